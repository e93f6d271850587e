"""Page-number pagination shared by every list endpoint.

The admin tables jump to arbitrary pages and show "page X of Y", so list
responses carry a total count instead of an opaque cursor.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from pydantic import BaseModel

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class Page:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationInfo(BaseModel):
    page: int
    limit: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def build(cls, page: Page, total_count: int) -> "PaginationInfo":
        total_pages = math.ceil(total_count / page.limit) if page.limit else 0
        return cls(
            page=page.page,
            limit=page.limit,
            total_count=total_count,
            total_pages=total_pages,
            has_next_page=page.page < total_pages,
            has_previous_page=page.page > 1,
        )


def paginate(items: Sequence[T], page: Page) -> tuple[list[T], PaginationInfo]:
    """Slice an already filtered and sorted sequence."""
    window = list(items[page.offset : page.offset + page.limit])
    return window, PaginationInfo.build(page, len(items))
