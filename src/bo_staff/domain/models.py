"""Domain models for bo_staff — pure dataclasses, no SQLAlchemy dependency.

Staff rows themselves are the StaffModel ORM mapping (bo_gateway.staff);
roles are plain records referenced by name from staff.role.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Role:
    id: str
    name: str
    member_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class StaffFilter:
    search: str | None = None
    role: str | None = None        # None = any role
    status: str | None = None      # None = any status
    archived: bool | None = None   # None = archived and active alike

    @classmethod
    def from_query(
        cls,
        search: str | None,
        role: str | None,
        status: str | None,
        archived: bool | None,
    ) -> "StaffFilter":
        """Treat blank values and the UI's "all" option as no filter."""
        return cls(
            search=search.strip() if search and search.strip() else None,
            role=None if role in (None, "", "all") else role,
            status=None if status in (None, "", "all") else status,
            archived=archived,
        )
