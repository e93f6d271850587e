"""Repository Protocol for deposit entries (mocked in unit tests)."""

from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_deposit.domain.models import DepositEntry


class DepositRepositoryProtocol(Protocol):
    async def list_entries(
        self,
        db: AsyncSession,
        submitted_by: str | None,
        date_from: date | None,
        date_to: date | None,
    ) -> list[DepositEntry]: ...

    async def get(self, db: AsyncSession, deposit_id: str) -> DepositEntry | None: ...

    async def insert(self, db: AsyncSession, entry: DepositEntry) -> DepositEntry: ...

    async def update(self, db: AsyncSession, entry: DepositEntry) -> DepositEntry | None: ...

    async def delete(self, db: AsyncSession, deposit_id: str) -> bool: ...
