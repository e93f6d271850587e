"""Repository Protocol for the activity log (mocked in unit tests)."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_activity.domain.models import ActivityFilter, ActivityLog


class ActivityRepositoryProtocol(Protocol):
    async def insert(
        self,
        db: AsyncSession,
        user_id: str,
        user_name: str,
        action: str,
        description: str,
        details: str | None,
        ip_address: str | None,
    ) -> ActivityLog: ...

    async def prune(self, db: AsyncSession, keep: int) -> int: ...

    async def list_logs(
        self, db: AsyncSession, flt: ActivityFilter, limit: int, offset: int
    ) -> tuple[list[ActivityLog], int]: ...

    async def list_recent(
        self,
        db: AsyncSession,
        actions: list[str],
        user_id: str | None,
        limit: int,
    ) -> list[ActivityLog]: ...

    async def delete(self, db: AsyncSession, activity_id: str) -> bool: ...

    async def bulk_delete(self, db: AsyncSession, activity_ids: list[str]) -> int: ...
