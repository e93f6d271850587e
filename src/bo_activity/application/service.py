"""ActivityService — records the audit trail and serves it back.

`record()` only stages the insert (and the retention prune) on the caller's
session; the calling service commits it together with the change it
describes, so an audit row never exists for a rolled-back action.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bo_activity.application.schemas import (
    ActivityItem,
    ActivityListResponse,
    BulkDeleteResponse,
)
from src.bo_activity.domain.models import ActivityFilter, ActivityLog
from src.bo_activity.domain.repository import ActivityRepositoryProtocol
from src.bo_activity.infrastructure.persistence import ActivityRepository
from src.bo_common.enums import FINANCIAL_ACTIONS, ActivityAction
from src.bo_common.errors import ActivityNotFoundError
from src.bo_common.pagination import Page, PaginationInfo
from src.bo_common.permissions import Actor, resolve_owner_filter

logger = logging.getLogger(__name__)


class ActivityService:
    def __init__(
        self,
        repo: ActivityRepositoryProtocol | None = None,
        retention: int | None = None,
    ) -> None:
        self._repo: ActivityRepositoryProtocol = repo or ActivityRepository()
        self._retention = retention if retention is not None else settings.ACTIVITY_LOG_RETENTION

    async def record(
        self,
        db: AsyncSession,
        actor_id: str,
        actor_name: str,
        action: ActivityAction | str,
        description: str,
        details: str | None = None,
        ip_address: str | None = None,
    ) -> ActivityLog:
        action_value = action.value if isinstance(action, ActivityAction) else action
        log = await self._repo.insert(
            db, str(actor_id), actor_name, action_value, description, details, ip_address
        )
        pruned = await self._repo.prune(db, self._retention)
        if pruned:
            logger.info(
                "Pruned %d activity log entries beyond retention %d", pruned, self._retention
            )
        return log

    async def list_activities(
        self,
        db: AsyncSession,
        actor: Actor,
        page: Page,
        action: str | None = None,
        user_id: str | None = None,
        search: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> ActivityListResponse:
        flt = ActivityFilter(
            action=None if action in (None, "", "all") else action,
            user_id=resolve_owner_filter(actor, user_id),
            search=search,
            date_from=date_from,
            date_to=date_to,
        )
        logs, total = await self._repo.list_logs(db, flt, page.limit, page.offset)
        return ActivityListResponse(
            items=[ActivityItem.from_domain(log) for log in logs],
            pagination=PaginationInfo.build(page, total),
        )

    async def recent_financial(
        self, db: AsyncSession, user_id: str | None, limit: int = 10
    ) -> list[ActivityLog]:
        return await self._repo.list_recent(db, sorted(FINANCIAL_ACTIONS), user_id, limit)

    async def delete_activity(
        self, db: AsyncSession, actor: Actor, activity_id: str, ip: str
    ) -> None:
        try:
            deleted = await self._repo.delete(db, activity_id)
            if not deleted:
                raise ActivityNotFoundError(activity_id)
            await self.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.DELETE_ACTIVITY,
                "Deleted an activity log entry",
                f"Activity ID: {activity_id}",
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def bulk_delete(
        self,
        db: AsyncSession,
        actor: Actor,
        activity_ids: list[str],
        ip: str,
    ) -> BulkDeleteResponse:
        try:
            count = await self._repo.bulk_delete(db, activity_ids)
            await self.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.BULK_DELETE_ACTIVITIES,
                f"Bulk deleted {count} activity log entries",
                f"Requested: {len(activity_ids)}",
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BulkDeleteResponse(deleted_count=count)
