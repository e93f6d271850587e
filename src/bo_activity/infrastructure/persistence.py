"""ActivityRepository — raw text() SQL over the activity_logs table.

asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL for optional filters.
The caller owns the transaction; nothing here commits.
"""

from sqlalchemy import bindparam, text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.types import String

from src.bo_activity.domain.models import ActivityFilter, ActivityLog
from src.bo_common.errors import InternalError

_COLUMNS = "id, action, description, details, user_id, user_name, ip_address, timestamp"

_INSERT_SQL = text(f"""
    INSERT INTO activity_logs (action, description, details, user_id, user_name, ip_address)
    VALUES (:action, :description, :details, CAST(:user_id AS UUID), :user_name, :ip_address)
    RETURNING {_COLUMNS}
""")

# Keeps the newest :keep rows; ties on timestamp broken by id
_PRUNE_SQL = text("""
    DELETE FROM activity_logs
    WHERE id IN (
        SELECT id FROM activity_logs
        ORDER BY timestamp DESC, id DESC
        OFFSET :keep
    )
""")

_FILTER_WHERE = """
    WHERE (CAST(:action AS TEXT) IS NULL OR action = CAST(:action AS TEXT))
      AND (CAST(:user_id AS TEXT) IS NULL OR user_id = CAST(:user_id AS UUID))
      AND (
          CAST(:search AS TEXT) IS NULL
          OR description ILIKE CAST(:search AS TEXT)
          OR COALESCE(details, '') ILIKE CAST(:search AS TEXT)
          OR user_name ILIKE CAST(:search AS TEXT)
      )
      AND (CAST(:date_from AS DATE) IS NULL OR timestamp::date >= CAST(:date_from AS DATE))
      AND (CAST(:date_to AS DATE) IS NULL OR timestamp::date <= CAST(:date_to AS DATE))
"""

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM activity_logs
    {_FILTER_WHERE}
    ORDER BY timestamp DESC, id DESC
    LIMIT :limit OFFSET :offset
""")

_COUNT_SQL = text(f"""
    SELECT COUNT(*) AS total
    FROM activity_logs
    {_FILTER_WHERE}
""")

_RECENT_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM activity_logs
    WHERE action = ANY(:actions)
      AND (CAST(:user_id AS TEXT) IS NULL OR user_id = CAST(:user_id AS UUID))
    ORDER BY timestamp DESC, id DESC
    LIMIT :limit
""").bindparams(bindparam("actions", type_=ARRAY(String)))

_DELETE_SQL = text("""
    DELETE FROM activity_logs WHERE id = CAST(:activity_id AS UUID)
""")

_BULK_DELETE_SQL = text("""
    DELETE FROM activity_logs WHERE id = ANY(:activity_ids)
""").bindparams(bindparam("activity_ids", type_=ARRAY(UUID(as_uuid=False))))


def _row_to_activity(row: object) -> ActivityLog:
    return ActivityLog(
        id=str(row.id),  # type: ignore[attr-defined]
        action=row.action,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        details=row.details,  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        user_name=row.user_name,  # type: ignore[attr-defined]
        ip_address=row.ip_address,  # type: ignore[attr-defined]
        timestamp=row.timestamp,  # type: ignore[attr-defined]
    )


def _filter_params(flt: ActivityFilter) -> dict[str, object]:
    return {
        "action": flt.action or None,
        "user_id": flt.user_id or None,
        "search": f"%{flt.search.strip()}%" if flt.search and flt.search.strip() else None,
        "date_from": flt.date_from,
        "date_to": flt.date_to,
    }


class ActivityRepository:
    async def insert(
        self,
        db: AsyncSession,
        user_id: str,
        user_name: str,
        action: str,
        description: str,
        details: str | None,
        ip_address: str | None,
    ) -> ActivityLog:
        result = await db.execute(
            _INSERT_SQL,
            {
                "action": action,
                "description": description,
                "details": details,
                "user_id": user_id,
                "user_name": user_name,
                "ip_address": ip_address,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Activity insert returned no rows")
        return _row_to_activity(row)

    async def prune(self, db: AsyncSession, keep: int) -> int:
        result = await db.execute(_PRUNE_SQL, {"keep": keep})
        return result.rowcount or 0

    async def list_logs(
        self, db: AsyncSession, flt: ActivityFilter, limit: int, offset: int
    ) -> tuple[list[ActivityLog], int]:
        params = _filter_params(flt)
        total = (await db.execute(_COUNT_SQL, params)).scalar_one()
        result = await db.execute(_LIST_SQL, {**params, "limit": limit, "offset": offset})
        return [_row_to_activity(r) for r in result.fetchall()], int(total)

    async def list_recent(
        self,
        db: AsyncSession,
        actions: list[str],
        user_id: str | None,
        limit: int,
    ) -> list[ActivityLog]:
        result = await db.execute(
            _RECENT_SQL, {"actions": actions, "user_id": user_id, "limit": limit}
        )
        return [_row_to_activity(r) for r in result.fetchall()]

    async def delete(self, db: AsyncSession, activity_id: str) -> bool:
        result = await db.execute(_DELETE_SQL, {"activity_id": activity_id})
        return (result.rowcount or 0) > 0

    async def bulk_delete(self, db: AsyncSession, activity_ids: list[str]) -> int:
        result = await db.execute(_BULK_DELETE_SQL, {"activity_ids": activity_ids})
        return result.rowcount or 0
