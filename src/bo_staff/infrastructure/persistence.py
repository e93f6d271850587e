"""StaffRepository (ORM over StaffModel) and RoleRepository (raw text() SQL).

The caller owns the transaction; nothing here commits.
"""

import uuid
from typing import Any

from sqlalchemy import func, or_, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_common.errors import InternalError
from src.bo_gateway.staff.db_models import StaffModel
from src.bo_staff.domain.models import Role, StaffFilter


def _uuid_or_none(raw: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


class StaffRepository:
    async def list_staff(
        self, db: AsyncSession, flt: StaffFilter, limit: int, offset: int
    ) -> tuple[list[StaffModel], int]:
        conditions = []
        if flt.search:
            pattern = f"%{flt.search}%"
            conditions.append(
                or_(
                    StaffModel.name.ilike(pattern),
                    StaffModel.email.ilike(pattern),
                    StaffModel.role.ilike(pattern),
                )
            )
        if flt.role:
            conditions.append(StaffModel.role == flt.role)
        if flt.status:
            conditions.append(StaffModel.status == flt.status)
        if flt.archived is not None:
            conditions.append(StaffModel.is_archived.is_(flt.archived))

        total = (
            await db.execute(select(func.count()).select_from(StaffModel).where(*conditions))
        ).scalar_one()
        result = await db.execute(
            select(StaffModel)
            .where(*conditions)
            .order_by(StaffModel.created_at.desc(), StaffModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), int(total)

    async def get(self, db: AsyncSession, staff_id: str) -> StaffModel | None:
        key = _uuid_or_none(staff_id)
        if key is None:
            return None
        return await db.get(StaffModel, key)

    async def get_by_email(self, db: AsyncSession, email: str) -> StaffModel | None:
        result = await db.execute(
            select(StaffModel).where(func.lower(StaffModel.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def count(self, db: AsyncSession) -> int:
        return int((await db.execute(select(func.count()).select_from(StaffModel))).scalar_one())

    async def add(self, db: AsyncSession, staff: StaffModel) -> StaffModel:
        db.add(staff)
        await db.flush()
        return staff

    async def delete(self, db: AsyncSession, staff: StaffModel) -> None:
        await db.delete(staff)
        await db.flush()

    async def reset_permissions(
        self, db: AsyncSession, permissions: dict[str, Any], keep_role: str
    ) -> int:
        result = await db.execute(
            update(StaffModel)
            .where(StaffModel.role != keep_role)
            .values(permissions=permissions)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def count_with_role(self, db: AsyncSession, role_name: str) -> int:
        result = await db.execute(
            select(func.count()).select_from(StaffModel).where(StaffModel.role == role_name)
        )
        return int(result.scalar_one())

    async def rename_role(self, db: AsyncSession, old_name: str, new_name: str) -> int:
        result = await db.execute(
            update(StaffModel)
            .where(StaffModel.role == old_name)
            .values(role=new_name)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------

_LIST_ROLES_SQL = text("""
    SELECT r.id, r.name, r.created_at, r.updated_at,
           COUNT(s.id) AS member_count
    FROM roles r
    LEFT JOIN staff s ON s.role = r.name
    GROUP BY r.id, r.name, r.created_at, r.updated_at
    ORDER BY r.created_at ASC, r.name ASC
""")

_GET_ROLE_SQL = text("""
    SELECT r.id, r.name, r.created_at, r.updated_at,
           (SELECT COUNT(*) FROM staff s WHERE s.role = r.name) AS member_count
    FROM roles r
    WHERE r.id = CAST(:role_id AS UUID)
""")

_FIND_ROLE_SQL = text("""
    SELECT r.id, r.name, r.created_at, r.updated_at, 0 AS member_count
    FROM roles r
    WHERE LOWER(r.name) = LOWER(:name)
      AND (CAST(:exclude_id AS TEXT) IS NULL OR r.id <> CAST(:exclude_id AS UUID))
    LIMIT 1
""")

_INSERT_ROLE_SQL = text("""
    INSERT INTO roles (name) VALUES (:name)
    RETURNING id, name, created_at, updated_at, 0 AS member_count
""")

_RENAME_ROLE_SQL = text("""
    UPDATE roles SET name = :name
    WHERE id = CAST(:role_id AS UUID)
    RETURNING id, name, created_at, updated_at, 0 AS member_count
""")

_DELETE_ROLE_SQL = text("""
    DELETE FROM roles WHERE id = CAST(:role_id AS UUID)
""")


def _row_to_role(row: object) -> Role:
    return Role(
        id=str(row.id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        member_count=int(row.member_count or 0),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class RoleRepository:
    async def list_roles(self, db: AsyncSession) -> list[Role]:
        result = await db.execute(_LIST_ROLES_SQL)
        return [_row_to_role(r) for r in result.fetchall()]

    async def get(self, db: AsyncSession, role_id: str) -> Role | None:
        if _uuid_or_none(role_id) is None:
            return None
        row = (await db.execute(_GET_ROLE_SQL, {"role_id": role_id})).fetchone()
        return _row_to_role(row) if row else None

    async def find_by_name(
        self, db: AsyncSession, name: str, exclude_id: str | None = None
    ) -> Role | None:
        row = (
            await db.execute(_FIND_ROLE_SQL, {"name": name, "exclude_id": exclude_id})
        ).fetchone()
        return _row_to_role(row) if row else None

    async def insert(self, db: AsyncSession, name: str) -> Role:
        row = (await db.execute(_INSERT_ROLE_SQL, {"name": name})).fetchone()
        if row is None:
            raise InternalError("Role insert returned no rows")
        return _row_to_role(row)

    async def rename(self, db: AsyncSession, role_id: str, name: str) -> Role | None:
        row = (await db.execute(_RENAME_ROLE_SQL, {"role_id": role_id, "name": name})).fetchone()
        return _row_to_role(row) if row else None

    async def delete(self, db: AsyncSession, role_id: str) -> bool:
        result = await db.execute(_DELETE_ROLE_SQL, {"role_id": role_id})
        return (result.rowcount or 0) > 0

