"""Repository Protocols for staff and roles (mocked in unit tests)."""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_gateway.staff.db_models import StaffModel
from src.bo_staff.domain.models import Role, StaffFilter


class StaffRepositoryProtocol(Protocol):
    async def list_staff(
        self, db: AsyncSession, flt: StaffFilter, limit: int, offset: int
    ) -> tuple[list[StaffModel], int]: ...

    async def get(self, db: AsyncSession, staff_id: str) -> StaffModel | None: ...

    async def get_by_email(self, db: AsyncSession, email: str) -> StaffModel | None: ...

    async def count(self, db: AsyncSession) -> int: ...

    async def add(self, db: AsyncSession, staff: StaffModel) -> StaffModel: ...

    async def delete(self, db: AsyncSession, staff: StaffModel) -> None: ...

    async def reset_permissions(
        self, db: AsyncSession, permissions: dict[str, Any], keep_role: str
    ) -> int: ...

    async def count_with_role(self, db: AsyncSession, role_name: str) -> int: ...

    async def rename_role(self, db: AsyncSession, old_name: str, new_name: str) -> int: ...


class RoleRepositoryProtocol(Protocol):
    async def list_roles(self, db: AsyncSession) -> list[Role]: ...

    async def get(self, db: AsyncSession, role_id: str) -> Role | None: ...

    async def find_by_name(
        self, db: AsyncSession, name: str, exclude_id: str | None = None
    ) -> Role | None: ...

    async def insert(self, db: AsyncSession, name: str) -> Role: ...

    async def rename(self, db: AsyncSession, role_id: str, name: str) -> Role | None: ...

    async def delete(self, db: AsyncSession, role_id: str) -> bool: ...
