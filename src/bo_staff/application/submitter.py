"""Resolve who a new ledger record is submitted by."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_common.errors import StaffNotFoundError
from src.bo_common.permissions import Actor, is_admin
from src.bo_staff.domain.repository import StaffRepositoryProtocol


async def resolve_submitter(
    db: AsyncSession,
    actor: Actor,
    requested: str | None,
    staff_repo: StaffRepositoryProtocol,
) -> tuple[str, str]:
    """(submitted_by, submitted_by_name) for a record being created.

    Admins may record on behalf of another staff member; for everyone else
    the requested submitter is ignored and the caller is used.
    """
    if not requested or not is_admin(actor.role) or requested == str(actor.id):
        return str(actor.id), actor.name
    staff = await staff_repo.get(db, requested)
    if staff is None:
        raise StaffNotFoundError(requested)
    return str(staff.id), staff.name
