"""FastAPI dependencies: current staff member and permission gates.

Usage in any protected router:
    from src.bo_gateway.auth.dependencies import get_current_staff, require_permission

    @router.get("/deposits")
    async def list_deposits(staff: StaffModel = Depends(require_permission("deposits", "view"))):
        ...
"""

import logging
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_common.database import get_db_session
from src.bo_common.errors import (
    AccountDeactivatedError,
    AccountDeletedError,
    InvalidCredentialsError,
    PermissionDeniedError,
)
from src.bo_common.permissions import (
    check_permission,
    is_matrix_missing,
    is_super_admin,
    repaired_permissions,
)
from src.bo_gateway.auth.jwt_handler import decode_token
from src.bo_gateway.staff.db_models import StaffModel

logger = logging.getLogger(__name__)

# tokenUrl drives the Swagger UI "Authorize" button
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def repair_missing_permissions(db: AsyncSession, staff: StaffModel) -> bool:
    """Grant a default matrix to staff rows stored without one.

    The sole staff member and admins get everything; other roles get the
    basic staff set. Returns True when the row was repaired (and committed).
    """
    if not is_matrix_missing(staff.permissions):
        return False

    total = (await db.execute(select(func.count()).select_from(StaffModel))).scalar_one()
    staff.permissions = repaired_permissions(staff.role, is_sole_member=total == 1)
    await db.commit()
    logger.warning(
        "Repaired missing permissions for %s (%s, sole_member=%s)",
        staff.email,
        staff.role,
        total == 1,
    )
    return True


async def get_current_staff(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> StaffModel:
    """Resolve the Bearer token to an active staff row.

    Raises HTTP 401 for a missing/invalid/expired token, AccountDeletedError
    (1006) when the staff row is gone and AccountDeactivatedError (1004) when
    the member is inactive or archived.
    """
    try:
        claims = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    staff = await db.get(StaffModel, _parse_uuid(claims["sub"]))
    if staff is None:
        raise AccountDeletedError()
    if not staff.is_active:
        raise AccountDeactivatedError()

    await repair_missing_permissions(db, staff)
    return staff


def _parse_uuid(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None


def require_permission(module: str, action: str) -> Callable[..., Awaitable[StaffModel]]:
    """Dependency factory: the current staff member must hold `module.action`."""

    async def _checker(staff: StaffModel = Depends(get_current_staff)) -> StaffModel:
        check_permission(staff, module, action)
        return staff

    return _checker


async def require_super_admin(
    staff: StaffModel = Depends(get_current_staff),
) -> StaffModel:
    """Super Admin-only endpoints (activity deletion, permission reset)."""
    if not is_super_admin(staff.role):
        raise PermissionDeniedError("perform this action (Super Admin only)")
    return staff
