"""Staff management and role REST API."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_common.database import get_db_session
from src.bo_common.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page
from src.bo_common.response import ApiResponse, respond
from src.bo_gateway.auth.dependencies import get_current_staff, require_permission
from src.bo_gateway.client_ip import get_client_ip
from src.bo_gateway.staff.db_models import StaffModel
from src.bo_gateway.staff.schemas import StaffInfo
from src.bo_staff.application.schemas import CreateStaffRequest, RoleRequest, UpdateStaffRequest
from src.bo_staff.application.service import RoleService, StaffService
from src.bo_staff.domain.models import StaffFilter

router = APIRouter(prefix="/staff", tags=["staff"])
roles_router = APIRouter(prefix="/roles", tags=["roles"])

_service = StaffService()
_roles = RoleService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.get("")
async def list_staff(
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("staff_management", "view"))],
    search: str | None = Query(None, description="Name, email or role substring"),
    role: str | None = Query(None, description="Role name or 'all'"),
    status_filter: str | None = Query(None, alias="status", description="active|inactive|all"),
    archived: bool | None = Query(None, description="true = archived only, false = active only"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> ApiResponse:
    flt = StaffFilter.from_query(search, role, status_filter, archived)
    data = await _service.list_staff(db, flt, Page(page, limit))
    return respond(request, data.model_dump())


@router.post("/refresh-permissions")
async def refresh_permissions(
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(get_current_staff)],
) -> ApiResponse:
    data = await _service.refresh_permissions(db, staff, get_client_ip(request))
    return respond(request, data.model_dump(), "Permissions reset")


@router.post("/fix-admin-permissions")
async def fix_admin_permissions(
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(get_current_staff)],
) -> ApiResponse:
    fixed = await _service.fix_admin_permissions(db, staff)
    return respond(request, StaffInfo.from_model(fixed).model_dump(), "Permissions fixed")


@router.get("/{staff_id}")
async def get_staff(
    staff_id: uuid.UUID,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("staff_management", "view"))],
) -> ApiResponse:
    member = await _service.get_staff(db, str(staff_id))
    return respond(request, StaffInfo.from_model(member).model_dump())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_staff(
    body: CreateStaffRequest,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("staff_management", "add"))],
) -> ApiResponse:
    data = await _service.create_staff(db, staff, body, get_client_ip(request))
    return respond(request, data.model_dump(), "Staff member created")


@router.put("/{staff_id}")
async def update_staff(
    staff_id: uuid.UUID,
    body: UpdateStaffRequest,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("staff_management", "edit"))],
) -> ApiResponse:
    member = await _service.update_staff(db, staff, str(staff_id), body, get_client_ip(request))
    return respond(request, StaffInfo.from_model(member).model_dump(), "Staff member updated")


@router.delete("/{staff_id}")
async def delete_staff(
    staff_id: uuid.UUID,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("staff_management", "delete"))],
) -> ApiResponse:
    await _service.delete_staff(db, staff, str(staff_id), get_client_ip(request))
    return respond(request, {"id": str(staff_id)}, "Staff member deleted")


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


@roles_router.get("")
async def list_roles(
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("staff_management", "view"))],
) -> ApiResponse:
    roles = await _roles.list_roles(db)
    return respond(request, [r.model_dump() for r in roles])


@roles_router.post("", status_code=status.HTTP_201_CREATED)
async def create_role(
    body: RoleRequest,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("staff_management", "add"))],
) -> ApiResponse:
    role = await _roles.create_role(db, staff, body.role_name, get_client_ip(request))
    return respond(request, role.model_dump(), "Role created")


@roles_router.put("/{role_id}")
async def rename_role(
    role_id: uuid.UUID,
    body: RoleRequest,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("staff_management", "edit"))],
) -> ApiResponse:
    role = await _roles.rename_role(
        db, staff, str(role_id), body.role_name, get_client_ip(request)
    )
    return respond(request, role.model_dump(), "Role updated")


@roles_router.delete("/{role_id}")
async def delete_role(
    role_id: uuid.UUID,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("staff_management", "delete"))],
) -> ApiResponse:
    await _roles.delete_role(db, staff, str(role_id), get_client_ip(request))
    return respond(request, {"id": str(role_id)}, "Role deleted")
