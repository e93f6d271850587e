"""Activity log REST API — listing for everyone, deletion for Super Admins."""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_activity.application.schemas import BulkDeleteRequest
from src.bo_activity.application.service import ActivityService
from src.bo_common.database import get_db_session
from src.bo_common.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page
from src.bo_common.response import ApiResponse, respond
from src.bo_gateway.auth.dependencies import get_current_staff, require_super_admin
from src.bo_gateway.client_ip import get_client_ip
from src.bo_gateway.staff.db_models import StaffModel

router = APIRouter(prefix="/activities", tags=["activities"])

_service = ActivityService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.get("")
async def list_activities(
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(get_current_staff)],
    action: str | None = Query(None, description="ActivityAction value or 'all'"),
    user_id: uuid.UUID | None = Query(None, description="Admins only: one staff member"),
    search: str | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> ApiResponse:
    data = await _service.list_activities(
        db,
        staff,
        Page(page, limit),
        action=action,
        user_id=str(user_id) if user_id else None,
        search=search,
        date_from=date_from,
        date_to=date_to,
    )
    return respond(request, data.model_dump())


@router.post("/bulk-delete")
async def bulk_delete_activities(
    body: BulkDeleteRequest,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_super_admin)],
) -> ApiResponse:
    data = await _service.bulk_delete(
        db, staff, [str(i) for i in body.activity_ids], get_client_ip(request)
    )
    return respond(request, data.model_dump(), f"Deleted {data.deleted_count} entries")


@router.delete("/{activity_id}")
async def delete_activity(
    activity_id: uuid.UUID,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_super_admin)],
) -> ApiResponse:
    await _service.delete_activity(db, staff, str(activity_id), get_client_ip(request))
    return respond(request, {"id": str(activity_id)}, "Activity deleted")
