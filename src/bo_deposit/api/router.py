"""Deposit entries REST API."""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_common.database import get_db_session
from src.bo_common.enums import DateFilter
from src.bo_common.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page
from src.bo_common.response import ApiResponse, respond
from src.bo_deposit.application.schemas import DepositRequest
from src.bo_deposit.application.service import DepositService
from src.bo_gateway.auth.dependencies import get_current_staff, require_permission
from src.bo_gateway.client_ip import get_client_ip
from src.bo_gateway.staff.db_models import StaffModel

router = APIRouter(prefix="/deposits", tags=["deposits"])

_service = DepositService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]
CurrentStaff = Annotated[StaffModel, Depends(get_current_staff)]


@router.get("")
async def list_deposits(
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("deposits", "view"))],
    search: str | None = Query(None),
    date_filter: DateFilter = Query(DateFilter.ALL),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    submitted_by: str | None = Query(None, description="Admins only: staff id or 'all'"),
    expense_type: str | None = Query(None, description="ExpenseType value or 'all'"),
    sort: str | None = Query(None, description="date-desc, amount-asc, submitter-asc, ..."),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> ApiResponse:
    data = await _service.list_deposits(
        db,
        staff,
        Page(page, limit),
        submitted_by=submitted_by,
        date_filter=date_filter,
        date_from=date_from,
        date_to=date_to,
        search=search,
        expense_type=expense_type,
        sort=sort,
    )
    return respond(request, data.model_dump())


@router.get("/{deposit_id}")
async def get_deposit(
    deposit_id: uuid.UUID,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("deposits", "view"))],
) -> ApiResponse:
    data = await _service.get_deposit(db, staff, str(deposit_id))
    return respond(request, data.model_dump())


@router.post("", status_code=201)
async def create_deposit(
    body: DepositRequest,
    request: Request,
    db: DbSession,
    staff: Annotated[StaffModel, Depends(require_permission("deposits", "add"))],
) -> ApiResponse:
    data = await _service.create_deposit(db, staff, body, get_client_ip(request))
    return respond(request, data.model_dump(), "Deposit entry added")


@router.put("/{deposit_id}")
async def update_deposit(
    deposit_id: uuid.UUID,
    body: DepositRequest,
    request: Request,
    db: DbSession,
    staff: CurrentStaff,
) -> ApiResponse:
    data = await _service.update_deposit(
        db, staff, str(deposit_id), body, get_client_ip(request)
    )
    return respond(request, data.model_dump(), "Deposit entry updated")


@router.delete("/{deposit_id}")
async def delete_deposit(
    deposit_id: uuid.UUID,
    request: Request,
    db: DbSession,
    staff: CurrentStaff,
) -> ApiResponse:
    await _service.delete_deposit(db, staff, str(deposit_id), get_client_ip(request))
    return respond(request, {"id": str(deposit_id)}, "Deposit entry deleted")
