"""Banks and bank transactions REST API."""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_bank.application.schemas import BankRequest, BankTransactionRequest
from src.bo_bank.application.service import BankService, BankTransactionService
from src.bo_common.database import get_db_session
from src.bo_common.enums import DateFilter
from src.bo_common.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page
from src.bo_common.response import ApiResponse, respond
from src.bo_gateway.auth.dependencies import get_current_staff, require_permission
from src.bo_gateway.client_ip import get_client_ip
from src.bo_gateway.staff.db_models import StaffModel

banks_router = APIRouter(prefix="/banks", tags=["banks"])
transactions_router = APIRouter(prefix="/bank-transactions", tags=["bank-transactions"])

_banks = BankService()
_transactions = BankTransactionService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]
CurrentStaff = Annotated[StaffModel, Depends(get_current_staff)]
CanView = Annotated[StaffModel, Depends(require_permission("bank_deposits", "view"))]
CanAdd = Annotated[StaffModel, Depends(require_permission("bank_deposits", "add"))]


# ---------------------------------------------------------------------------
# Banks
# ---------------------------------------------------------------------------


@banks_router.get("")
async def list_banks(request: Request, db: DbSession, staff: CanView) -> ApiResponse:
    items = await _banks.list_banks(db)
    return respond(request, [b.model_dump() for b in items])


@banks_router.post("", status_code=201)
async def create_bank(
    body: BankRequest, request: Request, db: DbSession, staff: CanAdd
) -> ApiResponse:
    data = await _banks.create_bank(db, staff, body.bank_name, get_client_ip(request))
    return respond(request, data.model_dump(), "Bank added")


@banks_router.put("/{bank_id}")
async def rename_bank(
    bank_id: uuid.UUID,
    body: BankRequest,
    request: Request,
    db: DbSession,
    staff: CurrentStaff,
) -> ApiResponse:
    data = await _banks.rename_bank(
        db, staff, str(bank_id), body.bank_name, get_client_ip(request)
    )
    return respond(request, data.model_dump(), "Bank updated")


@banks_router.delete("/{bank_id}")
async def delete_bank(
    bank_id: uuid.UUID, request: Request, db: DbSession, staff: CurrentStaff
) -> ApiResponse:
    await _banks.delete_bank(db, staff, str(bank_id), get_client_ip(request))
    return respond(request, {"id": str(bank_id)}, "Bank deleted")


# ---------------------------------------------------------------------------
# Bank transactions
# ---------------------------------------------------------------------------


@transactions_router.get("")
async def list_transactions(
    request: Request,
    db: DbSession,
    staff: CanView,
    search: str | None = Query(None),
    date_filter: DateFilter = Query(DateFilter.ALL),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    submitted_by: str | None = Query(None, description="Admins only: staff id or 'all'"),
    bank_id: uuid.UUID | None = Query(None),
    sort: str | None = Query(None, description="date-desc, deposit-asc, remaining-desc, ..."),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> ApiResponse:
    data = await _transactions.list_transactions(
        db,
        staff,
        Page(page, limit),
        submitted_by=submitted_by,
        bank_id=str(bank_id) if bank_id else None,
        date_filter=date_filter,
        date_from=date_from,
        date_to=date_to,
        search=search,
        sort=sort,
    )
    return respond(request, data.model_dump())


@transactions_router.get("/previous-balance")
async def previous_balance(
    request: Request,
    db: DbSession,
    staff: CanView,
    bank_id: uuid.UUID = Query(...),
    on: date = Query(..., alias="date"),
    exclude_id: uuid.UUID | None = Query(None, description="Transaction being edited"),
) -> ApiResponse:
    data = await _transactions.previous_balance(
        db, str(bank_id), on, str(exclude_id) if exclude_id else None
    )
    return respond(request, data.model_dump())


@transactions_router.get("/{transaction_id}")
async def get_transaction(
    transaction_id: uuid.UUID, request: Request, db: DbSession, staff: CanView
) -> ApiResponse:
    data = await _transactions.get_transaction(db, staff, str(transaction_id))
    return respond(request, data.model_dump())


@transactions_router.post("", status_code=201)
async def create_transaction(
    body: BankTransactionRequest, request: Request, db: DbSession, staff: CanAdd
) -> ApiResponse:
    data = await _transactions.create_transaction(db, staff, body, get_client_ip(request))
    return respond(request, data.model_dump(), "Bank transaction added")


@transactions_router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: uuid.UUID,
    body: BankTransactionRequest,
    request: Request,
    db: DbSession,
    staff: CurrentStaff,
) -> ApiResponse:
    data = await _transactions.update_transaction(
        db, staff, str(transaction_id), body, get_client_ip(request)
    )
    return respond(request, data.model_dump(), "Bank transaction updated")


@transactions_router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: uuid.UUID, request: Request, db: DbSession, staff: CurrentStaff
) -> ApiResponse:
    await _transactions.delete_transaction(
        db, staff, str(transaction_id), get_client_ip(request)
    )
    return respond(request, {"id": str(transaction_id)}, "Bank transaction deleted")
