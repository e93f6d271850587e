"""Dashboard REST API."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_common.database import get_db_session
from src.bo_common.enums import DateFilter
from src.bo_common.response import ApiResponse, respond
from src.bo_dashboard.application.service import DashboardService
from src.bo_gateway.auth.dependencies import require_permission
from src.bo_gateway.staff.db_models import StaffModel

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

_service = DashboardService()


@router.get("/metrics")
async def get_metrics(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    staff: Annotated[StaffModel, Depends(require_permission("dashboard", "view"))],
    date_filter: DateFilter = Query(DateFilter.ALL),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
) -> ApiResponse:
    data = await _service.metrics(db, staff, date_filter, date_from, date_to)
    return respond(request, data.model_dump())
