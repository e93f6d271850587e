"""DashboardService — metrics over the caller's visible ledgers."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_activity.application.service import ActivityService
from src.bo_bank.application.service import BankTransactionService
from src.bo_bank.domain.models import BankTransactionFilter
from src.bo_common.datetime_utils import resolve_date_range
from src.bo_common.enums import DateFilter
from src.bo_common.permissions import Actor, visible_owner_filter
from src.bo_dashboard.application.schemas import DashboardResponse, DateRangeOut
from src.bo_dashboard.domain.metrics import compute_metrics
from src.bo_deposit.application.service import DepositService
from src.bo_deposit.domain.models import DepositFilter

RECENT_ACTIVITY_LIMIT = 10


class DashboardService:
    def __init__(
        self,
        deposits: DepositService | None = None,
        transactions: BankTransactionService | None = None,
        activity: ActivityService | None = None,
    ) -> None:
        self._deposits = deposits or DepositService()
        self._transactions = transactions or BankTransactionService()
        self._activity = activity or ActivityService()

    async def metrics(
        self,
        db: AsyncSession,
        actor: Actor,
        date_filter: DateFilter | str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> DashboardResponse:
        owner = visible_owner_filter(actor)
        start, end = resolve_date_range(date_filter, date_from, date_to)

        entries = await self._deposits.load_filtered(
            db, DepositFilter(submitted_by=owner, date_from=start, date_to=end)
        )
        transactions = await self._transactions.load_filtered(
            db, BankTransactionFilter(submitted_by=owner, date_from=start, date_to=end)
        )
        recent = await self._activity.recent_financial(db, owner, RECENT_ACTIVITY_LIMIT)

        preset = DateFilter(date_filter) if date_filter else DateFilter.ALL
        return DashboardResponse.build(
            compute_metrics(entries, transactions),
            DateRangeOut(
                date_filter=preset.value,
                date_from=date_from.isoformat() if date_from else None,
                date_to=date_to.isoformat() if date_to else None,
            ),
            recent,
        )
