"""DepositService — daily deposit entries.

The repository narrows by owner and date in SQL; search, expense type,
sorting, pagination and the summary run over the loaded entries. Module
flags for view/add are enforced by the router; the record-level
edit/delete rules are checked here.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_activity.application.service import ActivityService
from src.bo_common.datetime_utils import resolve_date_range
from src.bo_common.enums import ActivityAction
from src.bo_common.errors import DepositNotFoundError
from src.bo_common.money import cents_to_display
from src.bo_common.pagination import Page, paginate
from src.bo_common.permissions import Actor, check_record_access, resolve_owner_filter
from src.bo_deposit.application.schemas import (
    DepositItem,
    DepositListResponse,
    DepositPageTotals,
    DepositRequest,
    DepositSummaryOut,
)
from src.bo_deposit.domain.calculations import filter_entries, sort_entries, summarize
from src.bo_deposit.domain.models import DepositEntry, DepositFilter
from src.bo_deposit.domain.repository import DepositRepositoryProtocol
from src.bo_deposit.infrastructure.persistence import DepositRepository
from src.bo_staff.application.submitter import resolve_submitter
from src.bo_staff.domain.repository import StaffRepositoryProtocol
from src.bo_staff.infrastructure.persistence import StaffRepository

logger = logging.getLogger(__name__)

_MODULE = "deposits"
_NOUN = "deposit entry"


def _details(entry: DepositEntry) -> str:
    return (
        f"Deposits: {cents_to_display(entry.total_deposit)}, "
        f"Withdrawals: {cents_to_display(entry.total_withdraw)}, "
        f"Balance: {cents_to_display(entry.todays_balance)}"
    )


def _apply_body(entry: DepositEntry, body: DepositRequest) -> DepositEntry:
    entry.date = body.date
    entry.local_deposit = body.local_deposit
    entry.usdt_deposit = body.usdt_deposit
    entry.cash_deposit = body.cash_deposit
    entry.local_withdraw = body.local_withdraw
    entry.usdt_withdraw = body.usdt_withdraw
    entry.cash_withdraw = body.cash_withdraw
    entry.incentives = [i.to_domain() for i in body.incentives]
    entry.expenses = [x.to_domain() for x in body.expenses]
    return entry


class DepositService:
    def __init__(
        self,
        repo: DepositRepositoryProtocol | None = None,
        staff_repo: StaffRepositoryProtocol | None = None,
        activity: ActivityService | None = None,
    ) -> None:
        self._repo: DepositRepositoryProtocol = repo or DepositRepository()
        self._staff: StaffRepositoryProtocol = staff_repo or StaffRepository()
        self._activity = activity or ActivityService()

    async def load_filtered(
        self, db: AsyncSession, flt: DepositFilter
    ) -> list[DepositEntry]:
        """Every entry matching `flt`; `flt.submitted_by` must already be resolved."""
        entries = await self._repo.list_entries(
            db, flt.submitted_by, flt.date_from, flt.date_to
        )
        return filter_entries(entries, flt.search, flt.expense_type)

    async def list_deposits(
        self,
        db: AsyncSession,
        actor: Actor,
        page: Page,
        *,
        submitted_by: str | None = None,
        date_filter: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        search: str | None = None,
        expense_type: str | None = None,
        sort: str | None = None,
    ) -> DepositListResponse:
        start, end = resolve_date_range(date_filter, date_from, date_to)
        flt = DepositFilter(
            submitted_by=resolve_owner_filter(actor, submitted_by),
            date_from=start,
            date_to=end,
            search=search,
            expense_type=expense_type,
        )
        entries = sort_entries(await self.load_filtered(db, flt), sort)
        window, info = paginate(entries, page)
        return DepositListResponse(
            items=[DepositItem.from_domain(e) for e in window],
            pagination=info,
            summary=DepositSummaryOut.from_domain(summarize(entries)),
            page_totals=DepositPageTotals.from_entries(window),
        )

    async def _get_visible(
        self, db: AsyncSession, actor: Actor, deposit_id: str, action: str
    ) -> DepositEntry:
        entry = await self._repo.get(db, deposit_id)
        if entry is None:
            raise DepositNotFoundError(deposit_id)
        check_record_access(actor, _MODULE, action, entry.submitted_by, _NOUN)
        return entry

    async def get_deposit(
        self, db: AsyncSession, actor: Actor, deposit_id: str
    ) -> DepositItem:
        return DepositItem.from_domain(await self._get_visible(db, actor, deposit_id, "view"))

    async def create_deposit(
        self, db: AsyncSession, actor: Actor, body: DepositRequest, ip: str
    ) -> DepositItem:
        try:
            submitted_by, submitted_by_name = await resolve_submitter(
                db,
                actor,
                str(body.submitted_by) if body.submitted_by else None,
                self._staff,
            )
            entry = _apply_body(
                DepositEntry(
                    id="",
                    date=body.date,
                    submitted_by=submitted_by,
                    submitted_by_name=submitted_by_name,
                ),
                body,
            )
            saved = await self._repo.insert(db, entry)
            description = f"Added deposit entry for {saved.date.isoformat()}"
            if submitted_by != str(actor.id):
                description += f" on behalf of {submitted_by_name}"
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.ADD_DEPOSIT,
                description,
                _details(saved),
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return DepositItem.from_domain(saved)

    async def update_deposit(
        self,
        db: AsyncSession,
        actor: Actor,
        deposit_id: str,
        body: DepositRequest,
        ip: str,
    ) -> DepositItem:
        entry = await self._get_visible(db, actor, deposit_id, "edit")
        try:
            saved = await self._repo.update(db, _apply_body(entry, body))
            if saved is None:
                raise DepositNotFoundError(deposit_id)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.EDIT_DEPOSIT,
                f"Updated deposit entry for {saved.date.isoformat()}",
                _details(saved),
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return DepositItem.from_domain(saved)

    async def delete_deposit(
        self, db: AsyncSession, actor: Actor, deposit_id: str, ip: str
    ) -> None:
        entry = await self._get_visible(db, actor, deposit_id, "delete")
        try:
            if not await self._repo.delete(db, deposit_id):
                raise DepositNotFoundError(deposit_id)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.DELETE_DEPOSIT,
                f"Deleted deposit entry for {entry.date.isoformat()}",
                f"Submitted by: {entry.submitted_by_name}. {_details(entry)}",
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Deposit entry %s deleted by %s", deposit_id, actor.name)
