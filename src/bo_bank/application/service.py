"""BankService and BankTransactionService.

The running balance of a transaction is derived from the bank's most recent
earlier transaction, across every submitter, unless the caller pins it.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_activity.application.service import ActivityService
from src.bo_bank.application.schemas import (
    BankItem,
    BankMetricsOut,
    BankPageTotals,
    BankTransactionItem,
    BankTransactionListResponse,
    BankTransactionRequest,
    PreviousBalanceResponse,
)
from src.bo_bank.domain.calculations import (
    compute_metrics,
    filter_transactions,
    remaining_balance,
    sort_transactions,
)
from src.bo_bank.domain.models import Bank, BankTransaction, BankTransactionFilter
from src.bo_bank.domain.repository import (
    BankRepositoryProtocol,
    BankTransactionRepositoryProtocol,
)
from src.bo_bank.infrastructure.persistence import BankRepository, BankTransactionRepository
from src.bo_common.datetime_utils import resolve_date_range
from src.bo_common.enums import ActivityAction
from src.bo_common.errors import (
    BankExistsError,
    BankHasTransactionsError,
    BankNotFoundError,
    BankTransactionNotFoundError,
    PermissionDeniedError,
)
from src.bo_common.money import cents_to_display
from src.bo_common.pagination import Page, paginate
from src.bo_common.permissions import (
    Actor,
    can_delete_bank,
    can_edit_bank,
    check_record_access,
    resolve_owner_filter,
)
from src.bo_staff.application.submitter import resolve_submitter
from src.bo_staff.domain.repository import StaffRepositoryProtocol
from src.bo_staff.infrastructure.persistence import StaffRepository

logger = logging.getLogger(__name__)

_MODULE = "bank_deposits"
_NOUN = "bank transaction"


class BankService:
    def __init__(
        self,
        repo: BankRepositoryProtocol | None = None,
        activity: ActivityService | None = None,
    ) -> None:
        self._repo: BankRepositoryProtocol = repo or BankRepository()
        self._activity = activity or ActivityService()

    async def list_banks(self, db: AsyncSession) -> list[BankItem]:
        return [BankItem.from_domain(b) for b in await self._repo.list_banks(db)]

    async def _get(self, db: AsyncSession, bank_id: str) -> Bank:
        bank = await self._repo.get(db, bank_id)
        if bank is None:
            raise BankNotFoundError(bank_id)
        return bank

    async def create_bank(
        self, db: AsyncSession, actor: Actor, name: str, ip: str
    ) -> BankItem:
        try:
            if await self._repo.find_by_name(db, name) is not None:
                raise BankExistsError(name)
            bank = await self._repo.insert(db, name, str(actor.id), actor.name)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.ADD_BANK,
                f"Added bank {name}",
                None,
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BankItem.from_domain(bank)

    async def rename_bank(
        self, db: AsyncSession, actor: Actor, bank_id: str, name: str, ip: str
    ) -> BankItem:
        if not can_edit_bank(actor):
            raise PermissionDeniedError("edit banks (admins only)")
        bank = await self._get(db, bank_id)
        try:
            if await self._repo.find_by_name(db, name, exclude_id=bank_id) is not None:
                raise BankExistsError(name)
            renamed = await self._repo.rename(db, bank_id, name)
            if renamed is None:
                raise BankNotFoundError(bank_id)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.EDIT_BANK,
                f"Renamed bank {bank.name} to {name}",
                None,
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BankItem.from_domain(renamed)

    async def delete_bank(
        self, db: AsyncSession, actor: Actor, bank_id: str, ip: str
    ) -> None:
        if not can_delete_bank(actor):
            raise PermissionDeniedError("delete banks (admins only)")
        bank = await self._get(db, bank_id)
        try:
            if await self._repo.count_transactions(db, bank_id) > 0:
                raise BankHasTransactionsError(bank.name)
            await self._repo.delete(db, bank_id)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.DELETE_BANK,
                f"Deleted bank {bank.name}",
                None,
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise


def _details(txn: BankTransaction) -> str:
    return (
        f"Bank: {txn.bank_name}, Deposit: {cents_to_display(txn.deposit_cents)}, "
        f"Withdraw: {cents_to_display(txn.withdraw_cents)}, "
        f"Remaining: {cents_to_display(txn.remaining_balance_cents)}"
    )


class BankTransactionService:
    def __init__(
        self,
        repo: BankTransactionRepositoryProtocol | None = None,
        banks: BankRepositoryProtocol | None = None,
        staff_repo: StaffRepositoryProtocol | None = None,
        activity: ActivityService | None = None,
    ) -> None:
        self._repo: BankTransactionRepositoryProtocol = repo or BankTransactionRepository()
        self._banks: BankRepositoryProtocol = banks or BankRepository()
        self._staff: StaffRepositoryProtocol = staff_repo or StaffRepository()
        self._activity = activity or ActivityService()

    async def load_filtered(
        self, db: AsyncSession, flt: BankTransactionFilter
    ) -> list[BankTransaction]:
        """Every transaction matching `flt`; `flt.submitted_by` must already be resolved."""
        txns = await self._repo.list_transactions(
            db, flt.submitted_by, flt.bank_id, flt.date_from, flt.date_to
        )
        return filter_transactions(txns, flt.search)

    async def list_transactions(
        self,
        db: AsyncSession,
        actor: Actor,
        page: Page,
        *,
        submitted_by: str | None = None,
        bank_id: str | None = None,
        date_filter: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> BankTransactionListResponse:
        start, end = resolve_date_range(date_filter, date_from, date_to)
        flt = BankTransactionFilter(
            submitted_by=resolve_owner_filter(actor, submitted_by),
            bank_id=bank_id,
            date_from=start,
            date_to=end,
            search=search,
        )
        txns = sort_transactions(await self.load_filtered(db, flt), sort)
        window, info = paginate(txns, page)
        metrics = compute_metrics(txns, await self._banks.count(db))
        return BankTransactionListResponse(
            items=[BankTransactionItem.from_domain(t) for t in window],
            pagination=info,
            metrics=BankMetricsOut.from_domain(metrics),
            page_totals=BankPageTotals.from_transactions(window),
        )

    async def _require_bank(self, db: AsyncSession, bank_id: str) -> Bank:
        bank = await self._banks.get(db, bank_id)
        if bank is None:
            raise BankNotFoundError(bank_id)
        return bank

    async def previous_balance(
        self,
        db: AsyncSession,
        bank_id: str,
        on: date,
        exclude_id: str | None = None,
    ) -> PreviousBalanceResponse:
        await self._require_bank(db, bank_id)
        balance = await self._repo.previous_balance(db, bank_id, on, exclude_id)
        return PreviousBalanceResponse(
            bank_id=bank_id,
            date=on.isoformat(),
            previous_balance_cents=balance,
            previous_balance_display=cents_to_display(balance),
        )

    async def _get_visible(
        self, db: AsyncSession, actor: Actor, transaction_id: str, action: str
    ) -> BankTransaction:
        txn = await self._repo.get(db, transaction_id)
        if txn is None:
            raise BankTransactionNotFoundError(transaction_id)
        check_record_access(actor, _MODULE, action, txn.submitted_by, _NOUN)
        return txn

    async def get_transaction(
        self, db: AsyncSession, actor: Actor, transaction_id: str
    ) -> BankTransactionItem:
        txn = await self._get_visible(db, actor, transaction_id, "view")
        return BankTransactionItem.from_domain(txn)

    async def _derive_remaining(
        self,
        db: AsyncSession,
        body: BankTransactionRequest,
        exclude_id: str | None = None,
    ) -> int:
        if body.remaining_balance_cents is not None:
            return body.remaining_balance_cents
        previous = await self._repo.previous_balance(
            db, str(body.bank_id), body.date, exclude_id
        )
        return remaining_balance(previous, body.deposit_cents, body.withdraw_cents)

    async def create_transaction(
        self, db: AsyncSession, actor: Actor, body: BankTransactionRequest, ip: str
    ) -> BankTransactionItem:
        try:
            bank = await self._require_bank(db, str(body.bank_id))
            submitted_by, submitted_by_name = await resolve_submitter(
                db,
                actor,
                str(body.submitted_by) if body.submitted_by else None,
                self._staff,
            )
            txn = BankTransaction(
                id="",
                date=body.date,
                bank_id=bank.id,
                bank_name=bank.name,
                deposit_cents=body.deposit_cents,
                withdraw_cents=body.withdraw_cents,
                pnl_cents=body.pnl_cents,
                remaining_balance_cents=await self._derive_remaining(db, body),
                submitted_by=submitted_by,
                submitted_by_name=submitted_by_name,
            )
            saved = await self._repo.insert(db, txn)
            description = f"Added bank transaction for {saved.date.isoformat()}"
            if submitted_by != str(actor.id):
                description += f" on behalf of {submitted_by_name}"
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.ADD_BANK_DEPOSIT,
                description,
                _details(saved),
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BankTransactionItem.from_domain(saved)

    async def update_transaction(
        self,
        db: AsyncSession,
        actor: Actor,
        transaction_id: str,
        body: BankTransactionRequest,
        ip: str,
    ) -> BankTransactionItem:
        txn = await self._get_visible(db, actor, transaction_id, "edit")
        try:
            bank = await self._require_bank(db, str(body.bank_id))
            txn.date = body.date
            txn.bank_id = bank.id
            txn.bank_name = bank.name
            txn.deposit_cents = body.deposit_cents
            txn.withdraw_cents = body.withdraw_cents
            txn.pnl_cents = body.pnl_cents
            txn.remaining_balance_cents = await self._derive_remaining(
                db, body, exclude_id=transaction_id
            )
            saved = await self._repo.update(db, txn)
            if saved is None:
                raise BankTransactionNotFoundError(transaction_id)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.EDIT_BANK_DEPOSIT,
                f"Updated bank transaction for {saved.date.isoformat()}",
                _details(saved),
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BankTransactionItem.from_domain(saved)

    async def delete_transaction(
        self, db: AsyncSession, actor: Actor, transaction_id: str, ip: str
    ) -> None:
        txn = await self._get_visible(db, actor, transaction_id, "delete")
        try:
            if not await self._repo.delete(db, transaction_id):
                raise BankTransactionNotFoundError(transaction_id)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.DELETE_BANK_DEPOSIT,
                f"Deleted bank transaction for {txn.date.isoformat()}",
                f"Submitted by: {txn.submitted_by_name}. {_details(txn)}",
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Bank transaction %s deleted by %s", transaction_id, actor.name)
