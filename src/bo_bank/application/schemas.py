"""Pydantic schemas for banks and bank transactions."""

import datetime as dt
import uuid
from collections.abc import Sequence
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from src.bo_bank.domain.models import Bank, BankMetrics, BankTransaction
from src.bo_common.money import cents_to_display
from src.bo_common.pagination import PaginationInfo


def _strip_bank_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("bank name must not be blank")
    return v


BankName = Annotated[str, Field(min_length=1, max_length=255), AfterValidator(_strip_bank_name)]
Cents = Annotated[int, Field(ge=0)]


# ---------------------------------------------------------------------------
# Banks
# ---------------------------------------------------------------------------


class BankRequest(BaseModel):
    bank_name: BankName


class BankItem(BaseModel):
    id: str
    name: str
    created_by: str | None
    created_by_name: str | None
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, b: Bank) -> "BankItem":
        return cls(
            id=b.id,
            name=b.name,
            created_by=b.created_by,
            created_by_name=b.created_by_name,
            created_at=b.created_at.isoformat() if b.created_at else None,
            updated_at=b.updated_at.isoformat() if b.updated_at else None,
        )


# ---------------------------------------------------------------------------
# Bank transactions
# ---------------------------------------------------------------------------


class BankTransactionRequest(BaseModel):
    """Body of POST and PUT.

    Leave `remaining_balance_cents` out to have it derived from the bank's
    previous balance. `submitted_by` is honoured on create, for admins only.
    """

    date: dt.date
    bank_id: uuid.UUID
    deposit_cents: Cents = 0
    withdraw_cents: Cents = 0
    pnl_cents: int | None = None
    remaining_balance_cents: int | None = None
    submitted_by: uuid.UUID | None = None


class BankTransactionItem(BaseModel):
    id: str
    date: str
    bank_id: str
    bank_name: str
    deposit_cents: int
    withdraw_cents: int
    pnl_cents: int | None
    remaining_balance_cents: int
    deposit_display: str
    withdraw_display: str
    remaining_balance_display: str
    submitted_by: str
    submitted_by_name: str
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, t: BankTransaction) -> "BankTransactionItem":
        return cls(
            id=t.id,
            date=t.date.isoformat(),
            bank_id=t.bank_id,
            bank_name=t.bank_name,
            deposit_cents=t.deposit_cents,
            withdraw_cents=t.withdraw_cents,
            pnl_cents=t.pnl_cents,
            remaining_balance_cents=t.remaining_balance_cents,
            deposit_display=cents_to_display(t.deposit_cents),
            withdraw_display=cents_to_display(t.withdraw_cents),
            remaining_balance_display=cents_to_display(t.remaining_balance_cents),
            submitted_by=t.submitted_by,
            submitted_by_name=t.submitted_by_name,
            created_at=t.created_at.isoformat() if t.created_at else None,
            updated_at=t.updated_at.isoformat() if t.updated_at else None,
        )


class LargestBalanceOut(BaseModel):
    bank_name: str
    balance: int


class BankMetricsOut(BaseModel):
    total_deposits: int
    total_withdrawals: int
    net_balance: int
    total_remaining: int
    active_banks: int
    largest_balance: LargestBalanceOut
    transaction_count: int

    @classmethod
    def from_domain(cls, m: BankMetrics) -> "BankMetricsOut":
        largest = m.largest_balance
        return cls(
            total_deposits=m.total_deposits,
            total_withdrawals=m.total_withdrawals,
            net_balance=m.net_balance,
            total_remaining=m.total_remaining,
            active_banks=m.active_banks,
            largest_balance=LargestBalanceOut(
                bank_name=largest.bank_name if largest else "N/A",
                balance=largest.balance if largest else 0,
            ),
            transaction_count=m.transaction_count,
        )


class BankPageTotals(BaseModel):
    deposit_cents: int = 0
    withdraw_cents: int = 0
    pnl_cents: int = 0
    remaining_balance_cents: int = 0

    @classmethod
    def from_transactions(cls, txns: Sequence[BankTransaction]) -> "BankPageTotals":
        totals = cls()
        for t in txns:
            totals.deposit_cents += t.deposit_cents
            totals.withdraw_cents += t.withdraw_cents
            totals.pnl_cents += t.pnl_cents or 0
            totals.remaining_balance_cents += t.remaining_balance_cents
        return totals


class BankTransactionListResponse(BaseModel):
    items: list[BankTransactionItem]
    pagination: PaginationInfo
    metrics: BankMetricsOut
    page_totals: BankPageTotals


class PreviousBalanceResponse(BaseModel):
    bank_id: str
    date: str
    previous_balance_cents: int
    previous_balance_display: str
