"""Pydantic schemas for deposit entries.

Amounts travel as int cents. Each response item carries the derived totals
and their display strings so the admin table renders them as-is.
"""

import datetime as dt
import uuid
from collections.abc import Sequence
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from src.bo_common.enums import ExpenseType
from src.bo_common.money import cents_to_display
from src.bo_common.pagination import PaginationInfo
from src.bo_deposit.domain.models import (
    ClientIncentive,
    DepositEntry,
    DepositSummary,
    Expense,
)

Cents = Annotated[int, Field(ge=0)]


def _non_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


IncentiveName = Annotated[str, Field(min_length=1, max_length=255), AfterValidator(_non_blank)]


class IncentiveIn(BaseModel):
    name: IncentiveName
    amount_cents: int = Field(..., gt=0)

    def to_domain(self) -> ClientIncentive:
        return ClientIncentive(name=self.name, amount_cents=self.amount_cents)


class ExpenseIn(BaseModel):
    type: ExpenseType
    amount_cents: int = Field(..., gt=0)
    description: str | None = Field(None, max_length=1000)

    def to_domain(self) -> Expense:
        description = self.description.strip() if self.description else None
        return Expense(
            type=self.type.value,
            amount_cents=self.amount_cents,
            description=description or None,
        )


class DepositRequest(BaseModel):
    """Body of POST and PUT. `submitted_by` is honoured on create, for admins only."""

    date: dt.date
    local_deposit: Cents = 0
    usdt_deposit: Cents = 0
    cash_deposit: Cents = 0
    local_withdraw: Cents = 0
    usdt_withdraw: Cents = 0
    cash_withdraw: Cents = 0
    incentives: list[IncentiveIn] = Field(default_factory=list)
    expenses: list[ExpenseIn] = Field(default_factory=list)
    submitted_by: uuid.UUID | None = None


class IncentiveOut(BaseModel):
    id: str | None
    name: str
    amount_cents: int
    amount_display: str


class ExpenseOut(BaseModel):
    id: str | None
    type: str
    amount_cents: int
    amount_display: str
    description: str | None


class DepositItem(BaseModel):
    id: str
    date: str
    local_deposit: int
    usdt_deposit: int
    cash_deposit: int
    local_withdraw: int
    usdt_withdraw: int
    cash_withdraw: int
    incentives: list[IncentiveOut]
    expenses: list[ExpenseOut]
    total_deposit: int
    total_withdraw: int
    net: int
    total_incentives: int
    total_expenses: int
    todays_balance: int
    total_deposit_display: str
    total_withdraw_display: str
    todays_balance_display: str
    submitted_by: str
    submitted_by_name: str
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, e: DepositEntry) -> "DepositItem":
        return cls(
            id=e.id,
            date=e.date.isoformat(),
            local_deposit=e.local_deposit,
            usdt_deposit=e.usdt_deposit,
            cash_deposit=e.cash_deposit,
            local_withdraw=e.local_withdraw,
            usdt_withdraw=e.usdt_withdraw,
            cash_withdraw=e.cash_withdraw,
            incentives=[
                IncentiveOut(
                    id=i.id,
                    name=i.name,
                    amount_cents=i.amount_cents,
                    amount_display=cents_to_display(i.amount_cents),
                )
                for i in e.incentives
            ],
            expenses=[
                ExpenseOut(
                    id=x.id,
                    type=x.type,
                    amount_cents=x.amount_cents,
                    amount_display=cents_to_display(x.amount_cents),
                    description=x.description,
                )
                for x in e.expenses
            ],
            total_deposit=e.total_deposit,
            total_withdraw=e.total_withdraw,
            net=e.net,
            total_incentives=e.total_incentives,
            total_expenses=e.total_expenses,
            todays_balance=e.todays_balance,
            total_deposit_display=cents_to_display(e.total_deposit),
            total_withdraw_display=cents_to_display(e.total_withdraw),
            todays_balance_display=cents_to_display(e.todays_balance),
            submitted_by=e.submitted_by,
            submitted_by_name=e.submitted_by_name,
            created_at=e.created_at.isoformat() if e.created_at else None,
            updated_at=e.updated_at.isoformat() if e.updated_at else None,
        )


class DepositSummaryOut(BaseModel):
    total_deposits: int
    total_withdraws: int
    net_deposits: int
    total_client_incentives: int
    total_company_expenses: int
    net_profit: int
    entry_count: int
    net_profit_display: str

    @classmethod
    def from_domain(cls, s: DepositSummary) -> "DepositSummaryOut":
        return cls(
            total_deposits=s.total_deposits,
            total_withdraws=s.total_withdraws,
            net_deposits=s.net_deposits,
            total_client_incentives=s.total_client_incentives,
            total_company_expenses=s.total_company_expenses,
            net_profit=s.net_profit,
            entry_count=s.entry_count,
            net_profit_display=cents_to_display(s.net_profit),
        )


class DepositPageTotals(BaseModel):
    local_deposit: int = 0
    usdt_deposit: int = 0
    cash_deposit: int = 0
    local_withdraw: int = 0
    usdt_withdraw: int = 0
    cash_withdraw: int = 0
    total_incentives: int = 0
    total_expenses: int = 0
    todays_balance: int = 0

    @classmethod
    def from_entries(cls, entries: Sequence[DepositEntry]) -> "DepositPageTotals":
        totals = cls()
        for e in entries:
            totals.local_deposit += e.local_deposit
            totals.usdt_deposit += e.usdt_deposit
            totals.cash_deposit += e.cash_deposit
            totals.local_withdraw += e.local_withdraw
            totals.usdt_withdraw += e.usdt_withdraw
            totals.cash_withdraw += e.cash_withdraw
            totals.total_incentives += e.total_incentives
            totals.total_expenses += e.total_expenses
            totals.todays_balance += e.todays_balance
        return totals


class DepositListResponse(BaseModel):
    items: list[DepositItem]
    pagination: PaginationInfo
    summary: DepositSummaryOut
    page_totals: DepositPageTotals
