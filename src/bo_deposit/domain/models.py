"""Domain models for bo_deposit — pure dataclasses, no SQLAlchemy dependency.

All amounts are int cents.
"""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class ClientIncentive:
    name: str
    amount_cents: int           # > 0
    id: str | None = None


@dataclass
class Expense:
    type: str                   # ExpenseType value
    amount_cents: int           # > 0
    description: str | None = None
    id: str | None = None


@dataclass
class DepositEntry:
    id: str
    date: date
    submitted_by: str
    submitted_by_name: str
    local_deposit: int = 0
    usdt_deposit: int = 0
    cash_deposit: int = 0
    local_withdraw: int = 0
    usdt_withdraw: int = 0
    cash_withdraw: int = 0
    incentives: list[ClientIncentive] = field(default_factory=list)
    expenses: list[Expense] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_deposit(self) -> int:
        return self.local_deposit + self.usdt_deposit + self.cash_deposit

    @property
    def total_withdraw(self) -> int:
        return self.local_withdraw + self.usdt_withdraw + self.cash_withdraw

    @property
    def net(self) -> int:
        return self.total_deposit - self.total_withdraw

    @property
    def total_incentives(self) -> int:
        return sum(i.amount_cents for i in self.incentives)

    @property
    def total_expenses(self) -> int:
        return sum(e.amount_cents for e in self.expenses)

    @property
    def todays_balance(self) -> int:
        return self.net - self.total_incentives - self.total_expenses


@dataclass
class DepositSummary:
    total_deposits: int = 0
    total_withdraws: int = 0
    total_client_incentives: int = 0
    total_company_expenses: int = 0
    entry_count: int = 0

    @property
    def net_deposits(self) -> int:
        return self.total_deposits - self.total_withdraws

    @property
    def net_profit(self) -> int:
        return self.net_deposits - self.total_client_incentives - self.total_company_expenses


@dataclass
class DepositFilter:
    """Everything a listing can narrow by. `submitted_by` is already resolved
    against the caller's visibility."""

    submitted_by: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    search: str | None = None
    expense_type: str | None = None
