"""Domain models for bo_bank — pure dataclasses, no SQLAlchemy dependency.

All amounts are int cents. pnl_cents is signed and optional.
"""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class Bank:
    id: str
    name: str
    created_by: str | None = None
    created_by_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class BankTransaction:
    id: str
    date: date
    bank_id: str
    submitted_by: str
    submitted_by_name: str
    bank_name: str = ""
    deposit_cents: int = 0
    withdraw_cents: int = 0
    pnl_cents: int | None = None
    remaining_balance_cents: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def net(self) -> int:
        return self.deposit_cents - self.withdraw_cents


@dataclass
class LargestBalance:
    bank_name: str = "N/A"
    balance: int = 0


@dataclass
class BankMetrics:
    total_deposits: int = 0
    total_withdrawals: int = 0
    total_remaining: int = 0
    active_banks: int = 0
    largest_balance: LargestBalance | None = None
    transaction_count: int = 0

    @property
    def net_balance(self) -> int:
        return self.total_deposits - self.total_withdrawals


@dataclass
class BankTransactionFilter:
    """`submitted_by` is already resolved against the caller's visibility."""

    submitted_by: str | None = None
    bank_id: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    search: str | None = None
