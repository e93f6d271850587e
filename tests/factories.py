"""Builders for test objects shared across unit and API tests."""

import uuid
from datetime import UTC, date, datetime
from typing import Any

from src.bo_bank.domain.models import Bank, BankTransaction
from src.bo_common.permissions import full_permissions
from src.bo_deposit.domain.models import ClientIncentive, DepositEntry, Expense
from src.bo_gateway.staff.db_models import StaffModel


def make_staff(
    role: str = "Super Admin",
    permissions: dict[str, Any] | None = None,
    name: str = "Alice",
    email: str = "alice@example.com",
    status: str = "active",
    is_archived: bool = False,
) -> StaffModel:
    staff = StaffModel()
    staff.id = uuid.uuid4()
    staff.name = name
    staff.email = email
    staff.password_hash = "$2b$12$fakehash"
    staff.role = role
    staff.status = status
    staff.permissions = full_permissions() if permissions is None else permissions
    staff.is_archived = is_archived
    staff.archived_at = None
    staff.last_login = None
    staff.created_at = datetime(2026, 1, 1, tzinfo=UTC)
    staff.updated_at = datetime(2026, 1, 1, tzinfo=UTC)
    return staff


def make_entry(
    submitted_by: str = "staff-1",
    submitted_by_name: str = "Alice",
    on: date = date(2026, 3, 1),
    deposits: tuple[int, int, int] = (100000, 50000, 0),
    withdraws: tuple[int, int, int] = (20000, 0, 0),
    incentives: list[tuple[str, int]] | None = None,
    expenses: list[tuple[str, int, str | None]] | None = None,
    created_at: datetime | None = None,
    entry_id: str | None = None,
) -> DepositEntry:
    return DepositEntry(
        id=entry_id or str(uuid.uuid4()),
        date=on,
        submitted_by=submitted_by,
        submitted_by_name=submitted_by_name,
        local_deposit=deposits[0],
        usdt_deposit=deposits[1],
        cash_deposit=deposits[2],
        local_withdraw=withdraws[0],
        usdt_withdraw=withdraws[1],
        cash_withdraw=withdraws[2],
        incentives=[ClientIncentive(name=n, amount_cents=a) for n, a in (incentives or [])],
        expenses=[
            Expense(type=t, amount_cents=a, description=d) for t, a, d in (expenses or [])
        ],
        created_at=created_at or datetime(2026, 3, 1, 12, tzinfo=UTC),
    )


def make_bank(name: str = "Chase Bank", bank_id: str | None = None) -> Bank:
    return Bank(id=bank_id or str(uuid.uuid4()), name=name)


def make_txn(
    bank_id: str = "bank-1",
    bank_name: str = "Chase Bank",
    on: date = date(2026, 3, 1),
    deposit: int = 0,
    withdraw: int = 0,
    remaining: int = 0,
    submitted_by: str = "staff-1",
    submitted_by_name: str = "Alice",
    created_at: datetime | None = None,
    pnl: int | None = None,
) -> BankTransaction:
    return BankTransaction(
        id=str(uuid.uuid4()),
        date=on,
        bank_id=bank_id,
        bank_name=bank_name,
        deposit_cents=deposit,
        withdraw_cents=withdraw,
        pnl_cents=pnl,
        remaining_balance_cents=remaining,
        submitted_by=submitted_by,
        submitted_by_name=submitted_by_name,
        created_at=created_at or datetime(2026, 3, 1, 12, tzinfo=UTC),
    )
