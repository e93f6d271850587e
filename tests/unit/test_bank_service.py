"""Unit tests for BankService and BankTransactionService with mocked repositories."""

import uuid
from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.bo_bank.application.schemas import BankTransactionRequest
from src.bo_bank.application.service import BankService, BankTransactionService
from src.bo_bank.domain.models import Bank
from src.bo_common.enums import ActivityAction
from src.bo_common.errors import (
    BankExistsError,
    BankHasTransactionsError,
    BankNotFoundError,
    BankTransactionNotFoundError,
    PermissionDeniedError,
)
from src.bo_common.pagination import Page
from src.bo_common.permissions import full_permissions
from src.bo_gateway.staff.db_models import StaffModel
from tests.factories import make_bank, make_staff, make_txn

BANK_ID = str(uuid.uuid4())


@pytest.fixture
def bank_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.get.return_value = make_bank("Chase Bank", BANK_ID)
    repo.find_by_name.return_value = None
    repo.count.return_value = 7
    repo.count_transactions.return_value = 0
    return repo


@pytest.fixture
def txn_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.insert.side_effect = lambda db, txn: txn
    repo.update.side_effect = lambda db, txn: txn
    repo.delete.return_value = True
    repo.previous_balance.return_value = 0
    return repo


@pytest.fixture
def activity() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def banks(bank_repo: AsyncMock, activity: AsyncMock) -> BankService:
    return BankService(bank_repo, activity)


@pytest.fixture
def service(
    txn_repo: AsyncMock, bank_repo: AsyncMock, activity: AsyncMock
) -> BankTransactionService:
    return BankTransactionService(txn_repo, bank_repo, AsyncMock(), activity)


def _body(**overrides: object) -> BankTransactionRequest:
    data: dict[str, object] = {
        "date": "2026-03-10",
        "bank_id": BANK_ID,
        "deposit_cents": 5000,
        "withdraw_cents": 1000,
    }
    data.update(overrides)
    return BankTransactionRequest(**data)


class TestBanks:
    async def test_create_duplicate_name(
        self, banks: BankService, bank_repo: AsyncMock, mock_db: AsyncMock, super_admin: StaffModel
    ) -> None:
        bank_repo.find_by_name.return_value = make_bank("chase bank")
        with pytest.raises(BankExistsError):
            await banks.create_bank(mock_db, super_admin, "Chase Bank", "ip")
        mock_db.rollback.assert_awaited_once()

    async def test_create_records_creator(
        self,
        banks: BankService,
        bank_repo: AsyncMock,
        activity: AsyncMock,
        mock_db: AsyncMock,
        staff_member: StaffModel,
    ) -> None:
        bank_repo.insert.return_value = Bank(
            id="b9", name="Ally", created_by=str(staff_member.id), created_by_name="Bob"
        )
        item = await banks.create_bank(mock_db, staff_member, "Ally", "ip")
        assert item.created_by_name == "Bob"
        bank_repo.insert.assert_awaited_once_with(mock_db, "Ally", str(staff_member.id), "Bob")
        assert activity.record.await_args.args[3] == ActivityAction.ADD_BANK

    async def test_rename_is_admin_only(
        self, banks: BankService, mock_db: AsyncMock
    ) -> None:
        manager = make_staff(role="Manager", permissions=full_permissions())
        with pytest.raises(PermissionDeniedError):
            await banks.rename_bank(mock_db, manager, BANK_ID, "New", "ip")

    async def test_rename_conflict(
        self, banks: BankService, bank_repo: AsyncMock, mock_db: AsyncMock, super_admin: StaffModel
    ) -> None:
        bank_repo.find_by_name.return_value = make_bank("Wells Fargo")
        with pytest.raises(BankExistsError):
            await banks.rename_bank(mock_db, super_admin, BANK_ID, "wells fargo", "ip")

    async def test_delete_blocked_by_transactions(
        self, banks: BankService, bank_repo: AsyncMock, mock_db: AsyncMock, super_admin: StaffModel
    ) -> None:
        bank_repo.count_transactions.return_value = 3
        with pytest.raises(BankHasTransactionsError):
            await banks.delete_bank(mock_db, super_admin, BANK_ID, "ip")
        bank_repo.delete.assert_not_awaited()

    async def test_delete_missing(
        self, banks: BankService, bank_repo: AsyncMock, mock_db: AsyncMock, super_admin: StaffModel
    ) -> None:
        bank_repo.get.return_value = None
        with pytest.raises(BankNotFoundError):
            await banks.delete_bank(mock_db, super_admin, BANK_ID, "ip")


class TestCreateTransaction:
    async def test_remaining_derived_from_previous(
        self,
        service: BankTransactionService,
        txn_repo: AsyncMock,
        mock_db: AsyncMock,
        staff_member: StaffModel,
    ) -> None:
        txn_repo.previous_balance.return_value = 20000

        item = await service.create_transaction(mock_db, staff_member, _body(), "ip")

        assert item.remaining_balance_cents == 24000
        assert item.bank_name == "Chase Bank"
        assert item.submitted_by == str(staff_member.id)
        txn_repo.previous_balance.assert_awaited_once_with(
            mock_db, BANK_ID, date(2026, 3, 10), None
        )

    async def test_override_skips_lookup(
        self,
        service: BankTransactionService,
        txn_repo: AsyncMock,
        mock_db: AsyncMock,
        staff_member: StaffModel,
    ) -> None:
        item = await service.create_transaction(
            mock_db, staff_member, _body(remaining_balance_cents=0, pnl_cents=-300), "ip"
        )
        assert item.remaining_balance_cents == 0
        assert item.pnl_cents == -300
        txn_repo.previous_balance.assert_not_awaited()

    async def test_unknown_bank(
        self,
        service: BankTransactionService,
        bank_repo: AsyncMock,
        mock_db: AsyncMock,
        staff_member: StaffModel,
    ) -> None:
        bank_repo.get.return_value = None
        with pytest.raises(BankNotFoundError):
            await service.create_transaction(mock_db, staff_member, _body(), "ip")
        mock_db.rollback.assert_awaited_once()

    async def test_negative_amounts_rejected(self) -> None:
        with pytest.raises(ValueError):
            _body(deposit_cents=-1)


class TestModifyTransaction:
    async def test_update_excludes_itself_from_previous_balance(
        self,
        service: BankTransactionService,
        txn_repo: AsyncMock,
        mock_db: AsyncMock,
        super_admin: StaffModel,
    ) -> None:
        txn_repo.get.return_value = make_txn(bank_id=BANK_ID, submitted_by="someone")
        txn_repo.previous_balance.return_value = 100

        item = await service.update_transaction(mock_db, super_admin, "t1", _body(), "ip")

        assert item.remaining_balance_cents == 4100
        assert txn_repo.previous_balance.await_args.args[3] == "t1"

    async def test_non_owner_cannot_delete(
        self, service: BankTransactionService, txn_repo: AsyncMock, mock_db: AsyncMock
    ) -> None:
        actor = make_staff(role="Accountant", permissions=full_permissions())
        txn_repo.get.return_value = make_txn(submitted_by=str(uuid.uuid4()))
        with pytest.raises(PermissionDeniedError):
            await service.delete_transaction(mock_db, actor, "t1", "ip")

    async def test_missing_transaction(
        self,
        service: BankTransactionService,
        txn_repo: AsyncMock,
        mock_db: AsyncMock,
        super_admin: StaffModel,
    ) -> None:
        txn_repo.get.return_value = None
        with pytest.raises(BankTransactionNotFoundError):
            await service.get_transaction(mock_db, super_admin, "t1")


class TestListing:
    async def test_metrics_and_bank_filter(
        self,
        service: BankTransactionService,
        txn_repo: AsyncMock,
        mock_db: AsyncMock,
        staff_member: StaffModel,
    ) -> None:
        txn_repo.list_transactions.return_value = [
            make_txn(bank_id=BANK_ID, deposit=1000, remaining=1000),
            make_txn(bank_id=BANK_ID, withdraw=300, remaining=700, on=date(2026, 3, 2)),
        ]

        resp = await service.list_transactions(
            mock_db, staff_member, Page(limit=1), bank_id=BANK_ID
        )

        args = txn_repo.list_transactions.await_args.args
        assert args[1] == str(staff_member.id)
        assert args[2] == BANK_ID
        assert resp.metrics.total_deposits == 1000
        assert resp.metrics.total_withdrawals == 300
        assert resp.metrics.active_banks == 7
        assert resp.metrics.largest_balance.balance == 700
        assert resp.page_totals.withdraw_cents == 300
        assert resp.pagination.total_pages == 2

    async def test_previous_balance_lookup(
        self, service: BankTransactionService, txn_repo: AsyncMock, mock_db: AsyncMock
    ) -> None:
        txn_repo.previous_balance.return_value = 150000
        resp = await service.previous_balance(mock_db, BANK_ID, date(2026, 3, 10))
        assert resp.previous_balance_cents == 150000
        assert resp.previous_balance_display == "$1,500.00"
