"""Tests for running balances, search, sort and bank metrics."""

from datetime import UTC, date, datetime

import pytest

from src.bo_bank.domain.calculations import (
    compute_metrics,
    filter_transactions,
    largest_balance,
    remaining_balance,
    sort_transactions,
)
from tests.factories import make_txn


class TestRemainingBalance:
    @pytest.mark.parametrize(
        "previous,deposit,withdraw,expected",
        [
            (0, 10000, 0, 10000),
            (10000, 5000, 2000, 13000),
            (1000, 0, 3000, -2000),
        ],
    )
    def test_derived(self, previous: int, deposit: int, withdraw: int, expected: int) -> None:
        assert remaining_balance(previous, deposit, withdraw) == expected

    def test_override_wins(self) -> None:
        assert remaining_balance(10000, 5000, 0, override=42) == 42

    def test_explicit_zero_override_is_honoured(self) -> None:
        assert remaining_balance(10000, 5000, 0, override=0) == 0


class TestLargestBalance:
    def test_uses_latest_transaction_per_bank(self) -> None:
        txns = [
            make_txn(bank_id="a", bank_name="Chase", on=date(2026, 3, 1), remaining=90000),
            make_txn(bank_id="a", bank_name="Chase", on=date(2026, 3, 5), remaining=1000),
            make_txn(bank_id="b", bank_name="Wells", on=date(2026, 3, 2), remaining=5000),
        ]
        best = largest_balance(txns)
        assert best.bank_name == "Wells"
        assert best.balance == 5000

    def test_created_at_breaks_same_day_ties(self) -> None:
        txns = [
            make_txn(
                bank_id="a",
                remaining=700,
                created_at=datetime(2026, 3, 1, 18, tzinfo=UTC),
            ),
            make_txn(
                bank_id="a",
                remaining=300,
                created_at=datetime(2026, 3, 1, 9, tzinfo=UTC),
            ),
        ]
        assert largest_balance(txns).balance == 700

    def test_floor_when_empty_or_negative(self) -> None:
        assert largest_balance([]).bank_name == "N/A"
        negative = largest_balance([make_txn(remaining=-500)])
        assert (negative.bank_name, negative.balance) == ("N/A", 0)


class TestMetrics:
    def test_sums_and_counts(self) -> None:
        txns = [
            make_txn(bank_id="a", deposit=10000, withdraw=0, remaining=10000),
            make_txn(bank_id="b", deposit=0, withdraw=2500, remaining=-2500),
        ]
        m = compute_metrics(txns, bank_count=7)
        assert m.total_deposits == 10000
        assert m.total_withdrawals == 2500
        assert m.net_balance == 7500
        assert m.total_remaining == 7500
        assert m.active_banks == 7
        assert m.transaction_count == 2
        assert m.largest_balance is not None
        assert m.largest_balance.balance == 10000


class TestSearchAndSort:
    def test_search_by_bank_name_and_amount(self) -> None:
        chase = make_txn(bank_name="Chase Bank", deposit=250000)
        wells = make_txn(bank_name="Wells Fargo")
        assert filter_transactions([chase, wells], "chase") == [chase]
        assert filter_transactions([chase, wells], "2,500.00") == [chase]
        assert filter_transactions([chase, wells], None) == [chase, wells]

    def test_sort_by_remaining_and_bank(self) -> None:
        low = make_txn(bank_name="b", remaining=1)
        high = make_txn(bank_name="A", remaining=9)
        assert sort_transactions([low, high], "remaining-desc") == [high, low]
        assert sort_transactions([low, high], "bank-asc") == [high, low]

    def test_default_sort_newest_first(self) -> None:
        old = make_txn(on=date(2026, 1, 1))
        new = make_txn(on=date(2026, 2, 1))
        assert sort_transactions([old, new], None) == [new, old]
