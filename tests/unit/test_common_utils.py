"""Tests for money, date-range, pagination and connection helpers."""

from datetime import date

import pytest

from config.settings import settings
from src.bo_common.database import engine
from src.bo_common.datetime_utils import resolve_date_range, subtract_months
from src.bo_common.enums import DateFilter
from src.bo_common.money import amount_texts, cents_to_display, ratio_percent
from src.bo_common.pagination import Page, PaginationInfo, paginate
from src.bo_common.redis_client import redis_key


class TestMoney:
    def test_cents_to_display(self) -> None:
        assert cents_to_display(6500) == "$65.00"
        assert cents_to_display(150000) == "$1,500.00"
        assert cents_to_display(-1205) == "-$12.05"
        assert cents_to_display(0) == "$0.00"

    def test_amount_texts(self) -> None:
        assert amount_texts(150000) == ("1500.00", "$1,500.00")
        assert amount_texts(-5) == ("-0.05", "-$0.05")

    def test_ratio_percent(self) -> None:
        assert ratio_percent(500, 1000) == 50.0
        assert ratio_percent(1, 3) == 33.3
        assert ratio_percent(0, 1000) == 0.0
        assert ratio_percent(-10, 1000) == 0.0
        # zero denominator counts as 1
        assert ratio_percent(5, 0) == 500.0


REF = date(2026, 3, 31)


class TestDateRange:
    def test_custom_range_wins(self) -> None:
        assert resolve_date_range(DateFilter.TODAY, date(2026, 1, 1), None, REF) == (
            date(2026, 1, 1),
            None,
        )

    def test_presets(self) -> None:
        assert resolve_date_range("today", None, None, REF) == (REF, REF)
        assert resolve_date_range("week", None, None, REF) == (date(2026, 3, 24), REF)
        assert resolve_date_range("month", None, None, REF) == (date(2026, 2, 28), REF)
        assert resolve_date_range("all", None, None, REF) == (None, None)
        assert resolve_date_range(None, None, None, REF) == (None, None)

    def test_unknown_preset_raises(self) -> None:
        with pytest.raises(ValueError):
            resolve_date_range("fortnight", None, None, REF)

    def test_subtract_months_crosses_year(self) -> None:
        assert subtract_months(date(2026, 1, 15), 1) == date(2025, 12, 15)
        assert subtract_months(date(2024, 3, 31), 1) == date(2024, 2, 29)


class TestPagination:
    def test_offset(self) -> None:
        assert Page(3, 20).offset == 40

    def test_info(self) -> None:
        info = PaginationInfo.build(Page(2, 10), 25)
        assert info.total_pages == 3
        assert info.has_next_page and info.has_previous_page

    def test_empty(self) -> None:
        info = PaginationInfo.build(Page(1, 10), 0)
        assert info.total_pages == 0
        assert not info.has_next_page and not info.has_previous_page

    def test_paginate_window(self) -> None:
        window, info = paginate(list(range(25)), Page(3, 10))
        assert window == [20, 21, 22, 23, 24]
        assert info.total_count == 25
        assert not info.has_next_page


class TestConnections:
    def test_redis_keys_are_namespaced(self) -> None:
        assert redis_key("otp", "bob@example.com") == "bo:otp:bob@example.com"
        assert redis_key("ratelimit", "203.0.113.9", "login") == "bo:ratelimit:203.0.113.9:login"

    def test_engine_pool_follows_settings(self) -> None:
        assert engine.pool.size() == settings.DB_POOL_SIZE
