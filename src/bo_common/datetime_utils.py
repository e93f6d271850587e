"""UTC datetime utilities and the date-range presets shared by list endpoints."""

import calendar
from datetime import date, datetime, timedelta, timezone

from src.bo_common.enums import DateFilter


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def today() -> date:
    return utc_now().date()


def subtract_months(d: date, months: int) -> date:
    """Same day `months` earlier, clamped to the end of a shorter month."""
    month_index = d.year * 12 + (d.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def resolve_date_range(
    date_filter: DateFilter | str | None,
    date_from: date | None,
    date_to: date | None,
    reference: date | None = None,
) -> tuple[date | None, date | None]:
    """Turn a preset or a custom range into inclusive (from, to) bounds.

    A custom range always wins over the preset. `None` on either side means
    unbounded.
    """
    if date_from is not None or date_to is not None:
        return date_from, date_to

    ref = reference or today()
    preset = DateFilter(date_filter) if date_filter else DateFilter.ALL
    if preset is DateFilter.TODAY:
        return ref, ref
    if preset is DateFilter.WEEK:
        return ref - timedelta(days=7), ref
    if preset is DateFilter.MONTH:
        return subtract_months(ref, 1), ref
    return None, None
