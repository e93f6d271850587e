"""Pure functions over deposit entries: search, sort, summarize.

No I/O: the repository narrows by owner and date in SQL, everything else
runs here on the loaded entries.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from src.bo_common.money import amount_texts
from src.bo_deposit.domain.models import DepositEntry, DepositSummary


def _created_ts(e: DepositEntry) -> float:
    return e.created_at.timestamp() if e.created_at else 0.0


SORT_KEYS: dict[str, tuple[Callable[[DepositEntry], Any], bool]] = {
    "date-desc": (lambda e: (e.date, _created_ts(e)), True),
    "date-asc": (lambda e: (e.date, _created_ts(e)), False),
    "amount-desc": (lambda e: e.net, True),
    "amount-asc": (lambda e: e.net, False),
    "submitter-asc": (lambda e: e.submitted_by_name.lower(), False),
    "submitter-desc": (lambda e: e.submitted_by_name.lower(), True),
}
DEFAULT_SORT = "date-desc"


def matches_search(entry: DepositEntry, term: str) -> bool:
    """Case-insensitive match on date, submitter, incentives, expenses and deposit amounts."""
    needle = term.strip().lower()
    if not needle:
        return True

    haystack: list[str] = [entry.date.isoformat(), entry.submitted_by_name.lower()]
    haystack.extend(i.name.lower() for i in entry.incentives)
    for e in entry.expenses:
        haystack.append(e.type.lower())
        if e.description:
            haystack.append(e.description.lower())
    for cents in (entry.local_deposit, entry.usdt_deposit, entry.cash_deposit):
        haystack.extend(amount_texts(cents))
    return any(needle in text for text in haystack)


def has_expense_type(entry: DepositEntry, expense_type: str | None) -> bool:
    if not expense_type or expense_type == "all":
        return True
    return any(e.type == expense_type for e in entry.expenses)


def filter_entries(
    entries: Iterable[DepositEntry],
    search: str | None = None,
    expense_type: str | None = None,
) -> list[DepositEntry]:
    return [
        e
        for e in entries
        if (not search or matches_search(e, search)) and has_expense_type(e, expense_type)
    ]


def sort_entries(entries: Iterable[DepositEntry], sort: str | None) -> list[DepositEntry]:
    """Stable sort by one of SORT_KEYS; unknown keys fall back to newest first."""
    key, reverse = SORT_KEYS.get(sort or DEFAULT_SORT, SORT_KEYS[DEFAULT_SORT])
    return sorted(entries, key=key, reverse=reverse)


def summarize(entries: Sequence[DepositEntry]) -> DepositSummary:
    summary = DepositSummary(entry_count=len(entries))
    for e in entries:
        summary.total_deposits += e.total_deposit
        summary.total_withdraws += e.total_withdraw
        summary.total_client_incentives += e.total_incentives
        summary.total_company_expenses += e.total_expenses
    return summary
