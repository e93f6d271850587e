"""Running balance, search, sort and metrics over bank transactions. No I/O."""

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from src.bo_bank.domain.models import BankMetrics, BankTransaction, LargestBalance
from src.bo_common.money import amount_texts


def remaining_balance(
    previous_balance: int,
    deposit_cents: int,
    withdraw_cents: int,
    override: int | None = None,
) -> int:
    """previous + deposit − withdraw, unless the caller supplied a balance.

    An explicit override of 0 is a real balance, not "absent".
    """
    if override is not None:
        return override
    return previous_balance + deposit_cents - withdraw_cents


def _recency(t: BankTransaction) -> tuple[Any, float]:
    return t.date, t.created_at.timestamp() if t.created_at else 0.0


SORT_KEYS: dict[str, tuple[Callable[[BankTransaction], Any], bool]] = {
    "date-desc": (_recency, True),
    "date-asc": (_recency, False),
    "deposit-desc": (lambda t: t.deposit_cents, True),
    "deposit-asc": (lambda t: t.deposit_cents, False),
    "withdraw-desc": (lambda t: t.withdraw_cents, True),
    "withdraw-asc": (lambda t: t.withdraw_cents, False),
    "remaining-desc": (lambda t: t.remaining_balance_cents, True),
    "remaining-asc": (lambda t: t.remaining_balance_cents, False),
    "bank-asc": (lambda t: t.bank_name.lower(), False),
    "bank-desc": (lambda t: t.bank_name.lower(), True),
}
DEFAULT_SORT = "date-desc"


def matches_search(t: BankTransaction, term: str) -> bool:
    """Case-insensitive match on date, submitter, bank name and amounts."""
    needle = term.strip().lower()
    if not needle:
        return True
    haystack = [t.date.isoformat(), t.submitted_by_name.lower(), t.bank_name.lower()]
    for cents in (t.deposit_cents, t.withdraw_cents, t.remaining_balance_cents):
        haystack.extend(amount_texts(cents))
    return any(needle in text for text in haystack)


def filter_transactions(
    transactions: Iterable[BankTransaction], search: str | None = None
) -> list[BankTransaction]:
    if not search:
        return list(transactions)
    return [t for t in transactions if matches_search(t, search)]


def sort_transactions(
    transactions: Iterable[BankTransaction], sort: str | None
) -> list[BankTransaction]:
    key, reverse = SORT_KEYS.get(sort or DEFAULT_SORT, SORT_KEYS[DEFAULT_SORT])
    return sorted(transactions, key=key, reverse=reverse)


def largest_balance(transactions: Sequence[BankTransaction]) -> LargestBalance:
    """Highest latest-remaining balance across banks, floored at {N/A, 0}."""
    latest: dict[str, BankTransaction] = {}
    for t in transactions:
        current = latest.get(t.bank_id)
        if current is None or _recency(t) >= _recency(current):
            latest[t.bank_id] = t

    best = LargestBalance()
    for t in latest.values():
        if t.remaining_balance_cents > best.balance:
            best = LargestBalance(bank_name=t.bank_name, balance=t.remaining_balance_cents)
    return best


def compute_metrics(transactions: Sequence[BankTransaction], bank_count: int) -> BankMetrics:
    metrics = BankMetrics(
        active_banks=bank_count,
        transaction_count=len(transactions),
        largest_balance=largest_balance(transactions),
    )
    for t in transactions:
        metrics.total_deposits += t.deposit_cents
        metrics.total_withdrawals += t.withdraw_cents
        metrics.total_remaining += t.remaining_balance_cents
    return metrics
