"""Dashboard aggregates over already-visible deposit entries and bank transactions."""

from collections.abc import Sequence
from dataclasses import dataclass

from src.bo_bank.domain.models import BankTransaction
from src.bo_common.money import ratio_percent
from src.bo_deposit.domain.models import DepositEntry


@dataclass
class DashboardMetrics:
    total_deposits: int = 0
    total_withdrawals: int = 0
    total_company_expenses: int = 0
    total_client_incentives: int = 0
    deposits_count: int = 0
    withdrawals_count: int = 0

    @property
    def total_balance(self) -> int:
        return self.total_deposits - self.total_withdrawals

    @property
    def balance_excluding_expenses(self) -> int:
        return self.total_balance - self.total_company_expenses

    @property
    def net_profit(self) -> int:
        return self.balance_excluding_expenses - self.total_client_incentives

    @property
    def balance_percent(self) -> float:
        return ratio_percent(self.total_balance, self.total_deposits)

    @property
    def balance_excluding_expenses_percent(self) -> float:
        return ratio_percent(self.balance_excluding_expenses, self.total_balance)

    @property
    def net_profit_percent(self) -> float:
        return ratio_percent(self.net_profit, self.balance_excluding_expenses)


def compute_metrics(
    entries: Sequence[DepositEntry], transactions: Sequence[BankTransaction]
) -> DashboardMetrics:
    m = DashboardMetrics(deposits_count=len(entries), withdrawals_count=len(transactions))
    for e in entries:
        m.total_deposits += e.total_deposit
        m.total_company_expenses += e.total_expenses
        m.total_client_incentives += e.total_incentives
    for t in transactions:
        m.total_withdrawals += t.withdraw_cents
    return m


def activity_kind(action: str) -> str:
    """Badge for the recent-activity feed."""
    if action.startswith("delete_"):
        return "warning"
    if action.startswith("edit_"):
        return "info"
    return "success"
