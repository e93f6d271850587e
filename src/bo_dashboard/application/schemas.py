"""Pydantic schemas for the dashboard."""

from pydantic import BaseModel

from src.bo_activity.domain.models import ActivityLog
from src.bo_dashboard.domain.metrics import DashboardMetrics, activity_kind


class MetricsOut(BaseModel):
    total_deposits: int
    total_withdrawals: int
    total_balance: int
    total_company_expenses: int
    balance_excluding_expenses: int
    total_client_incentives: int
    net_profit: int


class PercentagesOut(BaseModel):
    balance: float
    balance_excluding_expenses: float
    net_profit: float


class CountsOut(BaseModel):
    deposits_count: int
    withdrawals_count: int


class DateRangeOut(BaseModel):
    date_filter: str
    date_from: str | None
    date_to: str | None


class RecentActivityItem(BaseModel):
    id: str
    action: str
    type: str  # warning | info | success
    description: str
    user_name: str
    timestamp: str

    @classmethod
    def from_domain(cls, log: ActivityLog) -> "RecentActivityItem":
        return cls(
            id=log.id,
            action=log.action,
            type=activity_kind(log.action),
            description=log.description,
            user_name=log.user_name,
            timestamp=log.timestamp.isoformat() if log.timestamp else "",
        )


class DashboardResponse(BaseModel):
    metrics: MetricsOut
    percentages: PercentagesOut
    counts: CountsOut
    date_range: DateRangeOut
    recent_activity: list[RecentActivityItem]

    @classmethod
    def build(
        cls,
        m: DashboardMetrics,
        date_range: DateRangeOut,
        recent: list[ActivityLog],
    ) -> "DashboardResponse":
        return cls(
            metrics=MetricsOut(
                total_deposits=m.total_deposits,
                total_withdrawals=m.total_withdrawals,
                total_balance=m.total_balance,
                total_company_expenses=m.total_company_expenses,
                balance_excluding_expenses=m.balance_excluding_expenses,
                total_client_incentives=m.total_client_incentives,
                net_profit=m.net_profit,
            ),
            percentages=PercentagesOut(
                balance=m.balance_percent,
                balance_excluding_expenses=m.balance_excluding_expenses_percent,
                net_profit=m.net_profit_percent,
            ),
            counts=CountsOut(
                deposits_count=m.deposits_count,
                withdrawals_count=m.withdrawals_count,
            ),
            date_range=date_range,
            recent_activity=[RecentActivityItem.from_domain(log) for log in recent],
        )
