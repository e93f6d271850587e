"""Domain models for bo_activity — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class ActivityLog:
    id: str
    action: str                  # ActivityAction value
    description: str
    user_id: str                 # no FK: survives staff deletion
    user_name: str
    details: str | None = None
    ip_address: str | None = None
    timestamp: datetime | None = None


@dataclass
class ActivityFilter:
    action: str | None = None
    user_id: str | None = None
    search: str | None = None
    date_from: date | None = None
    date_to: date | None = None
