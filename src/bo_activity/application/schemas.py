"""Pydantic schemas for the activity log API."""

import uuid

from pydantic import BaseModel, Field

from src.bo_activity.domain.models import ActivityLog
from src.bo_common.pagination import PaginationInfo


class BulkDeleteRequest(BaseModel):
    activity_ids: list[uuid.UUID] = Field(..., min_length=1)


class ActivityItem(BaseModel):
    id: str
    action: str
    description: str
    details: str | None
    user_id: str
    user_name: str
    ip_address: str | None
    timestamp: str  # ISO8601

    @classmethod
    def from_domain(cls, log: ActivityLog) -> "ActivityItem":
        return cls(
            id=log.id,
            action=log.action,
            description=log.description,
            details=log.details,
            user_id=log.user_id,
            user_name=log.user_name,
            ip_address=log.ip_address,
            timestamp=log.timestamp.isoformat() if log.timestamp else "",
        )


class ActivityListResponse(BaseModel):
    items: list[ActivityItem]
    pagination: PaginationInfo


class BulkDeleteResponse(BaseModel):
    deleted_count: int
