"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.entities import NotificationBatch, RatingNotification
from app.infrastructure.notifications import NotificationMessage


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the polling client."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    service_provider_id: int
    customer_id: int
    score: int
    comment: str | None = None
    created_at: datetime
    type: str


class NotificationsResponse(BaseModel):
    """Notifications consumed by a poll plus queue metadata."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    notifications: list[NotificationRead] = Field(default_factory=list)
    count: int
    has_more: bool
    last_notification_time: datetime | None = None

    @classmethod
    def from_batch(cls, batch: NotificationBatch) -> "NotificationsResponse":
        return cls(
            notifications=[
                NotificationRead.model_validate(notification)
                for notification in batch.notifications
            ],
            count=batch.count,
            has_more=batch.has_more,
            last_notification_time=batch.last_notification_time,
        )


class NotificationCountResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    service_provider_id: int
    pending_notifications: int


class NotificationIngress(NotificationMessage):
    """Body of the internal ingress, in the broker wire format (PascalCase)."""

    def to_notification(self) -> RatingNotification:
        return self.to_entity()


__all__ = [
    "NotificationCountResponse",
    "NotificationIngress",
    "NotificationRead",
    "NotificationsResponse",
]
