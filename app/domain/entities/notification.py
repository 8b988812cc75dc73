"""Domain entities representing rating notifications awaiting a poller."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

NEW_RATING_NOTIFICATION_TYPE = "NewRating"


def new_notification_id() -> str:
    """Return a fresh producer-side notification identifier."""

    return str(uuid.uuid4())


@dataclass(frozen=True)
class RatingNotification:
    """Immutable event telling a service provider it received a rating.

    Notifications are grouped by ``service_provider_id``; ``customer_id`` is
    the customer who triggered the event.
    """

    service_provider_id: int
    customer_id: int
    score: int
    created_at: datetime
    comment: str | None = None
    id: str = field(default_factory=new_notification_id)
    type: str = NEW_RATING_NOTIFICATION_TYPE


@dataclass(frozen=True)
class NotificationBatch:
    """Result of a poll: the consumed notifications plus queue metadata."""

    notifications: list[RatingNotification]
    has_more: bool

    @property
    def count(self) -> int:
        return len(self.notifications)

    @property
    def last_notification_time(self) -> datetime | None:
        if not self.notifications:
            return None
        return self.notifications[-1].created_at


__all__ = [
    "NEW_RATING_NOTIFICATION_TYPE",
    "NotificationBatch",
    "RatingNotification",
    "new_notification_id",
]
