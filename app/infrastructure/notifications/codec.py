"""Wire encoding for rating notifications.

Notifications travel as UTF-8 JSON objects with PascalCase field names::

    {"Id": "...", "ServiceProviderId": 1, "CustomerId": 2, "Score": 5,
     "Comment": null, "CreatedAt": "2025-01-01T10:00:00Z", "Type": "NewRating"}

The same encoding is used for broker messages, Redis list entries and the
body of the internal HTTP ingress.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.domain.entities import (
    MAX_COMMENT_LENGTH,
    MAX_SCORE,
    MIN_SCORE,
    NEW_RATING_NOTIFICATION_TYPE,
    RatingNotification,
    new_notification_id,
)
from app.utils import ensure_utc


class NotificationDecodeError(ValueError):
    """Raised when a payload cannot be turned into a notification."""


class NotificationMessage(BaseModel):
    """Pydantic view of the notification wire format."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default_factory=new_notification_id, alias="Id", min_length=1)
    service_provider_id: int = Field(alias="ServiceProviderId")
    customer_id: int = Field(alias="CustomerId")
    score: int = Field(alias="Score")
    comment: str | None = Field(default=None, alias="Comment")
    created_at: datetime = Field(alias="CreatedAt")
    type: str = Field(default=NEW_RATING_NOTIFICATION_TYPE, alias="Type")

    @classmethod
    def from_entity(cls, notification: RatingNotification) -> "NotificationMessage":
        return cls(
            id=notification.id,
            service_provider_id=notification.service_provider_id,
            customer_id=notification.customer_id,
            score=notification.score,
            comment=notification.comment,
            created_at=ensure_utc(notification.created_at),
            type=notification.type,
        )

    def to_entity(self) -> RatingNotification:
        """Return the domain notification, raising ``ValueError`` for invalid data."""

        if self.service_provider_id <= 0:
            raise ValueError("ServiceProviderId must be greater than 0")
        if self.customer_id <= 0:
            raise ValueError("CustomerId must be greater than 0")
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise ValueError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}")
        if self.comment is not None and len(self.comment.strip()) > MAX_COMMENT_LENGTH:
            raise ValueError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")
        try:
            created_at = ensure_utc(self.created_at)
        except OverflowError as exc:
            raise ValueError("CreatedAt is out of range once converted to UTC") from exc

        return RatingNotification(
            id=self.id,
            service_provider_id=self.service_provider_id,
            customer_id=self.customer_id,
            score=self.score,
            comment=self.comment,
            created_at=created_at,
            type=self.type,
        )


def encode_notification(notification: RatingNotification) -> bytes:
    """Return the UTF-8 JSON representation of ``notification``."""

    message = NotificationMessage.from_entity(notification)
    return message.model_dump_json(by_alias=True).encode("utf-8")


def decode_notification(payload: bytes | str) -> RatingNotification:
    """Parse ``payload`` into a :class:`RatingNotification`.

    Raises :class:`NotificationDecodeError` for anything that is not a valid
    notification object, including invalid UTF-8, malformed JSON, ``null``,
    out of range values and timestamps that cannot be expressed in UTC.
    """

    try:
        message = NotificationMessage.model_validate_json(payload)
        return message.to_entity()
    except (ValidationError, UnicodeDecodeError, ValueError) as exc:
        raise NotificationDecodeError(f"Invalid notification payload: {exc}") from exc


__all__ = [
    "NotificationDecodeError",
    "NotificationMessage",
    "decode_notification",
    "encode_notification",
]
