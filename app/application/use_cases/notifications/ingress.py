"""Use case for notifications delivered over the internal HTTP ingress."""

from __future__ import annotations

import logging

from app.domain.entities import RatingNotification
from app.infrastructure.notifications import NotificationStore
from app.application.use_cases.ratings.validators import (
    ensure_positive_identifier,
    ensure_valid_score,
    normalize_comment,
)

logger = logging.getLogger(__name__)


def add_notification(store: NotificationStore, notification: RatingNotification) -> None:
    """Validate ``notification`` and append it to its provider's queue."""

    ensure_positive_identifier(notification.service_provider_id, "Service Provider ID")
    ensure_positive_identifier(notification.customer_id, "Customer ID")
    ensure_valid_score(notification.score)
    normalize_comment(notification.comment)
    if not notification.id:
        raise ValueError("Notification ID is required")

    store.append(notification)
    logger.info(
        "Received notification %s for service provider %s",
        notification.id,
        notification.service_provider_id,
    )


__all__ = ["add_notification"]
