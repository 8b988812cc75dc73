"""Use cases backing the notification poll API."""

from __future__ import annotations

import logging

from app.domain.entities import NotificationBatch
from app.infrastructure.notifications import NotificationStore
from app.application.use_cases.ratings.validators import ensure_positive_identifier

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 50


def ensure_valid_limit(limit: int) -> None:
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_LIMIT:
        raise ValueError(f"Limit must be between 1 and {MAX_LIMIT}")


def get_notifications(
    store: NotificationStore,
    *,
    service_provider_id: int,
    limit: int = DEFAULT_LIMIT,
) -> NotificationBatch:
    """Consume up to ``limit`` pending notifications for the provider.

    Returned notifications are removed from the store and will not be
    returned by later polls.
    """

    ensure_positive_identifier(service_provider_id, "Service Provider ID")
    ensure_valid_limit(limit)

    logger.info(
        "Getting notifications for service provider %s, limit: %s",
        service_provider_id,
        limit,
    )
    notifications = store.take_up_to(service_provider_id, limit)
    remaining = store.count(service_provider_id)
    return NotificationBatch(notifications=notifications, has_more=remaining > 0)


def get_notification_count(store: NotificationStore, *, service_provider_id: int) -> int:
    """Return how many notifications are pending without consuming them."""

    ensure_positive_identifier(service_provider_id, "Service Provider ID")
    return store.count(service_provider_id)


__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "ensure_valid_limit",
    "get_notification_count",
    "get_notifications",
]
