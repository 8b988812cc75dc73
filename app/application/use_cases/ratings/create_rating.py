"""Use case for recording a rating and announcing it to the provider."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.domain.entities import Rating, RatingNotification
from app.infrastructure.notifications import NotificationPublisher
from app.infrastructure.repositories import RatingRepository
from app.utils import now_in_utc
from .validators import ensure_positive_identifier, ensure_valid_score, normalize_comment

logger = logging.getLogger(__name__)


def create_rating(
    session: Session,
    *,
    publisher: NotificationPublisher,
    service_provider_id: int,
    customer_id: int,
    score: int,
    comment: str | None = None,
) -> Rating:
    """Persist a new rating, then publish a notification best-effort.

    The rating is committed before anything is published. Persistence errors
    propagate to the caller; publish failures are logged and never change the
    returned rating.
    """

    ensure_positive_identifier(service_provider_id, "Service Provider ID")
    ensure_positive_identifier(customer_id, "Customer ID")
    ensure_valid_score(score)

    logger.info(
        "Creating rating for service provider %s by customer %s",
        service_provider_id,
        customer_id,
    )
    entity = Rating(
        id=None,
        service_provider_id=service_provider_id,
        customer_id=customer_id,
        score=score,
        comment=normalize_comment(comment),
        created_at=now_in_utc(),
    )
    try:
        saved = RatingRepository(session).create(entity)
    except Exception:
        logger.exception(
            "Error creating rating for service provider %s", service_provider_id
        )
        raise
    logger.info("Rating %s created successfully", saved.id)

    _publish_rating_notification(publisher, saved)
    return saved


def build_rating_notification(rating: Rating) -> RatingNotification:
    """Return the notification announcing ``rating`` to its provider."""

    return RatingNotification(
        service_provider_id=rating.service_provider_id,
        customer_id=rating.customer_id,
        score=rating.score,
        comment=rating.comment,
        created_at=rating.created_at or now_in_utc(),
    )


def _publish_rating_notification(
    publisher: NotificationPublisher, rating: Rating
) -> None:
    try:
        result = publisher.publish(build_rating_notification(rating))
    except Exception:
        logger.exception(
            "Failed to publish notification for rating %s - continuing anyway", rating.id
        )
        return

    if result.succeeded:
        logger.info("Notification published for rating %s", rating.id)
    else:
        logger.warning(
            "Notification for rating %s was not published: %s", rating.id, result.error
        )


__all__ = ["build_rating_notification", "create_rating"]
