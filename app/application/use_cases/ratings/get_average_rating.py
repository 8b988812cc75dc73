"""Use case for retrieving a provider's average rating."""

import logging

from sqlalchemy.orm import Session

from app.domain.entities import AverageRating
from app.infrastructure.repositories import RatingRepository
from .validators import ensure_positive_identifier

logger = logging.getLogger(__name__)


def get_average_rating(session: Session, service_provider_id: int) -> AverageRating | None:
    """Return rating statistics for the provider, or ``None`` without ratings."""

    ensure_positive_identifier(service_provider_id, "Service Provider ID")

    result = RatingRepository(session).get_average_for_provider(service_provider_id)
    if result is None:
        logger.info("No ratings found for service provider %s", service_provider_id)
        return None

    logger.info(
        "Service provider %s has average rating %s from %s ratings",
        result.service_provider_id,
        result.average_rating,
        result.total_ratings,
    )
    return result
