"""Domain entities describing customer ratings of service providers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

MIN_SCORE = 1
MAX_SCORE = 5
MAX_COMMENT_LENGTH = 500


@dataclass
class Rating:
    """A score given by a customer to a service provider."""

    id: int | None
    service_provider_id: int
    customer_id: int
    score: int
    comment: str | None
    created_at: datetime | None


@dataclass(frozen=True)
class AverageRating:
    """Aggregated rating statistics for a service provider."""

    service_provider_id: int
    average_rating: float
    total_ratings: int
    last_rated_at: datetime | None


__all__ = [
    "AverageRating",
    "MAX_COMMENT_LENGTH",
    "MAX_SCORE",
    "MIN_SCORE",
    "Rating",
]
