"""Schemas for rating endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.entities import MAX_COMMENT_LENGTH, MAX_SCORE, MIN_SCORE


class RatingCreate(BaseModel):
    """Payload required to rate a service provider."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    service_provider_id: int = Field(..., ge=1, description="Service provider being rated")
    customer_id: int = Field(..., ge=1, description="Customer submitting the rating")
    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    comment: str | None = Field(default=None, max_length=MAX_COMMENT_LENGTH)


class RatingRead(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    service_provider_id: int
    customer_id: int
    score: int
    comment: str | None = None
    created_at: datetime


class AverageRatingRead(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    service_provider_id: int
    average_rating: float
    total_ratings: int
    last_rated_at: datetime | None = None


__all__ = ["AverageRatingRead", "RatingCreate", "RatingRead"]
