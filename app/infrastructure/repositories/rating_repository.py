"""Persistence helpers for rating entities."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import AverageRating, Rating
from app.infrastructure.models import RatingModel
from app.utils import ensure_naive_utc, ensure_utc, now_in_utc


class RatingRepository:
    """Provide persistence and aggregation for :class:`Rating` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, rating: Rating) -> Rating:
        model = RatingModel(
            service_provider_id=rating.service_provider_id,
            customer_id=rating.customer_id,
            score=rating.score,
            comment=rating.comment,
            created_at=ensure_naive_utc(rating.created_at or now_in_utc()),
        )
        self.session.add(model)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, rating_id: int) -> Rating | None:
        model = self.session.get(RatingModel, rating_id)
        if model is None:
            return None
        return self._to_entity(model)

    def get_average_for_provider(self, service_provider_id: int) -> AverageRating | None:
        row = (
            self.session.query(
                func.avg(RatingModel.score),
                func.count(RatingModel.id),
                func.max(RatingModel.created_at),
            )
            .filter(RatingModel.service_provider_id == service_provider_id)
            .one()
        )
        average, total, last_rated_at = row
        if not total:
            return None
        return AverageRating(
            service_provider_id=service_provider_id,
            average_rating=round(float(average), 2),
            total_ratings=int(total),
            last_rated_at=ensure_utc(last_rated_at),
        )

    @staticmethod
    def _to_entity(model: RatingModel) -> Rating:
        return Rating(
            id=model.id,
            service_provider_id=model.service_provider_id,
            customer_id=model.customer_id,
            score=model.score,
            comment=model.comment,
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["RatingRepository"]
