"""SQLAlchemy model for persisted ratings."""

from sqlalchemy import Column, DateTime, Index, Integer, String

from app.infrastructure.database import Base
from app.utils import ensure_naive_utc, now_in_utc


def _utc_now_naive():
    return ensure_naive_utc(now_in_utc())


class RatingModel(Base):
    """Database representation of a customer rating."""

    __tablename__ = "ratings"
    __table_args__ = (
        Index("idx_ratings_service_provider_id", "service_provider_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    service_provider_id = Column(Integer, nullable=False)
    customer_id = Column(Integer, nullable=False)
    score = Column(Integer, nullable=False)
    comment = Column(String(1000), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=_utc_now_naive)


__all__ = ["RatingModel"]
