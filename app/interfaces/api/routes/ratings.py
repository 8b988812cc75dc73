"""Endpoints for creating ratings and reading provider averages."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.use_cases.ratings import (
    create_rating as create_rating_uc,
    get_average_rating as get_average_rating_uc,
)
from app.infrastructure.database import get_db
from app.infrastructure.notifications import NotificationPublisher
from app.interfaces.api.dependencies import get_notification_publisher
from app.interfaces.api.schemas import AverageRatingRead, RatingCreate, RatingRead

router = APIRouter(prefix="/api/ratings", tags=["ratings"])

logger = logging.getLogger(__name__)


@router.post("", response_model=RatingRead, status_code=status.HTTP_201_CREATED)
def create_rating(
    payload: RatingCreate,
    db: Session = Depends(get_db),
    publisher: NotificationPublisher = Depends(get_notification_publisher),
) -> RatingRead:
    """Create a rating. The response does not depend on notification delivery."""

    try:
        rating = create_rating_uc(
            db,
            publisher=publisher,
            service_provider_id=payload.service_provider_id,
            customer_id=payload.customer_id,
            score=payload.score,
            comment=payload.comment,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return RatingRead.model_validate(rating)


@router.get("/average", response_model=AverageRatingRead)
def get_average_rating(
    service_provider_id: int = Query(..., alias="serviceProviderId"),
    db: Session = Depends(get_db),
) -> AverageRatingRead:
    try:
        result = get_average_rating_uc(db, service_provider_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No ratings exist for service provider {service_provider_id}",
        )
    return AverageRatingRead.model_validate(result)
