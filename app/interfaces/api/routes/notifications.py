"""Poll endpoints for service providers awaiting rating notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.application.use_cases.notifications import (
    DEFAULT_LIMIT,
    get_notification_count as get_notification_count_uc,
    get_notifications as get_notifications_uc,
)
from app.infrastructure.notifications import NotificationStore, NotificationStoreError
from app.interfaces.api.dependencies import get_notification_store
from app.interfaces.api.schemas import NotificationCountResponse, NotificationsResponse

router = APIRouter(prefix="/api/notifications", tags=["notifications"])

logger = logging.getLogger(__name__)


@router.get("", response_model=NotificationsResponse)
def get_notifications(
    service_provider_id: int = Query(..., alias="serviceProviderId"),
    limit: int = Query(DEFAULT_LIMIT),
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationsResponse:
    """Return and consume pending notifications (once-only)."""

    try:
        batch = get_notifications_uc(
            store, service_provider_id=service_provider_id, limit=limit
        )
    except ValueError as exc:
        logger.warning("Invalid notification poll: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NotificationStoreError as exc:
        logger.exception(
            "Unexpected error getting notifications for service provider %s",
            service_provider_id,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while retrieving notifications",
        ) from exc
    return NotificationsResponse.from_batch(batch)


@router.get("/count", response_model=NotificationCountResponse)
def get_notification_count(
    service_provider_id: int = Query(..., alias="serviceProviderId"),
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationCountResponse:
    """Return the number of pending notifications without consuming them."""

    try:
        count = get_notification_count_uc(store, service_provider_id=service_provider_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NotificationStoreError as exc:
        logger.exception(
            "Error getting notification count for service provider %s",
            service_provider_id,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while retrieving notification count",
        ) from exc
    return NotificationCountResponse(
        service_provider_id=service_provider_id, pending_notifications=count
    )
