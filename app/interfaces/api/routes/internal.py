"""Internal service-to-service ingress for notifications (HTTP transport)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.application.use_cases.notifications import add_notification as add_notification_uc
from app.infrastructure.notifications import NotificationStore, NotificationStoreError
from app.interfaces.api.dependencies import get_notification_store
from app.interfaces.api.schemas import NotificationIngress

router = APIRouter(prefix="/api/internal", tags=["internal"])

logger = logging.getLogger(__name__)


@router.post("/notifications", status_code=status.HTTP_204_NO_CONTENT)
def add_notification(
    payload: NotificationIngress,
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    """Store a notification sent by the rating side."""

    try:
        add_notification_uc(store, payload.to_notification())
    except ValueError as exc:
        logger.warning("Invalid notification data received: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NotificationStoreError as exc:
        logger.exception("Unexpected error storing notification %s", payload.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while processing the notification",
        ) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
