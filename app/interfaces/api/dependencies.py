"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, status

from app.infrastructure.notifications import NotificationPublisher, NotificationStore


def get_notification_store(request: Request) -> NotificationStore:
    """Return the notification store created by the application lifespan."""

    store = getattr(request.app.state, "notification_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification store is not available",
        )
    return store


def get_notification_publisher(request: Request) -> NotificationPublisher:
    """Return the notification publisher created by the application lifespan."""

    publisher = getattr(request.app.state, "notification_publisher", None)
    if publisher is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification publisher is not available",
        )
    return publisher


__all__ = ["get_notification_publisher", "get_notification_store"]
