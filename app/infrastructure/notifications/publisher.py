"""Best-effort publishing of rating notifications.

Publishing never raises. Every publisher reports its outcome through a
:class:`PublishResult` so callers treat a failed publish as an ordinary
result instead of an exception.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from app.domain.entities import RatingNotification

from .codec import encode_notification

logger = logging.getLogger(__name__)

INTERNAL_INGRESS_PATH = "/api/internal/notifications"


@dataclass(frozen=True)
class PublishResult:
    """Outcome of a single publish attempt."""

    succeeded: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> "PublishResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, error: str) -> "PublishResult":
        return cls(succeeded=False, error=error)


class NotificationPublisher(ABC):
    """Hand notifications to a transport without ever raising."""

    @abstractmethod
    def publish(self, notification: RatingNotification) -> PublishResult:
        """Send ``notification`` and report whether the transport accepted it."""

    def close(self) -> None:
        """Release transport resources."""


class HttpNotificationPublisher(NotificationPublisher):
    """Publish notifications by POSTing them to the internal ingress."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    @classmethod
    def from_base_url(
        cls, base_url: str, *, timeout: float = 5.0
    ) -> "HttpNotificationPublisher":
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def publish(self, notification: RatingNotification) -> PublishResult:
        try:
            body = encode_notification(notification)
            logger.info(
                "Publishing notification for service provider %s to %s",
                notification.service_provider_id,
                self._client.base_url,
            )
            response = self._client.post(
                INTERNAL_INGRESS_PATH,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except Exception as exc:
            logger.exception("Error publishing notification %s", notification.id)
            return PublishResult.failed(str(exc))

        if not response.is_success:
            logger.warning(
                "Failed to publish notification %s. Status: %s",
                notification.id,
                response.status_code,
            )
            return PublishResult.failed(f"HTTP {response.status_code}")

        logger.info("Successfully published notification %s", notification.id)
        return PublishResult.ok()

    def close(self) -> None:
        self._client.close()


__all__ = [
    "HttpNotificationPublisher",
    "INTERNAL_INGRESS_PATH",
    "NotificationPublisher",
    "PublishResult",
]
