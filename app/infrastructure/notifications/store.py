"""Contract shared by the notification store backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities import RatingNotification


class NotificationStoreError(RuntimeError):
    """Raised when the backing store cannot be reached or fails."""


class NotificationStore(ABC):
    """Holds pending notifications per service provider until polled.

    ``take_up_to`` is destructive: a notification handed to one caller is
    removed and can never be returned again. Callers are responsible for
    bounding ``limit``.
    """

    @abstractmethod
    def append(self, notification: RatingNotification) -> None:
        """Insert ``notification`` at the tail of its provider's queue."""

    @abstractmethod
    def take_up_to(
        self, service_provider_id: int, limit: int
    ) -> list[RatingNotification]:
        """Atomically remove and return up to ``limit`` oldest notifications."""

    @abstractmethod
    def count(self, service_provider_id: int) -> int:
        """Return the number of pending notifications without consuming them."""

    def close(self) -> None:
        """Release backend resources."""


__all__ = ["NotificationStore", "NotificationStoreError"]
