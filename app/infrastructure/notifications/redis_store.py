"""Redis backed notification store shared across processes."""

from __future__ import annotations

import logging
from datetime import timedelta

import redis

from app.domain.entities import RatingNotification

from .codec import NotificationDecodeError, decode_notification, encode_notification
from .store import NotificationStore, NotificationStoreError

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "notifications"
DEFAULT_RETENTION = timedelta(days=7)


class RedisNotificationStore(NotificationStore):
    """Keep pending notifications in one Redis list per service provider.

    Appends ``LPUSH`` to the head of ``{prefix}:{service_provider_id}`` and
    takes ``RPOP`` from the tail, which yields FIFO order. Every append resets
    the key's expiry so abandoned providers clean themselves up.
    """

    def __init__(
        self,
        client: redis.Redis,
        *,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        retention: timedelta = DEFAULT_RETENTION,
    ) -> None:
        self._client = client
        self._key_prefix = key_prefix
        self._retention = retention

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisNotificationStore":
        return cls(redis.Redis.from_url(url), **kwargs)

    def key_for(self, service_provider_id: int) -> str:
        return f"{self._key_prefix}:{service_provider_id}"

    def append(self, notification: RatingNotification) -> None:
        key = self.key_for(notification.service_provider_id)
        payload = encode_notification(notification)
        try:
            pipeline = self._client.pipeline(transaction=True)
            pipeline.lpush(key, payload)
            pipeline.expire(key, self._retention)
            pipeline.execute()
        except redis.RedisError as exc:
            raise NotificationStoreError(
                f"Failed to store notification {notification.id} in Redis"
            ) from exc

        logger.info(
            "Added notification %s to Redis for service provider %s",
            notification.id,
            notification.service_provider_id,
        )

    def take_up_to(
        self, service_provider_id: int, limit: int
    ) -> list[RatingNotification]:
        key = self.key_for(service_provider_id)
        try:
            # RPOP with a count is a single command, so concurrent takes
            # never see the same entry.
            raw_entries = self._client.rpop(key, limit)
        except redis.RedisError as exc:
            raise NotificationStoreError(
                f"Failed to read notifications for service provider {service_provider_id}"
            ) from exc

        notifications: list[RatingNotification] = []
        for raw in raw_entries or []:
            try:
                notifications.append(decode_notification(raw))
            except NotificationDecodeError:
                logger.error(
                    "Failed to deserialize notification from Redis key %s: %r", key, raw
                )

        logger.info(
            "Retrieved and consumed %s notifications from Redis for service provider %s",
            len(notifications),
            service_provider_id,
        )
        return notifications

    def count(self, service_provider_id: int) -> int:
        try:
            return int(self._client.llen(self.key_for(service_provider_id)))
        except redis.RedisError as exc:
            raise NotificationStoreError(
                f"Failed to count notifications for service provider {service_provider_id}"
            ) from exc

    def close(self) -> None:
        self._client.close()


__all__ = ["DEFAULT_KEY_PREFIX", "DEFAULT_RETENTION", "RedisNotificationStore"]
