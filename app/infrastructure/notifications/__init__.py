"""Notification storage, encoding and publishing for the infrastructure layer."""

from .codec import (
    NotificationDecodeError,
    NotificationMessage,
    decode_notification,
    encode_notification,
)
from .memory_store import InMemoryNotificationStore
from .publisher import HttpNotificationPublisher, NotificationPublisher, PublishResult
from .redis_store import RedisNotificationStore
from .store import NotificationStore, NotificationStoreError

__all__ = [
    "HttpNotificationPublisher",
    "InMemoryNotificationStore",
    "NotificationDecodeError",
    "NotificationMessage",
    "NotificationPublisher",
    "NotificationStore",
    "NotificationStoreError",
    "PublishResult",
    "RedisNotificationStore",
    "decode_notification",
    "encode_notification",
]
