"""Use cases for storing and polling rating notifications."""

from .ingress import add_notification
from .polling import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    get_notification_count,
    get_notifications,
)

__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "add_notification",
    "get_notification_count",
    "get_notifications",
]
