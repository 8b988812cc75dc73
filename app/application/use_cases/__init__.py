"""Aggregate application use cases."""

from .notifications import add_notification, get_notification_count, get_notifications
from .ratings import create_rating, get_average_rating

__all__ = [
    "add_notification",
    "create_rating",
    "get_average_rating",
    "get_notification_count",
    "get_notifications",
]
