"""Domain entities exposed by the application."""

from .notification import (
    NEW_RATING_NOTIFICATION_TYPE,
    NotificationBatch,
    RatingNotification,
    new_notification_id,
)
from .rating import (
    MAX_COMMENT_LENGTH,
    MAX_SCORE,
    MIN_SCORE,
    AverageRating,
    Rating,
)

__all__ = [
    "AverageRating",
    "MAX_COMMENT_LENGTH",
    "MAX_SCORE",
    "MIN_SCORE",
    "NEW_RATING_NOTIFICATION_TYPE",
    "NotificationBatch",
    "Rating",
    "RatingNotification",
    "new_notification_id",
]
