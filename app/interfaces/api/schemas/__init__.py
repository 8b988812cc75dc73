from .notification import (
    NotificationCountResponse,
    NotificationIngress,
    NotificationRead,
    NotificationsResponse,
)
from .rating import AverageRatingRead, RatingCreate, RatingRead

__all__ = [
    "AverageRatingRead",
    "NotificationCountResponse",
    "NotificationIngress",
    "NotificationRead",
    "NotificationsResponse",
    "RatingCreate",
    "RatingRead",
]
