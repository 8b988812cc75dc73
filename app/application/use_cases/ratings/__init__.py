"""Use cases for recording and aggregating ratings."""

from .create_rating import build_rating_notification, create_rating
from .get_average_rating import get_average_rating

__all__ = ["build_rating_notification", "create_rating", "get_average_rating"]
