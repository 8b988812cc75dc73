"""ORM models used by the application infrastructure."""

from .rating import RatingModel

__all__ = ["RatingModel"]
