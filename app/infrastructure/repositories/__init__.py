"""Repository implementations for infrastructure layer."""

from .rating_repository import RatingRepository

__all__ = ["RatingRepository"]
