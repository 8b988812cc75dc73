"""Utility helpers for reusable functionality."""

from .datetime import ensure_naive_utc, ensure_utc, now_in_utc

__all__ = [
    "ensure_naive_utc",
    "ensure_utc",
    "now_in_utc",
]
