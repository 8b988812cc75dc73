"""Helpers for working with timezone-aware UTC datetimes."""

from __future__ import annotations

from datetime import datetime, timezone


def now_in_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in UTC.

    Naive datetimes are assumed to already be UTC, which is how they are
    stored in the ratings table and how producers without offset information
    serialize them.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ensure_naive_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` converted to UTC without ``tzinfo`` for storage."""

    normalized = ensure_utc(value)
    if normalized is None:
        return None
    return normalized.replace(tzinfo=None)


__all__ = ["ensure_naive_utc", "ensure_utc", "now_in_utc"]
