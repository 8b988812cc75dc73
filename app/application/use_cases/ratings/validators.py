"""Validation helpers for rating use cases."""

from app.domain.entities import MAX_COMMENT_LENGTH, MAX_SCORE, MIN_SCORE


def ensure_positive_identifier(value: int, label: str) -> None:
    """Raise ``ValueError`` unless ``value`` is a positive integer."""

    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{label} must be greater than 0")


def ensure_valid_score(score: int) -> None:
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError("Score must be an integer")
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ValueError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}")


def normalize_comment(comment: str | None) -> str | None:
    """Trim ``comment`` and enforce the maximum length."""

    if comment is None:
        return None
    trimmed = comment.strip()
    if len(trimmed) > MAX_COMMENT_LENGTH:
        raise ValueError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")
    return trimmed


__all__ = ["ensure_positive_identifier", "ensure_valid_score", "normalize_comment"]
