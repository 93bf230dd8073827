"""Timestamp helper shared by the models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current UTC time with microsecond precision."""
    return datetime.now(UTC)
