"""Timestamps for history records."""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Aware UTC now; the single clock used when stamping results."""
    return datetime.now(timezone.utc)


def ensure_timezone_aware(dt: Optional[datetime]) -> datetime:
    """
    Treat a naive datetime read back from the history table as UTC.

    SQLite drops tzinfo on ``DateTime(timezone=True)`` columns, so rows come
    back naive even though they were written aware.

    Raises:
        ValueError: If dt is None
    """
    if dt is None:
        raise ValueError("datetime cannot be None")
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)
