"""
Date/time helpers. No framework imports.

MongoDB hands back naive datetimes unless the client is tz-aware; every
comparison in this codebase goes through ``as_utc`` first.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return *value* as an aware UTC datetime.

    Naive datetimes (no ``tzinfo``) are assumed to be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_unix(value: Optional[datetime]) -> Optional[int]:
    """Convert a datetime to integer Unix seconds (``None`` passes through)."""
    if value is None:
        return None
    return int(as_utc(value).timestamp())
