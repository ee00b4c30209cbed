"""Time utilities for timezone-aware UTC datetimes."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def utc_timestamp_millis() -> int:
    """Milliseconds since the epoch, used to make generated blob keys sortable."""
    return int(utc_now().timestamp() * 1000)
