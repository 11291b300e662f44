"""UTC timestamp helpers used for scheduling and log fields."""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as a timezone-aware datetime.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return ``dt`` as an aware UTC datetime.

    Naive datetimes are treated as UTC; aware ones are converted.
    ``None`` passes through.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_timestamp_for_log(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as ISO-8601 UTC with a 'Z' suffix, without microseconds.

    Example:
        >>> format_timestamp_for_log(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))
        '2026-10-19T12:00:00Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return None
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")
