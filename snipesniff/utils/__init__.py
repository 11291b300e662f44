"""Shared utilities."""

from .timestamps import ensure_utc, format_timestamp_for_log, utc_now

__all__ = [
    "utc_now",
    "ensure_utc",
    "format_timestamp_for_log",
]
