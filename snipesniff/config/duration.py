"""Interval parsing for the ``interval`` configuration value."""

import re
from typing import Union

MIN_INTERVAL_SECONDS = 1
MAX_INTERVAL_SECONDS = 86400  # 24 hours

_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

_ISO8601_PATTERN = re.compile(
    r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$"
)
_HUMAN_PATTERN = re.compile(r"(\d+)\s*([smhd])")


class DurationParseError(ValueError):
    """Raised when an interval value cannot be parsed or is out of range."""


def parse_interval(value: Union[int, str]) -> int:
    """
    Convert an interval config value to whole seconds.

    Accepts a bare integer (seconds), a digit-only string, a human-readable
    duration ("30s", "15m", "1h30m", "2d") or an ISO-8601 duration
    ("PT15M", "P1D").

    Args:
        value: Raw interval value from the configuration file

    Returns:
        Interval in seconds

    Raises:
        DurationParseError: If the value is not a recognised duration

    Examples:
        >>> parse_interval(90)
        90
        >>> parse_interval("15m")
        900
        >>> parse_interval("PT1H")
        3600
    """
    if isinstance(value, bool):
        raise DurationParseError(f"Interval must be a duration, got boolean {value!r}")

    if isinstance(value, int):
        return value

    if not isinstance(value, str):
        raise DurationParseError(f"Interval must be an integer or a string, got {type(value).__name__}")

    text = value.strip()
    if not text:
        raise DurationParseError("Interval cannot be empty")

    if text.isdigit():
        return int(text)

    if text.upper().startswith("P"):
        return _parse_iso8601(text)

    return _parse_human_readable(text)


def _parse_iso8601(text: str) -> int:
    match = _ISO8601_PATTERN.match(text.upper())
    if not match:
        raise DurationParseError(
            f"Invalid ISO-8601 duration: '{text}'. Expected e.g. 'PT30S', 'PT15M', 'PT1H30M' or 'P1D'"
        )

    days, hours, minutes, seconds = match.groups()
    total = (
        int(days or 0) * 86400
        + int(hours or 0) * 3600
        + int(minutes or 0) * 60
        + int(float(seconds or 0))
    )

    if total == 0:
        raise DurationParseError(f"Interval cannot be zero: '{text}'")
    return total


def _parse_human_readable(text: str) -> int:
    lowered = text.lower()
    matches = _HUMAN_PATTERN.findall(lowered)

    if not matches:
        raise DurationParseError(
            f"Invalid duration: '{text}'. Expected e.g. '30s', '15m', '1h' or '1h30m'"
        )

    # Reject trailing garbage such as "15m later"
    consumed = "".join(f"{num}{unit}" for num, unit in matches)
    if consumed != re.sub(r"\s+", "", lowered):
        raise DurationParseError(
            f"Invalid characters in duration: '{text}'. "
            "Use only digits and the units s, m, h, d"
        )

    total = sum(int(num) * _UNIT_SECONDS[unit] for num, unit in matches)
    if total == 0:
        raise DurationParseError(f"Interval cannot be zero: '{text}'")
    return total


def validate_interval_range(
    seconds: int,
    min_seconds: int = MIN_INTERVAL_SECONDS,
    max_seconds: int = MAX_INTERVAL_SECONDS,
) -> None:
    """
    Check that an interval lies within the accepted bounds.

    Raises:
        DurationParseError: If the interval is outside [min_seconds, max_seconds]
    """
    if seconds < min_seconds:
        raise DurationParseError(
            f"Interval too short: {describe_seconds(seconds)}. Minimum is {describe_seconds(min_seconds)}."
        )

    if seconds > max_seconds:
        raise DurationParseError(
            f"Interval too long: {describe_seconds(seconds)}. Maximum is {describe_seconds(max_seconds)}."
        )


def describe_seconds(seconds: int) -> str:
    """Render a second count as '1 second', '15 minutes', '2 hours', ..."""
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if abs(seconds) >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''}"
    return f"{seconds} second{'s' if seconds != 1 else ''}"
