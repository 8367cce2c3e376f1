"""Timestamp rendering for the long format."""

from __future__ import annotations

import time
from datetime import datetime, timezone

from dirlist.config import TimeStyle

NS_PER_SECOND = 1_000_000_000

MINUTE = 60
HOUR = 3600
DAY = 86400
WEEK = 604800
MONTH = 2629746
MAX_RELATIVE_AGE = 365 * DAY


def _utc(timestamp_ns: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ns // NS_PER_SECOND, tz=timezone.utc)


def _plural(count: int, unit: str) -> str:
    return f"1 {unit} ago" if count == 1 else f"{count} {unit}s ago"


def format_absolute(timestamp_ns: int, now_ns: int) -> str:
    """Return ``Mon D HH:MM`` for the current year, ``Mon D YYYY`` otherwise."""
    when = _utc(timestamp_ns)
    month = when.strftime("%b")
    if when.year == _utc(now_ns).year:
        return f"{month} {when.day} {when:%H:%M}"
    return f"{month} {when.day} {when.year}"


def format_relative(timestamp_ns: int, now_ns: int) -> str:
    """Return a human phrase such as ``3 hours ago`` or ``last week``.

    Future timestamps and anything older than a year fall back to
    :func:`format_absolute`.
    """
    diff = (now_ns - timestamp_ns) // NS_PER_SECOND
    if diff < 0 or diff > MAX_RELATIVE_AGE:
        return format_absolute(timestamp_ns, now_ns)

    if diff < MINUTE:
        return "just now"
    if diff < HOUR:
        return _plural(diff // MINUTE, "minute")
    if diff < DAY:
        return _plural(diff // HOUR, "hour")
    if diff < 2 * DAY:
        return "yesterday"
    if diff < WEEK:
        return _plural(diff // DAY, "day")
    if diff < 2 * WEEK:
        return "last week"
    if diff < MONTH:
        return _plural(diff // WEEK, "week")
    if diff < 2 * MONTH:
        return "last month"
    return _plural(diff // MONTH, "month")


def format_time(timestamp_ns: int, style: TimeStyle, now_ns: int | None = None) -> str:
    """Render *timestamp_ns* in the requested style.

    ISO styles are printed in UTC. A timestamp outside the calendar range
    is printed as raw epoch seconds.

    Args:
        timestamp_ns: Nanoseconds since the epoch.
        style: Output style.
        now_ns: Reference "now" for relative output; defaults to the clock.

    Returns:
        str: Formatted timestamp.
    """
    try:
        if style is TimeStyle.ISO:
            return f"{_utc(timestamp_ns):%Y-%m-%d %H:%M}"
        if style is TimeStyle.LONG_ISO:
            nanos = timestamp_ns % NS_PER_SECOND
            return f"{_utc(timestamp_ns):%Y-%m-%d %H:%M:%S}.{nanos:09d} +0000"
        return format_relative(timestamp_ns, time.time_ns() if now_ns is None else now_ns)
    except (OverflowError, ValueError, OSError):
        return str(timestamp_ns // NS_PER_SECOND)
