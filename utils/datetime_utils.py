"""
Datetime utilities for consistent timezone handling.
Fire times are always timezone-aware UTC datetimes.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_aware(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def format_12_hour(dt: datetime) -> str:
    """
    Format a datetime as host-local 12-hour clock time, e.g. "3:05:09 PM".

    Args:
        dt: Datetime object (timezone-aware or naive)

    Returns:
        Time string without leading zero on the hour
    """
    local = ensure_aware(dt).astimezone()
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d}:{local.second:02d} {suffix}"
