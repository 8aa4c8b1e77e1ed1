"""
Duration conversion and fire-time calculation.

Pure helpers: no state, no clock access. Callers pass "now" in.
"""

from datetime import datetime, timedelta
from typing import Union

from models.reminder import Reminder, TimeUnit
from utils.constants import MS_PER_HOUR, MS_PER_MINUTE, MS_PER_SECOND
from utils.datetime_utils import format_12_hour

_MS_PER_UNIT = {
    TimeUnit.SECONDS.value: MS_PER_SECOND,
    TimeUnit.MINUTES.value: MS_PER_MINUTE,
    TimeUnit.HOURS.value: MS_PER_HOUR,
}


def _unit_tag(time_unit: Union[TimeUnit, str]) -> str:
    if isinstance(time_unit, TimeUnit):
        return time_unit.value
    return str(time_unit)


def to_milliseconds(time_value: int, time_unit: Union[TimeUnit, str]) -> int:
    """
    Convert a magnitude and unit to milliseconds.

    Unknown unit tags fall back to seconds.

    Args:
        time_value: Positive magnitude
        time_unit: TimeUnit member or its string tag

    Returns:
        Duration in milliseconds
    """
    return int(time_value) * _MS_PER_UNIT.get(_unit_tag(time_unit), MS_PER_SECOND)


def describe(time_value: int, time_unit: Union[TimeUnit, str]) -> str:
    """Human-readable duration, e.g. "2 minutes" (no singular forms)."""
    return f"{time_value} {_unit_tag(time_unit)}"


def compute_fire_at(now: datetime, milliseconds: int) -> datetime:
    """
    Absolute fire time for a delay starting at now.

    Raises:
        OverflowError: If the result is outside the datetime range
    """
    return now + timedelta(milliseconds=milliseconds)


def format_time_left(reminder: Reminder) -> str:
    """List-view caption, e.g. "In 2 minutes (at 3:05:09 PM)"."""
    return (
        f"In {describe(reminder.time_value, reminder.time_unit)} "
        f"(at {format_12_hour(reminder.scheduled_for)})"
    )
