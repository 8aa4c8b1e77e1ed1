"""Pydantic models for reminders and scheduling results."""

from .reminder import (
    NotificationContent,
    Reminder,
    ReminderForm,
    ReminderState,
    Resolution,
    ResolutionReason,
    ScheduleOutcome,
    ScheduleResult,
    TimeUnit,
)

__all__ = [
    "NotificationContent",
    "Reminder",
    "ReminderForm",
    "ReminderState",
    "Resolution",
    "ResolutionReason",
    "ScheduleOutcome",
    "ScheduleResult",
    "TimeUnit",
]
