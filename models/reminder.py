"""Reminder models for the pending-reminder lifecycle."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TimeUnit(str, Enum):
    """Units the user can pick for a reminder delay."""

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"


class ReminderState(str, Enum):
    """Lifecycle state of a reminder."""

    PENDING = "pending"
    RESOLVED = "resolved"


class ResolutionReason(str, Enum):
    """Why a reminder left the pending set."""

    CANCELLED = "cancelled"
    DELIVERED = "delivered"
    EXPIRED = "expired"


class Reminder(BaseModel):
    """A reminder believed to be pending delivery."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Notification ID from the gateway")
    text: str = Field(..., min_length=1)
    time_value: int = Field(..., gt=0)
    time_unit: TimeUnit
    scheduled_for: datetime


class Resolution(BaseModel):
    """Audit record of a PENDING -> RESOLVED transition."""

    model_config = ConfigDict(frozen=True)

    reminder: Reminder
    reason: ResolutionReason
    resolved_at: datetime


class NotificationContent(BaseModel):
    """Content handed to the notification gateway."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    sound: bool = True


class ReminderForm(BaseModel):
    """Input fields of the presentation layer."""

    text: str = ""
    time_value: str = ""
    time_unit: TimeUnit = TimeUnit.MINUTES

    def clear(self) -> None:
        """Empty the text and time fields, keeping the selected unit."""
        self.text = ""
        self.time_value = ""


class ScheduleOutcome(str, Enum):
    """Result kinds of the scheduling operation."""

    SCHEDULED = "scheduled"
    MISSING_INPUT = "missing_input"
    INVALID_NUMBER = "invalid_number"
    GATEWAY_FAILED = "gateway_failed"


class ScheduleResult(BaseModel):
    """Outcome of a scheduling attempt."""

    outcome: ScheduleOutcome
    message: str
    reminder: Optional[Reminder] = None

    @property
    def ok(self) -> bool:
        return self.outcome == ScheduleOutcome.SCHEDULED
