"""
Reminder scheduling and cancellation.

ReminderService turns user input into a scheduled notification plus a
pending reminder, and cancels reminders on request. A reminder is only
stored after the gateway accepted the schedule call, and it is stored
without yielding to the event loop in between.
"""

from datetime import datetime
from typing import Callable, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from models.reminder import (
    NotificationContent,
    Reminder,
    ReminderForm,
    ResolutionReason,
    ScheduleOutcome,
    ScheduleResult,
)
from scheduler.durations import compute_fire_at, to_milliseconds
from scheduler.gateway import NotificationGateway
from scheduler.notifier import StatusNotifier
from scheduler.store import ReminderStore
from utils.constants import (
    DEFAULT_NOTIFICATION_TITLE,
    MAX_REMINDER_TEXT_LENGTH,
    MSG_INVALID_NUMBER,
    MSG_MISSING_INPUT,
    MSG_PERMISSION_DENIED,
    MSG_REMINDER_CANCELLED,
    MSG_REMINDER_SET,
    MSG_SCHEDULE_FAILED,
)
from utils.datetime_utils import utc_now
from utils.exceptions import GatewayError, ValidationError
from utils.logging_config import get_logger
from utils.validation import parse_time_value, sanitize_text

logger = get_logger(__name__)


def create_scheduler() -> AsyncIOScheduler:
    """
    Create the in-memory scheduler shared by the gateway and the reconciler.

    Jobs are not persisted; pending reminders do not survive a restart.
    """
    return AsyncIOScheduler(timezone="UTC")


class ReminderService:
    """Scheduling and cancellation operations over one reminder store."""

    def __init__(
        self,
        store: ReminderStore,
        gateway: NotificationGateway,
        notifier: StatusNotifier,
        clock: Callable[[], datetime] = utc_now,
        notification_title: str = DEFAULT_NOTIFICATION_TITLE,
        notification_sound: bool = True,
        max_text_length: int = MAX_REMINDER_TEXT_LENGTH,
    ) -> None:
        self.store = store
        self._gateway = gateway
        self._notifier = notifier
        self._clock = clock
        self._notification_title = notification_title
        self._notification_sound = notification_sound
        self._max_text_length = max_text_length

    def list_reminders(self) -> List[Reminder]:
        """Pending reminders for display."""
        return self.store.pending()

    async def request_permission(self) -> bool:
        """Ask the gateway for notification permission, reporting a denial once."""
        try:
            granted = await self._gateway.request_permission()
        except GatewayError as e:
            logger.warning(f"Permission request failed: {e}")
            granted = False

        if not granted:
            self._notifier.show(MSG_PERMISSION_DENIED)
        return granted

    async def schedule_reminder(self, form: ReminderForm) -> ScheduleResult:
        """
        Validate the form, schedule a notification and store the reminder.

        The form is cleared only when the reminder was stored.

        Args:
            form: Input fields (text, raw time value, unit)

        Returns:
            ScheduleResult describing what happened
        """
        text = sanitize_text(form.text, self._max_text_length)
        if not text or not str(form.time_value or "").strip():
            return self._reject(ScheduleOutcome.MISSING_INPUT, MSG_MISSING_INPUT)

        try:
            time_value = parse_time_value(form.time_value)
            fire_at = compute_fire_at(
                self._clock(), to_milliseconds(time_value, form.time_unit)
            )
        except (ValidationError, OverflowError) as e:
            # OverflowError: fire time beyond what datetime can represent
            logger.debug(f"Rejected time value {form.time_value!r}: {e}")
            return self._reject(ScheduleOutcome.INVALID_NUMBER, MSG_INVALID_NUMBER)

        content = NotificationContent(
            title=self._notification_title,
            body=text,
            sound=self._notification_sound,
        )
        try:
            notification_id = await self._gateway.schedule(content, fire_at)
        except Exception as e:
            logger.error(f"Failed to schedule reminder {text!r}: {e}", exc_info=True)
            return self._reject(ScheduleOutcome.GATEWAY_FAILED, MSG_SCHEDULE_FAILED)

        # No await between the gateway returning and the insert
        reminder = Reminder(
            id=notification_id,
            text=text,
            time_value=time_value,
            time_unit=form.time_unit,
            scheduled_for=fire_at,
        )
        self.store.insert(reminder)

        form.clear()
        logger.info(
            f"Reminder {reminder.id} set for {fire_at.isoformat()} "
            f"({time_value} {form.time_unit.value})"
        )
        self._notifier.show(MSG_REMINDER_SET)
        return ScheduleResult(
            outcome=ScheduleOutcome.SCHEDULED, message=MSG_REMINDER_SET, reminder=reminder
        )

    async def cancel_reminder(self, reminder_id: str) -> Optional[Reminder]:
        """
        Cancel the notification and drop the reminder.

        The reminder is removed even when the gateway cancel fails, so no
        stale entry stays visible. Gateway failures are logged, never raised.

        Returns:
            The removed reminder, or None if it was already resolved
        """
        try:
            await self._gateway.cancel(reminder_id)
        except GatewayError as e:
            logger.warning(f"Gateway cancel failed for {reminder_id}: {e}")
        except Exception as e:
            logger.error(f"Unexpected error cancelling {reminder_id}: {e}", exc_info=True)

        removed = self.store.remove(reminder_id, ResolutionReason.CANCELLED)
        self._notifier.show(MSG_REMINDER_CANCELLED)
        logger.info(f"Reminder {reminder_id} cancelled")
        return removed

    def _reject(self, outcome: ScheduleOutcome, message: str) -> ScheduleResult:
        self._notifier.show(message)
        return ScheduleResult(outcome=outcome, message=message)
