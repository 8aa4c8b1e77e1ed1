"""
In-memory store of pending reminders.

The store is the only owner of the pending collection. Removal and
compaction are total: resolving an id that is no longer pending is a
no-op, so every reconciliation trigger can run redundantly.
"""

from collections import OrderedDict, deque
from datetime import datetime
from typing import Callable, Deque, Dict, List, Optional

from models.reminder import Reminder, ReminderState, Resolution, ResolutionReason
from utils.datetime_utils import utc_now
from utils.exceptions import DuplicateReminderError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class ReminderStore:
    """Pending reminders keyed by notification id, in insertion order."""

    def __init__(
        self,
        history_size: int = 100,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._pending: "OrderedDict[str, Reminder]" = OrderedDict()
        self._history: Deque[Resolution] = deque(maxlen=max(1, history_size))
        self._resolved_ids: Dict[str, ResolutionReason] = {}
        self._clock = clock

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, reminder_id: object) -> bool:
        return reminder_id in self._pending

    def insert(self, reminder: Reminder) -> None:
        """
        Add a pending reminder.

        Raises:
            DuplicateReminderError: If the id is already pending
        """
        if reminder.id in self._pending:
            raise DuplicateReminderError(f"Reminder {reminder.id} is already pending")

        self._pending[reminder.id] = reminder
        self._resolved_ids.pop(reminder.id, None)
        logger.debug(f"Stored reminder {reminder.id} for {reminder.scheduled_for}")

    def get(self, reminder_id: str) -> Optional[Reminder]:
        return self._pending.get(reminder_id)

    def pending(self) -> List[Reminder]:
        """Snapshot of pending reminders in insertion order."""
        return list(self._pending.values())

    def remove(self, reminder_id: str, reason: ResolutionReason) -> Optional[Reminder]:
        """
        Resolve a single reminder.

        Returns:
            The removed reminder, or None if it was not pending
        """
        reminder = self._pending.pop(reminder_id, None)
        if reminder is None:
            return None

        self._record(reminder, reason)
        return reminder

    def compact(
        self,
        keep: Callable[[Reminder], bool],
        reason: ResolutionReason = ResolutionReason.EXPIRED,
    ) -> List[Reminder]:
        """
        Keep only reminders matching the predicate.

        Returns:
            Reminders that were removed
        """
        kept: "OrderedDict[str, Reminder]" = OrderedDict()
        removed: List[Reminder] = []
        for rid, reminder in self._pending.items():
            if keep(reminder):
                kept[rid] = reminder
            else:
                removed.append(reminder)
        if not removed:
            return []

        self._pending = kept
        for reminder in removed:
            self._record(reminder, reason)
        return removed

    def expire(self, now: datetime) -> List[Reminder]:
        """Drop reminders whose fire time is not after now."""
        return self.compact(lambda r: r.scheduled_for > now, ResolutionReason.EXPIRED)

    def state_of(self, reminder_id: str) -> Optional[ReminderState]:
        """Lifecycle state of an id, or None if the store never held it."""
        if reminder_id in self._pending:
            return ReminderState.PENDING
        if reminder_id in self._resolved_ids:
            return ReminderState.RESOLVED
        return None

    def resolution_reason(self, reminder_id: str) -> Optional[ResolutionReason]:
        return self._resolved_ids.get(reminder_id)

    @property
    def history(self) -> List[Resolution]:
        """Most recent resolutions, oldest first."""
        return list(self._history)

    def _record(self, reminder: Reminder, reason: ResolutionReason) -> None:
        resolution = Resolution(
            reminder=reminder, reason=reason, resolved_at=self._clock()
        )
        if len(self._history) == self._history.maxlen:
            evicted = self._history[0]
            self._resolved_ids.pop(evicted.reminder.id, None)
        self._history.append(resolution)
        self._resolved_ids[reminder.id] = reason
        logger.debug(f"Resolved reminder {reminder.id} ({reason.value})")
