"""
Lifecycle reconciler.

Keeps the reminder store in line with what the notification gateway has
actually done. Three independent triggers resolve pending reminders:

* delivery events from the gateway remove the delivered id,
* a periodic sweep drops reminders whose fire time has passed,
* a background -> active transition runs the same sweep, because
  timers may not have run while the process was suspended.

All triggers are idempotent and run on the event loop thread, so they
never interleave with each other or with scheduling/cancellation.
"""

from datetime import datetime
from typing import Callable, List, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from models.reminder import Reminder, ResolutionReason
from scheduler.gateway import NotificationGateway, Subscription
from scheduler.lifecycle import AppLifecycle, AppState
from scheduler.store import ReminderStore
from utils.constants import DEFAULT_SWEEP_INTERVAL_SECONDS
from utils.datetime_utils import utc_now
from utils.exceptions import ReconcilerStateError
from utils.logging_config import get_logger

logger = get_logger(__name__)

SWEEP_JOB_ID = "sweep_expired_reminders"

_RESUMABLE_STATES = (AppState.INACTIVE, AppState.BACKGROUND)


class LifecycleReconciler:
    """Owns the reconciliation triggers for one reminder store."""

    def __init__(
        self,
        store: ReminderStore,
        gateway: NotificationGateway,
        lifecycle: AppLifecycle,
        scheduler: AsyncIOScheduler,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._lifecycle = lifecycle
        self._scheduler = scheduler
        self._sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock

        self._delivery_subscription: Optional[Subscription] = None
        self._lifecycle_subscription: Optional[Subscription] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """
        Subscribe to delivery and lifecycle events and register the sweep job.

        Raises:
            ReconcilerStateError: If already started
        """
        if self._running:
            raise ReconcilerStateError("Reconciler already started")

        self._delivery_subscription = self._gateway.on_delivered(self.handle_delivered)
        self._lifecycle_subscription = self._lifecycle.on_state_change(
            self.handle_state_change
        )
        self._scheduler.add_job(
            self._run_sweep,
            trigger=IntervalTrigger(seconds=self._sweep_interval_seconds),
            id=SWEEP_JOB_ID,
            name="Drop reminders whose fire time has passed",
            replace_existing=True,
        )
        self._running = True
        logger.info(
            f"Reconciler started (sweep every {self._sweep_interval_seconds}s)"
        )

    def stop(self) -> None:
        """Tear down subscriptions and the sweep job. Safe to call twice."""
        if not self._running:
            return

        for subscription in (self._delivery_subscription, self._lifecycle_subscription):
            if subscription is not None:
                subscription.remove()
        self._delivery_subscription = None
        self._lifecycle_subscription = None

        try:
            self._scheduler.remove_job(SWEEP_JOB_ID)
        except JobLookupError:
            logger.debug("Sweep job already removed")

        self._running = False
        logger.info("Reconciler stopped")

    def handle_delivered(self, notification_id: str) -> None:
        """Delivery trigger: resolve exactly the delivered reminder."""
        removed = self._store.remove(notification_id, ResolutionReason.DELIVERED)
        if removed is None:
            logger.debug(f"Delivered notification {notification_id} was not pending")
        else:
            logger.info(f"Reminder {notification_id} delivered: {removed.text!r}")

    def handle_state_change(self, previous: AppState, next_state: AppState) -> None:
        """Resume trigger: catch up when the app returns to the foreground."""
        if previous in _RESUMABLE_STATES and next_state == AppState.ACTIVE:
            removed = self.sweep()
            logger.info(f"Resume reconciliation removed {len(removed)} reminders")

    def sweep(self) -> List[Reminder]:
        """Sweep trigger: drop every reminder whose fire time is not in the future."""
        removed = self._store.expire(self._clock())
        if removed:
            logger.info(
                f"Swept {len(removed)} expired reminders, {len(self._store)} pending"
            )
        return removed

    async def _run_sweep(self) -> None:
        # Coroutine so AsyncIOScheduler runs it on the event loop, not a thread
        try:
            self.sweep()
        except Exception as e:
            logger.error(f"Reminder sweep failed: {e}", exc_info=True)
