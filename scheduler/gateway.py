"""
Notification gateway: schedules one-shot notifications and reports delivery.

SchedulerNotificationGateway keeps each notification as an APScheduler
date job on the shared AsyncIOScheduler. When a job fires it hands the
content to a delivery channel and then tells every subscriber which
notification id was delivered.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from models.reminder import NotificationContent
from utils.datetime_utils import ensure_aware, utc_now
from utils.exceptions import (
    GatewayError,
    NotificationNotFoundError,
    NotificationPermissionError,
)
from utils.logging_config import get_logger

logger = get_logger(__name__)

DeliveryHandler = Callable[[str], None]
DeliveryChannel = Callable[[str, NotificationContent], Awaitable[None]]
PermissionCheck = Callable[[], Awaitable[bool]]


class Subscription:
    """Handle returned by event subscriptions. remove() is idempotent."""

    def __init__(self, unsubscribe: Callable[[], None]) -> None:
        self._unsubscribe: Optional[Callable[[], None]] = unsubscribe

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def remove(self) -> None:
        if self._unsubscribe is None:
            return
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        unsubscribe()


class NotificationGateway(ABC):
    """External notification subsystem as seen by the reminder core."""

    def __init__(self) -> None:
        self._delivery_handlers: List[DeliveryHandler] = []

    @abstractmethod
    async def request_permission(self) -> bool:
        """Ask for permission to deliver notifications."""

    @abstractmethod
    async def schedule(self, content: NotificationContent, fire_at: datetime) -> str:
        """
        Schedule a notification.

        Returns:
            Opaque notification id

        Raises:
            GatewayError: On any permission, validation or transport failure
        """

    @abstractmethod
    async def cancel(self, notification_id: str) -> None:
        """
        Cancel a scheduled notification.

        Raises:
            GatewayError: If the notification could not be cancelled
        """

    def on_delivered(self, handler: DeliveryHandler) -> Subscription:
        """Subscribe to delivery events carrying the delivered id."""
        self._delivery_handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._delivery_handlers:
                self._delivery_handlers.remove(handler)

        return Subscription(_unsubscribe)

    def _emit_delivered(self, notification_id: str) -> None:
        for handler in list(self._delivery_handlers):
            try:
                handler(notification_id)
            except Exception as e:
                logger.error(
                    f"Delivery handler failed for {notification_id}: {e}",
                    exc_info=True,
                )


async def _always_granted() -> bool:
    return True


class SchedulerNotificationGateway(NotificationGateway):
    """Gateway backed by APScheduler date jobs."""

    def __init__(
        self,
        scheduler: AsyncIOScheduler,
        channel: DeliveryChannel,
        permission_check: PermissionCheck = _always_granted,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        super().__init__()
        self._scheduler = scheduler
        self._channel = channel
        self._permission_check = permission_check
        self._clock = clock
        self._permission_granted: Optional[bool] = None

    @property
    def permission_granted(self) -> Optional[bool]:
        """Last permission answer, or None before request_permission()."""
        return self._permission_granted

    async def request_permission(self) -> bool:
        try:
            granted = bool(await self._permission_check())
        except Exception as e:
            logger.warning(f"Notification permission check failed: {e}")
            granted = False

        self._permission_granted = granted
        logger.info(f"Notification permission granted: {granted}")
        return granted

    async def schedule(self, content: NotificationContent, fire_at: datetime) -> str:
        if self._permission_granted is False:
            raise NotificationPermissionError("Notification permission not granted")

        fire_at = ensure_aware(fire_at)
        if fire_at <= self._clock():
            raise GatewayError(f"Fire time {fire_at.isoformat()} is not in the future")

        notification_id = uuid.uuid4().hex
        try:
            self._scheduler.add_job(
                self._fire,
                trigger=DateTrigger(run_date=fire_at),
                args=[notification_id, content],
                id=notification_id,
                name=f"Deliver notification: {content.title}",
                misfire_grace_time=None,  # Late is better than never
            )
        except Exception as e:
            raise GatewayError(f"Failed to schedule notification: {e}") from e

        logger.info(f"Notification {notification_id} scheduled for {fire_at.isoformat()}")
        return notification_id

    async def cancel(self, notification_id: str) -> None:
        try:
            self._scheduler.remove_job(notification_id)
        except JobLookupError as e:
            raise NotificationNotFoundError(
                f"No scheduled notification {notification_id}"
            ) from e

        logger.info(f"Notification {notification_id} cancelled")

    async def _fire(self, notification_id: str, content: NotificationContent) -> None:
        """Job body: deliver, then report the id as delivered."""
        try:
            await self._channel(notification_id, content)
            logger.info(f"Notification {notification_id} delivered")
        except Exception as e:
            logger.error(
                f"Failed to deliver notification {notification_id}: {e}", exc_info=True
            )
        finally:
            # The job is gone either way, so the notification is no longer pending
            self._emit_delivered(notification_id)
