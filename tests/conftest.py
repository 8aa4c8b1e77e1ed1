"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from unittest.mock import patch

import pytest

from models.reminder import NotificationContent, Reminder, TimeUnit
from scheduler.gateway import NotificationGateway
from scheduler.notifier import StatusNotifier
from scheduler.store import ReminderStore
from utils.exceptions import GatewayError, NotificationNotFoundError

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Virtual clock; call it to read the time, advance() to move it."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeGateway(NotificationGateway):
    """In-memory gateway with switchable failures."""

    def __init__(self) -> None:
        super().__init__()
        self.scheduled = {}
        self.cancelled: List[str] = []
        self.fail_schedule: Optional[Exception] = None
        self.fail_cancel: Optional[Exception] = None
        self.permission = True
        self._counter = 0

    async def request_permission(self) -> bool:
        return self.permission

    async def schedule(self, content: NotificationContent, fire_at: datetime) -> str:
        if self.fail_schedule is not None:
            raise self.fail_schedule
        self._counter += 1
        notification_id = f"notif-{self._counter}"
        self.scheduled[notification_id] = (content, fire_at)
        return notification_id

    async def cancel(self, notification_id: str) -> None:
        if self.fail_cancel is not None:
            raise self.fail_cancel
        if notification_id not in self.scheduled:
            raise NotificationNotFoundError(notification_id)
        del self.scheduled[notification_id]
        self.cancelled.append(notification_id)

    def deliver(self, notification_id: str) -> None:
        self.scheduled.pop(notification_id, None)
        self._emit_delivered(notification_id)


class RecordingNotifier(StatusNotifier):
    """Collects status messages."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    def show(self, message: str) -> None:
        self.messages.append(message)


def make_reminder(
    reminder_id: str,
    scheduled_for: datetime,
    text: str = "Test reminder",
    time_value: int = 1,
    time_unit: TimeUnit = TimeUnit.MINUTES,
) -> Reminder:
    return Reminder(
        id=reminder_id,
        text=text,
        time_value=time_value,
        time_unit=time_unit,
        scheduled_for=scheduled_for,
    )


@pytest.fixture(autouse=True)
def mock_settings():
    """Mock settings for all tests."""
    with patch("config.settings") as mock_settings:
        mock_settings.bot_token = "123456:test_token"
        mock_settings.telegram_chat_id = 42
        mock_settings.notification_title = "Reminder!"
        mock_settings.notification_sound = True
        mock_settings.default_time_unit = "minutes"
        mock_settings.sweep_interval_seconds = 60.0
        mock_settings.reminder_history_size = 100
        mock_settings.max_reminder_text_length = 500
        mock_settings.environment = "test"
        yield mock_settings


@pytest.fixture(name="make_reminder")
def make_reminder_fixture():
    """Factory for Reminder instances."""
    return make_reminder


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return ReminderStore(clock=clock)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def gateway_error():
    return GatewayError("transport down")
