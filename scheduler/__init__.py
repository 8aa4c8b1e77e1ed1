"""Reminder lifecycle core: scheduling, storage and reconciliation."""

from .durations import compute_fire_at, describe, format_time_left, to_milliseconds
from .store import ReminderStore
from .gateway import NotificationGateway, SchedulerNotificationGateway, Subscription
from .lifecycle import AppLifecycle, AppState, install_signal_handlers
from .notifier import LoggingStatusNotifier, StatusNotifier
from .reconciler import LifecycleReconciler
from .reminders import ReminderService, create_scheduler

__all__ = [
    "AppLifecycle",
    "AppState",
    "LifecycleReconciler",
    "LoggingStatusNotifier",
    "NotificationGateway",
    "ReminderService",
    "ReminderStore",
    "SchedulerNotificationGateway",
    "StatusNotifier",
    "Subscription",
    "compute_fire_at",
    "create_scheduler",
    "describe",
    "format_time_left",
    "install_signal_handlers",
    "to_milliseconds",
]
