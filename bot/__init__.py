"""Telegram bot handlers, states and collaborators."""

from .handlers import register_handlers
from .notifier import TelegramDeliveryChannel, TelegramStatusNotifier
from .states import ReminderStates

__all__ = [
    "register_handlers",
    "ReminderStates",
    "TelegramDeliveryChannel",
    "TelegramStatusNotifier",
]
