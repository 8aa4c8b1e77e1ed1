"""
Telegram-backed collaborators for the reminder core.

TelegramStatusNotifier shows status messages in the chat.
TelegramDeliveryChannel sends the reminder notifications themselves and
answers the gateway's permission check.
"""

import asyncio
import logging
from typing import Set

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from models.reminder import NotificationContent
from scheduler.notifier import StatusNotifier
from utils.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class TelegramStatusNotifier(StatusNotifier):
    """Sends status messages to a chat without blocking the caller."""

    def __init__(self, bot: Bot, chat_id: int) -> None:
        self._bot = bot
        self._chat_id = chat_id
        self._tasks: Set[asyncio.Task] = set()

    def show(self, message: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running loop, status message dropped: {message}")
            return

        task = loop.create_task(self._send(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for status messages still being sent."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _send(self, message: str) -> None:
        try:
            await self._bot.send_message(
                self._chat_id, f"ℹ️ {message}", disable_notification=True
            )
        except TelegramAPIError as e:
            logger.warning(f"Failed to send status message: {e}")


class TelegramDeliveryChannel:
    """Delivery channel for SchedulerNotificationGateway."""

    def __init__(self, bot: Bot, chat_id: int) -> None:
        self._bot = bot
        self._chat_id = chat_id

    async def __call__(self, notification_id: str, content: NotificationContent) -> None:
        try:
            await self._bot.send_message(
                self._chat_id,
                f"🔔 {content.title}\n\n{content.body}",
                disable_notification=not content.sound,
            )
        except TelegramAPIError as e:
            raise DeliveryError(
                f"Telegram rejected notification {notification_id}: {e}"
            ) from e

    async def check_permission(self) -> bool:
        """The bot may notify the chat if it can see it."""
        try:
            await self._bot.get_chat(self._chat_id)
        except TelegramAPIError as e:
            logger.warning(f"Bot cannot reach chat {self._chat_id}: {e}")
            return False
        return True
