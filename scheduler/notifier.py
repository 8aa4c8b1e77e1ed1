"""Status notifier: ephemeral, fire-and-forget user messages."""

from abc import ABC, abstractmethod

from utils.logging_config import get_logger

logger = get_logger(__name__)


class StatusNotifier(ABC):
    """Shows a short status message to the user."""

    @abstractmethod
    def show(self, message: str) -> None:
        """Display message. Must not raise."""


class LoggingStatusNotifier(StatusNotifier):
    """Writes status messages to the log. Used when no chat is attached."""

    def show(self, message: str) -> None:
        logger.info(f"Status: {message}")
