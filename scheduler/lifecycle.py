"""
App lifecycle signaling.

The process is "active" while it runs in the foreground. On Unix, job
control (Ctrl+Z / fg) is bridged into background/active transitions so
the reconciler can catch up after the process was suspended.
"""

import asyncio
import os
import signal
from enum import Enum
from typing import Callable, List

from scheduler.gateway import Subscription
from utils.logging_config import get_logger

logger = get_logger(__name__)


class AppState(str, Enum):
    """Application visibility states."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BACKGROUND = "background"


StateChangeHandler = Callable[[AppState, AppState], None]


class AppLifecycle:
    """Current app state plus change subscriptions."""

    def __init__(self, initial_state: AppState = AppState.ACTIVE) -> None:
        self._state = initial_state
        self._handlers: List[StateChangeHandler] = []

    @property
    def state(self) -> AppState:
        return self._state

    def on_state_change(self, handler: StateChangeHandler) -> Subscription:
        """Subscribe to (previous, next) state transitions."""
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return Subscription(_unsubscribe)

    def transition(self, next_state: AppState) -> None:
        """Move to next_state and notify subscribers. Same-state moves are ignored."""
        previous = self._state
        if previous == next_state:
            return

        self._state = next_state
        logger.info(f"App state changed: {previous.value} -> {next_state.value}")

        for handler in list(self._handlers):
            try:
                handler(previous, next_state)
            except Exception as e:
                logger.error(f"State change handler failed: {e}", exc_info=True)


def install_signal_handlers(
    lifecycle: AppLifecycle, loop: asyncio.AbstractEventLoop
) -> bool:
    """
    Map SIGTSTP/SIGCONT to background/active transitions.

    Returns:
        True if handlers were installed, False on platforms without job control
    """
    if not (hasattr(signal, "SIGTSTP") and hasattr(signal, "SIGCONT")):
        logger.info("Job control signals not available, lifecycle bridge disabled")
        return False

    def _on_suspend() -> None:
        lifecycle.transition(AppState.BACKGROUND)
        os.kill(os.getpid(), signal.SIGSTOP)

    def _on_resume() -> None:
        lifecycle.transition(AppState.ACTIVE)

    try:
        loop.add_signal_handler(signal.SIGTSTP, _on_suspend)
        loop.add_signal_handler(signal.SIGCONT, _on_resume)
    except (NotImplementedError, RuntimeError) as e:
        logger.warning(f"Could not install lifecycle signal handlers: {e}")
        return False

    return True


def remove_signal_handlers(loop: asyncio.AbstractEventLoop) -> None:
    """Undo install_signal_handlers()."""
    if not (hasattr(signal, "SIGTSTP") and hasattr(signal, "SIGCONT")):
        return
    for sig in (signal.SIGTSTP, signal.SIGCONT):
        try:
            loop.remove_signal_handler(sig)
        except (NotImplementedError, RuntimeError):
            continue
