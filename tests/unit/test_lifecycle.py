"""
Unit tests for app lifecycle signaling.
"""

import signal
from unittest.mock import MagicMock

import pytest

from scheduler.lifecycle import AppLifecycle, AppState, install_signal_handlers


def test_initial_state_is_active():
    assert AppLifecycle().state == AppState.ACTIVE


def test_transition_notifies_with_previous_and_next():
    lifecycle = AppLifecycle()
    handler = MagicMock()
    lifecycle.on_state_change(handler)

    lifecycle.transition(AppState.BACKGROUND)
    lifecycle.transition(AppState.ACTIVE)

    assert handler.call_args_list[0].args == (AppState.ACTIVE, AppState.BACKGROUND)
    assert handler.call_args_list[1].args == (AppState.BACKGROUND, AppState.ACTIVE)
    assert lifecycle.state == AppState.ACTIVE


def test_same_state_transition_not_reported():
    lifecycle = AppLifecycle()
    handler = MagicMock()
    lifecycle.on_state_change(handler)

    lifecycle.transition(AppState.ACTIVE)

    handler.assert_not_called()


def test_unsubscribe_stops_notifications():
    lifecycle = AppLifecycle()
    handler = MagicMock()
    subscription = lifecycle.on_state_change(handler)

    subscription.remove()
    lifecycle.transition(AppState.INACTIVE)

    handler.assert_not_called()


def test_handler_error_does_not_block_transition():
    lifecycle = AppLifecycle()
    lifecycle.on_state_change(MagicMock(side_effect=RuntimeError("boom")))
    healthy = MagicMock()
    lifecycle.on_state_change(healthy)

    lifecycle.transition(AppState.BACKGROUND)

    assert lifecycle.state == AppState.BACKGROUND
    healthy.assert_called_once()


@pytest.mark.skipif(not hasattr(signal, "SIGCONT"), reason="no job control signals")
def test_install_signal_handlers_registers_resume():
    """Test SIGCONT is mapped to an active transition."""
    lifecycle = AppLifecycle(initial_state=AppState.BACKGROUND)
    loop = MagicMock()

    assert install_signal_handlers(lifecycle, loop) is True

    registered = {call.args[0]: call.args[1] for call in loop.add_signal_handler.call_args_list}
    assert set(registered) == {signal.SIGTSTP, signal.SIGCONT}

    registered[signal.SIGCONT]()
    assert lifecycle.state == AppState.ACTIVE


def test_install_signal_handlers_unsupported_loop():
    loop = MagicMock()
    loop.add_signal_handler.side_effect = NotImplementedError

    assert install_signal_handlers(AppLifecycle(), loop) is False
