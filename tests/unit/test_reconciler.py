"""
Unit tests for the lifecycle reconciler.
Covers the delivery, sweep and resume triggers and start/stop teardown.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from apscheduler.jobstores.base import JobLookupError
from apscheduler.triggers.interval import IntervalTrigger

from models.reminder import ReminderForm, ReminderState, ResolutionReason
from scheduler.lifecycle import AppLifecycle, AppState
from scheduler.reconciler import SWEEP_JOB_ID, LifecycleReconciler
from scheduler.reminders import ReminderService
from utils.exceptions import ReconcilerStateError


@pytest.fixture
def mock_scheduler():
    scheduler = MagicMock()
    scheduler.add_job = MagicMock()
    scheduler.remove_job = MagicMock()
    return scheduler


@pytest.fixture
def lifecycle():
    return AppLifecycle()


@pytest.fixture
def reconciler(store, gateway, lifecycle, mock_scheduler, clock):
    return LifecycleReconciler(
        store, gateway, lifecycle, mock_scheduler, sweep_interval_seconds=60, clock=clock
    )


@pytest.fixture
def seeded_store(store, make_reminder, t0):
    store.insert(make_reminder("past", t0 - timedelta(seconds=5)))
    store.insert(make_reminder("soon", t0 + timedelta(seconds=5)))
    store.insert(make_reminder("later", t0 + timedelta(hours=1)))
    return store


def test_start_registers_sweep_job(reconciler, mock_scheduler):
    """Test start() adds the periodic sweep job."""
    reconciler.start()

    mock_scheduler.add_job.assert_called_once()
    kwargs = mock_scheduler.add_job.call_args.kwargs
    assert kwargs["id"] == SWEEP_JOB_ID
    assert isinstance(kwargs["trigger"], IntervalTrigger)
    assert kwargs["trigger"].interval == timedelta(seconds=60)
    assert reconciler.running is True


def test_start_twice_raises(reconciler):
    reconciler.start()
    with pytest.raises(ReconcilerStateError):
        reconciler.start()


def test_stop_tears_everything_down(reconciler, mock_scheduler, gateway, lifecycle, seeded_store, clock):
    """Test events after stop() never touch the store."""
    reconciler.start()
    reconciler.stop()

    mock_scheduler.remove_job.assert_called_once_with(SWEEP_JOB_ID)
    assert reconciler.running is False

    clock.advance(hours=2)
    gateway.deliver("soon")
    lifecycle.transition(AppState.BACKGROUND)
    lifecycle.transition(AppState.ACTIVE)

    assert len(seeded_store) == 3


def test_stop_is_idempotent(reconciler, mock_scheduler):
    reconciler.stop()
    reconciler.start()
    reconciler.stop()
    reconciler.stop()

    mock_scheduler.remove_job.assert_called_once_with(SWEEP_JOB_ID)


def test_stop_tolerates_missing_sweep_job(reconciler, mock_scheduler):
    mock_scheduler.remove_job.side_effect = JobLookupError(SWEEP_JOB_ID)
    reconciler.start()

    reconciler.stop()

    assert reconciler.running is False


def test_delivery_event_removes_exactly_that_id(reconciler, gateway, seeded_store):
    reconciler.start()

    gateway.deliver("later")

    assert [r.id for r in seeded_store.pending()] == ["past", "soon"]
    assert seeded_store.resolution_reason("later") == ResolutionReason.DELIVERED


def test_delivery_event_for_unknown_id_is_noop(reconciler, gateway, seeded_store):
    reconciler.start()

    gateway.deliver("unknown")

    assert len(seeded_store) == 3


def test_sweep_drops_expired(reconciler, seeded_store):
    """Test sweep over {now-5s, now+5s, now+1h} keeps the two future ones."""
    removed = reconciler.sweep()

    assert [r.id for r in removed] == ["past"]
    assert [r.id for r in seeded_store.pending()] == ["soon", "later"]


@pytest.mark.asyncio
async def test_scheduled_sweep_job_runs_sweep(reconciler, mock_scheduler, seeded_store):
    """Test the registered job body performs the sweep."""
    reconciler.start()
    job_func = mock_scheduler.add_job.call_args.args[0]

    await job_func()

    assert "past" not in seeded_store


@pytest.mark.asyncio
async def test_scheduled_sweep_job_swallows_errors(reconciler, mock_scheduler, store):
    reconciler.start()
    job_func = mock_scheduler.add_job.call_args.args[0]
    store.expire = MagicMock(side_effect=RuntimeError("boom"))

    await job_func()


@pytest.mark.parametrize("previous", [AppState.BACKGROUND, AppState.INACTIVE])
def test_resume_runs_compaction(reconciler, lifecycle, seeded_store, previous):
    """Test background/inactive -> active catches up."""
    lifecycle.transition(previous)
    reconciler.start()

    lifecycle.transition(AppState.ACTIVE)

    assert [r.id for r in seeded_store.pending()] == ["soon", "later"]


def test_non_resume_transitions_do_not_compact(reconciler, lifecycle, seeded_store):
    reconciler.start()

    lifecycle.transition(AppState.INACTIVE)
    lifecycle.transition(AppState.BACKGROUND)

    assert len(seeded_store) == 3


def test_background_to_inactive_does_not_compact(reconciler, seeded_store):
    reconciler.handle_state_change(AppState.BACKGROUND, AppState.INACTIVE)
    assert len(seeded_store) == 3


def test_triggers_race_on_same_id(reconciler, gateway, lifecycle, seeded_store, clock):
    """Test delivery, sweep and resume resolving one id record it once."""
    reconciler.start()
    clock.advance(seconds=10)

    gateway.deliver("soon")
    reconciler.sweep()
    lifecycle.transition(AppState.BACKGROUND)
    lifecycle.transition(AppState.ACTIVE)
    gateway.deliver("soon")

    resolved_ids = [res.reminder.id for res in seeded_store.history]
    assert sorted(resolved_ids) == ["past", "soon"]
    assert seeded_store.resolution_reason("soon") == ResolutionReason.DELIVERED
    assert seeded_store.state_of("soon") == ReminderState.RESOLVED
    assert [r.id for r in seeded_store.pending()] == ["later"]


@pytest.mark.asyncio
async def test_end_to_end_schedule_then_sweep(store, gateway, notifier, clock, reconciler, t0):
    """Test "Call mom" in 2 minutes is swept once virtual time passes it."""
    service = ReminderService(store, gateway, notifier, clock=clock)
    reconciler.start()

    result = await service.schedule_reminder(
        ReminderForm(text="Call mom", time_value="2", time_unit="minutes")
    )

    assert result.ok
    assert len(store) == 1
    assert store.pending()[0].scheduled_for == t0 + timedelta(milliseconds=120000)

    clock.advance(seconds=119)
    reconciler.sweep()
    assert len(store) == 1

    clock.advance(seconds=2)
    reconciler.sweep()
    assert len(store) == 0
    assert store.resolution_reason(result.reminder.id) == ResolutionReason.EXPIRED
