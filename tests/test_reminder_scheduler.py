# tests/test_reminder_scheduler.py

from __future__ import annotations

import asyncio
import time
from datetime import date, timedelta

import pytest

from taskminder.tasks.reminder_scheduler import (
    ReminderScheduler,
    SchedulerState,
    build_reminder,
    reminder_label,
    run_reminder_cycle,
    run_reminder_scheduler,
)
from taskminder.tasks.task_models import Priority, Task, TaskStatus
from taskminder.tasks.task_store import TaskStore

from .conftest import TODAY
from .fakes import FakeDueTaskSource, FakeReminderSink, FlakyDueTaskSource


def _task(task_id: int, due: date, title: str = "ping") -> Task:
    return Task(
        id=task_id,
        title=title,
        description="",
        priority=Priority.HIGH,
        due_date=due,
        status=TaskStatus.PENDING,
    )


def test_reminder_label() -> None:
    assert reminder_label(TODAY, TODAY) == "DUE TODAY"
    assert reminder_label(TODAY - timedelta(days=1), TODAY) == "OVERDUE by 1 day(s)"
    assert reminder_label(TODAY - timedelta(days=12), TODAY) == "OVERDUE by 12 day(s)"


def test_build_reminder_copies_task_fields() -> None:
    r = build_reminder(_task(7, TODAY - timedelta(days=3), "Pay rent"), TODAY)

    assert (r.task_id, r.title, r.priority, r.due_date) == (7, "Pay rent", Priority.HIGH, TODAY - timedelta(days=3))
    assert r.label == "OVERDUE by 3 day(s)"


def test_cycle_notifies_once_per_batch(today) -> None:
    source = FakeDueTaskSource([_task(1, TODAY), _task(2, TODAY - timedelta(days=2))])
    sink = FakeReminderSink()

    assert run_reminder_cycle(source, sink, today=today) == 2
    assert len(sink.batches) == 1
    assert [r.label for r in sink.reminders] == ["DUE TODAY", "OVERDUE by 2 day(s)"]


def test_empty_cycle_sends_nothing(today) -> None:
    sink = FakeReminderSink()
    assert run_reminder_cycle(FakeDueTaskSource([]), sink, today=today) == 0
    assert sink.batches == []


def test_cycle_reads_store_without_mutating_it(store: TaskStore, today) -> None:
    store.create("due", "", Priority.HIGH, TODAY)
    store.create("later", "", Priority.LOW, TODAY + timedelta(days=1))
    before = store.list()

    sink = FakeReminderSink()
    run_reminder_cycle(store, sink, today=today)

    assert [r.task_id for r in sink.reminders] == [1]
    assert store.list() == before


@pytest.mark.asyncio
async def test_loop_keeps_running_after_a_failed_cycle(today) -> None:
    source = FlakyDueTaskSource([_task(1, TODAY)], failures=1)
    sink = FakeReminderSink()
    stop = asyncio.Event()

    runner = asyncio.create_task(
        run_reminder_scheduler(source, sink, stop_event=stop, interval_seconds=0.01, today=today)
    )
    await asyncio.sleep(0.1)
    stop.set()
    await asyncio.wait_for(runner, timeout=1.0)

    assert source.calls >= 2
    assert sink.reminders, "Scheduler should notify after the transient failure"


@pytest.mark.asyncio
async def test_stop_event_cancels_the_wait_early(today) -> None:
    sink = FakeReminderSink()
    stop = asyncio.Event()

    runner = asyncio.create_task(
        run_reminder_scheduler(FakeDueTaskSource([]), sink, stop_event=stop, interval_seconds=60.0, today=today)
    )
    await asyncio.sleep(0.05)

    started = time.monotonic()
    stop.set()
    await asyncio.wait_for(runner, timeout=1.0)
    assert time.monotonic() - started < 1.0


def test_background_scheduler_lifecycle(today) -> None:
    sink = FakeReminderSink()
    scheduler = ReminderScheduler(
        FakeDueTaskSource([_task(1, TODAY)]), sink, interval_seconds=60.0, today=today
    )
    assert scheduler.state == SchedulerState.STOPPED

    scheduler.start()
    try:
        assert scheduler.is_running
        assert sink.notified.wait(timeout=2.0)
        with pytest.raises(RuntimeError):
            scheduler.start()
    finally:
        started = time.monotonic()
        scheduler.stop(timeout=2.0)

    # The 60 s wait is cut short.
    assert time.monotonic() - started < 2.0
    assert scheduler.state == SchedulerState.STOPPED
    assert not scheduler.is_running
    assert [r.task_id for r in sink.reminders] == [1]


def test_stop_when_not_running_is_a_noop(today) -> None:
    scheduler = ReminderScheduler(FakeDueTaskSource([]), FakeReminderSink(), today=today)
    scheduler.stop()
    assert scheduler.state == SchedulerState.STOPPED


def test_scheduler_can_restart_after_stop(today) -> None:
    sink = FakeReminderSink()
    scheduler = ReminderScheduler(
        FakeDueTaskSource([_task(1, TODAY)]), sink, interval_seconds=60.0, today=today
    )

    scheduler.start()
    assert sink.notified.wait(timeout=2.0)
    scheduler.stop(timeout=2.0)

    sink.notified.clear()
    scheduler.start()
    assert sink.notified.wait(timeout=2.0)
    scheduler.stop(timeout=2.0)

    assert len(sink.batches) == 2


def test_crashed_thread_leaves_scheduler_stopped(today, monkeypatch: pytest.MonkeyPatch) -> None:
    async def crash(*args, **kwargs) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr("taskminder.tasks.reminder_scheduler.run_reminder_scheduler", crash)
    scheduler = ReminderScheduler(FakeDueTaskSource([]), FakeReminderSink(), today=today)

    scheduler.start()
    deadline = time.monotonic() + 2.0
    while scheduler.state != SchedulerState.STOPPED and time.monotonic() < deadline:
        time.sleep(0.01)

    assert scheduler.state == SchedulerState.STOPPED
    assert not scheduler.is_running

    # A crashed scheduler can be started again.
    monkeypatch.undo()
    scheduler.start()
    assert scheduler.is_running
    scheduler.stop(timeout=2.0)
    assert scheduler.state == SchedulerState.STOPPED


def test_check_now_runs_on_calling_thread(today) -> None:
    sink = FakeReminderSink()
    scheduler = ReminderScheduler(FakeDueTaskSource([_task(3, TODAY)]), sink, today=today)

    assert scheduler.check_now() == 1
    assert scheduler.state == SchedulerState.STOPPED
    assert sink.reminders[0].task_id == 3
