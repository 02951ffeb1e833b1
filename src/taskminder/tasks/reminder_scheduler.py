# src/taskminder/tasks/reminder_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

A small polling loop that:
- asks the store for PENDING tasks due today or earlier,
- turns each into a Reminder (id, title, priority, due date, label),
- hands the batch to an injected sink.

It never writes to the store. The loop runs on its own asyncio event loop in a
daemon thread so the blocking console REPL can keep the main thread.
"""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from ..core.ports import DueTaskSource, ReminderSink
from ..utils import dates
from .task_models import Priority, Task

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 30.0


@dataclass(slots=True, frozen=True)
class Reminder:
    task_id: int
    title: str
    priority: Priority
    due_date: date
    label: str


def reminder_label(due_date: date, today: date) -> str:
    overdue_days = dates.days_between(due_date, today)
    if overdue_days <= 0:
        return "DUE TODAY"
    return f"OVERDUE by {overdue_days} day(s)"


def build_reminder(task: Task, today: date) -> Reminder:
    return Reminder(
        task_id=task.id,
        title=task.title,
        priority=task.priority,
        due_date=task.due_date,
        label=reminder_label(task.due_date, today),
    )


def run_reminder_cycle(
    store: DueTaskSource,
    sink: ReminderSink,
    *,
    today: Callable[[], date] = dates.today,
) -> int:
    """One check: query, build, notify. Returns the number of reminders sent."""
    tasks = store.due_or_overdue()
    if not tasks:
        return 0
    now = today()
    reminders = [build_reminder(t, now) for t in tasks]
    sink.notify(reminders)
    logger.debug("Reminder cycle sent %d reminder(s)", len(reminders))
    return len(reminders)


async def run_reminder_scheduler(
    store: DueTaskSource,
    sink: ReminderSink,
    *,
    stop_event: asyncio.Event,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    today: Callable[[], date] = dates.today,
) -> None:
    """
    Polling loop.

    Every interval_seconds:
    - run one reminder cycle (errors are logged, the loop keeps going)
    - wait for stop_event with a timeout; setting the event ends the loop at once
    """
    sleep_s = max(0.01, float(interval_seconds))

    while not stop_event.is_set():
        try:
            run_reminder_cycle(store, sink, today=today)
        except Exception:
            logger.exception("Reminder cycle failed")

        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)

    logger.info("Reminder loop finished.")


class SchedulerState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    STOPPING = "stopping"


class ReminderScheduler:
    """
    Owns the background thread running run_reminder_scheduler.

    STOPPED -> start() -> RUNNING -> stop() -> STOPPING -> (thread joined) -> STOPPED
    """

    def __init__(
        self,
        store: DueTaskSource,
        sink: ReminderSink,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        today: Callable[[], date] = dates.today,
    ) -> None:
        self._store = store
        self._sink = sink
        self._interval = float(interval_seconds)
        self._today = today

        self._state = SchedulerState.STOPPED
        self._state_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event: asyncio.Event | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SchedulerState.RUNNING

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def start(self) -> None:
        with self._state_lock:
            if self._state != SchedulerState.STOPPED:
                raise RuntimeError(f"Reminder scheduler cannot start while {self._state.value}")

            ready = threading.Event()

            def runner() -> None:
                loop = asyncio.new_event_loop()
                asyncio.set_event_loop(loop)
                stop_event = asyncio.Event()

                self._loop = loop
                self._stop_event = stop_event
                ready.set()

                try:
                    loop.run_until_complete(
                        run_reminder_scheduler(
                            self._store,
                            self._sink,
                            stop_event=stop_event,
                            interval_seconds=self._interval,
                            today=self._today,
                        )
                    )
                except Exception:
                    logger.exception("Reminder scheduler thread crashed.")
                finally:
                    with contextlib.suppress(Exception):
                        loop.close()
                    self._mark_exited()

            t = threading.Thread(target=runner, name="ReminderScheduler", daemon=True)
            self._thread = t
            self._state = SchedulerState.RUNNING
            t.start()
            ready.wait(timeout=5.0)

        logger.info("Reminder scheduler started (every %.0f seconds).", self._interval)

    def stop(self, timeout: float | None = None) -> None:
        with self._state_lock:
            if self._state != SchedulerState.RUNNING:
                return
            self._state = SchedulerState.STOPPING

        loop, stop_event, thread = self._loop, self._stop_event, self._thread
        if loop is not None and stop_event is not None:
            try:
                loop.call_soon_threadsafe(stop_event.set)
            except RuntimeError:
                # Loop already closed: the thread is gone.
                logger.debug("Reminder loop already closed.", exc_info=True)

        if thread is not None:
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("Reminder scheduler did not stop within %s seconds.", timeout)

        with self._state_lock:
            self._state = SchedulerState.STOPPED
            self._thread = None
            self._loop = None
            self._stop_event = None
        logger.info("Reminder scheduler stopped.")

    def _mark_exited(self) -> None:
        """Runner thread exit hook: a loop that ends without stop() must not stay RUNNING."""
        with self._state_lock:
            if self._thread is not threading.current_thread():
                return
            if self._state != SchedulerState.RUNNING:
                return
            self._state = SchedulerState.STOPPED
            self._thread = None
            self._loop = None
            self._stop_event = None
        logger.warning("Reminder scheduler thread exited without stop(); state reset to STOPPED.")

    def check_now(self) -> int:
        """Run a single cycle on the calling thread."""
        return run_reminder_cycle(self._store, self._sink, today=self._today)
