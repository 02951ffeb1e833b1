# src/taskminder/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- builds the TaskStore and injects it into the reminder scheduler.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import ReminderSink
from ..core.state import AppState
from ..tasks.reminder_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_file_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, reminder_sink: ReminderSink | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings(). The scheduler is built but not started;
    with no sink (or reminders disabled) there is no scheduler at all.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_file_path)

    scheduler: ReminderScheduler | None = None
    if reminder_sink is not None and getattr(settings, "reminders_enabled", True):
        scheduler = ReminderScheduler(
            store,
            reminder_sink,
            interval_seconds=settings.reminder_interval_seconds,
        )
    else:
        logger.info("Reminders disabled.")

    return AppState(settings=settings, task_store=store, scheduler=scheduler)
