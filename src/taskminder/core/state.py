# src/taskminder/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.reminder_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """Everything the console layer needs, wired once in cli.bootstrap."""

    settings: Any
    task_store: TaskStore
    scheduler: ReminderScheduler | None = None
