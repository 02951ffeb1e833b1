# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskminder.core.state import AppState
from taskminder.tasks.task_store import TaskStore

# Every test runs on this day unless it builds its own clock.
TODAY = date(2026, 10, 18)


@pytest.fixture()
def today() -> Callable[[], date]:
    return lambda: TODAY


@pytest.fixture()
def tasks_path(tmp_path: Path) -> Path:
    return tmp_path / "tasks.txt"


@pytest.fixture()
def settings(tmp_path: Path, tasks_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="taskminder-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_file_path=tasks_path,
        reminders_enabled=True,
        reminder_interval_seconds=0.01,
    )


@pytest.fixture()
def store(tasks_path: Path, today: Callable[[], date]) -> TaskStore:
    """Real file-backed store; its persistence is part of what we test."""
    return TaskStore(tasks_path, today=today)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, task_store=store)
