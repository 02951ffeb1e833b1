# tests/test_bootstrap.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskminder.cli.bootstrap import create_initial_state
from taskminder.config import Settings
from taskminder.tasks.reminder_scheduler import SchedulerState

from .fakes import FakeReminderSink


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKMINDER_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TASKMINDER_TASKS_FILE", raising=False)
    monkeypatch.setenv("TASKMINDER_REMINDER_INTERVAL", "not-a-number")
    monkeypatch.setenv("TASKMINDER_REMINDERS_ENABLED", "no")

    s = Settings.from_env()

    assert s.data_dir == tmp_path
    assert s.tasks_file_path == tmp_path / "tasks.txt"
    assert s.reminder_interval_seconds == 30.0
    assert s.reminders_enabled is False


def test_settings_explicit_tasks_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKMINDER_TASKS_FILE", str(tmp_path / "elsewhere.csv"))
    monkeypatch.setenv("TASKMINDER_REMINDER_INTERVAL", "5")

    s = Settings.from_env()

    assert s.tasks_file_path == tmp_path / "elsewhere.csv"
    assert s.reminder_interval_seconds == 5.0


def test_create_initial_state_wires_store_and_scheduler(settings) -> None:
    sink = FakeReminderSink()
    state = create_initial_state(settings=settings, reminder_sink=sink)

    assert state.task_store.path == settings.tasks_file_path
    assert state.scheduler is not None
    assert state.scheduler.state == SchedulerState.STOPPED
    assert state.scheduler.interval_seconds == settings.reminder_interval_seconds


def test_create_initial_state_without_reminders(settings) -> None:
    settings.reminders_enabled = False
    state = create_initial_state(settings=settings, reminder_sink=FakeReminderSink())
    assert state.scheduler is None

    assert create_initial_state(settings=settings).scheduler is None
