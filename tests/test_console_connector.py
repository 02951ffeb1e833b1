# tests/test_console_connector.py

from __future__ import annotations

from datetime import timedelta

import pytest

from taskminder.connectors.console_connector import ConsoleReminderSink, run_console_loop
from taskminder.tasks.reminder_scheduler import build_reminder
from taskminder.tasks.task_models import Priority, Task, TaskStatus

from .conftest import TODAY


def _feed(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    it = iter(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


def test_console_loop_runs_commands_until_exit(state, monkeypatch, capsys) -> None:
    due = (TODAY + timedelta(days=1)).isoformat()
    _feed(monkeypatch, [f"/add Pay rent | | high | {due}", "hello", "", "/list", "/exit", "/add never | | low | " + due])

    run_console_loop(state)

    out = capsys.readouterr().out
    assert "Task created" in out
    assert "Commands start with '/'" in out
    assert "Pay rent" in out
    assert [t.title for t in state.task_store.list()] == ["Pay rent"]


def test_console_loop_stops_on_eof(state, monkeypatch) -> None:
    _feed(monkeypatch, [])
    run_console_loop(state)


def test_console_sink_prints_reminders(capsys) -> None:
    task = Task(
        id=4,
        title="Pay rent",
        description="",
        priority=Priority.HIGH,
        due_date=TODAY - timedelta(days=2),
        status=TaskStatus.PENDING,
    )
    ConsoleReminderSink().notify([build_reminder(task, TODAY)])

    out = capsys.readouterr().out
    assert "#4 Pay rent [HIGH]" in out
    assert "OVERDUE by 2 day(s)" in out
