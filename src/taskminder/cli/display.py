# src/taskminder/cli/display.py

"""Plain-text rendering for the console connector."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from ..tasks.reminder_scheduler import Reminder
from ..tasks.task_models import Task
from ..utils.dates import DISPLAY_FORMAT, describe_date, format_date


def format_task(task: Task, today: date | None = None) -> str:
    due = format_date(task.due_date, DISPLAY_FORMAT)
    lines = [
        f"#{task.id} {task.title}",
        f"  Priority : {task.priority.value}",
        f"  Due      : {due} ({describe_date(task.due_date, today)})",
        f"  Status   : {task.status.value}",
    ]
    if task.description:
        lines.insert(1, f"  {task.description}")
    return "\n".join(lines)


def format_task_line(task: Task) -> str:
    due = format_date(task.due_date, DISPLAY_FORMAT)
    mark = "x" if not task.is_pending else " "
    return f"[{mark}] #{task.id:<4} {task.priority.value:<6} {due}  {task.title}"


def format_task_list(tasks: Sequence[Task], *, empty: str = "No tasks found.") -> str:
    if not tasks:
        return empty
    body = "\n".join(format_task_line(t) for t in tasks)
    return f"{body}\nTotal: {len(tasks)}"


def format_reminders(reminders: Sequence[Reminder]) -> str:
    lines = ["[REMINDER] Tasks needing attention:"]
    for r in reminders:
        due = format_date(r.due_date, DISPLAY_FORMAT)
        lines.append(f"  #{r.task_id} {r.title} [{r.priority.value}] due {due} - {r.label}")
    return "\n".join(lines)


def format_stats(total: int, pending: int, completed: int) -> str:
    rate = (completed * 100.0 / total) if total else 0.0
    return (
        "Statistics:\n"
        f"  Total tasks     : {total}\n"
        f"  Pending         : {pending}\n"
        f"  Completed       : {completed}\n"
        f"  Completion rate : {rate:.1f}%"
    )
