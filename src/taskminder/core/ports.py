# src/taskminder/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduler depends on Protocols instead of concrete implementations,
so tests can drive it with in-memory fakes.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.reminder_scheduler import Reminder
    from ..tasks.task_models import Task


class DueTaskSource(Protocol):
    """Read-only view of the store used by the reminder scheduler."""

    def due_or_overdue(self) -> list[Task]: ...


class ReminderSink(Protocol):
    """
    Where reminders go. Called once per scheduler cycle with every reminder
    of that cycle; never called with an empty batch.
    """

    def notify(self, reminders: Sequence[Reminder]) -> None: ...
