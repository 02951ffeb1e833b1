# src/taskminder/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import date
from pathlib import Path

from ..utils import dates
from .errors import PersistenceError, ValidationError
from .task_codec import TaskFile
from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory task store backed by a flat file.

    The list held here is the source of truth for the process lifetime:
    - every mutator rewrites the whole file before returning
    - a failed write is logged and kept in last_save_error, memory is NOT rolled back
    - a failed load degrades to an empty store

    Thread-safety:
    - one RLock guards the list; mutators persist while still holding it
    - every read returns copies, callers never see the live objects
    """

    def __init__(
        self,
        path: str | Path = "tasks.txt",
        *,
        today: Callable[[], date] = dates.today,
    ) -> None:
        self._file = TaskFile(path)
        self._today = today
        self._lock = threading.RLock()
        self._tasks: list[Task] = []
        self._last_save_error: PersistenceError | None = None

        try:
            self._tasks = self._file.load().tasks
        except PersistenceError:
            logger.exception("Failed to load tasks; starting with an empty store.")
            self._tasks = []

        self._next_id = max((t.id for t in self._tasks), default=0) + 1
        logger.info("TaskStore ready path=%s total=%s", self._file.path, len(self._tasks))

    @property
    def path(self) -> Path:
        return self._file.path

    @property
    def last_save_error(self) -> PersistenceError | None:
        return self._last_save_error

    # ---- low-level helpers ----

    def _persist(self) -> None:
        # Caller holds the lock.
        try:
            self._file.save(self._tasks)
        except PersistenceError as e:
            self._last_save_error = e
            logger.error("%s (in-memory state kept, disk is behind)", e)
            return
        self._last_save_error = None

    def _find(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def _check_due_date(self, due_date: date) -> None:
        if due_date < self._today():
            raise ValidationError("Due date cannot be in the past!")

    # ---- public API ----

    def create(
        self,
        title: str,
        description: str,
        priority: Priority | str,
        due_date: date,
    ) -> Task:
        if not title or not title.strip():
            raise ValidationError("Task title cannot be empty!")
        priority = Priority.parse(priority)
        self._check_due_date(due_date)

        with self._lock:
            task = Task(
                id=self._next_id,
                title=title,
                description=description or "",
                priority=priority,
                due_date=due_date,
                status=TaskStatus.PENDING,
            )
            self._next_id += 1
            self._tasks.append(task)
            self._persist()
            logger.debug("Task added id=%s priority=%s due=%s", task.id, priority.value, due_date)
            return task.copy()

    def list(self) -> list[Task]:
        with self._lock:
            return [t.copy() for t in self._tasks]

    def list_by_status(self, status: TaskStatus) -> list[Task]:
        with self._lock:
            return [t.copy() for t in self._tasks if t.status == status]

    def list_by_priority(self, priority: Priority) -> list[Task]:
        with self._lock:
            return [t.copy() for t in self._tasks if t.priority == priority]

    def find_by_id(self, task_id: int) -> Task | None:
        with self._lock:
            task = self._find(task_id)
            return task.copy() if task is not None else None

    def update(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        priority: Priority | str | None = None,
        due_date: date | None = None,
    ) -> bool:
        """
        Overwrite the given fields. Returns False if the task does not exist.

        A blank title is ignored. An unknown priority or a past due_date raises
        ValidationError before anything is written, so the task is left as it was.
        """
        if priority is not None:
            priority = Priority.parse(priority)

        with self._lock:
            task = self._find(task_id)
            if task is None:
                return False

            if due_date is not None:
                self._check_due_date(due_date)

            if title is not None and title.strip():
                task.title = title
            if description is not None:
                task.description = description
            if priority is not None:
                task.priority = priority
            if due_date is not None:
                task.due_date = due_date

            self._persist()
            logger.debug("Task updated id=%s", task_id)
            return True

    def complete(self, task_id: int) -> bool:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return False
            task.status = TaskStatus.COMPLETED
            self._persist()
            logger.debug("Task completed id=%s", task_id)
            return True

    def delete(self, task_id: int) -> bool:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return False
            self._tasks.remove(task)
            self._persist()
            logger.debug("Task deleted id=%s", task_id)
            return True

    def due_or_overdue(self) -> list[Task]:
        """PENDING tasks whose due date is today or earlier. Read-only."""
        today = self._today()
        with self._lock:
            return [t.copy() for t in self._tasks if t.is_pending and t.due_date <= today]

    def count_by_status(self, status: TaskStatus) -> int:
        with self._lock:
            return sum(1 for t in self._tasks if t.status == status)

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)
