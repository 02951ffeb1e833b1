# src/taskminder/tasks/task_codec.py

"""
Flat-file persistence for tasks.

One record per line, six comma-separated fields:

    id,title,description,priority,due_date,status

Records are written with the standard CSV dialect and minimal quoting: plain
fields are written verbatim, fields holding commas, quotes or line breaks are
quoted. Files written by the old comma-joined format load unchanged, with one
exception: a legacy field that starts with a double quote is read as a quoted
field, so `"Quoted" report` comes back as `Quoted report`.

Loading goes line by line. A quoted field may carry a record over several
lines, but only when the joined lines parse into one valid record; otherwise
the opening line alone is skipped as corrupt and loading resumes on the next.

The file is always rewritten as a whole (temp file + os.replace), so a crash
mid-write leaves the previous version in place.
"""

from __future__ import annotations

import contextlib
import csv
import io
import logging
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ..utils.dates import format_date, parse_date
from .errors import CorruptRecordError, PersistenceError, ValidationError
from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

FIELDS = ("id", "title", "description", "priority", "due_date", "status")


@dataclass(slots=True)
class LoadResult:
    tasks: list[Task] = field(default_factory=list)
    skipped: int = 0


def encode_record(task: Task) -> list[str]:
    return [
        str(task.id),
        task.title,
        task.description,
        task.priority.value,
        format_date(task.due_date),
        task.status.value,
    ]


def decode_record(row: Sequence[str], *, line_no: int | None = None) -> Task:
    """Turn one CSV row into a Task or raise CorruptRecordError."""
    raw = ",".join(row)
    if len(row) != len(FIELDS):
        raise CorruptRecordError(
            f"expected {len(FIELDS)} fields, got {len(row)}", line_no=line_no, raw=raw
        )

    id_s, title, description, priority_s, due_s, status_s = row

    try:
        task_id = int(id_s.strip())
    except ValueError:
        raise CorruptRecordError(f"id is not an integer: {id_s!r}", line_no=line_no, raw=raw) from None
    if task_id <= 0:
        raise CorruptRecordError(f"id must be positive: {task_id}", line_no=line_no, raw=raw)

    if not title.strip():
        raise CorruptRecordError("title is blank", line_no=line_no, raw=raw)

    try:
        priority = Priority(priority_s.strip())
        status = TaskStatus(status_s.strip())
    except ValueError as e:
        raise CorruptRecordError(str(e), line_no=line_no, raw=raw) from None

    try:
        due_date = parse_date(due_s)
    except ValidationError as e:
        raise CorruptRecordError(str(e), line_no=line_no, raw=raw) from None

    return Task(
        id=task_id,
        title=title,
        description=description,
        priority=priority,
        due_date=due_date,
        status=status,
    )


def dumps(tasks: Iterable[Task]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    for task in tasks:
        writer.writerow(encode_record(task))
    return buf.getvalue()


# Upper bound on physical lines one quoted multi-line record may span.
MAX_RECORD_LINES = 64


def _parse_row(text: str, *, strict: bool) -> list[str] | None:
    try:
        return next(csv.reader([text], strict=strict), [])
    except csv.Error:
        return None


def _join_multiline(lines: Sequence[str], start: int) -> tuple[Task, int] | None:
    """
    Try to read a record whose quoted field spans several lines, starting at lines[start].

    Returns the task and the number of lines it used, or None when no well-formed
    record of six fields can be built (the caller then skips lines[start] alone).
    """
    candidate = lines[start]
    end = min(len(lines), start + MAX_RECORD_LINES)
    for j in range(start + 1, end):
        candidate += lines[j]
        # strict: an open quote at the end of the text is an error, not a short row
        row = _parse_row(candidate, strict=True)
        if row is None:
            continue
        if len(row) != len(FIELDS):
            return None
        try:
            return decode_record(row, line_no=start + 1), j - start + 1
        except CorruptRecordError:
            return None
    return None


def loads(text: str) -> LoadResult:
    """
    Decode file contents line by line. Bad records are counted and skipped, never raised.

    A line only absorbs the lines after it when together they form one valid
    quoted record, so a stray quote costs that single line and nothing more.
    """
    result = LoadResult()
    lines = io.StringIO(text, newline="").readlines()
    i = 0
    while i < len(lines):
        line = lines[i]
        line_no = i + 1
        if not line.strip():
            i += 1
            continue

        row = _parse_row(line, strict=False)
        if row is None or len(row) != len(FIELDS):
            joined = _join_multiline(lines, i)
            if joined is not None:
                task, used = joined
                result.tasks.append(task)
                i += used
                continue

        try:
            if row is None:
                raise CorruptRecordError("malformed CSV line", line_no=line_no, raw=line.rstrip("\r\n"))
            result.tasks.append(decode_record(row, line_no=line_no))
        except CorruptRecordError as e:
            logger.warning("Skipping corrupted task record: %s (%r)", e, e.raw)
            result.skipped += 1
        i += 1

    return result


class TaskFile:
    """The single task file on disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_text(self) -> str:
        # newline="" keeps line breaks inside quoted fields intact
        with open(self._path, encoding="utf-8", newline="") as f:
            return f.read()

    def exists(self) -> bool:
        return self._path.exists()

    def save(self, tasks: Iterable[Task]) -> None:
        payload = dumps(tasks)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, encoding="utf-8", newline="")
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise PersistenceError(f"Unable to save tasks to {self._path}: {e}") from e

    def load(self) -> LoadResult:
        if not self._path.exists():
            logger.info("No task file at %s yet; starting fresh.", self._path)
            return LoadResult()

        try:
            text = self._read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Unable to load tasks from {self._path}: {e}") from e

        result = loads(text)
        if result.skipped:
            logger.warning(
                "Loaded %d task(s) from %s, skipped %d corrupted record(s).",
                len(result.tasks),
                self._path,
                result.skipped,
            )
        else:
            logger.info("Loaded %d task(s) from %s.", len(result.tasks), self._path)
        return result

    def count_records(self) -> int:
        if not self._path.exists():
            return 0
        try:
            text = self._read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Unable to read task file {self._path}: {e}") from e
        result = loads(text)
        return len(result.tasks) + result.skipped

    def delete(self) -> bool:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Unable to delete task file {self._path}: {e}") from e
        return True
