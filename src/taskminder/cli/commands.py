# src/taskminder/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.errors import ValidationError
from ..tasks.task_models import Priority, TaskStatus
from ..utils.dates import parse_user_date
from .display import format_stats, format_task, format_task_list

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "|"


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        ValidationError raised by a handler is turned into its message.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except ValidationError as e:
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_fields(args: list[str]) -> list[str]:
    return [p.strip() for p in " ".join(args).split(FIELD_SEPARATOR)]


def _parse_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Invalid task id {raw!r}. Please enter a number.") from None


def _warn_if_unsaved(state: AppState, reply: str) -> str:
    err = state.task_store.last_save_error
    if err is None:
        return reply
    return f"{reply}\nWarning: changes are kept in memory but could not be saved ({err})."


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> | <description> | <priority> | <due date>

    Description may be empty; priority defaults to MEDIUM when omitted.
    """
    fields = _split_fields(args)
    if len(fields) != 4:
        return "Usage: /add <title> | <description> | <high|medium|low> | <yyyy-mm-dd or dd-mm-yyyy>"

    title, description, priority_raw, due_raw = fields
    priority = Priority.parse(priority_raw) if priority_raw else Priority.MEDIUM
    due_date = parse_user_date(due_raw)

    task = state.task_store.create(title, description, priority, due_date)
    return _warn_if_unsaved(state, f"Task created:\n{format_task(task)}")


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                -> all tasks
    /list pending        -> by status
    /list high           -> by priority
    """
    store = state.task_store
    if not args or args[0].lower() == "all":
        return format_task_list(store.list(), empty="No tasks found. Create your first task with /add.")

    key = args[0].upper()
    if key in TaskStatus.__members__:
        status = TaskStatus(key)
        return format_task_list(store.list_by_status(status), empty=f"No {status.value} tasks found.")
    if key in Priority.__members__:
        priority = Priority(key)
        return format_task_list(
            store.list_by_priority(priority), empty=f"No {priority.value} priority tasks found."
        )

    return "Usage: /list [all|pending|completed|high|medium|low]"


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    task_id = _parse_id(args[0])
    task = state.task_store.find_by_id(task_id)
    if task is None:
        return f"Task not found with ID: {task_id}"
    return format_task(task)


def cmd_update(state: AppState, args: list[str]) -> str:
    """
    /update <id> title=... | description=... | priority=... | due=...

    Omitted fields are kept. An empty title is ignored.
    """
    if len(args) < 2:
        return "Usage: /update <id> title=... | description=... | priority=... | due=..."

    task_id = _parse_id(args[0])
    changes: dict[str, str] = {}
    for part in _split_fields(args[1:]):
        if not part:
            continue
        key, sep, value = part.partition("=")
        key = key.strip().lower()
        if not sep or key not in ("title", "description", "priority", "due"):
            return f"Unknown field {part!r}. Use title=, description=, priority= or due=."
        changes[key] = value.strip()

    updated = state.task_store.update(
        task_id,
        title=changes.get("title"),
        description=changes.get("description"),
        priority=Priority.parse(changes["priority"]) if "priority" in changes else None,
        due_date=parse_user_date(changes["due"]) if "due" in changes else None,
    )
    if not updated:
        return f"Task not found with ID: {task_id}"
    return _warn_if_unsaved(state, f"Task #{task_id} updated.")


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task_id = _parse_id(args[0])
    if not state.task_store.complete(task_id):
        return f"Task not found with ID: {task_id}"
    return _warn_if_unsaved(state, f"Task #{task_id} marked as COMPLETED.")


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <id>"
    task_id = _parse_id(args[0])
    if not state.task_store.delete(task_id):
        return f"Task not found with ID: {task_id}"
    return _warn_if_unsaved(state, f"Task #{task_id} deleted.")


def cmd_stats(state: AppState, args: list[str]) -> str:
    store = state.task_store
    return format_stats(
        total=store.count_tasks(),
        pending=store.count_by_status(TaskStatus.PENDING),
        completed=store.count_by_status(TaskStatus.COMPLETED),
    )


def cmd_remind(state: AppState, args: list[str]) -> str:
    """Run one reminder check right away (reminders go to the usual sink)."""
    if state.scheduler is None:
        return "Reminders are disabled."
    sent = state.scheduler.check_now()
    if not sent:
        return "Nothing due today or overdue."
    return f"{sent} reminder(s) shown."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add",
    cmd_add,
    help_text="Create a task: /add <title> | <description> | <priority> | <due date>.",
    aliases=["new"],
)
registry.register(
    "list",
    cmd_list,
    help_text="List tasks: /list [all|pending|completed|high|medium|low].",
    aliases=["ls"],
)
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register(
    "update",
    cmd_update,
    help_text="Update a task: /update <id> title=... | description=... | priority=... | due=....",
    aliases=["edit"],
)
registry.register("done", cmd_done, help_text="Mark a task as completed: /done <id>.", aliases=["complete"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("stats", cmd_stats, help_text="Show task statistics.")
registry.register("remind", cmd_remind, help_text="Check for due/overdue tasks now.")
