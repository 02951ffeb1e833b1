# src/taskminder/connectors/console_connector.py

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.display import format_reminders
from ..core.state import AppState
from ..tasks.reminder_scheduler import Reminder

logger = logging.getLogger(__name__)

PROMPT = ">>> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleReminderSink:
    """
    Prints reminders from the scheduler thread.

    The lock keeps a reminder block from interleaving with a command reply.
    """

    def __init__(self, lock: threading.Lock | None = None) -> None:
        self._lock = lock or threading.Lock()

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    def notify(self, reminders: Sequence[Reminder]) -> None:
        if not reminders:
            return
        with self._lock:
            print()
            _print_ts(format_reminders(reminders))
            print(PROMPT, end="", flush=True)


def run_console_loop(state: AppState, *, output_lock: threading.Lock | None = None) -> None:
    logger.info("Console connector started (tasks=%s).", state.task_store.count_tasks())
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskminder"))
    _print_ts(f"[{app_name}] Type /help for commands. Use /exit to quit.\n")

    lock = output_lock or threading.Lock()

    while True:
        try:
            user_input = input(PROMPT).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            response = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            response = "Commands start with '/'. Use /help to list available commands."

        with lock:
            _print_ts(response)

    logger.info("Console connector finished.")
