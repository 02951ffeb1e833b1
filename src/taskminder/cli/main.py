# src/taskminder/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then:
- starts the reminder scheduler in a background daemon thread,
- runs the console REPL in the main thread until /exit or EOF.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleReminderSink, run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        if state.scheduler is not None:
            state.scheduler.stop(timeout=5.0)
    except Exception:
        logger.exception("Failed to stop the reminder scheduler.")

    # Every mutation is already on disk; only report if the last write failed.
    err = state.task_store.last_save_error
    if err is not None:
        logger.error("Last save failed, recent changes may be lost: %s", err)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    sink = ConsoleReminderSink()
    state = create_initial_state(settings=settings, reminder_sink=sink)

    try:
        if state.scheduler is not None:
            state.scheduler.start()
        run_console_loop(state, output_lock=sink.lock)
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
