"""taskminder: a single-user task tracker with background due-date reminders."""

__version__ = "0.1.0"
