# src/taskminder/utils/dates.py

"""
Date helpers used by the task core and the console layer.

Dates are calendar dates only (datetime.date). The on-disk format is ISO
(yyyy-mm-dd); the console also accepts and shows dd-mm-yyyy.
"""

from __future__ import annotations

from datetime import date, datetime

from ..tasks.errors import ValidationError

ISO_FORMAT = "%Y-%m-%d"
DISPLAY_FORMAT = "%d-%m-%Y"


def today() -> date:
    return date.today()


def parse_date(text: str, fmt: str = ISO_FORMAT) -> date:
    raw = (text or "").strip()
    try:
        return datetime.strptime(raw, fmt).date()
    except ValueError:
        example = date(2026, 1, 20).strftime(fmt)
        raise ValidationError(f"Invalid date {raw!r}. Please use the format {example}.") from None


def parse_user_date(text: str) -> date:
    """Parse either yyyy-mm-dd or dd-mm-yyyy."""
    raw = (text or "").strip()
    for fmt in (ISO_FORMAT, DISPLAY_FORMAT):
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    raise ValidationError(f"Invalid date {raw!r}. Use yyyy-mm-dd or dd-mm-yyyy (e.g. 2026-01-20).")


def format_date(d: date, fmt: str = ISO_FORMAT) -> str:
    return d.strftime(fmt)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (positive when end is later)."""
    return (end - start).days


def days_until(d: date, ref: date | None = None) -> int:
    return days_between(ref or today(), d)


def describe_date(d: date, ref: date | None = None) -> str:
    days = days_until(d, ref)
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    if days == -1:
        return "Yesterday"
    if days > 1:
        return f"In {days} days"
    return f"{abs(days)} days ago"
