"""Pure calendar arithmetic - no I/O dependencies.

Weeks start on Sunday throughout.
"""

import calendar
from datetime import date, time, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .events import Event


def fill_zero(value: int, size: int = 2) -> str:
    return str(value).zfill(size)


def parse_time(value: str | time) -> time:
    """Parse 'HH:MM' into a time. Raises ValueError on bad input, TypeError on non-strings."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise TypeError(f"Invalid time: {value!r} (expected HH:MM)")
    hour, sep, minute = value.strip().partition(":")
    if not sep or not hour.isdigit() or not minute.isdigit():
        raise ValueError(f"Invalid time: {value!r} (expected HH:MM)")
    return time(int(hour), int(minute))


def format_time(value: time) -> str:
    return f"{fill_zero(value.hour)}:{fill_zero(value.minute)}"


def format_date(value: date, day: int | None = None) -> str:
    """Format as YYYY-MM-DD, optionally overriding the day of month."""
    if day is not None:
        value = value.replace(day=day)
    return value.isoformat()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def week_start(value: date) -> date:
    """Sunday on or before the given date."""
    # date.weekday(): Monday=0 ... Sunday=6
    return value - timedelta(days=(value.weekday() + 1) % 7)


def week_dates(value: date) -> list[date]:
    """The seven dates (Sunday..Saturday) of the week containing `value`."""
    start = week_start(value)
    return [start + timedelta(days=i) for i in range(7)]


def weeks_at_month(value: date) -> list[list[int | None]]:
    """
    Month grid for the month containing `value`.

    Each row is one Sunday-start week of 7 cells; cells outside the month
    are None.
    """
    first_weekday = (date(value.year, value.month, 1).weekday() + 1) % 7
    total_days = days_in_month(value.year, value.month)

    cells: list[int | None] = [None] * first_weekday
    cells.extend(range(1, total_days + 1))
    cells.extend([None] * (-len(cells) % 7))

    return [cells[i : i + 7] for i in range(0, len(cells), 7)]


def format_week(value: date) -> str:
    """E.g. 'November 2025, week 4'.

    The week belongs to the month of its Thursday, so a week spanning two
    months is counted once.
    """
    thursday = week_start(value) + timedelta(days=4)
    week_number = (thursday.day - 1) // 7 + 1
    return f"{thursday.strftime('%B')} {thursday.year}, week {week_number}"


def format_month(value: date) -> str:
    return f"{value.strftime('%B')} {value.year}"


def month_bounds(value: date) -> tuple[date, date]:
    """First and last day of the month containing `value`."""
    first = value.replace(day=1)
    last = value.replace(day=days_in_month(value.year, value.month))
    return first, last


def is_date_in_range(value: date, start: date, end: date) -> bool:
    return start <= value <= end


def events_for_day(events: list["Event"], day: int) -> list["Event"]:
    """Events falling on the given day of month (callers pass one month's events)."""
    return [e for e in events if e.date.day == day]


def time_error_message(start: time | None, end: time | None) -> tuple[str | None, str | None]:
    """
    Form-level messages for an inconsistent time range.

    Returns (start_error, end_error); both None when the range is fine or
    incomplete.
    """
    if start is None or end is None:
        return None, None
    if start >= end:
        return "Start time must be before end time", "End time must be after start time"
    return None, None
