"""Event search - pure, no I/O."""

from datetime import date

from .dates import is_date_in_range, month_bounds, week_dates
from .events import Event

VIEWS = ("week", "month")


def matches_term(event: Event, term: str) -> bool:
    """Case-insensitive substring match on title, description or location."""
    if not term:
        return True
    needle = term.lower()
    return any(needle in field.lower() for field in (event.title, event.description, event.location))


def view_range(current_date: date, view: str) -> tuple[date, date]:
    """First and last date shown by a week or month view."""
    if view == "week":
        days = week_dates(current_date)
        return days[0], days[-1]
    if view == "month":
        return month_bounds(current_date)
    raise ValueError(f"Unknown view: {view!r} (expected one of {', '.join(VIEWS)})")


def search_events(
    events: list[Event],
    term: str,
    current_date: date,
    view: str = "month",
) -> list[Event]:
    """
    Events matching `term` that fall within the currently viewed week or month.

    An empty term keeps every event in view.
    """
    start, end = view_range(current_date, view)
    return [
        e
        for e in events
        if is_date_in_range(e.date, start, end) and matches_term(e, term.strip())
    ]
