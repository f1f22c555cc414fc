"""Recurring-series grouping - pure, no I/O.

Series membership is structural: occurrences are separate records with no
shared key, so siblings are found by matching the repeat rule, title and
times. Two unrelated events that happen to match on every one of those
fields are treated as one series.
"""

from dataclasses import replace
from datetime import date

from .events import NO_REPEAT, Event


def is_recurring(event: Event) -> bool:
    return event.repeat.is_repeating


def same_series(a: Event, b: Event) -> bool:
    return (
        a.repeat.type == b.repeat.type
        and a.repeat.interval == b.repeat.interval
        and a.repeat.end_date == b.repeat.end_date
        and a.title == b.title
        and a.start_time == b.start_time
        and a.end_time == b.end_time
    )


def find_series_members(reference: Event, events: list[Event]) -> list[Event]:
    """All events in the same series as `reference` (dates may differ)."""
    return [e for e in events if same_series(reference, e)]


def detach(event: Event) -> Event:
    """Copy of `event` with its repeat rule cleared, taking it out of its series."""
    return replace(event, repeat=NO_REPEAT)


def apply_to_series(reference: Event, changes: dict, events: list[Event]) -> list[Event]:
    """
    Updated copies of every series member with `changes` applied.

    `changes` maps Event field names to new values. Each member keeps its own
    id and date unless those are explicitly changed.
    """
    unknown = set(changes) - set(Event.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown event fields: {', '.join(sorted(unknown))}")
    if "id" in changes:
        raise ValueError("Event ids cannot be changed")
    return [replace(member, **changes) for member in find_series_members(reference, events)]


def move_single(event: Event, target_date: date) -> Event:
    """Move one occurrence to a new date, detaching it from its series."""
    return replace(detach(event), date=target_date)


def move_series(reference: Event, target_date: date, events: list[Event]) -> list[Event]:
    """
    Shift every series member by the offset between `reference.date` and
    `target_date`.
    """
    offset = target_date - reference.date
    return [replace(m, date=m.date + offset) for m in find_series_members(reference, events)]
