"""Shared workflow layer between the CLI and any other front end.

Each flow validates, consults the pure core, then issues one store call per
affected record. Multi-record flows keep going past individual failures and
report them together at the end.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Callable, TypeVar

from .adapters.http_api import HttpEventStore
from .adapters.json_file import JsonFileEventStore
from .config import Config
from .core.events import Event, ValidationError, validate_event
from .core.overlap import find_overlaps
from .core.recurrence import DEFAULT_CEILING, expand
from .core.series import (
    apply_to_series,
    detach,
    find_series_members,
    is_recurring,
    move_series,
    move_single,
)
from .ports.event_store import BatchPersistenceError, EventStore, PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# Fields an edit may propagate to the rest of a series
_SERIES_FIELDS = tuple(f.name for f in fields(Event) if f.name not in ("id", "date"))


@dataclass
class SaveResult:
    """Outcome of a save. `saved` is empty when overlaps blocked the save."""

    saved: list[Event] = field(default_factory=list)
    overlaps: list[Event] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return not self.saved and bool(self.overlaps)


def get_store(config: Config) -> EventStore:
    """Build the configured store adapter."""
    if config.store == "http":
        return HttpEventStore(config.api_base_url)
    return JsonFileEventStore(config.events_path)


def run_batch(items: list[T], action: Callable[[T], R]) -> list[R]:
    """
    Apply `action` to each item in order, continuing past PersistenceError.

    Raises BatchPersistenceError after the loop if anything failed.
    """
    applied: list[R] = []
    failures: list[tuple[T, PersistenceError]] = []

    for item in items:
        try:
            applied.append(action(item))
        except PersistenceError as e:
            logger.warning(f"Batch item failed: {e}")
            failures.append((item, e))

    if failures:
        raise BatchPersistenceError(applied, failures)
    return applied


def _series_overlaps(occurrences: list[Event], existing: list[Event]) -> list[Event]:
    """Existing events clashing with any occurrence, without duplicates."""
    seen: set[str | None] = set()
    clashes = []
    for occurrence in occurrences:
        for other in find_overlaps(occurrence, existing):
            key = other.id if other.id is not None else id(other)
            if key not in seen:
                seen.add(key)
                clashes.append(other)
    return clashes


def save_event(
    store: EventStore,
    event: Event,
    force: bool = False,
    ceiling: date = DEFAULT_CEILING,
) -> SaveResult:
    """
    Create or update an event.

    Drafts (no id) that repeat are expanded into a series and every
    occurrence is stored. Stored events are replaced in full. Overlaps with
    existing events are returned instead of saving unless `force` is set.
    """
    validate_event(event)
    existing = store.list_events()

    if event.id is None and is_recurring(event):
        occurrences = expand(event, ceiling=ceiling)
        overlaps = _series_overlaps(occurrences, existing)
        if overlaps and not force:
            return SaveResult(overlaps=overlaps)
        logger.info(f"Creating {len(occurrences)} occurrences of {event.title!r}")
        return SaveResult(saved=run_batch(occurrences, store.create_event), overlaps=overlaps)

    overlaps = find_overlaps(event, existing)
    if overlaps and not force:
        return SaveResult(overlaps=overlaps)

    if event.id is None:
        saved = store.create_event(event)
    else:
        saved = store.replace_event(event)
    return SaveResult(saved=[saved], overlaps=overlaps)


def edit_occurrence(
    store: EventStore,
    original: Event,
    updated: Event,
    edit_all: bool = False,
    force: bool = False,
) -> SaveResult:
    """
    Edit one occurrence of a series, or the whole series.

    Single: only `original`'s record changes and it leaves the series.
    All: every field that differs between `original` and `updated` (except
    id and date) is applied to each series member. Members keep their own
    dates, so a date change is rejected; `move_occurrence` shifts a series.
    """
    validate_event(updated)
    series_edit = edit_all and is_recurring(original)
    if series_edit and updated.date != original.date:
        raise ValidationError("Cannot change the date of a whole series; move it instead")
    existing = store.list_events()

    if not series_edit:
        target = replace(updated, id=original.id)
        if is_recurring(original):
            target = detach(target)
        overlaps = find_overlaps(target, existing)
        if overlaps and not force:
            return SaveResult(overlaps=overlaps)
        return SaveResult(saved=[store.replace_event(target)], overlaps=overlaps)

    changes = {
        name: getattr(updated, name)
        for name in _SERIES_FIELDS
        if getattr(updated, name) != getattr(original, name)
    }
    members = apply_to_series(original, changes, existing)
    overlaps = _series_overlaps(members, existing)
    if overlaps and not force:
        return SaveResult(overlaps=overlaps)
    logger.info(f"Updating {len(members)} occurrences of {original.title!r}: {sorted(changes)}")
    return SaveResult(saved=run_batch(members, store.replace_event), overlaps=overlaps)


def delete_occurrence(store: EventStore, event: Event, delete_all: bool = False) -> list[str]:
    """Delete one occurrence or its whole series. Returns the deleted ids."""
    if not delete_all or not is_recurring(event):
        store.delete_event(event.id)
        return [event.id]

    members = find_series_members(event, store.list_events())
    logger.info(f"Deleting {len(members)} occurrences of {event.title!r}")

    def _delete(member: Event) -> str:
        store.delete_event(member.id)
        return member.id

    return run_batch(members, _delete)


def move_occurrence(
    store: EventStore,
    event: Event,
    target_date: date,
    move_all: bool = False,
) -> list[Event]:
    """
    Move an event to another date.

    A non-recurring event just changes date. A single occurrence of a series
    also leaves its series; moving the whole series shifts every member by
    the same number of days.
    """
    if target_date == event.date:
        return []

    if not is_recurring(event):
        return [store.replace_event(replace(event, date=target_date))]

    if not move_all:
        return [store.replace_event(move_single(event, target_date))]

    moved = move_series(event, target_date, store.list_events())
    logger.info(f"Moving {len(moved)} occurrences of {event.title!r} by {(target_date - event.date).days} days")
    return run_batch(moved, store.replace_event)
