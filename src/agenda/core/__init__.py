"""Functional core - pure scheduling logic with no I/O."""

from .events import (
    Category,
    Event,
    NOTIFICATION_OPTIONS,
    RepeatRule,
    RepeatType,
    ValidationError,
    validate_event,
)
from .recurrence import DEFAULT_CEILING, expand
from .overlap import events_overlap, find_overlaps
from .notifications import Notification, due_notifications, is_due, prune_notifications
from .series import (
    apply_to_series,
    detach,
    find_series_members,
    is_recurring,
    move_series,
    move_single,
)
from .search import search_events

__all__ = [
    # Events
    "Category",
    "Event",
    "NOTIFICATION_OPTIONS",
    "RepeatRule",
    "RepeatType",
    "ValidationError",
    "validate_event",
    # Recurrence
    "DEFAULT_CEILING",
    "expand",
    # Overlap
    "events_overlap",
    "find_overlaps",
    # Notifications
    "Notification",
    "due_notifications",
    "is_due",
    "prune_notifications",
    # Series
    "apply_to_series",
    "detach",
    "find_series_members",
    "is_recurring",
    "move_series",
    "move_single",
    # Search
    "search_events",
]
