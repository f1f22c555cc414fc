"""Overlap detection - pure, no I/O."""

from .events import Event


def events_overlap(a: Event, b: Event) -> bool:
    """
    Same date and intersecting [start, end) ranges.

    Back-to-back events (one ends exactly when the other starts) do not
    overlap.
    """
    if a.date != b.date:
        return False
    return a.start_time < b.end_time and a.end_time > b.start_time


def find_overlaps(candidate: Event, existing: list[Event]) -> list[Event]:
    """
    All existing events that clash with `candidate`, in their original order.

    When the candidate is a stored event being edited, its own record is
    ignored.
    """
    return [
        other
        for other in existing
        if not (candidate.id is not None and other.id == candidate.id)
        and events_overlap(candidate, other)
    ]
