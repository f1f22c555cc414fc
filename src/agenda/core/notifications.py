"""Notification due-window logic - pure, no I/O.

The set of already-notified event ids is explicit state: callers pass it in
and keep the returned set for the next evaluation.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from .events import NOTIFICATION_OPTIONS, Event


@dataclass(frozen=True)
class Notification:
    """A transient alert for one event. Never persisted."""

    event_id: str
    message: str


def event_start(event: Event) -> datetime:
    return datetime.combine(event.date, event.start_time)


def is_due(event: Event, now: datetime) -> bool:
    """True while `now` is in [start - notification_time, start)."""
    start = event_start(event)
    fire_at = start - timedelta(minutes=event.notification_time)
    return fire_at <= now < start


def notification_message(event: Event) -> str:
    lead = NOTIFICATION_OPTIONS.get(event.notification_time, f"{event.notification_time} minutes")
    return f"{event.title} starts in {lead}."


def due_notifications(
    now: datetime,
    events: list[Event],
    already_notified: frozenset[str] | set[str],
) -> tuple[list[Notification], frozenset[str]]:
    """
    Notifications that become due at `now`.

    Returns (new notifications, updated notified set). Events whose id is
    already in `already_notified` never fire again, so repeated calls with
    the returned set are idempotent. The input set is not modified.
    """
    notified = set(already_notified)
    fired = []

    for event in events:
        if event.id is None or event.id in notified:
            continue
        if is_due(event, now):
            fired.append(Notification(event_id=event.id, message=notification_message(event)))
            notified.add(event.id)

    return fired, frozenset(notified)


def prune_notifications(
    now: datetime,
    notifications: list[Notification],
    events: list[Event],
) -> list[Notification]:
    """Drop alerts whose event was removed or is no longer in its due window."""
    by_id = {e.id: e for e in events}
    return [
        n
        for n in notifications
        if n.event_id in by_id and is_due(by_id[n.event_id], now)
    ]


def dismiss(notifications: list[Notification], event_id: str) -> list[Notification]:
    """Remove an alert. The event stays in the notified set, so it won't re-fire."""
    return [n for n in notifications if n.event_id != event_id]
