"""Periodic notification checks."""

import logging
import threading
from datetime import datetime
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .core.events import ValidationError
from .core.notifications import Notification, dismiss, due_notifications, prune_notifications
from .ports.event_store import EventStore, PersistenceError

logger = logging.getLogger(__name__)


class Notifier:
    """
    Owns the per-session notification state.

    Each tick re-reads the store, fires alerts for newly due events, and
    drops alerts whose event is gone or no longer due. An event fires at
    most once per Notifier, even after its alert is dismissed.
    """

    def __init__(
        self,
        store: EventStore,
        on_notify: Callable[[Notification], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.on_notify = on_notify
        self.clock = clock
        self.notified: frozenset[str] = frozenset()
        self.notifications: list[Notification] = []
        self._lock = threading.Lock()
        self._scheduler: BackgroundScheduler | None = None

    def tick(self, now: datetime | None = None) -> list[Notification]:
        """Evaluate all events once. Returns the notifications fired by this tick."""
        now = now or self.clock()
        try:
            events = self.store.list_events()
        except (PersistenceError, ValidationError) as e:
            logger.error(f"Notification check skipped: {e}")
            return []

        with self._lock:
            fired, self.notified = due_notifications(now, events, self.notified)
            self.notifications = prune_notifications(now, self.notifications, events) + fired

        for notification in fired:
            logger.info(f"Notification for {notification.event_id}: {notification.message}")
            if self.on_notify:
                self.on_notify(notification)

        return fired

    def dismiss(self, event_id: str) -> None:
        """Remove an active alert without allowing it to fire again."""
        with self._lock:
            self.notifications = dismiss(self.notifications, event_id)

    def start(self, interval_seconds: int = 1) -> BackgroundScheduler:
        """Run `tick` every `interval_seconds` on a background scheduler."""
        scheduler = BackgroundScheduler()
        scheduler.add_job(
            self.tick,
            IntervalTrigger(seconds=interval_seconds),
            id="notification_check",
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(f"Notification checks every {interval_seconds}s")
        return scheduler

    def stop(self) -> None:
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Notification checks stopped")
