"""Event store interface."""

from typing import Protocol

from agenda.core.events import Event


class PersistenceError(Exception):
    """Raised by a store when a read or write fails."""

    pass


class BatchPersistenceError(PersistenceError):
    """
    Raised after a multi-record operation in which some writes failed.

    The batch is not rolled back: `applied` holds the records written before
    and after each failure, `failures` the (event, error) pairs. Callers
    should re-fetch the full event list to reconcile.
    """

    def __init__(self, applied: list, failures: list[tuple[Event, PersistenceError]]):
        self.applied = applied
        self.failures = failures
        super().__init__(
            f"{len(failures)} of {len(applied) + len(failures)} records failed: "
            + "; ".join(str(err) for _, err in failures)
        )


class EventStore(Protocol):
    """Interface for persisting events in any backend."""

    def list_events(self) -> list[Event]:
        """Fetch every stored event."""
        ...

    def create_event(self, draft: Event) -> Event:
        """Store a draft and return it with its assigned id."""
        ...

    def replace_event(self, event: Event) -> Event:
        """Overwrite the stored record with the same id."""
        ...

    def delete_event(self, event_id: str) -> None:
        """Remove a record by id."""
        ...
