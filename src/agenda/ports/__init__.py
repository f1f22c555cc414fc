"""Ports - interfaces/protocols for external dependencies."""

from .event_store import BatchPersistenceError, EventStore, PersistenceError

__all__ = [
    "EventStore",
    "PersistenceError",
    "BatchPersistenceError",
]
