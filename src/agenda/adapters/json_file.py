"""File-based event storage adapter."""

import json
import logging
import uuid
from dataclasses import replace
from pathlib import Path

from agenda.core.events import Event
from agenda.ports.event_store import PersistenceError

logger = logging.getLogger(__name__)


class JsonFileEventStore:
    """
    JSON file event storage.

    Implements EventStore protocol. All events live in one document of the
    form {"events": [...]}, rewritten on every change.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _read(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read {self.path}: {e}")
            raise PersistenceError(f"Cannot read event file {self.path}: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("events", []), list):
            logger.error(f"Unexpected layout in {self.path}")
            raise PersistenceError(f"Cannot read event file {self.path}: expected an 'events' list")
        return data.get("events", [])

    def _write(self, records: list[dict]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"events": records}, indent=2, ensure_ascii=False))
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            raise PersistenceError(f"Cannot write event file {self.path}: {e}") from e

    def list_events(self) -> list[Event]:
        """Fetch every stored event."""
        return [Event.from_dict(r) for r in self._read()]

    def create_event(self, draft: Event) -> Event:
        """Store a draft under a fresh id."""
        event = replace(draft, id=str(uuid.uuid4()))
        records = self._read()
        records.append(event.to_dict())
        self._write(records)
        return event

    def replace_event(self, event: Event) -> Event:
        """Overwrite the record with the same id."""
        if event.id is None:
            raise PersistenceError("Cannot replace an event without an id")
        records = self._read()
        for i, record in enumerate(records):
            if record.get("id") == event.id:
                records[i] = event.to_dict()
                self._write(records)
                return event
        raise PersistenceError(f"Event not found: {event.id}")

    def delete_event(self, event_id: str) -> None:
        """Remove a record by id."""
        records = self._read()
        remaining = [r for r in records if r.get("id") != event_id]
        if len(remaining) == len(records):
            raise PersistenceError(f"Event not found: {event_id}")
        self._write(remaining)
