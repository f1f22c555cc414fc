"""REST API adapter - HTTP client for an /api/events backend."""

import logging

import requests

from agenda.core.events import Event
from agenda.ports.event_store import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class HttpEventStore:
    """
    HTTP event store.

    Implements EventStore protocol against a server exposing
    GET/POST /api/events and PUT/DELETE /api/events/<id>. No business
    logic - just I/O.
    """

    def __init__(self, base_url: str, timeout: int = DEFAULT_TIMEOUT, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _url(self, event_id: str | None = None) -> str:
        url = f"{self.base_url}/api/events"
        return f"{url}/{event_id}" if event_id else url

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Send a request, turning transport and HTTP errors into PersistenceError."""
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise PersistenceError(f"{method} {url} failed: {e}") from e
        return resp

    def _json(self, resp: requests.Response, url: str) -> dict:
        """Decode a JSON object body, raising PersistenceError on anything else."""
        try:
            data = resp.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise PersistenceError(f"Invalid JSON from {url}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Unexpected response from {url}: expected an object")
        return data

    def list_events(self) -> list[Event]:
        """Fetch every stored event."""
        url = self._url()
        data = self._json(self._request("GET", url), url)
        return [Event.from_dict(item) for item in data.get("events", [])]

    def create_event(self, draft: Event) -> Event:
        """POST a draft; the server assigns the id."""
        payload = draft.to_dict()
        payload.pop("id", None)
        url = self._url()
        resp = self._request("POST", url, json=payload)
        return Event.from_dict(self._json(resp, url))

    def replace_event(self, event: Event) -> Event:
        """PUT the full record."""
        if event.id is None:
            raise PersistenceError("Cannot replace an event without an id")
        url = self._url(event.id)
        resp = self._request("PUT", url, json=event.to_dict())
        return Event.from_dict(self._json(resp, url))

    def delete_event(self, event_id: str) -> None:
        """DELETE a record by id."""
        self._request("DELETE", self._url(event_id))
