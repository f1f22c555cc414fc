"""Adapters - I/O implementations of ports."""

from .json_file import JsonFileEventStore
from .http_api import HttpEventStore

__all__ = [
    "JsonFileEventStore",
    "HttpEventStore",
]
