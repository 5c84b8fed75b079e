"""Adapters - I/O implementations of ports."""

from .events_api import EventsApiAdapter, AuthenticationError
from .file_cache import FileEventCache

__all__ = [
    "EventsApiAdapter",
    "AuthenticationError",
    "FileEventCache",
]
