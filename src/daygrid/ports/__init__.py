"""Ports - interfaces/protocols for external dependencies."""

from .event_repo import EventRepository
from .event_cache import EventCache

__all__ = [
    "EventRepository",
    "EventCache",
]
