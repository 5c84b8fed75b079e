"""Event snapshot storage interface."""

from datetime import datetime
from typing import Protocol


class EventCache(Protocol):
    """Interface for keeping the last fetched event list."""

    def save(self, raw_events: list[dict]) -> None:
        """Replace the stored snapshot."""
        ...

    def load(self) -> list[dict]:
        """Return the stored snapshot, empty if none."""
        ...

    def exists(self) -> bool:
        """Check if a snapshot has been stored."""
        ...

    def saved_at(self) -> datetime | None:
        """When the snapshot was written."""
        ...
