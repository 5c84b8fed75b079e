"""Event repository interface."""

from datetime import date
from pathlib import Path
from typing import Protocol

from daygrid.core.calendar import CalendarEvent


class EventRepository(Protocol):
    """Interface for reading and writing the user's calendar events."""

    def fetch_events(self) -> list[CalendarEvent]:
        """Fetch every event owned by the signed-in user."""
        ...

    def fetch_raw(self) -> list[dict]:
        """Fetch events as the backend returns them."""
        ...

    def create_event(self, draft: dict) -> dict:
        """Create an event from a title/start/end draft."""
        ...

    def delete_event(self, event_id: str) -> None:
        """Delete an event by id."""
        ...

    def create_event_from_audio(self, audio_path: Path, selected_date: date) -> dict:
        """Upload a voice note the backend turns into an event."""
        ...
