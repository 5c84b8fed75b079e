"""File-based event snapshot adapter."""

import json
import logging
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class FileEventCache:
    """
    File-based snapshot of the last fetched events.

    Implements EventCache protocol. Stores the raw API payload so it can be
    normalized again with the current settings.
    """

    def __init__(self, cache_dir: Path | str, filename: str = "events.json"):
        self.cache_dir = Path(cache_dir).expanduser()
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.cache_dir / filename

    def save(self, raw_events: list[dict]) -> None:
        """Replace the stored snapshot."""
        payload = {"saved_at": datetime.now().isoformat(), "events": raw_events}
        self.path.write_text(json.dumps(payload, indent=2, default=str))

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt event cache {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> list[dict]:
        """Return the stored snapshot, empty if none."""
        return self._read().get("events", [])

    def exists(self) -> bool:
        return self.path.exists()

    def saved_at(self) -> datetime | None:
        """When the snapshot was written."""
        stamp = self._read().get("saved_at")
        if not stamp:
            return None
        try:
            return datetime.fromisoformat(stamp)
        except ValueError:
            return None
