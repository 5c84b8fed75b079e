"""Calendar REST API adapter - HTTP client for event CRUD."""

import logging
import mimetypes
import time
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import requests

from daygrid.config import Config, Session, load_config
from daygrid.core.calendar import CalendarEvent, normalize_events

logger = logging.getLogger(__name__)

SESSION_COOKIE = "token"
SESSION_TTL = 3600
REQUEST_TIMEOUT = 30


class AuthenticationError(Exception):
    """Raised when the API rejects or lacks a session."""

    pass


def _isoformat(value: datetime | str | None, tz: ZoneInfo | None = None) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        # Naive values are wall-clock times in the configured zone
        value = value.replace(tzinfo=tz) if tz else value.astimezone()
    return value.isoformat()


class EventsApiAdapter:
    """
    Calendar API adapter.

    Implements EventRepository protocol. Handles the session cookie and the
    event endpoints. No layout logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: Session | None = None):
        self.config = config or load_config()
        self.session = session or Session.load()
        self.base_url = self.config.api_base_url.rstrip("/")
        self._http = requests.Session()

    @property
    def tz(self) -> ZoneInfo | None:
        return ZoneInfo(self.config.timezone) if self.config.timezone else None

    def _ensure_session(self) -> None:
        if not self.session.is_valid():
            raise AuthenticationError("No valid session. Run 'daygrid login' first.")

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Make an authenticated API request."""
        self._ensure_session()
        resp = self._http.request(
            method,
            f"{self.base_url}{endpoint}",
            cookies={SESSION_COOKIE: self.session.token},
            timeout=REQUEST_TIMEOUT,
            **kwargs,
        )
        if resp.status_code in (401, 403):
            raise AuthenticationError(f"Session rejected ({resp.status_code}). Run 'daygrid login' again.")
        resp.raise_for_status()
        return resp

    def login(self, email: str, password: str) -> Session:
        """Sign in and persist the session cookie."""
        resp = self._http.post(
            f"{self.base_url}/login",
            json={"email": email, "password": password},
            timeout=REQUEST_TIMEOUT,
        )
        if resp.status_code != 200:
            raise AuthenticationError(f"Login failed: {resp.text}")

        token = resp.cookies.get(SESSION_COOKIE) or self._http.cookies.get(SESSION_COOKIE)
        if not token:
            raise AuthenticationError("Login succeeded but no session cookie was returned")

        self.session.token = token
        self.session.expires_at = int(time.time()) + SESSION_TTL
        self.session.save()
        logger.info(f"Signed in as {email}")
        return self.session

    def logout(self) -> None:
        """End the session on the server and forget it locally."""
        if self.session.token:
            try:
                self._http.post(
                    f"{self.base_url}/logout",
                    cookies={SESSION_COOKIE: self.session.token},
                    timeout=REQUEST_TIMEOUT,
                )
            except requests.RequestException as e:
                logger.warning(f"Logout request failed: {e}")
        self.session.clear()

    def fetch_raw(self) -> list[dict]:
        """Fetch the user's events as returned by the API."""
        data = self._request("GET", "/calendar/getAllEventsForUser").json()
        events = data.get("events", []) if isinstance(data, dict) else data
        return [e for e in events or [] if isinstance(e, dict)]

    def fetch_events(self) -> list[CalendarEvent]:
        """Fetch and normalize the user's events."""
        return normalize_events(self.fetch_raw(), self.tz)

    def create_event(self, draft: dict) -> dict:
        """
        Create an event.

        ``draft`` needs ``title`` and ``start``; ``end_time``, ``description``
        and ``category_id`` are optional.
        """
        if not draft.get("title") or not draft.get("start"):
            raise ValueError("Title and start time are required")

        payload = {
            "title": draft["title"],
            "description": draft.get("description", ""),
            "category_id": draft.get("category_id", ""),
            "start": _isoformat(draft["start"], self.tz),
            "end_time": _isoformat(draft.get("end_time"), self.tz),
            "created_by": draft.get("created_by") or self.config.email,
        }
        resp = self._request("POST", "/calendar/event", json={"event": payload})
        return resp.json() if resp.content else {}

    def delete_event(self, event_id: str) -> None:
        """Delete an event by id."""
        self._request("DELETE", "/calendar/event", json={"event": {"id": event_id}})

    def create_event_from_audio(self, audio_path: Path, selected_date: date) -> dict:
        """Upload a recorded voice note; the server extracts the event."""
        audio_path = Path(audio_path)
        mime_type = mimetypes.guess_type(audio_path.name)[0] or "audio/webm"
        selected = datetime.combine(selected_date, datetime.min.time())

        with audio_path.open("rb") as f:
            resp = self._request(
                "POST",
                "/calendar/createEventAudioInput",
                files={"audio": (audio_path.name, f, mime_type)},
                data={"selected_date": _isoformat(selected, self.tz)},
            )
        return resp.json() if resp.content else {}
