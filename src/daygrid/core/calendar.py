"""Pure calendar domain logic - no I/O dependencies."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "No Title"


@dataclass
class CalendarEvent:
    """A calendar event owned by the signed-in user."""

    id: str
    title: str
    start: datetime
    end: datetime
    description: str = ""
    category: str = ""

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def spans_days(self) -> list[date]:
        """Every date touched by the event, start to end inclusive."""
        first = self.start_date.toordinal()
        last = self.end_date.toordinal()
        return [date.fromordinal(n) for n in range(first, last + 1)]

    def format_time_range(self) -> str:
        return f"{self.start.strftime('%H:%M')} - {self.end.strftime('%H:%M')}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def default_end(start: datetime) -> datetime:
    """End used when an event has none: 23:59 on the start date."""
    return start.replace(hour=23, minute=59, second=0, microsecond=0)


def overlaps_day(event: CalendarEvent, day: date) -> bool:
    """Check if an event's span touches a given date."""
    return event.start <= end_of_day(day) and event.end >= start_of_day(day)


def filter_events_for_day(events: list[CalendarEvent], day: date) -> list[CalendarEvent]:
    """
    Select events whose interval intersects a day.

    Multi-day events that merely touch the day at either boundary are included.
    Pure function - no I/O.
    """
    return [e for e in events if overlaps_day(e, day)]


def sort_events_by_start(events: list[CalendarEvent]) -> list[CalendarEvent]:
    """Sort events by start time, keeping fetch order for equal starts."""
    return sorted(events, key=lambda e: e.start)


def parse_timestamp(value: str | datetime, tz: tzinfo | None = None) -> datetime:
    """
    Parse an API timestamp into a naive local datetime.

    Accepts ISO-8601 strings with a trailing ``Z``. Aware values are converted
    to ``tz`` (or the system zone) before the offset is dropped.
    """
    if isinstance(value, datetime):
        dt = value
    elif not isinstance(value, str):
        raise TypeError(f"expected an ISO-8601 string, got {type(value).__name__}")
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)

    if dt.tzinfo is not None:
        dt = dt.astimezone(tz).replace(tzinfo=None)
    return dt


def normalize_event(raw: dict, tz: tzinfo | None = None) -> CalendarEvent | None:
    """
    Build a CalendarEvent from an API payload.

    Returns None (and logs) for entries without a usable start. An end before
    the start is clamped to the start.
    """
    if not raw:
        logger.warning("Skipping empty event payload")
        return None

    event_id = str(raw.get("id", ""))
    start_raw = raw.get("start")
    if not start_raw:
        logger.warning(f"Skipping event {event_id or '?'}: missing start")
        return None

    try:
        start = parse_timestamp(start_raw, tz)
    except (TypeError, ValueError) as e:
        logger.warning(f"Skipping event {event_id or '?'}: bad start {start_raw!r} ({e})")
        return None

    end_raw = raw.get("end_time") or raw.get("end")
    end = default_end(start)
    if end_raw:
        try:
            end = parse_timestamp(end_raw, tz)
        except (TypeError, ValueError) as e:
            logger.warning(f"Event {event_id or '?'}: bad end {end_raw!r}, using end of day ({e})")

    if end < start:
        logger.warning(f"Event {event_id or '?'} ends before it starts; clamping end to start")
        end = start

    return CalendarEvent(
        id=event_id,
        title=raw.get("title") or DEFAULT_TITLE,
        start=start,
        end=end,
        description=raw.get("description") or "",
        category=raw.get("category_id") or raw.get("category") or "",
    )


def normalize_events(raw_events: list[dict], tz: tzinfo | None = None) -> list[CalendarEvent]:
    """Normalize a fetched list, dropping unusable entries and keeping order."""
    events = []
    for raw in raw_events:
        if not isinstance(raw, dict):
            logger.warning(f"Skipping non-object event entry {raw!r}")
            continue
        event = normalize_event(raw, tz)
        if event is not None:
            events.append(event)
    return events
