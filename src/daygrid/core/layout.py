"""Day-cell layout: which events occupy a date and how their bars connect."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum

from .calendar import CalendarEvent, filter_events_for_day, sort_events_by_start
from .colors import ColorResolver, EventColor

SUNDAY = 6


class Segment(str, Enum):
    """How an event's bar looks inside one day cell."""

    SINGLE_DAY = "single-day"
    START = "segment-start"
    END = "segment-end"
    MIDDLE = "segment-middle"


@dataclass(frozen=True)
class SegmentStyle:
    """Border and rounding for one bar segment."""

    css_class: str
    border_top: bool
    border_bottom: bool
    border_left: bool
    border_right: bool
    rounded_left: bool
    rounded_right: bool


_SEGMENT_STYLES = {
    Segment.SINGLE_DAY: SegmentStyle("mv-ev--single", True, True, True, True, True, True),
    Segment.START: SegmentStyle("mv-ev--left", True, True, True, False, True, False),
    Segment.END: SegmentStyle("mv-ev--right", True, True, False, True, False, True),
    Segment.MIDDLE: SegmentStyle("mv-ev--mid", True, True, False, False, False, False),
}


def classify_segment(event: CalendarEvent, day: date) -> Segment:
    """Classify an event relative to a day it overlaps."""
    starts_today = event.start.date() == day
    ends_today = event.end.date() == day

    if starts_today and ends_today:
        return Segment.SINGLE_DAY
    if starts_today:
        return Segment.START
    if ends_today:
        return Segment.END
    return Segment.MIDDLE


def segment_style(segment: Segment) -> SegmentStyle:
    return _SEGMENT_STYLES[segment]


@dataclass
class PlacedEvent:
    """An event as drawn in a specific day cell."""

    event: CalendarEvent
    segment: Segment
    color: EventColor

    @property
    def style(self) -> SegmentStyle:
        return segment_style(self.segment)

    @property
    def label(self) -> str:
        """Bar text; placeholder "Busy" titles show the time range instead."""
        if self.event.title and self.event.title != "Busy":
            return self.event.title
        return self.event.format_time_range()

    def to_dict(self) -> dict:
        return {
            **self.event.to_dict(),
            "segment": self.segment.value,
            "css_class": self.style.css_class,
            "border": self.color.border,
            "background": self.color.background,
        }


@dataclass
class DayCell:
    """One calendar grid square and the events visible on it."""

    day: date
    events: list[PlacedEvent] = field(default_factory=list)
    is_today: bool = False
    is_past: bool = False
    in_month: bool = True

    def to_dict(self) -> dict:
        return {
            "day": self.day.isoformat(),
            "is_today": self.is_today,
            "is_past": self.is_past,
            "in_month": self.in_month,
            "events": [p.to_dict() for p in self.events],
        }


def compute_day_cell(
    events: list[CalendarEvent],
    day: date,
    today: date | None = None,
    month: date | None = None,
    resolver: ColorResolver | None = None,
) -> DayCell:
    """
    Compute the layout of a single day.

    Pure function - no I/O.

    Args:
        events: Normalized events (end always set)
        day: Date being displayed
        today: Reference date for the today/past flags (defaults to date.today())
        month: Month the cell is displayed under, for the out-of-month flag
        resolver: Colour resolver (a fresh default one if omitted)

    Returns:
        DayCell with events sorted by start and classified
    """
    today = today or date.today()
    resolver = resolver or ColorResolver()

    visible = sort_events_by_start(filter_events_for_day(events, day))
    placed = [
        PlacedEvent(event=e, segment=classify_segment(e, day), color=resolver.resolve(e.category))
        for e in visible
    ]
    return DayCell(
        day=day,
        events=placed,
        is_today=day == today,
        is_past=day < today,
        in_month=month is None or (day.year, day.month) == (month.year, month.month),
    )


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def add_months(month: date, count: int) -> date:
    """Shift the first of a month by a number of months."""
    index = month.year * 12 + (month.month - 1) + count
    return date(index // 12, index % 12 + 1, 1)


def last_of_month(day: date) -> date:
    return add_months(first_of_month(day), 1) - timedelta(days=1)


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")


def month_grid_days(month: date, week_starts_on: int = SUNDAY) -> list[date]:
    """
    All dates in the whole weeks covering a month.

    ``week_starts_on`` uses Python weekday numbers (Monday=0, Sunday=6).
    """
    first = first_of_month(month)
    last = last_of_month(month)
    grid_start = first - timedelta(days=(first.weekday() - week_starts_on) % 7)
    week_end = (week_starts_on + 6) % 7
    grid_end = last + timedelta(days=(week_end - last.weekday()) % 7)
    return [grid_start + timedelta(days=i) for i in range((grid_end - grid_start).days + 1)]


class EventIndex:
    """
    Month-bucketed index over a snapshot of events.

    Each event is listed under every month its span touches, so a day lookup
    only scans that month's bucket.
    """

    def __init__(
        self,
        events: list[CalendarEvent],
        resolver: ColorResolver | None = None,
        week_starts_on: int = SUNDAY,
    ):
        self.events = list(events)
        self.resolver = resolver or ColorResolver()
        self.week_starts_on = week_starts_on
        self.month_index: dict[str, list[CalendarEvent]] = {}

        for event in self.events:
            current = first_of_month(event.start_date)
            last = first_of_month(event.end_date)
            while current <= last:
                self.month_index.setdefault(month_key(current), []).append(event)
                current = add_months(current, 1)

    def events_for_month(self, month: date) -> list[CalendarEvent]:
        return self.month_index.get(month_key(month), [])

    def day_cell(self, day: date, today: date | None = None, month: date | None = None) -> DayCell:
        return compute_day_cell(
            self.events_for_month(day),
            day,
            today=today,
            month=month,
            resolver=self.resolver,
        )

    def month_cells(self, month: date, today: date | None = None) -> list[DayCell]:
        """Day cells for the full grid of a month, leading/trailing days flagged."""
        month = first_of_month(month)
        return [
            self.day_cell(day, today=today, month=month)
            for day in month_grid_days(month, self.week_starts_on)
        ]
