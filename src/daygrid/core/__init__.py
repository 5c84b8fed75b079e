"""Functional core - pure layout logic with no I/O."""

from .calendar import (
    CalendarEvent,
    filter_events_for_day,
    normalize_event,
    normalize_events,
    sort_events_by_start,
)
from .colors import ColorResolver, EventColor, border_color, event_background, resolve_color
from .layout import (
    DayCell,
    EventIndex,
    PlacedEvent,
    Segment,
    classify_segment,
    compute_day_cell,
    month_grid_days,
)
from .paginator import MonthPaginator, MonthWindow, NavigateAction

__all__ = [
    # Events
    "CalendarEvent",
    "filter_events_for_day",
    "normalize_event",
    "normalize_events",
    "sort_events_by_start",
    # Colours
    "ColorResolver",
    "EventColor",
    "border_color",
    "event_background",
    "resolve_color",
    # Layout
    "DayCell",
    "EventIndex",
    "PlacedEvent",
    "Segment",
    "classify_segment",
    "compute_day_cell",
    "month_grid_days",
    # Paging
    "MonthPaginator",
    "MonthWindow",
    "NavigateAction",
]
