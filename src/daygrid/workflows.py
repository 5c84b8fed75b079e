"""Shared workflow layer between the CLI and the refresher.

Each compile_* function loads events (API first, snapshot cache as fallback),
runs the layout core and returns text ready to print.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from zoneinfo import ZoneInfo

import requests

from .adapters.events_api import EventsApiAdapter
from .adapters.file_cache import FileEventCache
from .config import DATA_DIR, Config
from .core.calendar import CalendarEvent, normalize_events
from .core.colors import ColorResolver
from .core.layout import DayCell, EventIndex, first_of_month
from .core.paginator import MonthPaginator, MonthWindow
from .ports import EventCache, EventRepository
from .render import format_day_cell, format_month, format_window

logger = logging.getLogger(__name__)


@dataclass
class EventSnapshot:
    """Events plus where they came from."""

    events: list[CalendarEvent]
    from_cache: bool = False


def get_cache(config: Config) -> EventCache:
    """Resolve cache directory from config."""
    if config.cache_dir:
        return FileEventCache(Path(config.cache_dir).expanduser())
    return FileEventCache(DATA_DIR / "cache")


def get_repository(config: Config) -> EventsApiAdapter:
    return EventsApiAdapter(config)


def get_paginator(config: Config, today: date | None = None) -> MonthPaginator:
    return MonthPaginator(
        total_months=config.total_months,
        current_month_index=config.current_month_index,
        overscan=config.overscan,
        row_height=config.month_row_height,
        today=today,
    )


def build_index(config: Config, events: list[CalendarEvent]) -> EventIndex:
    return EventIndex(
        events,
        resolver=ColorResolver(default_color=config.default_color),
        week_starts_on=config.week_starts_on,
    )


def load_events(config: Config, offline: bool = False) -> EventSnapshot:
    """
    Fetch events and refresh the snapshot cache.

    Falls back to the cache when the API is unreachable. Authentication
    errors are not masked.
    """
    cache = get_cache(config)
    tz = ZoneInfo(config.timezone) if config.timezone else None

    if not offline:
        try:
            repository: EventRepository = get_repository(config)
            raw = repository.fetch_raw()
        except requests.RequestException as e:
            if not cache.exists():
                raise
            logger.warning(f"Calendar API unavailable ({e}); using cached events")
        else:
            cache.save(raw)
            return EventSnapshot(events=normalize_events(raw, tz))

    return EventSnapshot(events=normalize_events(cache.load(), tz), from_cache=True)


def _cache_note(snapshot: EventSnapshot, config: Config) -> str:
    if not snapshot.from_cache:
        return ""
    saved = get_cache(config).saved_at()
    when = saved.strftime("%Y-%m-%d %H:%M") if saved else "unknown time"
    return f"\n\n(offline: events as of {when})"


def compute_day(config: Config, day: date, offline: bool = False, today: date | None = None) -> DayCell:
    snapshot = load_events(config, offline)
    return build_index(config, snapshot.events).day_cell(day, today=today)


def compile_day(config: Config, day: date, offline: bool = False, today: date | None = None) -> str:
    """Agenda text for one day."""
    snapshot = load_events(config, offline)
    cell = build_index(config, snapshot.events).day_cell(day, today=today)
    return format_day_cell(cell) + _cache_note(snapshot, config)


def compile_month(config: Config, month: date, offline: bool = False, today: date | None = None) -> str:
    """Month grid text."""
    snapshot = load_events(config, offline)
    index = build_index(config, snapshot.events)
    cells = index.month_cells(first_of_month(month), today=today)
    return format_month(cells, month, config.week_starts_on) + _cache_note(snapshot, config)


def compute_window(config: Config, scroll_offset: float, viewport_height: float | None = None) -> MonthWindow:
    return get_paginator(config).compute_month_window(scroll_offset, viewport_height)


def compile_window(config: Config, scroll_offset: float, viewport_height: float | None = None) -> str:
    return format_window(compute_window(config, scroll_offset, viewport_height))
