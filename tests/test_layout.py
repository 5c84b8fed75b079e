"""Tests for day-cell layout: classification, day cells and the month index."""

from datetime import date, datetime, timedelta

import pytest

from daygrid.core.calendar import CalendarEvent, normalize_event
from daygrid.core.colors import ColorResolver
from daygrid.core.layout import (
    DayCell,
    EventIndex,
    Segment,
    add_months,
    classify_segment,
    compute_day_cell,
    last_of_month,
    month_grid_days,
    segment_style,
)


@pytest.fixture
def make_event():
    def _make(title: str, start: datetime, end: datetime, category: str = "") -> CalendarEvent:
        return CalendarEvent(id=title.lower(), title=title, start=start, end=end, category=category)
    return _make


@pytest.fixture
def trip(make_event):
    return make_event("Trip", datetime(2024, 3, 1, 10), datetime(2024, 3, 3, 14), category="red")


class TestClassifySegment:
    def test_start_day(self, trip):
        assert classify_segment(trip, date(2024, 3, 1)) is Segment.START

    def test_middle_day(self, trip):
        assert classify_segment(trip, date(2024, 3, 2)) is Segment.MIDDLE

    def test_end_day(self, trip):
        assert classify_segment(trip, date(2024, 3, 3)) is Segment.END

    def test_start_equals_end(self, make_event):
        moment = datetime(2024, 3, 5, 9)
        event = make_event("Ping", moment, moment)
        assert classify_segment(event, date(2024, 3, 5)) is Segment.SINGLE_DAY

    def test_omitted_end_is_single_day(self):
        event = normalize_event({"id": 1, "title": "Errand", "start": "2024-03-05T09:00:00"})
        assert classify_segment(event, date(2024, 3, 5)) is Segment.SINGLE_DAY

    def test_values(self):
        assert [s.value for s in Segment] == [
            "single-day",
            "segment-start",
            "segment-end",
            "segment-middle",
        ]


class TestSegmentStyle:
    def test_single_day_fully_bordered_and_rounded(self):
        style = segment_style(Segment.SINGLE_DAY)
        assert style.css_class == "mv-ev--single"
        assert all([style.border_top, style.border_bottom, style.border_left, style.border_right])
        assert style.rounded_left and style.rounded_right

    def test_start_open_on_the_right(self):
        style = segment_style(Segment.START)
        assert style.border_left and not style.border_right
        assert style.rounded_left and not style.rounded_right

    def test_end_open_on_the_left(self):
        style = segment_style(Segment.END)
        assert style.border_right and not style.border_left
        assert style.rounded_right and not style.rounded_left

    def test_middle_top_and_bottom_only(self):
        style = segment_style(Segment.MIDDLE)
        assert style.border_top and style.border_bottom
        assert not (style.border_left or style.border_right)
        assert not (style.rounded_left or style.rounded_right)


class TestComputeDayCell:
    def test_sorted_by_start(self, make_event):
        day = date(2024, 3, 2)
        events = [
            make_event("C", datetime(2024, 3, 2, 15), datetime(2024, 3, 2, 16)),
            make_event("A", datetime(2024, 3, 1, 8), datetime(2024, 3, 2, 9)),
            make_event("B", datetime(2024, 3, 2, 10), datetime(2024, 3, 2, 11)),
        ]
        cell = compute_day_cell(events, day, today=day)
        starts = [p.event.start for p in cell.events]
        assert starts == sorted(starts)
        assert [p.event.title for p in cell.events] == ["A", "B", "C"]

    def test_excludes_other_days(self, make_event):
        events = [make_event("Other", datetime(2024, 3, 4, 10), datetime(2024, 3, 4, 11))]
        cell = compute_day_cell(events, date(2024, 3, 2), today=date(2024, 3, 2))
        assert cell.events == []

    def test_flags(self, make_event):
        cell = compute_day_cell([], date(2024, 3, 2), today=date(2024, 3, 5), month=date(2024, 2, 1))
        assert cell.is_past is True
        assert cell.is_today is False
        assert cell.in_month is False

    def test_today_flag(self):
        cell = compute_day_cell([], date(2024, 3, 5), today=date(2024, 3, 5))
        assert cell.is_today is True
        assert cell.is_past is False
        assert cell.in_month is True

    def test_colours_resolved(self, make_event):
        events = [
            make_event("Red", datetime(2024, 3, 2, 9), datetime(2024, 3, 2, 10), category="red"),
            make_event("Bad", datetime(2024, 3, 2, 11), datetime(2024, 3, 2, 12), category="notacolour"),
        ]
        cell = compute_day_cell(events, date(2024, 3, 2), today=date(2024, 3, 2))
        assert cell.events[0].color.background == "rgba(255,0,0,0.3)"
        assert cell.events[1].color.border == "dodgerblue"

    def test_busy_title_shows_time_range(self, make_event):
        events = [make_event("Busy", datetime(2024, 3, 2, 9), datetime(2024, 3, 2, 10))]
        cell = compute_day_cell(events, date(2024, 3, 2), today=date(2024, 3, 2))
        assert cell.events[0].label == "09:00 - 10:00"

    def test_to_dict(self, trip):
        cell = compute_day_cell([trip], date(2024, 3, 2), today=date(2024, 3, 2))
        data = cell.to_dict()
        assert data["day"] == "2024-03-02"
        assert data["events"][0]["segment"] == "segment-middle"
        assert data["events"][0]["css_class"] == "mv-ev--mid"

    def test_span_round_trip(self):
        """Walking a span gives one start, middles, then one end."""
        event = normalize_event(
            {"id": 1, "title": "Conference", "start": "2024-03-28T09:00:00", "end_time": "2024-04-02T17:00:00"}
        )
        segments = [
            compute_day_cell([event], day, today=day).events[0].segment
            for day in event.spans_days()
        ]
        assert segments[0] is Segment.START
        assert segments[-1] is Segment.END
        assert all(s is Segment.MIDDLE for s in segments[1:-1])
        assert len(segments) == 6

    def test_span_round_trip_single_day(self):
        event = normalize_event({"id": 1, "start": "2024-03-28T09:00:00", "end_time": "2024-03-28T10:00:00"})
        segments = [
            compute_day_cell([event], day, today=day).events[0].segment
            for day in event.spans_days()
        ]
        assert segments == [Segment.SINGLE_DAY]


class TestMonthHelpers:
    def test_add_months_across_year(self):
        assert add_months(date(2024, 11, 1), 3) == date(2025, 2, 1)
        assert add_months(date(2024, 1, 1), -1) == date(2023, 12, 1)

    def test_last_of_month_leap_year(self):
        assert last_of_month(date(2024, 2, 10)) == date(2024, 2, 29)

    def test_grid_sunday_first(self):
        days = month_grid_days(date(2024, 3, 1))
        # March 2024 starts on a Friday and ends on a Sunday
        assert days[0] == date(2024, 2, 25)
        assert days[-1] == date(2024, 4, 6)
        assert len(days) % 7 == 0
        assert days[0].weekday() == 6

    def test_grid_monday_first(self):
        days = month_grid_days(date(2024, 3, 1), week_starts_on=0)
        assert days[0] == date(2024, 2, 26)
        assert days[-1] == date(2024, 3, 31)
        assert len(days) == 35

    def test_grid_is_contiguous(self):
        days = month_grid_days(date(2024, 9, 1))
        assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))


class TestEventIndex:
    def test_event_listed_in_every_month_it_touches(self, make_event):
        event = make_event("Long", datetime(2024, 1, 30, 9), datetime(2024, 3, 2, 9))
        index = EventIndex([event])
        assert set(index.month_index) == {"2024-01", "2024-02", "2024-03"}

    def test_day_cell_uses_month_bucket(self, trip, make_event):
        other = make_event("April", datetime(2024, 4, 2, 9), datetime(2024, 4, 2, 10))
        index = EventIndex([trip, other])
        cell = index.day_cell(date(2024, 3, 2), today=date(2024, 3, 2))
        assert [p.event.title for p in cell.events] == ["Trip"]

    def test_day_cell_for_cross_month_event(self, make_event):
        event = make_event("NYE", datetime(2024, 12, 31, 20), datetime(2025, 1, 1, 2))
        index = EventIndex([event])
        cell = index.day_cell(date(2025, 1, 1), today=date(2025, 1, 1))
        assert cell.events[0].segment is Segment.END

    def test_month_cells_cover_grid(self, trip):
        index = EventIndex([trip])
        cells = index.month_cells(date(2024, 3, 15), today=date(2024, 3, 2))
        assert len(cells) == len(month_grid_days(date(2024, 3, 1)))
        assert all(isinstance(c, DayCell) for c in cells)
        assert cells[0].in_month is False
        march_first = next(c for c in cells if c.day == date(2024, 3, 1))
        assert march_first.events[0].segment is Segment.START

    def test_uses_given_resolver(self, make_event):
        event = make_event("Plain", datetime(2024, 3, 2, 9), datetime(2024, 3, 2, 10))
        index = EventIndex([event], resolver=ColorResolver(default_color="green"))
        cell = index.day_cell(date(2024, 3, 2), today=date(2024, 3, 2))
        assert cell.events[0].color.rgb == (0, 128, 0)

    def test_empty(self):
        index = EventIndex([])
        assert index.day_cell(date(2024, 3, 2), today=date(2024, 3, 2)).events == []
