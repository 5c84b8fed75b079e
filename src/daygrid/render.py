"""Plain-text rendering of day cells and month grids."""

from datetime import date, timedelta

from .core.layout import DayCell, PlacedEvent, Segment
from .core.paginator import MonthWindow

COLUMN_WIDTH = 11
EVENT_LINES = 2

# Bar ends: an open side means the event continues into the neighbouring day
SEGMENT_MARKERS = {
    Segment.SINGLE_DAY: ("[", "]"),
    Segment.START: ("[", ">"),
    Segment.END: ("<", "]"),
    Segment.MIDDLE: ("<", ">"),
}


def format_bar(placed: PlacedEvent, width: int | None = None) -> str:
    """Render an event bar, e.g. ``[Dentist]`` or ``<Trip>``."""
    left, right = SEGMENT_MARKERS[placed.segment]
    label = placed.label
    if width is not None:
        room = max(1, width - 2)
        if len(label) > room:
            label = label[: room - 1] + "…" if room > 1 else label[:room]
    return f"{left}{label}{right}"


def format_day_cell(cell: DayCell) -> str:
    """Agenda listing for one day."""
    header = f"### {cell.day.strftime('%A, %B %d')}"
    if cell.is_today:
        header += " (today)"
    if not cell.events:
        return f"{header}\n  No events."

    lines = [header]
    for placed in cell.events:
        when = "All day" if placed.segment is Segment.MIDDLE else placed.event.start.strftime("%H:%M")
        if placed.segment is Segment.END:
            when = f"→{placed.event.end.strftime('%H:%M')}"
        lines.append(f"  {when:8} {format_bar(placed)}  ({placed.color.border})")
    return "\n".join(lines)


def weekday_labels(week_starts_on: int) -> list[str]:
    # 2024-01-01 was a Monday
    monday = date(2024, 1, 1)
    return [(monday + timedelta(days=(week_starts_on + i) % 7)).strftime("%a") for i in range(7)]


def _cell_lines(cell: DayCell) -> list[str]:
    if not cell.in_month:
        return [""] * (EVENT_LINES + 1)

    marker = "*" if cell.is_today else ""
    lines = [f"{cell.day.day}{marker}"]
    shown = cell.events[:EVENT_LINES]
    lines.extend(format_bar(p, COLUMN_WIDTH - 1) for p in shown)
    hidden = len(cell.events) - len(shown)
    if hidden > 0:
        lines[-1] = f"+{hidden + 1} more"
    lines.extend([""] * (EVENT_LINES + 1 - len(lines)))
    return lines


def format_month(cells: list[DayCell], month: date, week_starts_on: int = 6) -> str:
    """Render a month grid; ``*`` marks today."""
    total_width = COLUMN_WIDTH * 7
    out = [month.strftime("%B %Y").center(total_width).rstrip()]
    out.append("".join(label.ljust(COLUMN_WIDTH) for label in weekday_labels(week_starts_on)).rstrip())

    for week_start in range(0, len(cells), 7):
        week = [_cell_lines(c) for c in cells[week_start : week_start + 7]]
        for row in range(EVENT_LINES + 1):
            out.append("".join(col[row].ljust(COLUMN_WIDTH) for col in week).rstrip())
    return "\n".join(out)


def format_window(window: MonthWindow) -> str:
    return (
        f"{window.label} (slot {window.slot_index}, offset {window.month_offset:+d}); "
        f"rendering slots {window.render_start}-{window.render_stop}"
    )
