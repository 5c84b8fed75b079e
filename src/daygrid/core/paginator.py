"""Virtualized month list: maps scroll offsets to month slots."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from .layout import add_months, first_of_month, month_key

DEFAULT_TOTAL_MONTHS = 24
DEFAULT_CURRENT_MONTH_INDEX = 3
DEFAULT_OVERSCAN = 2
DEFAULT_ROW_HEIGHT = 700


class NavigateAction(str, Enum):
    PREV = "PREV"
    NEXT = "NEXT"
    TODAY = "TODAY"


@dataclass(frozen=True)
class MonthWindow:
    """The month shown at a scroll position and the slots to render."""

    slot_index: int
    month_offset: int
    month: date
    label: str
    visible_start: int
    visible_stop: int
    render_start: int
    render_stop: int

    @property
    def rendered_slots(self) -> range:
        return range(self.render_start, self.render_stop + 1)


class MonthPaginator:
    """
    A fixed number of month slots anchored on today's month.

    Slot ``current_month_index`` is today's month; slots before it are past
    months and slots after it future months.
    """

    def __init__(
        self,
        total_months: int = DEFAULT_TOTAL_MONTHS,
        current_month_index: int = DEFAULT_CURRENT_MONTH_INDEX,
        overscan: int = DEFAULT_OVERSCAN,
        row_height: int = DEFAULT_ROW_HEIGHT,
        today: date | None = None,
    ):
        if total_months < 1:
            raise ValueError("total_months must be at least 1")
        if not 0 <= current_month_index < total_months:
            raise ValueError("current_month_index must fall inside the window")
        if row_height < 1:
            raise ValueError("row_height must be positive")
        self.total_months = total_months
        self.current_month_index = current_month_index
        self.overscan = max(0, overscan)
        self.row_height = row_height
        self.base_month = first_of_month(today or date.today())

    def _clamp_slot(self, slot: int) -> int:
        return max(0, min(self.total_months - 1, slot))

    def month_offset(self, slot: int) -> int:
        return slot - self.current_month_index

    def month_for_slot(self, slot: int) -> date:
        return add_months(self.base_month, self.month_offset(slot))

    def item_key(self, slot: int) -> str:
        return month_key(self.month_for_slot(slot))

    def initial_scroll_offset(self) -> int:
        return self.current_month_index * self.row_height

    def slot_for_offset(self, scroll_offset: float) -> int:
        """Top visible slot for a scroll offset, clamped to the window."""
        return self._clamp_slot(int(max(0, scroll_offset) // self.row_height))

    def slot_for_month(self, month: date) -> int | None:
        """Slot showing a month, or None when it falls outside the window."""
        month = first_of_month(month)
        slot = (
            (month.year - self.base_month.year) * 12
            + (month.month - self.base_month.month)
            + self.current_month_index
        )
        if 0 <= slot < self.total_months:
            return slot
        return None

    def scroll_offset_for_month(self, month: date) -> int | None:
        slot = self.slot_for_month(month)
        return None if slot is None else slot * self.row_height

    def compute_month_window(self, scroll_offset: float, viewport_height: float | None = None) -> MonthWindow:
        """
        Compute the displayed month and render range for a scroll position.

        Args:
            scroll_offset: Pixels scrolled from the top of the list
            viewport_height: Visible height (defaults to one month row)
        """
        viewport_height = viewport_height or self.row_height
        top = self.slot_for_offset(scroll_offset)
        bottom_edge = max(0, scroll_offset) + max(1, viewport_height) - 1
        bottom = max(top, self.slot_for_offset(bottom_edge))
        month = self.month_for_slot(top)
        return MonthWindow(
            slot_index=top,
            month_offset=self.month_offset(top),
            month=month,
            label=month.strftime("%B %Y"),
            visible_start=top,
            visible_stop=bottom,
            render_start=self._clamp_slot(top - self.overscan),
            render_stop=self._clamp_slot(bottom + self.overscan),
        )

    def navigate(self, month: date, action: NavigateAction | str) -> date:
        """Toolbar navigation from a displayed month."""
        action = NavigateAction(action)
        month = first_of_month(month)
        if action is NavigateAction.PREV:
            return add_months(month, -1)
        if action is NavigateAction.NEXT:
            return add_months(month, 1)
        return self.base_month
