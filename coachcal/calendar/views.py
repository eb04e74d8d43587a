"""Day, week and month views over the shared grid engine.

``SchedulingGrid`` owns the anchor date and view mode, rebuilds the layout
from the current lessons on every render, and keeps an
``InteractionController`` bound to the latest time-grid layout.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import StrEnum

from loguru import logger

from coachcal.config.settings import GridSettings, settings
from coachcal.calendar.callbacks import CalendarCallbacks
from coachcal.calendar.geometry import layout_events, now_offset_px
from coachcal.calendar.interaction import InteractionController
from coachcal.calendar.models import (
    EventKind,
    GridLayout,
    LessonEvent,
    MonthCell,
    RenderedEvent,
    TimeRow,
    VisibleWindow,
)
from coachcal.calendar.overlap import assign_columns
from coachcal.calendar.window import (
    add_months,
    build_time_rows,
    build_visible_window,
    build_week_windows,
    month_grid,
    resolve_anchor,
)

WEEKDAY_HEADERS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


class ViewMode(StrEnum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class DayColumn:
    """One rendered day column of the time grid."""

    date: date
    label: str
    window: VisibleWindow
    events: tuple[RenderedEvent, ...]
    is_today: bool
    now_offset_px: float | None = None


@dataclass(frozen=True)
class TimeGridRendering:
    """Day or week rendering."""

    mode: ViewMode
    header: str
    rows: tuple[TimeRow, ...]
    columns: tuple[DayColumn, ...]
    # Re-render cadence for the current-time line; None when no column shows it
    refresh_seconds: int | None = None

    @property
    def layout(self) -> GridLayout:
        return GridLayout(
            windows=tuple(col.window for col in self.columns),
            columns=tuple(col.events for col in self.columns),
        )


@dataclass(frozen=True)
class MonthRendering:
    """Month rendering: lesson counts only, no time geometry."""

    header: str
    weekday_labels: tuple[str, ...]
    cells: tuple[MonthCell, ...]


def format_header(anchor: date, mode: ViewMode) -> str:
    """Title shown above the grid for the active view."""
    if mode == ViewMode.DAY:
        return f"{anchor:%A}, {anchor:%B} {anchor.day}, {anchor.year}"
    if mode == ViewMode.WEEK:
        start = anchor - timedelta(days=anchor.weekday())
        end = start + timedelta(days=6)
        return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"
    return f"{anchor:%B} {anchor.year}"


def build_day_column(
    window: VisibleWindow,
    lessons: Iterable[LessonEvent],
    now: datetime,
    config: GridSettings | None = None,
) -> DayColumn:
    """Lay out one day column; overlap resolution never crosses columns."""
    events = assign_columns(layout_events(lessons, window, config))
    today = now.astimezone(window.tz).date()
    return DayColumn(
        date=window.anchor,
        label=f"{window.anchor:%a}",
        window=window,
        events=tuple(events),
        is_today=window.anchor == today,
        now_offset_px=now_offset_px(window, now, config),
    )


def month_counts(lessons: Iterable[LessonEvent], days: list[date], tz: tzinfo) -> dict[date, int]:
    """Lessons per calendar day (by local start date), blocks excluded."""
    counts = Counter(
        lesson.start.astimezone(tz).date()
        for lesson in lessons
        if lesson.kind == EventKind.LESSON
    )
    return {d: counts.get(d, 0) for d in days}


class SchedulingGrid:
    """Interactive scheduling calendar state.

    The host supplies lessons and callbacks; the grid never reads or writes
    storage. Data flows in through ``set_lessons`` and intents flow out
    through ``callbacks``.
    """

    def __init__(
        self,
        lessons: Iterable[LessonEvent] = (),
        *,
        anchor: date | datetime | None = None,
        view: ViewMode = ViewMode.DAY,
        callbacks: CalendarCallbacks | None = None,
        column_width: float = 120.0,
        config: GridSettings | None = None,
    ):
        self.config = (config or settings).validate_grid()
        self.callbacks = callbacks or CalendarCallbacks()
        self._lessons: tuple[LessonEvent, ...] = ()
        self.set_lessons(lessons)
        self._anchor, self._tz = resolve_anchor(anchor, self.config)
        self._view = ViewMode(view)
        self.controller = InteractionController(
            callbacks=self.callbacks,
            column_width=column_width,
            config=self.config,
        )

    @property
    def anchor(self) -> date:
        return self._anchor

    @property
    def view(self) -> ViewMode:
        return self._view

    @property
    def lessons(self) -> tuple[LessonEvent, ...]:
        return self._lessons

    def set_lessons(self, lessons: Iterable[LessonEvent]) -> None:
        self._lessons = tuple(lessons)
        ids = [lesson.id for lesson in self._lessons]
        if len(ids) != len(set(ids)):
            logger.warning("[VIEW] Duplicate lesson ids supplied; id lookups resolve to the last occurrence")
        logger.debug(f"[VIEW] Received {len(self._lessons)} events")

    def set_view(self, view: ViewMode | str) -> None:
        """Switch view mode; the anchor date is preserved."""
        self._view = ViewMode(view)

    def go_to(self, anchor: date | datetime) -> None:
        self._anchor, self._tz = resolve_anchor(anchor, self.config)

    def previous(self) -> date:
        self._anchor = self._shift(-1)
        return self._anchor

    def next(self) -> date:
        self._anchor = self._shift(1)
        return self._anchor

    def today(self, now: datetime | None = None) -> date:
        self._anchor = self._now(now).date()
        return self._anchor

    def open_month_cell(self, day: date) -> None:
        """Clicking a month cell navigates to that day's day view."""
        self._anchor = day
        self._view = ViewMode.DAY
        logger.debug(f"[VIEW] Opened {day.isoformat()} from month view")

    def render(self, now: datetime | None = None) -> TimeGridRendering | MonthRendering:
        """Build the rendering for the current view and rebind the controller."""
        current = self._now(now)
        if self._view == ViewMode.MONTH:
            self.controller.rebind(GridLayout())
            return self._render_month(current)

        anchor = datetime.combine(self._anchor, datetime.min.time(), tzinfo=self._tz)
        if self._view == ViewMode.WEEK:
            windows = build_week_windows(anchor, self.config)
        else:
            windows = [build_visible_window(anchor, self.config)]

        columns = tuple(build_day_column(window, self._lessons, current, self.config) for window in windows)
        rendering = TimeGridRendering(
            mode=self._view,
            header=format_header(self._anchor, self._view),
            rows=tuple(build_time_rows(self.config)),
            columns=columns,
            refresh_seconds=self._refresh_seconds(columns),
        )
        self.controller.rebind(rendering.layout)
        return rendering

    def _render_month(self, now: datetime) -> MonthRendering:
        days = month_grid(self._anchor)
        counts = month_counts(self._lessons, days, self._tz)
        today = now.date()
        cells = tuple(
            MonthCell(
                date=d,
                count=counts[d],
                is_today=d == today,
                is_current_month=d.month == self._anchor.month,
            )
            for d in days
        )
        return MonthRendering(
            header=format_header(self._anchor, ViewMode.MONTH),
            weekday_labels=WEEKDAY_HEADERS,
            cells=cells,
        )

    def _refresh_seconds(self, columns: tuple[DayColumn, ...]) -> int | None:
        if any(col.now_offset_px is not None for col in columns):
            return self.config.now_refresh_seconds
        return None

    def _shift(self, direction: int) -> date:
        if self._view == ViewMode.DAY:
            return self._anchor + timedelta(days=direction)
        if self._view == ViewMode.WEEK:
            return self._anchor + timedelta(weeks=direction)
        return add_months(self._anchor, direction)

    def _now(self, now: datetime | None) -> datetime:
        if now is None:
            return datetime.now(self._tz)
        if now.tzinfo is None:
            return now.replace(tzinfo=self._tz)
        return now.astimezone(self._tz)
