"""Visible-window and date-grid helpers.

A coach's day does not start at midnight: each window begins at a fixed
wall-clock offset (05:30 by default) on the anchor date and lasts exactly
one day of elapsed time. Week boundaries are Monday-Sunday; the month grid
is six Sunday-first weeks.
"""

from __future__ import annotations

import calendar
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from coachcal.config.settings import GridSettings, settings
from coachcal.calendar.models import TimeRow, VisibleWindow

MONTH_GRID_CELLS = 42


def resolve_anchor(anchor: date | datetime | None, config: GridSettings | None = None) -> tuple[date, tzinfo]:
    """Split an anchor into its local calendar date and display zone.

    Aware datetimes keep their own zone; naive datetimes, plain dates and
    ``None`` (meaning now) use the configured grid timezone.
    """
    cfg = config or settings
    if anchor is None:
        tz = cfg.tz
        return datetime.now(tz).date(), tz
    if isinstance(anchor, datetime):
        if anchor.tzinfo is None:
            return anchor.date(), cfg.tz
        return anchor.date(), anchor.tzinfo
    return anchor, cfg.tz


def build_visible_window(anchor: date | datetime | None = None, config: GridSettings | None = None) -> VisibleWindow:
    """Compute the visible window for the day containing ``anchor``."""
    cfg = config or settings
    day, tz = resolve_anchor(anchor, cfg)
    local_start = datetime.combine(day, time(cfg.window_start_hour, cfg.window_start_minute), tzinfo=tz)
    start_utc = local_start.astimezone(UTC)
    return VisibleWindow(
        anchor=day,
        start=start_utc,
        end=start_utc + timedelta(minutes=cfg.window_minutes),
        tz=tz,
    )


def format_hour_label(hour: int) -> str:
    """12-hour label for an hour of day, e.g. ``6 AM`` or ``12 PM``."""
    suffix = "AM" if hour < 12 else "PM"
    display = hour % 12 or 12
    return f"{display} {suffix}"


def build_time_rows(config: GridSettings | None = None) -> list[TimeRow]:
    """Rows rendered down the side of the grid.

    A shorter, unlabeled lead-in row covers the minutes before the first full
    hour, then 24 labeled hour rows follow (06:00 through 05:00 by default).
    """
    cfg = config or settings
    rows: list[TimeRow] = []
    offset = cfg.window_offset_minutes
    first_hour = offset // 60
    if offset % 60:
        lead_in_minutes = 60 - offset % 60
        rows.append(
            TimeRow(
                hour=first_hour,
                height_px=cfg.hour_height_px * lead_in_minutes / 60,
                is_lead_in=True,
            )
        )
        first_hour += 1
    for i in range(24):
        hour = (first_hour + i) % 24
        rows.append(TimeRow(hour=hour, height_px=cfg.hour_height_px, label=format_hour_label(hour)))
    return rows


def week_start(d: date) -> date:
    """Return Monday of the calendar week containing d."""
    return d - timedelta(days=d.weekday())


def week_days(d: date) -> list[date]:
    """Return the seven dates, Monday first, of the week containing d."""
    start = week_start(d)
    return [start + timedelta(days=i) for i in range(7)]


def build_week_windows(anchor: date | datetime | None = None, config: GridSettings | None = None) -> list[VisibleWindow]:
    """Seven visible windows, one per day of the Monday-aligned week."""
    cfg = config or settings
    day, tz = resolve_anchor(anchor, cfg)
    windows = []
    for d in week_days(day):
        local = datetime.combine(d, time(cfg.window_start_hour, cfg.window_start_minute), tzinfo=tz)
        windows.append(build_visible_window(local, cfg))
    return windows


def month_grid(d: date) -> list[date]:
    """42 consecutive dates starting on the Sunday on/before the 1st of d's month."""
    first = d.replace(day=1)
    days_since_sunday = (first.weekday() + 1) % 7
    grid_start = first - timedelta(days=days_since_sunday)
    return [grid_start + timedelta(days=i) for i in range(MONTH_GRID_CELLS)]


def add_months(d: date, months: int) -> date:
    """Shift d by whole months, clamping the day to the target month's length."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))
