"""Event geometry: place lessons inside a visible window.

Offsets and heights are a single linear function of minutes
(``hour_height_px`` per hour), shared by every view. Heights have a floor so
zero-length or malformed bookings still render and stay tappable; the floor
never moves an event's top offset.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from loguru import logger

from coachcal.config.settings import GridSettings, settings
from coachcal.calendar.models import EventKind, LessonEvent, LessonStatus, RenderedEvent, VisibleWindow, ensure_utc

STATUS_CLASSES = {
    LessonStatus.SCHEDULED: "scheduled",
    LessonStatus.COMPLETED: "completed",
    LessonStatus.CANCELLED: "cancelled",
    LessonStatus.NO_SHOW: "noshow",
}


def minutes_between(a: datetime, b: datetime) -> float:
    """Elapsed minutes from a to b (negative if b is earlier)."""
    return (ensure_utc(b) - ensure_utc(a)).total_seconds() / 60


def minutes_to_px(minutes: float, config: GridSettings | None = None) -> float:
    cfg = config or settings
    return minutes / 60 * cfg.hour_height_px


def px_to_minutes(px: float, config: GridSettings | None = None) -> float:
    cfg = config or settings
    return px / cfg.hour_height_px * 60


def style_class_for(event: LessonEvent) -> str:
    if event.kind == EventKind.BLOCK:
        return "block"
    return STATUS_CLASSES.get(event.status, "scheduled")


def color_for(event: LessonEvent, config: GridSettings | None = None) -> str:
    cfg = config or settings
    if event.color:
        return event.color
    if event.kind == EventKind.BLOCK:
        return cfg.default_block_color
    return cfg.default_lesson_color


def place_event(event: LessonEvent, window: VisibleWindow, config: GridSettings | None = None) -> RenderedEvent | None:
    """Clip one event to the window and compute its box.

    Returns:
        RenderedEvent, or None if the event does not intersect the window
    """
    cfg = config or settings
    start = event.start
    # Malformed records (end before start) are treated as zero-length at start
    end = max(event.end, start)
    if end <= window.start or start >= window.end:
        return None

    clipped_start = max(start, window.start)
    clipped_end = min(end, window.end)

    top = minutes_to_px(minutes_between(window.start, clipped_start), cfg)
    duration = max(0.0, minutes_between(clipped_start, clipped_end))
    height = max(cfg.min_event_height_px, minutes_to_px(duration, cfg))

    return RenderedEvent(
        event=event,
        clipped_start=clipped_start,
        clipped_end=clipped_end,
        top_offset_px=top,
        height_px=height,
        color=color_for(event, cfg),
        style_class=style_class_for(event),
        is_small=height <= minutes_to_px(cfg.small_event_minutes, cfg),
    )


def layout_events(
    events: Iterable[LessonEvent],
    window: VisibleWindow,
    config: GridSettings | None = None,
) -> list[RenderedEvent]:
    """Place every event that intersects the window, preserving input order.

    Column fields are left at their defaults; see ``overlap.assign_columns``.
    """
    cfg = config or settings
    rendered: list[RenderedEvent] = []
    degenerate = 0
    for event in events:
        if event.end <= event.start:
            degenerate += 1
            logger.warning(
                f"[GRID] Event {event.id} has non-positive duration ({event.start.isoformat()} -> {event.end.isoformat()}); "
                "rendering at minimum height"
            )
        placed = place_event(event, window, cfg)
        if placed is not None:
            rendered.append(placed)

    logger.debug(
        f"[GRID] Placed {len(rendered)} events in window starting {window.local_start.isoformat()}",
        degenerate=degenerate,
    )
    return rendered


def now_offset_px(window: VisibleWindow, now: datetime, config: GridSettings | None = None) -> float | None:
    """Pixel offset of the current-time line, or None when now is outside the window."""
    m = minutes_between(window.start, now)
    if m < 0 or m > window.total_minutes:
        return None
    return minutes_to_px(m, config)
