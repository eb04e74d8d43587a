"""Pointer coordinates to grid time slots.

The snapping helpers are pure; ``GridSurface`` is the only piece that knows
about the host's viewport (the bounding rectangle of the grid element) and
turns client coordinates into grid-relative points.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from coachcal.config.settings import GridSettings, settings
from coachcal.calendar.geometry import minutes_to_px, px_to_minutes


@dataclass(frozen=True)
class GridPoint:
    """A point relative to the top-left corner of the time grid."""

    x: float
    y: float


@dataclass(frozen=True)
class GhostPosition:
    """Snapped drag-preview position.

    Attributes:
        minutes: Snapped minutes from the window start
        offset_px: ``minutes`` converted back to a top offset
        day_index: Day column the preview sits in
        clamped: True when the raw pointer position was outside the grid
    """

    minutes: int
    offset_px: float
    day_index: int
    clamped: bool = False


@dataclass(frozen=True)
class GridSurface:
    """Viewport rectangle of the grid element, as reported by the host."""

    left: float
    top: float
    width: float
    height: float
    day_count: int = 1

    @property
    def column_width(self) -> float:
        return self.width / max(self.day_count, 1)

    def to_grid_point(self, client_x: float, client_y: float) -> GridPoint:
        return GridPoint(client_x - self.left, client_y - self.top)

    def contains(self, client_x: float, client_y: float) -> bool:
        return self.left <= client_x < self.left + self.width and self.top <= client_y < self.top + self.height


def snap_minutes(raw_minutes: float, interval: int) -> int:
    """Round to the nearest multiple of ``interval``; exact halves round up."""
    return int(math.floor(raw_minutes / interval + 0.5)) * interval


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def day_index_at(x: float, column_width: float, day_count: int) -> int:
    if column_width <= 0 or day_count <= 1:
        return 0
    return int(clamp(math.floor(x / column_width), 0, day_count - 1))


def snap_point(
    point: GridPoint,
    *,
    column_width: float,
    day_count: int,
    pointer_offset_px: float = 0.0,
    config: GridSettings | None = None,
) -> GhostPosition:
    """Snap a grid-relative pointer position to a slot.

    ``pointer_offset_px`` is the distance from the grab point to the top of
    the dragged box, so the box keeps its position relative to the pointer.
    Results are clamped inside the grid.
    """
    cfg = config or settings
    raw = px_to_minutes(point.y - pointer_offset_px, cfg)
    snapped = snap_minutes(raw, cfg.snap_minutes)
    latest = cfg.window_minutes - cfg.snap_minutes
    minutes = int(clamp(snapped, 0, latest))

    raw_day = math.floor(point.x / column_width) if column_width > 0 else 0
    day = day_index_at(point.x, column_width, day_count)
    clamped = minutes != snapped or (day_count > 1 and raw_day != day)

    return GhostPosition(
        minutes=minutes,
        offset_px=minutes_to_px(minutes, cfg),
        day_index=day,
        clamped=clamped,
    )
