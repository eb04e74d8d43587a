"""Scheduling grid data model.

Host-facing records (lessons, blocks) and the intents emitted back to the
host are pydantic models so they can be validated from JSON and serialized.
Everything derived during a render pass (windows, rows, rendered events,
layout snapshots) is an immutable dataclass rebuilt on every input change.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta, tzinfo
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def ensure_utc(dt: datetime) -> datetime:
    """Normalize a timestamp to UTC, treating naive values as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


class LessonStatus(StrEnum):
    """Display-only lesson status."""

    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    NO_SHOW = "No Show"

    @classmethod
    def _missing_(cls, value: object) -> LessonStatus | None:
        if not isinstance(value, str):
            return None
        key = value.replace(" ", "").replace("_", "").replace("-", "").lower()
        aliases = {
            "scheduled": cls.SCHEDULED,
            "completed": cls.COMPLETED,
            "cancelled": cls.CANCELLED,
            "canceled": cls.CANCELLED,
            "noshow": cls.NO_SHOW,
        }
        return aliases.get(key)


class EventKind(StrEnum):
    """What a calendar entry represents."""

    LESSON = "lesson"
    BLOCK = "block"  # personal, non-client time


class LessonEvent(BaseModel):
    """A lesson or calendar block as supplied by the host.

    The grid treats these as read-only. ``resource`` carries the host's own
    record untouched so it can be handed back in selection/move intents.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(description="Opaque identifier, unique among rendered events")
    title: str = Field(default="", description="Display label")
    start: datetime = Field(validation_alias=AliasChoices("start", "start_time"))
    end: datetime = Field(validation_alias=AliasChoices("end", "end_time"))
    status: LessonStatus = Field(default=LessonStatus.SCHEDULED)
    color: str | None = Field(default=None, validation_alias=AliasChoices("color", "color_hint", "colorHint"))
    is_recurring: bool = Field(default=False, validation_alias=AliasChoices("is_recurring", "isRecurring"))
    kind: EventKind = Field(default=EventKind.LESSON)
    resource: Any = Field(default=None, exclude=True)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("start", "end")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def duration(self) -> timedelta:
        """Raw duration; may be zero or negative for malformed records."""
        return self.end - self.start


@dataclass(frozen=True)
class VisibleWindow:
    """Time range rendered by a single day column.

    ``start`` and ``end`` are UTC-normalized so ``end - start`` is exact
    elapsed time. ``tz`` is the zone the column is displayed in.
    """

    anchor: date
    start: datetime
    end: datetime
    tz: tzinfo

    @property
    def total_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60

    @property
    def local_start(self) -> datetime:
        return self.start.astimezone(self.tz)

    @property
    def local_end(self) -> datetime:
        return self.end.astimezone(self.tz)

    def contains(self, moment: datetime) -> bool:
        moment = ensure_utc(moment)
        return self.start <= moment < self.end

    def at_minutes(self, minutes: float) -> datetime:
        """Local timestamp ``minutes`` of elapsed time after the window start."""
        return (self.start + timedelta(minutes=minutes)).astimezone(self.tz)


@dataclass(frozen=True)
class TimeRow:
    """One rendered hour row; the lead-in row is shorter and unlabeled."""

    hour: int
    height_px: float
    is_lead_in: bool = False
    label: str | None = None


@dataclass(frozen=True)
class RenderedEvent:
    """An event placed inside one visible window."""

    event: LessonEvent
    clipped_start: datetime
    clipped_end: datetime
    top_offset_px: float
    height_px: float
    color: str
    style_class: str
    is_small: bool = False
    column_index: int = 0
    column_count: int = 1

    @property
    def id(self) -> str:
        return self.event.id

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def status(self) -> LessonStatus:
        return self.event.status

    @property
    def kind(self) -> EventKind:
        return self.event.kind

    @property
    def is_recurring(self) -> bool:
        return self.event.is_recurring

    @property
    def clipped_minutes(self) -> float:
        return (self.clipped_end - self.clipped_start).total_seconds() / 60

    @property
    def bottom_px(self) -> float:
        return self.top_offset_px + self.height_px

    def with_columns(self, column_index: int, column_count: int) -> RenderedEvent:
        return replace(self, column_index=column_index, column_count=column_count)


@dataclass(frozen=True)
class GridLayout:
    """Snapshot of one render pass of the time grid.

    ``windows[i]`` and ``columns[i]`` describe day column ``i``; the day view
    has a single column, the week view seven.
    """

    windows: tuple[VisibleWindow, ...] = ()
    columns: tuple[tuple[RenderedEvent, ...], ...] = ()
    _by_id: dict[str, RenderedEvent] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Duplicate ids resolve to the last event seen
        index = {ev.id: ev for column in self.columns for ev in column}
        object.__setattr__(self, "_by_id", index)

    @property
    def day_count(self) -> int:
        return len(self.windows)

    def find(self, event_id: str, day: int | None = None) -> RenderedEvent | None:
        """Look up a rendered event by id.

        An event crossing the window boundary renders once per day column
        under the same id, so pass ``day`` to get the piece in that column.
        Without it the last piece seen wins.
        """
        if day is None:
            return self._by_id.get(event_id)
        if not 0 <= day < len(self.columns):
            return None
        for ev in reversed(self.columns[day]):
            if ev.id == event_id:
                return ev
        return None

    def hit_test(self, x: float, y: float, column_width: float) -> RenderedEvent | None:
        """Return the topmost event box under a grid-relative point."""
        if not self.columns or column_width <= 0:
            return None
        day = min(max(math.floor(x / column_width), 0), len(self.columns) - 1)
        x_in_day = x - day * column_width
        for ev in reversed(self.columns[day]):
            width = column_width / ev.column_count
            left = ev.column_index * width
            if ev.top_offset_px <= y < ev.bottom_px and left <= x_in_day < left + width:
                return ev
        return None


@dataclass(frozen=True)
class MonthCell:
    """One of the 42 cells of the month grid."""

    date: date
    count: int
    is_today: bool
    is_current_month: bool


class SlotSelection(BaseModel):
    """Intent: create a new lesson in an empty slot."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    day_index: int = 0


class EventSelection(BaseModel):
    """Intent: open an existing lesson or block."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    resource: Any = None
    kind: EventKind = EventKind.LESSON


class EventMove(BaseModel):
    """Intent: reschedule an existing lesson or block, duration preserved."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    resource: Any = None
    new_start: datetime
    new_end: datetime
    kind: EventKind = EventKind.LESSON


Intent = SlotSelection | EventSelection | EventMove
