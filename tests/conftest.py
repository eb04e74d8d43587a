"""Root conftest for all tests.

Shared fixtures: grid settings pinned to UTC and a factory for lesson events
anchored on a fixed test day.
"""

from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta

import pytest

from coachcal.calendar.models import EventKind, LessonEvent, LessonStatus
from coachcal.config.settings import GridSettings

TEST_DAY = date(2024, 1, 15)  # a Monday


@pytest.fixture
def grid_settings() -> GridSettings:
    """Default grid constants with the display zone pinned to UTC."""
    return GridSettings(timezone="UTC", log_level="INFO")


@pytest.fixture
def at() -> Callable[..., datetime]:
    """Build a UTC timestamp on the test day (or an offset day)."""

    def _at(hour: int, minute: int = 0, day_offset: int = 0) -> datetime:
        day = TEST_DAY + timedelta(days=day_offset)
        return datetime(day.year, day.month, day.day, hour, minute, tzinfo=UTC)

    return _at


@pytest.fixture
def make_lesson(at) -> Callable[..., LessonEvent]:
    """Factory for lessons given start/end as (hour, minute) pairs."""
    counter = {"n": 0}

    def _make(
        start: tuple[int, int],
        end: tuple[int, int],
        *,
        id: str | None = None,
        day_offset: int = 0,
        end_day_offset: int | None = None,
        kind: EventKind = EventKind.LESSON,
        status: LessonStatus = LessonStatus.SCHEDULED,
        **extra,
    ) -> LessonEvent:
        counter["n"] += 1
        return LessonEvent(
            id=id or f"lesson-{counter['n']}",
            title=extra.pop("title", f"Lesson {counter['n']}"),
            start=at(*start, day_offset=day_offset),
            end=at(*end, day_offset=day_offset if end_day_offset is None else end_day_offset),
            kind=kind,
            status=status,
            **extra,
        )

    return _make
