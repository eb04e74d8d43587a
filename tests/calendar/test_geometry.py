"""Tests for event geometry (clipping, offsets, heights)."""

from datetime import UTC, date, datetime, timedelta

import pytest

from coachcal.calendar.geometry import layout_events, minutes_between, now_offset_px, place_event
from coachcal.calendar.models import EventKind, LessonStatus
from coachcal.calendar.window import build_visible_window
from coachcal.config.settings import GridSettings


@pytest.fixture
def window(grid_settings):
    return build_visible_window(date(2024, 1, 15), grid_settings)


class TestPlacement:
    """Tests for offset/height computation."""

    def test_offset_and_height_are_linear(self, window, make_lesson, grid_settings):
        """Test offset and height are linear."""
        lesson = make_lesson((10, 0), (11, 30))
        placed = place_event(lesson, window, grid_settings)
        # 10:00 is 4.5 hours after 05:30
        assert placed.top_offset_px == 4.5 * 64
        assert placed.height_px == 1.5 * 64
        assert placed.column_index == 0
        assert placed.column_count == 1

    def test_scale_factor_is_configurable(self, window, make_lesson):
        """Test scale factor is configurable."""
        config = GridSettings(hour_height_px=100)
        placed = place_event(make_lesson((6, 30), (7, 0)), window, config)
        assert placed.top_offset_px == 100
        assert placed.height_px == 50

    def test_event_at_window_start_has_zero_offset(self, window, make_lesson, grid_settings):
        """Test event at window start has zero offset."""
        placed = place_event(make_lesson((5, 30), (6, 0)), window, grid_settings)
        assert placed.top_offset_px == 0

    def test_short_event_gets_minimum_height(self, window, make_lesson, grid_settings):
        """Test short event gets minimum height."""
        placed = place_event(make_lesson((9, 0), (9, 5)), window, grid_settings)
        assert placed.height_px == grid_settings.min_event_height_px
        assert placed.top_offset_px == 3.5 * 64

    def test_zero_duration_event_is_kept(self, window, make_lesson, grid_settings):
        """Test zero duration event is kept."""
        placed = place_event(make_lesson((9, 0), (9, 0)), window, grid_settings)
        assert placed is not None
        assert placed.height_px == grid_settings.min_event_height_px
        assert placed.clipped_start == placed.clipped_end

    def test_end_before_start_is_clamped_not_dropped(self, window, make_lesson, grid_settings):
        """Test end before start is clamped not dropped."""
        lesson = make_lesson((9, 0), (8, 0))
        rendered = layout_events([lesson], window, grid_settings)
        assert len(rendered) == 1
        placed = rendered[0]
        assert placed.height_px == grid_settings.min_event_height_px
        assert placed.top_offset_px == 3.5 * 64
        assert placed.clipped_end >= placed.clipped_start


class TestClipping:
    """Tests for window intersection and clipping."""

    def test_events_outside_window_are_excluded(self, window, make_lesson, grid_settings):
        """Test events outside window are excluded."""
        before = make_lesson((4, 0), (5, 30))  # ends exactly at window start
        after = make_lesson((5, 30), (6, 30), day_offset=1)  # starts exactly at window end
        inside = make_lesson((12, 0), (13, 0))
        rendered = layout_events([before, after, inside], window, grid_settings)
        assert [ev.id for ev in rendered] == [inside.id]

    def test_event_straddling_start_is_clipped(self, window, make_lesson, grid_settings):
        """Test event straddling start is clipped."""
        placed = place_event(make_lesson((5, 0), (6, 30)), window, grid_settings)
        assert placed.clipped_start == window.start
        assert placed.top_offset_px == 0
        assert placed.height_px == 64

    def test_event_straddling_end_is_clipped(self, window, make_lesson, grid_settings):
        """Test event straddling end is clipped."""
        lesson = make_lesson((4, 30), (6, 0), day_offset=1)
        placed = place_event(lesson, window, grid_settings)
        assert placed.clipped_end == window.end
        assert placed.height_px == 64

    def test_late_night_lesson_belongs_to_previous_day(self, window, make_lesson, grid_settings):
        """Test late night lesson belongs to previous day."""
        lesson = make_lesson((1, 0), (2, 0), day_offset=1)
        placed = place_event(lesson, window, grid_settings)
        assert placed is not None
        assert placed.top_offset_px == 19.5 * 64

    def test_clipped_range_always_inside_window(self, window, make_lesson, grid_settings):
        """Test clipped range always inside window."""
        lessons = [
            make_lesson((0, 0), (23, 0)),
            make_lesson((5, 0), (5, 45)),
            make_lesson((23, 0), (8, 0), end_day_offset=1),
            make_lesson((3, 0), (9, 0), day_offset=1),
            make_lesson((12, 0), (12, 0)),
        ]
        for ev in layout_events(lessons, window, grid_settings):
            assert window.start <= ev.clipped_start <= ev.clipped_end <= window.end


class TestDisplayAttributes:
    """Tests for colors and style classes."""

    @pytest.mark.parametrize(
        ("status", "css"),
        [
            (LessonStatus.SCHEDULED, "scheduled"),
            (LessonStatus.COMPLETED, "completed"),
            (LessonStatus.CANCELLED, "cancelled"),
            (LessonStatus.NO_SHOW, "noshow"),
        ],
    )
    def test_status_classes(self, status, css, window, make_lesson, grid_settings):
        """Test each status maps to its style class."""
        placed = place_event(make_lesson((9, 0), (10, 0), status=status), window, grid_settings)
        assert placed.style_class == css

    def test_block_class_and_default_color(self, window, make_lesson, grid_settings):
        """Test block class and default color."""
        placed = place_event(make_lesson((9, 0), (10, 0), kind=EventKind.BLOCK), window, grid_settings)
        assert placed.style_class == "block"
        assert placed.color == "#6B7280"

    def test_color_hint_wins(self, window, make_lesson, grid_settings):
        """Test color hint wins."""
        placed = place_event(make_lesson((9, 0), (10, 0), color="#FF0000"), window, grid_settings)
        assert placed.color == "#FF0000"

    def test_lesson_default_color(self, window, make_lesson, grid_settings):
        """Test lesson default color."""
        placed = place_event(make_lesson((9, 0), (10, 0)), window, grid_settings)
        assert placed.color == grid_settings.default_lesson_color

    def test_small_flag(self, window, make_lesson, grid_settings):
        """Test events of 20 minutes or less are flagged small."""
        short = place_event(make_lesson((9, 0), (9, 20)), window, grid_settings)
        longer = place_event(make_lesson((9, 0), (9, 30)), window, grid_settings)
        assert short.is_small is True
        assert longer.is_small is False


class TestNowIndicator:
    """Tests for the current-time line offset."""

    def test_inside_window(self, window, grid_settings):
        """Test inside window."""
        now = datetime(2024, 1, 15, 6, 30, tzinfo=UTC)
        assert now_offset_px(window, now, grid_settings) == 64

    def test_outside_window(self, window, grid_settings):
        """Test outside window."""
        assert now_offset_px(window, datetime(2024, 1, 15, 5, 0, tzinfo=UTC), grid_settings) is None
        assert now_offset_px(window, window.end + timedelta(minutes=1), grid_settings) is None

    def test_minutes_between_handles_mixed_zones(self):
        """Test minutes between handles mixed zones."""
        a = datetime(2024, 1, 15, 10, 0, tzinfo=UTC)
        b = datetime(2024, 1, 15, 10, 30)
        assert minutes_between(a, b) == 30
