"""Tests for grid settings."""

from zoneinfo import ZoneInfo

import pytest

from coachcal.calendar.errors import GridConfigError
from coachcal.config.settings import GridSettings


class TestGridSettings:
    def test_defaults(self, grid_settings):
        """Test default grid constants pass validation."""
        assert grid_settings.hour_height_px == 64
        assert grid_settings.snap_minutes == 15
        assert grid_settings.window_offset_minutes == 330
        assert grid_settings.window_minutes == 1440
        assert grid_settings.long_press_ms == 500
        assert grid_settings.movement_threshold_px == 10
        assert grid_settings.validate_grid() is grid_settings

    def test_environment_override(self, monkeypatch):
        """Test COACHCAL_* variables override defaults."""
        monkeypatch.setenv("COACHCAL_HOUR_HEIGHT_PX", "48")
        monkeypatch.setenv("COACHCAL_TIMEZONE", "Europe/Paris")
        config = GridSettings()
        assert config.hour_height_px == 48
        assert config.tz == ZoneInfo("Europe/Paris")

    def test_unknown_timezone_falls_back_to_utc(self):
        """Test unknown timezone falls back to utc."""
        assert GridSettings(timezone="Mars/Olympus_Mons").timezone == "UTC"

    def test_log_level_is_normalized(self):
        """Test log level is normalized."""
        assert GridSettings(log_level="debug").log_level == "DEBUG"
        assert GridSettings(log_level="chatty").log_level == "INFO"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"hour_height_px": 0},
            {"snap_minutes": 0},
            {"snap_minutes": 25},
            {"min_event_height_px": -1},
            {"window_start_hour": 24},
            {"window_minutes": 1380},
            {"default_slot_minutes": 0},
            {"long_press_ms": 0},
        ],
    )
    def test_validate_grid_rejects(self, overrides):
        """Test validate grid rejects."""
        with pytest.raises(GridConfigError) as exc_info:
            GridSettings(**overrides).validate_grid()
        assert exc_info.value.code == "INVALID_GRID_SETTINGS"
        assert len(exc_info.value.details) == 1
