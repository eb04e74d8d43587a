"""Scheduling grid settings.

All visual and gesture constants live here so every view shares the same
scale. Values can be overridden through ``COACHCAL_*`` environment variables
or a ``.env`` file.
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coachcal.calendar.errors import GridConfigError


class GridSettings(BaseSettings):
    hour_height_px: float = Field(default=64.0, validation_alias="COACHCAL_HOUR_HEIGHT_PX")
    snap_minutes: int = Field(default=15, validation_alias="COACHCAL_SNAP_MINUTES")
    min_event_height_px: float = Field(default=8.0, validation_alias="COACHCAL_MIN_EVENT_HEIGHT_PX")
    window_start_hour: int = Field(default=5, validation_alias="COACHCAL_WINDOW_START_HOUR")
    window_start_minute: int = Field(default=30, validation_alias="COACHCAL_WINDOW_START_MINUTE")
    window_minutes: int = Field(
        default=1440,
        validation_alias="COACHCAL_WINDOW_MINUTES",
        description="Length of a visible window; always one full day",
    )
    long_press_ms: int = Field(default=500, validation_alias="COACHCAL_LONG_PRESS_MS")
    movement_threshold_px: float = Field(default=10.0, validation_alias="COACHCAL_MOVEMENT_THRESHOLD_PX")
    default_slot_minutes: int = Field(default=30, validation_alias="COACHCAL_DEFAULT_SLOT_MINUTES")
    click_suppress_ms: int = Field(default=300, validation_alias="COACHCAL_CLICK_SUPPRESS_MS")
    now_refresh_seconds: int = Field(
        default=30,
        validation_alias="COACHCAL_NOW_REFRESH_SECONDS",
        description="How often the host should re-render the current-time line",
    )
    small_event_minutes: int = Field(default=20, validation_alias="COACHCAL_SMALL_EVENT_MINUTES")
    default_lesson_color: str = Field(default="#6366F1", validation_alias="COACHCAL_DEFAULT_LESSON_COLOR")
    default_block_color: str = Field(default="#6B7280", validation_alias="COACHCAL_DEFAULT_BLOCK_COLOR")
    timezone: str = Field(default="UTC", validation_alias="COACHCAL_TIMEZONE")
    log_level: str = Field(default="INFO", validation_alias="COACHCAL_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid COACHCAL_LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown COACHCAL_TIMEZONE '{value}'. Defaulting to UTC.")
            return "UTC"
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def window_offset_minutes(self) -> int:
        return self.window_start_hour * 60 + self.window_start_minute

    def validate_grid(self) -> "GridSettings":
        """Check the structural constants the layout math depends on.

        Returns:
            self, so callers can chain it

        Raises:
            GridConfigError: If any constant would make the grid misrender
        """
        details: list[str] = []
        if self.hour_height_px <= 0:
            details.append(f"hour_height_px must be positive, got {self.hour_height_px}")
        if self.snap_minutes <= 0 or 60 % self.snap_minutes != 0:
            details.append(f"snap_minutes must be a positive divisor of 60, got {self.snap_minutes}")
        if self.min_event_height_px < 0:
            details.append(f"min_event_height_px must not be negative, got {self.min_event_height_px}")
        if not 0 <= self.window_start_hour <= 23 or not 0 <= self.window_start_minute <= 59:
            details.append(f"window start {self.window_start_hour}:{self.window_start_minute:02d} is not a time of day")
        if self.window_minutes != 1440:
            details.append(f"window_minutes must be 1440, got {self.window_minutes}")
        if self.default_slot_minutes <= 0:
            details.append(f"default_slot_minutes must be positive, got {self.default_slot_minutes}")
        if self.long_press_ms <= 0:
            details.append(f"long_press_ms must be positive, got {self.long_press_ms}")
        if details:
            raise GridConfigError("INVALID_GRID_SETTINGS", details)
        return self


settings = GridSettings()
