"""
Configuration management for Screw Sort.
Uses pydantic-settings for environment variable parsing.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from screw_sort.gameplay import constants


class Settings(BaseSettings):
    """Game settings loaded from SCREW_SORT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCREW_SORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Slot row
    slot_count: int = Field(
        default=constants.SLOT_COUNT, ge=1,
        description="Number of slots in the holding row"
    )
    match_count: int = Field(
        default=constants.MATCH_COUNT, ge=2,
        description="Same-colored screws needed for a match"
    )
    extra_slots: int = Field(
        default=constants.EXTRA_SLOTS, ge=1,
        description="Slots freed by the extra-slots relief action"
    )

    # Screws and plates
    screw_radius: float = Field(
        default=constants.SCREW_RADIUS, gt=0,
        description="Hit-test radius of a screw in pixels"
    )
    lerp_speed: float = Field(
        default=constants.LERP_SPEED, gt=0, le=1,
        description="Fraction of remaining distance a moving screw covers per 1/60 s"
    )
    gravity: float = Field(
        default=constants.GRAVITY, gt=0,
        description="Falling plate acceleration in px/s^2"
    )

    # Timing and health
    level_time: float = Field(
        default=constants.LEVEL_TIME, gt=0,
        description="Seconds on the clock at the start of each level"
    )
    combo_window_ms: int = Field(
        default=constants.COMBO_WINDOW_MS, ge=0,
        description="Max milliseconds between matches for them to chain"
    )
    max_health: int = Field(
        default=constants.MAX_HEALTH, ge=1,
        description="Hearts at the start of each level"
    )
    interstitial_every: int = Field(
        default=constants.INTERSTITIAL_EVERY, ge=1,
        description="Show an interstitial every N completed levels"
    )

    # Display
    screen_width: int = Field(default=constants.SCREEN_WIDTH, gt=0)
    screen_height: int = Field(default=constants.SCREEN_HEIGHT, gt=0)
    fps: int = Field(default=constants.FPS, gt=0)

    # Audio
    audio_enabled: bool = Field(
        default=True,
        description="Play synthesized sound effects"
    )

    # Logging
    log_level: str = Field(default="INFO")

    @property
    def combo_window(self) -> float:
        """Combo window in seconds."""
        return self.combo_window_ms / 1000.0


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Settings are read once at startup and never change afterwards.
    """
    return Settings()
