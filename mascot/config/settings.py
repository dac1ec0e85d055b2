"""Application Settings - Environment-based configuration.

Uses Pydantic Settings for validation and type coercion.
All variables are read with the ``MASCOT_`` prefix, e.g. ``MASCOT_TIME_SCALE``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mascot.config.constants import TIMING


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MASCOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_json: bool = Field(default=False, description="Render logs as JSON lines")
    environment: Literal["development", "test", "production"] = Field(
        default="development", description="Environment name"
    )

    # Playback
    time_scale: float = Field(
        default=1.0,
        gt=0.0,
        le=100.0,
        description="Real seconds per authored second (1.0 = authored speed)",
    )
    frame_rate: int = Field(
        default=TIMING.FRAME_RATE, ge=10, le=240, description="Timeline render ticks per second"
    )

    # Idle loop
    blink_interval_s: float = Field(
        default=TIMING.IDLE_BLINK_INTERVAL_S,
        gt=0.0,
        description="Authored seconds between idle blinks",
    )

    # Engine
    autoplay: bool = Field(default=False, description="Play the mascot timeline after mount")
    autoplay_delay_s: float = Field(
        default=TIMING.AUTOPLAY_DELAY_S, ge=0.0, description="Autoplay delay after mount"
    )

    # Sequencer
    success_hold_ms: int = Field(
        default=TIMING.SUCCESS_HOLD_MS,
        ge=0,
        le=60_000,
        description="How long the success indicator stays visible",
    )
    anchor_policy: Literal["release", "hold"] = Field(
        default="release",
        description=(
            "What happens to is_playing when the visual anchor is missing: "
            "release clears it after the abort, hold keeps it set"
        ),
    )

    # Signup
    persist_delay_ms: int = Field(
        default=TIMING.PERSIST_DELAY_MS,
        ge=0,
        le=10_000,
        description="Simulated persistence latency",
    )

    # Observability
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics")

    @field_validator("anchor_policy", mode="before")
    @classmethod
    def normalize_anchor_policy(cls, v: str) -> str:
        """Accept any casing for the anchor policy."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
