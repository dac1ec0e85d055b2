"""Configuration package."""

from mascot.config.constants import TIMING, TimingConstants
from mascot.config.settings import Settings, get_settings

__all__ = ["TIMING", "TimingConstants", "Settings", "get_settings"]
