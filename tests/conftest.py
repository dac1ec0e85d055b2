"""Pytest configuration and shared fixtures."""

import os

import pytest

# Set test environment variables before importing settings
os.environ.update({
    "MASCOT_ENVIRONMENT": "test",
    "MASCOT_LOG_LEVEL": "WARNING",
})

# Real seconds per authored second: the full celebration (~26 s authored)
# finishes in a few dozen milliseconds.
FAST_SCALE = 0.001


@pytest.fixture
def test_settings():
    """Provide fast test settings."""
    from mascot.config.settings import Settings
    return Settings(
        environment="test",
        time_scale=FAST_SCALE,
        frame_rate=60,
        persist_delay_ms=50,
        success_hold_ms=300,
    )


@pytest.fixture
def clock():
    """Provide a fast clock."""
    from mascot.animation.clock import AnimationClock
    return AnimationClock(time_scale=FAST_SCALE, frame_rate=60)


@pytest.fixture
def visual():
    """Provide a visual state at base values."""
    from mascot.animation.elements import VisualState
    return VisualState()


@pytest.fixture
def idle(visual, clock):
    """Provide an idle loop (not started)."""
    from mascot.animation.idle import IdleLoop
    return IdleLoop(visual, clock)


@pytest.fixture
def engine(visual, clock, idle):
    """Provide an engine wired to the idle loop (not mounted)."""
    from mascot.animation.mascot import MascotAnimation
    return MascotAnimation(visual, clock, idle=idle)


@pytest.fixture
def slow_clock():
    """Provide a clock for tests that sample values mid-flight."""
    from mascot.animation.clock import AnimationClock
    return AnimationClock(time_scale=0.01, frame_rate=60)
