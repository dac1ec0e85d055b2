"""Timing Constants - Authored durations for every animation step.

These values mirror the authored visual lengths of each transition. They
are tunable, but every fixed wait must cover the full visual transition
of its effect before the next mutation happens.

Timeline values are in seconds, sequencer waits in milliseconds.
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class TimingConstants:
    """Immutable authored timings."""

    # Main timeline step durations (seconds)
    BLINK_S: Final[float] = 0.2
    EYES_WIDEN_S: Final[float] = 0.8
    HEAD_TILT_S: Final[float] = 1.0
    MOUTH_OPEN_S: Final[float] = 0.8
    BOUNCE_S: Final[float] = 0.6
    TONGUE_OUT_S: Final[float] = 0.6
    TAIL_WIGGLE_S: Final[float] = 0.4
    SETTLE_S: Final[float] = 1.2
    EXCITED_HOLD_S: Final[float] = 2.5
    REVERT_EXPRESSION_S: Final[float] = 0.6
    REVERT_EYES_S: Final[float] = 0.8
    TAIL_WIGGLE_REPEATS: Final[int] = 3
    TONGUE_SWAY_REPEATS: Final[int] = 3

    # Idle loop (seconds)
    IDLE_BREATH_S: Final[float] = 3.0
    IDLE_TAIL_DRIFT_S: Final[float] = 2.5
    IDLE_BLINK_INTERVAL_S: Final[float] = 5.0
    IDLE_BLINK_CLOSE_S: Final[float] = 0.12
    IDLE_BLINK_OPEN_S: Final[float] = 0.15
    IDLE_BLINK_HOLD_S: Final[float] = 0.12

    # Engine autoplay delay after mount (seconds)
    AUTOPLAY_DELAY_S: Final[float] = 1.5

    # Phase sequencer waits (milliseconds)
    ENTRANCE_MS: Final[int] = 800
    STAND_UP_MS: Final[int] = 1000
    WAG_MS: Final[int] = 800
    WAG_FAST_MS: Final[int] = 1200
    CALM_WAG_MS: Final[int] = 600
    WAG_STOP_MS: Final[int] = 400
    RETRACT_TONGUE_MS: Final[int] = 800
    SIT_DOWN_MS: Final[int] = 800
    SUCCESS_HOLD_MS: Final[int] = 3000

    # Signup collaborator (milliseconds)
    PERSIST_DELAY_MS: Final[int] = 500

    # Playback
    FRAME_RATE: Final[int] = 60


# Singleton instance for import convenience
TIMING = TimingConstants()
