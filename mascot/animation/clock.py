"""Animation Clock - Monotonic time source for all playback.

Every duration in the system is authored in seconds at natural speed.
The clock converts between authored time and real time with a single
``time_scale`` factor, so tests and demos can run the full choreography
quickly without changing any authored value.

The clock is an explicitly owned value: each application builds one and
hands it to the timelines, the idle loop and the phase sequencer.
"""

import asyncio
import time
from typing import Final

from mascot.exceptions import InvalidConfigError


class AnimationClock:
    """Scaled monotonic clock for timeline playback.

    Usage:
        clock = AnimationClock(time_scale=0.01, frame_rate=60)

        start = clock.now()
        await clock.sleep(0.8)          # 0.8 authored seconds
        elapsed = clock.now() - start   # ~0.8
    """

    NS_PER_S: Final[int] = 1_000_000_000

    def __init__(self, time_scale: float = 1.0, frame_rate: int = 60) -> None:
        if time_scale <= 0:
            raise InvalidConfigError("time_scale", time_scale, "must be positive")
        if frame_rate <= 0:
            raise InvalidConfigError("frame_rate", frame_rate, "must be positive")
        self._time_scale = time_scale
        self._frame_rate = frame_rate
        self._origin_ns = time.monotonic_ns()

    def now(self) -> float:
        """Authored seconds elapsed since the clock was created."""
        elapsed_s = (time.monotonic_ns() - self._origin_ns) / self.NS_PER_S
        return elapsed_s / self._time_scale

    async def sleep(self, authored_s: float) -> None:
        """Suspend for an authored duration."""
        await asyncio.sleep(max(0.0, authored_s) * self._time_scale)

    async def sleep_ms(self, authored_ms: int) -> None:
        """Suspend for an authored duration given in milliseconds."""
        await self.sleep(authored_ms / 1000.0)

    async def next_frame(self) -> None:
        """Suspend until the next render tick."""
        await self.sleep(self.frame_interval_s)

    @property
    def time_scale(self) -> float:
        """Real seconds per authored second."""
        return self._time_scale

    @property
    def frame_rate(self) -> int:
        """Render ticks per authored second."""
        return self._frame_rate

    @property
    def frame_interval_s(self) -> float:
        """Authored seconds between render ticks."""
        return 1.0 / self._frame_rate
