"""Idle Loop - Ambient breathing motion and periodic blinks.

While no main timeline is playing the mascot is never perfectly still:
- Body breathes (slight vertical scale)
- Head bobs (slight vertical offset)
- Tail drifts (slight rotation)
All three run forever, reversing each cycle.

Independently, a blink is scheduled every few seconds. A blink is skipped
whenever the loop is paused or the busy predicate reports a main
timeline in flight, so the eyelids are never driven by two timelines.

The idle loop shares properties with the main timeline. It does not
compose with it: the owner pauses the loop before the main timeline's
first write and resumes it afterwards.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable

from mascot.animation.clock import AnimationClock
from mascot.animation.elements import Element, Prop, VisualState
from mascot.animation.timeline import Timeline
from mascot.config.constants import TIMING
from mascot.observability.logging import get_logger
from mascot.observability.metrics import record_blink

logger = get_logger(__name__)


@dataclass
class BlinkEvent:
    """Record of a fired blink."""

    seq: int
    t_s: float


class IdleLoop:
    """Perpetual ambient animation with a periodic blink side effect.

    Usage:
        idle = IdleLoop(visual, clock, is_busy=lambda: engine.is_playing)
        idle.start()

        idle.pause()    # hand properties to the main timeline
        idle.resume()   # take them back

        idle.stop()
    """

    def __init__(
        self,
        visual: VisualState,
        clock: AnimationClock,
        is_busy: Callable[[], bool] | None = None,
        blink_interval_s: float = TIMING.IDLE_BLINK_INTERVAL_S,
        on_blink: Callable[[BlinkEvent], None] | None = None,
    ) -> None:
        self._visual = visual
        self._clock = clock
        self._is_busy = is_busy or (lambda: False)
        self._blink_interval_s = blink_interval_s
        self._on_blink = on_blink

        self._timeline: Timeline | None = None
        self._blink_timeline: Timeline | None = None
        self._blink_task: asyncio.Task | None = None
        self._running = False
        self._paused = False

        self._blinks = 0
        self._pause_count = 0
        self._resume_count = 0

    def _build(self) -> Timeline:
        tl = Timeline("idle", visual=self._visual, clock=self._clock, repeat=-1, yoyo=True)
        tl.to(
            Element.BODY,
            {Prop.SCALE_Y: 1.015},
            TIMING.IDLE_BREATH_S,
            ease="sine.inOut",
            position=0,
        )
        tl.to(Element.HEAD, {Prop.Y: -1.5}, TIMING.IDLE_BREATH_S, ease="sine.inOut", position=0)
        tl.to(
            Element.TAIL,
            {Prop.ROTATE: 2},
            TIMING.IDLE_TAIL_DRIFT_S,
            ease="sine.inOut",
            position=0,
        )
        return tl

    def start(self) -> None:
        """Start the ambient loop and the blink scheduler. Idempotent."""
        if self._running:
            return

        self._running = True
        self._paused = False
        self._timeline = self._build()
        self._timeline.play()
        self._blink_task = asyncio.create_task(self._blink_loop(), name="idle:blink")
        logger.debug("idle_started", event_type="idle.started")

    def stop(self) -> None:
        """Stop everything. Idempotent."""
        if not self._running:
            return

        self._running = False
        if self._timeline is not None:
            self._timeline.kill()
            self._timeline = None
        self._kill_blink()
        if self._blink_task is not None:
            self._blink_task.cancel()
            self._blink_task = None
        logger.debug("idle_stopped", event_type="idle.stopped")

    def pause(self) -> bool:
        """Freeze ambient motion and cut any blink in flight. Idempotent.

        Returns:
            True if the loop was running and is now paused
        """
        if not self._running or self._paused:
            return False

        self._paused = True
        self._pause_count += 1
        if self._timeline is not None:
            self._timeline.pause()
        self._kill_blink()
        logger.debug("idle_paused", event_type="idle.paused")
        return True

    def resume(self) -> bool:
        """Continue ambient motion from where it was paused. Idempotent."""
        if not self._running or not self._paused:
            return False

        self._paused = False
        self._resume_count += 1
        if self._timeline is not None:
            self._timeline.resume()
        logger.debug("idle_resumed", event_type="idle.resumed")
        return True

    def restart(self) -> bool:
        """Resume and rewind ambient motion to its first frame."""
        resumed = self.resume()
        if self._running and self._timeline is not None:
            self._timeline.restart()
        return resumed

    def _kill_blink(self) -> None:
        if self._blink_timeline is not None:
            self._blink_timeline.kill()
            self._blink_timeline = None

    def _blink(self) -> None:
        self._blinks += 1
        tl = Timeline(f"blink-{self._blinks}", visual=self._visual, clock=self._clock)
        tl.to(Element.EYELIDS, {Prop.OPACITY: 1}, TIMING.IDLE_BLINK_CLOSE_S, ease="sine.in")
        tl.to(
            Element.EYELIDS,
            {Prop.OPACITY: 0},
            TIMING.IDLE_BLINK_OPEN_S,
            ease="sine.out",
            delay=TIMING.IDLE_BLINK_HOLD_S,
        )
        self._blink_timeline = tl
        tl.play()
        record_blink(fired=True)
        if self._on_blink is not None:
            self._on_blink(BlinkEvent(seq=self._blinks, t_s=self._clock.now()))

    async def _blink_loop(self) -> None:
        """Background loop scheduling blinks."""
        while self._running:
            try:
                await self._clock.sleep(self._blink_interval_s)

                if not self._running:
                    break

                if self._paused or self._is_busy():
                    record_blink(fired=False)
                    continue

                self._blink()

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.warning("idle_blink_error", error=str(e))
                continue

    @property
    def is_running(self) -> bool:
        """Whether the loop has been started."""
        return self._running

    @property
    def is_paused(self) -> bool:
        """Whether ambient motion is frozen."""
        return self._paused

    @property
    def blink_count(self) -> int:
        """Blinks fired so far."""
        return self._blinks

    @property
    def pause_count(self) -> int:
        """Effective pause() calls."""
        return self._pause_count

    @property
    def resume_count(self) -> int:
        """Effective resume() calls."""
        return self._resume_count

    @property
    def timeline(self) -> Timeline | None:
        """The ambient timeline (None when stopped)."""
        return self._timeline
