"""Mascot Animation - The nested celebratory timeline.

Builds and plays the fixed recipe:
1. Blink
2. Eyes widen
3. Head tilts forward (ears follow)
4. Mouth opens, eyes swap to the happy expression
5. Excited bounce with squash and stretch (floor shadow follows)
6. Tongue extends and sways
7. Tail wiggle (nested timeline, 3 repetitions)
8. Settle back to neutral
9. Hold the excited expression
10. Revert the expression

Ownership rules:
- The idle loop is paused before the first write of a run
- It is resumed exactly once: after on_complete (success) or by reset()
  after a kill (cancellation)
- play() is ignored while a run is in flight or while unmounted
"""

import asyncio
from enum import Enum
from typing import Callable

from mascot.animation.clock import AnimationClock
from mascot.animation.elements import Element, Prop, VisualState
from mascot.animation.idle import IdleLoop
from mascot.animation.timeline import Timeline
from mascot.config.constants import TIMING
from mascot.observability.logging import TimelineLogger, get_logger

logger = get_logger(__name__)


class MascotPhase(Enum):
    """Observable marker of the step the mascot timeline is in."""

    IDLE = "idle"
    BLINK = "blink"
    EYES_WIDEN = "eyes-widen"
    HEAD_TILT = "head-tilt"
    MOUTH_OPEN = "mouth-open"
    BOUNCE = "bounce"
    TONGUE_OUT = "tongue-out"
    TAIL_WIGGLE = "tail-wiggle"
    SETTLE = "settle"


def build_tail_wiggle(repeats: int = TIMING.TAIL_WIGGLE_REPEATS) -> Timeline:
    """Self-contained tail wiggle block, inserted into the parent as one unit."""
    wiggle = Timeline("tail-wiggle")
    for _ in range(repeats):
        wiggle.to(Element.TAIL, {Prop.ROTATE: 12}, TIMING.TAIL_WIGGLE_S, ease="sine.inOut")
        wiggle.to(Element.TAIL, {Prop.ROTATE: -8}, TIMING.TAIL_WIGGLE_S, ease="sine.inOut")
    return wiggle


class MascotAnimation:
    """Timeline engine component for the celebrating mascot.

    Usage:
        engine = MascotAnimation(visual, clock, idle=idle, on_complete=done)
        engine.mount()

        engine.play()           # ignored if already playing
        await engine.wait()

        engine.kill()           # cancel mid-flight
        engine.reset()          # restore base pose, resume idle

        engine.unmount()
    """

    def __init__(
        self,
        visual: VisualState,
        clock: AnimationClock,
        idle: IdleLoop | None = None,
        on_complete: Callable[[], None] | None = None,
        on_phase_change: Callable[[MascotPhase], None] | None = None,
        autoplay: bool = False,
        autoplay_delay_s: float = TIMING.AUTOPLAY_DELAY_S,
    ) -> None:
        self._visual = visual
        self._clock = clock
        self._idle = idle
        self._on_complete = on_complete
        self._on_phase_change = on_phase_change
        self._autoplay = autoplay
        self._autoplay_delay_s = autoplay_delay_s

        self._timeline: Timeline | None = None
        self._phase = MascotPhase.IDLE
        self._playing = False
        self._mounted = False
        self._dirty = False
        self._idle_held = False
        self._autoplay_task: asyncio.Task | None = None
        self._completions = 0
        self._logger = TimelineLogger("mascot")

    # ------------------------------------------------------------------
    # Mount lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Attach to the visual tree: start idling, schedule autoplay."""
        if self._mounted:
            return
        self._mounted = True
        if self._idle is not None:
            self._idle.start()
        if self._autoplay:
            self._autoplay_task = asyncio.create_task(self._autoplay_after_delay())

    def unmount(self) -> None:
        """Detach: cancel autoplay, kill playback, stop idling."""
        if not self._mounted:
            return
        self.kill()
        if self._idle is not None:
            self._idle.stop()
        self._idle_held = False
        self._mounted = False

    def _cancel_autoplay(self) -> None:
        if self._autoplay_task is not None:
            self._autoplay_task.cancel()
            self._autoplay_task = None

    async def _autoplay_after_delay(self) -> None:
        await self._clock.sleep(self._autoplay_delay_s)
        self._autoplay_task = None
        self.play()

    # ------------------------------------------------------------------
    # Recipe
    # ------------------------------------------------------------------

    def build(self) -> Timeline:
        """Construct the celebration timeline (not started)."""
        t = TIMING
        tl = Timeline(
            "mascot",
            visual=self._visual,
            clock=self._clock,
            on_complete=self._handle_complete,
        )

        # Blink
        tl.to(Element.EYELIDS, {Prop.OPACITY: 1}, t.BLINK_S, ease="sine.in")
        tl.to(Element.EYELIDS, {Prop.OPACITY: 0}, t.BLINK_S * 1.5, ease="sine.out")
        tl.call(lambda: self._set_phase(MascotPhase.EYES_WIDEN), position="+=0.3")

        # Eyes widen
        tl.to(Element.PUPILS, {Prop.SCALE: 1.15}, t.EYES_WIDEN_S, ease="power2.out")
        tl.to(Element.EYE_WHITES, {Prop.SCALE: 1.08}, t.EYES_WIDEN_S, ease="power2.out", position="<")
        tl.call(lambda: self._set_phase(MascotPhase.HEAD_TILT), position="+=0.2")

        # Head tilts forward
        tl.to(Element.HEAD, {Prop.ROTATE: 4, Prop.Y: -4}, t.HEAD_TILT_S, ease="power1.inOut")
        tl.to(Element.EARS, {Prop.ROTATE: -2}, t.HEAD_TILT_S, ease="power1.inOut", position="<0.15")
        tl.call(lambda: self._set_phase(MascotPhase.MOUTH_OPEN), position="+=0.3")

        # Mouth opens, happy eyes
        tl.to(Element.EYES, {Prop.OPACITY: 0}, t.MOUTH_OPEN_S * 0.6, ease="power1.inOut")
        tl.to(Element.HAPPY_EYES, {Prop.OPACITY: 1}, t.MOUTH_OPEN_S * 0.6, ease="power1.inOut", position="<")
        tl.to(Element.MOUTH_CLOSED, {Prop.OPACITY: 0}, t.MOUTH_OPEN_S * 0.4, ease="power1.inOut", position="<")
        tl.to(Element.MOUTH_OPEN, {Prop.OPACITY: 1}, t.MOUTH_OPEN_S, ease="power2.out", position="<0.15")
        tl.call(lambda: self._set_phase(MascotPhase.BOUNCE), position="+=0.4")

        # Squash, then stretch up
        tl.to(Element.MASCOT, {Prop.SCALE_Y: 0.94, Prop.SCALE_X: 1.04}, t.BOUNCE_S * 0.5, ease="power1.in")
        tl.to(Element.FLOOR, {Prop.SCALE_X: 1.2}, t.BOUNCE_S * 0.5, ease="power1.in", position="<")
        tl.to(
            Element.MASCOT,
            {Prop.SCALE_Y: 1.06, Prop.SCALE_X: 0.97, Prop.Y: -15},
            t.BOUNCE_S,
            ease="power2.out",
        )
        tl.to(Element.FLOOR, {Prop.SCALE_X: 0.8, Prop.OPACITY: 0.25}, t.BOUNCE_S, ease="power2.out", position="<")
        tl.call(lambda: self._set_phase(MascotPhase.TONGUE_OUT), position="+=0.2")

        # Tongue out with sway
        tl.to(Element.TONGUE, {Prop.SCALE_Y: 1.08}, t.TONGUE_OUT_S, ease="power2.out")
        tl.to(
            Element.TONGUE,
            {Prop.ROTATE: 3},
            t.TONGUE_OUT_S,
            ease="sine.inOut",
            yoyo=True,
            repeat=t.TONGUE_SWAY_REPEATS,
        )
        tl.call(lambda: self._set_phase(MascotPhase.TAIL_WIGGLE), position="+=0.3")

        tl.add(build_tail_wiggle())

        # Land and settle
        tl.call(lambda: self._set_phase(MascotPhase.SETTLE), position="+=0.3")
        tl.to(Element.MASCOT, {Prop.SCALE_Y: 0.97, Prop.SCALE_X: 1.02, Prop.Y: 0}, t.SETTLE_S * 0.4, ease="power1.in")
        tl.to(Element.FLOOR, {Prop.SCALE_X: 1.08, Prop.OPACITY: 0.4}, t.SETTLE_S * 0.4, ease="power1.in", position="<")
        tl.to(Element.MASCOT, {Prop.SCALE_Y: 1, Prop.SCALE_X: 1}, t.SETTLE_S, ease="power2.out")
        tl.to(Element.FLOOR, {Prop.SCALE_X: 1, Prop.OPACITY: 0.15}, t.SETTLE_S, ease="power2.out", position="<")
        tl.to(Element.HEAD, {Prop.ROTATE: 0, Prop.Y: 0}, t.SETTLE_S, ease="power2.out", position="<")
        tl.to(Element.EARS, {Prop.ROTATE: 0}, t.SETTLE_S, ease="power2.out", position="<")
        tl.to(Element.TAIL, {Prop.ROTATE: 0}, t.SETTLE_S * 1.2, ease="power2.out", position="<")

        # Keep the excited expression for a moment
        tl.hold(t.EXCITED_HOLD_S)

        # Back to the normal expression
        tl.to(Element.HAPPY_EYES, {Prop.OPACITY: 0}, t.REVERT_EXPRESSION_S, ease="power1.inOut")
        tl.to(Element.EYES, {Prop.OPACITY: 1}, t.REVERT_EXPRESSION_S, ease="power1.inOut", position="<")
        tl.to(Element.MOUTH_OPEN, {Prop.OPACITY: 0}, t.REVERT_EXPRESSION_S, ease="power1.inOut", position="<")
        tl.to(Element.MOUTH_CLOSED, {Prop.OPACITY: 1}, t.REVERT_EXPRESSION_S, ease="power1.inOut", position="<")
        tl.to(Element.PUPILS, {Prop.SCALE: 1}, t.REVERT_EYES_S, ease="power1.out", position="<")
        tl.to(Element.EYE_WHITES, {Prop.SCALE: 1}, t.REVERT_EYES_S, ease="power1.out", position="<")

        return tl

    # ------------------------------------------------------------------
    # Playback control
    # ------------------------------------------------------------------

    def play(self) -> bool:
        """Start a run.

        Returns:
            True if a run started; False if one is in flight or unmounted
        """
        if not self._mounted:
            self._logger.play_ignored(reason="not mounted")
            return False
        if self._playing:
            self._logger.play_ignored(reason="already playing")
            return False

        self._playing = True
        if self._idle is not None and self._idle.pause():
            self._idle_held = True

        if self._timeline is not None:
            self._timeline.kill()
        self._timeline = self.build()
        self._dirty = True
        self._set_phase(MascotPhase.BLINK)
        self._timeline.play()
        return True

    def kill(self) -> bool:
        """Cancel the run in flight. on_complete will not fire.

        Returns:
            True if a run was cancelled
        """
        self._cancel_autoplay()
        if self._timeline is None:
            return False
        killed = self._timeline.kill()
        self._playing = False
        return killed

    def reset(self) -> None:
        """Restore every animated property to base and hand back to idle.

        Idempotent. A no-op when nothing has played since the last reset
        or completion.
        """
        self._cancel_autoplay()
        if not self._playing and not self._dirty:
            return

        if self._timeline is not None:
            self._timeline.kill()
        self._visual.reset()
        self._playing = False
        self._dirty = False
        self._set_phase(MascotPhase.IDLE)
        if self._idle_held:
            self._idle_held = False
            if self._idle is not None:
                self._idle.restart()
        logger.info("mascot_reset", event_type="mascot.reset")

    async def wait(self) -> None:
        """Wait for the current run's playback task to end."""
        if self._timeline is not None:
            await self._timeline.wait()

    def _handle_complete(self) -> None:
        self._playing = False
        self._dirty = False
        self._completions += 1
        self._set_phase(MascotPhase.IDLE)
        try:
            if self._on_complete is not None:
                self._on_complete()
        finally:
            if self._idle_held:
                self._idle_held = False
                if self._idle is not None:
                    self._idle.resume()

    def _set_phase(self, phase: MascotPhase) -> None:
        if phase is self._phase:
            return
        self._phase = phase
        logger.debug("mascot_phase", event_type="mascot.phase", phase=phase.value)
        if self._on_phase_change is not None:
            self._on_phase_change(phase)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def phase(self) -> MascotPhase:
        """Current recipe step."""
        return self._phase

    @property
    def is_playing(self) -> bool:
        """Whether a run is in flight."""
        return self._playing

    @property
    def is_mounted(self) -> bool:
        """Whether the component is attached."""
        return self._mounted

    @property
    def completions(self) -> int:
        """Number of runs that fired on_complete."""
        return self._completions

    @property
    def timeline(self) -> Timeline | None:
        """The most recently built main timeline."""
        return self._timeline

    @property
    def on_complete(self) -> Callable[[], None] | None:
        """Completion callback invoked once per finished run."""
        return self._on_complete

    @on_complete.setter
    def on_complete(self, callback: Callable[[], None] | None) -> None:
        self._on_complete = callback
