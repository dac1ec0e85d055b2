"""Phase Sequencer - Fixed choreography over the visual anchor.

Runs one celebration end to end:
1. Entrance: reveal the anchor, start breathing, rest
2. Delegated: open the mouth and hand off to the mascot engine
3. Stand up with the mouth open
4. Wag
5. Wag fast
6. Calm the wag
7. Stop wagging
8. Retract the tongue (upright)
9. Sit back down (resting)
10. Teardown: clear effects, show the success indicator, hold, hide

Every timed wait covers the full visual transition of its effect before
the next mutation. The delegated step suspends until the engine's
completion callback resolves the signal channel.
"""

import asyncio
import time
import uuid
from dataclasses import dataclass
from enum import Enum

from mascot.animation.clock import AnimationClock
from mascot.config.constants import TIMING
from mascot.observability.logging import SequencerLogger, bind_run, unbind_run
from mascot.observability.metrics import record_run, record_run_duration
from mascot.orchestrator.signal_bridge import SignalChannel
from mascot.orchestrator.state import AnimationState, Effect, Phase, VisualAnchor


class AnchorPolicy(Enum):
    """What happens to is_playing when a run aborts on a missing anchor."""

    RELEASE = "release"  # clear it, so the next play can start
    HOLD = "hold"  # keep it set, blocking further plays


class StepKind(Enum):
    """How a step finishes."""

    TIMED = "timed"
    DELEGATED = "delegated"


@dataclass(frozen=True)
class PhaseStep:
    """One entry of the choreography."""

    name: str
    kind: StepKind = StepKind.TIMED
    phase: Phase | None = None
    add: tuple[Effect, ...] = ()
    remove: tuple[Effect, ...] = ()
    wait_ms: int = 0
    reveal: bool = False


PHASE_STEPS: tuple[PhaseStep, ...] = (
    PhaseStep(
        "entrance",
        phase=Phase.RESTING,
        add=(Effect.BREATHING,),
        wait_ms=TIMING.ENTRANCE_MS,
        reveal=True,
    ),
    PhaseStep(
        "mouth_open",
        kind=StepKind.DELEGATED,
        phase=Phase.MOUTH_OPEN_RESTING,
        add=(Effect.TONGUE_TRANSITION,),
    ),
    PhaseStep(
        "stand_up",
        phase=Phase.MOUTH_OPEN_UPRIGHT,
        add=(Effect.STANDING_TRANSITION,),
        wait_ms=TIMING.STAND_UP_MS,
    ),
    PhaseStep("wag", add=(Effect.WAG,), wait_ms=TIMING.WAG_MS),
    PhaseStep("wag_fast", add=(Effect.WAG_FAST,), wait_ms=TIMING.WAG_FAST_MS),
    PhaseStep("calm_wag", remove=(Effect.WAG_FAST,), wait_ms=TIMING.CALM_WAG_MS),
    PhaseStep("stop_wag", remove=(Effect.WAG,), wait_ms=TIMING.WAG_STOP_MS),
    PhaseStep(
        "retract_tongue",
        phase=Phase.UPRIGHT,
        remove=(Effect.TONGUE_TRANSITION,),
        wait_ms=TIMING.RETRACT_TONGUE_MS,
    ),
    PhaseStep(
        "sit_down",
        phase=Phase.RESTING,
        remove=(Effect.STANDING_TRANSITION,),
        wait_ms=TIMING.SIT_DOWN_MS,
    ),
)


class PhaseSequencer:
    """Top-level orchestrator of the celebration.

    Usage:
        sequencer = PhaseSequencer(state, anchor, channel, clock)
        completed = await sequencer.play()  # False if ignored or aborted
    """

    def __init__(
        self,
        state: AnimationState,
        anchor: VisualAnchor,
        channel: SignalChannel,
        clock: AnimationClock,
        anchor_policy: AnchorPolicy = AnchorPolicy.RELEASE,
        success_hold_ms: int = TIMING.SUCCESS_HOLD_MS,
        steps: tuple[PhaseStep, ...] = PHASE_STEPS,
    ) -> None:
        self._state = state
        self._anchor = anchor
        self._channel = channel
        self._clock = clock
        self._anchor_policy = anchor_policy
        self._success_hold_ms = success_hold_ms
        self._steps = steps

        self._runs = 0
        self._current_step: PhaseStep | None = None
        self._logger = SequencerLogger()

    async def play(self) -> bool:
        """Run the full choreography.

        Returns:
            True if the run completed; False if it was ignored (already
            playing) or aborted (anchor missing)
        """
        if self._state.is_playing:
            self._logger.play_ignored()
            return False

        run_id = uuid.uuid4().hex[:12]
        bind_run(run_id)
        self._state.set_playing(True, reason="play")
        record_run("started")
        self._logger.run_started(run_id)
        started = time.perf_counter()

        try:
            if not self._anchor.is_mounted:
                self._abort(run_id, "anchor missing")
                return False

            self._runs += 1
            for index, step in enumerate(self._steps, start=1):
                await self._run_step(index, step)

            await self._teardown()

            elapsed = time.perf_counter() - started
            self._logger.run_completed(run_id, elapsed)
            record_run("completed")
            record_run_duration(elapsed)
            return True

        except asyncio.CancelledError:
            self._cancel_cleanup()
            record_run("cancelled")
            raise

        finally:
            self._current_step = None
            unbind_run()

    async def _run_step(self, index: int, step: PhaseStep) -> None:
        self._current_step = step
        self._logger.step_entered(index, step.name, step.phase.value if step.phase else None)

        if step.reveal:
            self._anchor.show()
        for effect in step.add:
            self._anchor.add_effect(effect)
        for effect in step.remove:
            self._anchor.remove_effect(effect)
        if step.phase is not None:
            self._state.set_phase(step.phase, reason=step.name)

        if step.kind is StepKind.DELEGATED:
            # No timeout: a stuck acknowledgment stalls the run
            await self._channel.request()
        else:
            await self._clock.sleep_ms(step.wait_ms)

    async def _teardown(self) -> None:
        self._logger.step_entered(len(self._steps) + 1, "teardown", None)
        self._anchor.clear_effects()
        self._state.set_success_visible(True, reason="teardown")
        await self._clock.sleep_ms(self._success_hold_ms)
        self._state.set_success_visible(False, reason="teardown")
        self._state.set_playing(False, reason="teardown")

    def _abort(self, run_id: str, reason: str) -> None:
        if self._anchor_policy is AnchorPolicy.RELEASE:
            self._state.set_playing(False, reason=reason)
        self._logger.run_aborted(run_id, reason, is_playing=self._state.is_playing)
        record_run("aborted")

    def _cancel_cleanup(self) -> None:
        self._channel.cancel()
        self._anchor.clear_effects()
        self._state.set_success_visible(False, reason="cancelled")
        self._state.set_playing(False, reason="cancelled")

    @property
    def anchor_policy(self) -> AnchorPolicy:
        """Policy applied when the anchor is missing."""
        return self._anchor_policy

    @property
    def runs(self) -> int:
        """Runs that passed the anchor check."""
        return self._runs

    @property
    def current_step(self) -> PhaseStep | None:
        """Step in progress, if any."""
        return self._current_step

    @property
    def steps(self) -> tuple[PhaseStep, ...]:
        """The choreography."""
        return self._steps
