"""Animation State - Observable pose, playing flag and success indicator.

Phases:
- RESTING: Sitting, mouth closed
- MOUTH_OPEN_RESTING: Sitting, mouth open (rendered by the animated mascot)
- MOUTH_OPEN_UPRIGHT: Standing, mouth open
- UPRIGHT: Standing, mouth closed

Exactly one phase is active at a time. Only the phase sequencer mutates
it; everything else observes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from mascot.animation.clock import AnimationClock
from mascot.observability.logging import get_logger

logger = get_logger(__name__)


class Phase(Enum):
    """Pose shown by the visual anchor."""

    RESTING = "resting"
    MOUTH_OPEN_RESTING = "mouth-open-resting"
    MOUTH_OPEN_UPRIGHT = "mouth-open-upright"
    UPRIGHT = "upright"


POSE_ASSETS: dict[Phase, str] = {
    Phase.RESTING: "/assets/dog-animations/Sitting.svg",
    Phase.MOUTH_OPEN_RESTING: "/assets/dog-animations/Sitting_with_tongue_out.svg",
    Phase.MOUTH_OPEN_UPRIGHT: "/assets/dog-animations/Standing_with_tongue_out.svg",
    Phase.UPRIGHT: "/assets/dog-animations/Standing.svg",
}

# Drawn by the animated mascot instead of the static pose
ANIMATED_PHASES: frozenset[Phase] = frozenset({Phase.MOUTH_OPEN_RESTING})


def pose_asset(phase: Phase) -> str | None:
    """Image path for a phase, or None when the animated mascot renders it."""
    if phase in ANIMATED_PHASES:
        return None
    return POSE_ASSETS[phase]


class Effect(Enum):
    """Transient visual effect tags carried by the anchor."""

    BREATHING = "breathing"
    TONGUE_TRANSITION = "tongue-transition"
    STANDING_TRANSITION = "standing-transition"
    WAG = "wag"
    WAG_FAST = "wag-fast"


class VisualAnchor:
    """The container the sequencer drives.

    Its presence gates playback: a sequencer run aborts when the anchor is
    not mounted.
    """

    def __init__(self, mounted: bool = True) -> None:
        self._mounted = mounted
        self._visible = False
        self._effects: set[Effect] = set()

    def mount(self) -> None:
        self._mounted = True

    def unmount(self) -> None:
        self._mounted = False
        self._visible = False
        self._effects.clear()

    def show(self) -> None:
        self._visible = True

    def hide(self) -> None:
        self._visible = False

    def add_effect(self, effect: Effect) -> None:
        self._effects.add(effect)

    def remove_effect(self, effect: Effect) -> None:
        self._effects.discard(effect)

    def clear_effects(self) -> None:
        self._effects.clear()

    def has_effect(self, effect: Effect) -> bool:
        return effect in self._effects

    @property
    def is_mounted(self) -> bool:
        """Whether the anchor is present."""
        return self._mounted

    @property
    def is_visible(self) -> bool:
        """Whether the anchor is revealed."""
        return self._visible

    @property
    def effects(self) -> frozenset[Effect]:
        """Currently applied effect tags."""
        return frozenset(self._effects)


@dataclass
class PhaseTransition:
    """Record of an observable state change."""

    field_name: str
    old_value: Any
    new_value: Any
    t_s: float
    reason: str = ""
    metadata: dict = field(default_factory=dict)


StateChangeCallback = Callable[[PhaseTransition], None]


class AnimationState:
    """Observable state shared by the sequencer, the form and the view.

    Usage:
        state = AnimationState(clock)
        state.on_state_change(lambda t: print(t.field_name, t.new_value))

        state.set_phase(Phase.UPRIGHT, reason="retract tongue")
        state.set_playing(False)
    """

    def __init__(
        self,
        clock: AnimationClock | None = None,
        initial_phase: Phase = Phase.RESTING,
        max_history: int = 100,
    ) -> None:
        self._clock = clock
        self._phase = initial_phase
        self._is_playing = False
        self._success_visible = False

        self._on_change_callbacks: list[StateChangeCallback] = []
        self._history: list[PhaseTransition] = []
        self._max_history = max_history

    def on_state_change(self, callback: StateChangeCallback) -> None:
        """Register callback for any state change."""
        self._on_change_callbacks.append(callback)

    def set_phase(self, phase: Phase, reason: str = "") -> PhaseTransition | None:
        """Switch the active pose. Returns None if unchanged."""
        if phase is self._phase:
            return None
        old, self._phase = self._phase, phase
        return self._record("phase", old, phase, reason)

    def set_playing(self, playing: bool, reason: str = "") -> PhaseTransition | None:
        """Update the sequence-in-progress flag. Returns None if unchanged."""
        if playing == self._is_playing:
            return None
        old, self._is_playing = self._is_playing, playing
        return self._record("is_playing", old, playing, reason)

    def set_success_visible(self, visible: bool, reason: str = "") -> PhaseTransition | None:
        """Show or hide the success indicator. Returns None if unchanged."""
        if visible == self._success_visible:
            return None
        old, self._success_visible = self._success_visible, visible
        return self._record("success_visible", old, visible, reason)

    def _record(self, name: str, old: Any, new: Any, reason: str) -> PhaseTransition:
        transition = PhaseTransition(
            field_name=name,
            old_value=old,
            new_value=new,
            t_s=self._clock.now() if self._clock is not None else 0.0,
            reason=reason,
        )

        self._history.append(transition)
        if len(self._history) > self._max_history:
            self._history.pop(0)

        for callback in self._on_change_callbacks:
            try:
                callback(transition)
            except Exception as e:
                # Observer errors must not break the sequence
                logger.warning("state_observer_error", field=name, error=str(e))

        return transition

    @property
    def phase(self) -> Phase:
        """Active pose."""
        return self._phase

    @property
    def is_playing(self) -> bool:
        """Whether a sequence is in progress."""
        return self._is_playing

    @property
    def success_visible(self) -> bool:
        """Whether the success indicator is shown."""
        return self._success_visible

    @property
    def pose_asset(self) -> str | None:
        """Image path for the active pose."""
        return pose_asset(self._phase)

    @property
    def history(self) -> list[PhaseTransition]:
        """Transition history (most recent last)."""
        return self._history.copy()

    def phase_history(self) -> list[Phase]:
        """Phases entered, in order, starting with the initial one."""
        first = next((t for t in self._history if t.field_name == "phase"), None)
        phases = [first.old_value] if first is not None else [self._phase]
        phases.extend(t.new_value for t in self._history if t.field_name == "phase")
        return phases
