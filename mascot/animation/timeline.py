"""Timeline Engine - Offset-addressed property tweens with one completion.

A Timeline is an ordered list of children placed on a time axis:
- Tween: animate element properties to target values
- Cue: call a function at a point in time (phase markers)
- Hold: an empty span that extends the timeline
- Timeline: a nested sub-timeline inserted as one unit

Positions:
- None      immediately after the previous step ends (end of timeline)
- "<" / "<N"  same start as the previous child (+N seconds)
- ">" / ">N"  end of the previous child (+N seconds)
- "+=N" / "-=N"  end of timeline plus/minus N seconds
- a number  absolute start time in seconds

Lifecycle: BUILT → PLAYING → COMPLETED | KILLED, with PAUSED in between
for timelines that are paused and resumed (the idle loop).

Playback is a single asyncio task that advances the playhead once per
clock frame. Values are a pure function of the playhead: start values of
every tween are resolved when playback begins, from the previous tween on
the same property or from the value held by the visual state.
"""

import asyncio
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Mapping

from mascot.animation.clock import AnimationClock
from mascot.animation.easing import EasingFunction, ease as apply_ease
from mascot.animation.elements import Element, Prop, PropertyKey, VisualState
from mascot.exceptions import InvalidPositionError, TimelineError, TimelineStateError
from mascot.observability.logging import TimelineLogger
from mascot.observability.metrics import record_timeline_event

Position = float | int | str | None


class PlayState(Enum):
    """Timeline lifecycle states."""

    BUILT = "built"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"
    KILLED = "killed"


@dataclass
class Tween:
    """One property animation instruction."""

    target: Element
    props: dict[Prop, float]
    duration: float
    ease: str | EasingFunction | None = None
    repeat: int = 0
    yoyo: bool = False

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise TimelineError("Tween duration must not be negative")
        if self.repeat < 0:
            raise TimelineError("Tween repeat must be >= 0 (infinite repeat is timeline-only)")
        if not self.props:
            raise TimelineError(f"Tween on {self.target.value} animates nothing")

    @property
    def total_duration(self) -> float:
        """Duration including repeats."""
        return self.duration * (self.repeat + 1)

    @property
    def ends_reversed(self) -> bool:
        """Whether the final iteration runs backwards."""
        return self.yoyo and self.repeat % 2 == 1

    def progress_at(self, local_t: float) -> float:
        """Eased progress (0 = from, 1 = to) at time since tween start."""
        if local_t <= 0:
            return 0.0
        if self.duration == 0 or local_t >= self.total_duration:
            return 0.0 if self.ends_reversed else 1.0
        iteration = int(local_t // self.duration)
        linear = (local_t - iteration * self.duration) / self.duration
        if self.yoyo and iteration % 2 == 1:
            linear = 1.0 - linear
        return apply_ease(self.ease, linear)


@dataclass
class Cue:
    """A function called when the playhead reaches its position."""

    fn: Callable[[], None]
    label: str = ""


@dataclass
class Hold:
    """An empty span, used to keep the last pose on screen."""

    duration: float


@dataclass
class _Child:
    item: "Tween | Cue | Hold | Timeline"
    start: float

    @property
    def duration(self) -> float:
        if isinstance(self.item, Tween):
            return self.item.total_duration
        if isinstance(self.item, Hold):
            return self.item.duration
        if isinstance(self.item, Timeline):
            return self.item.duration
        return 0.0

    @property
    def end(self) -> float:
        return self.start + self.duration


@dataclass
class _Segment:
    """A tween resolved to absolute time and concrete start/end values."""

    start: float
    tween: Tween
    from_value: float
    to_value: float

    def value_at(self, t: float) -> float:
        p = self.tween.progress_at(t - self.start)
        return self.from_value + (self.to_value - self.from_value) * p

    @property
    def final_value(self) -> float:
        return self.from_value if self.tween.ends_reversed else self.to_value


@dataclass
class _CompiledCue:
    time: float
    order: int
    cue: Cue


@dataclass
class _Compiled:
    tracks: dict[PropertyKey, list[_Segment]] = field(default_factory=dict)
    initial: dict[PropertyKey, float] = field(default_factory=dict)
    cues: list[_CompiledCue] = field(default_factory=list)


class Timeline:
    """Ordered, offset-addressed collection of steps with one completion callback.

    Usage:
        tl = Timeline("wave", visual=state, clock=clock, on_complete=done)
        tl.to(Element.HEAD, {Prop.ROTATE: 4}, 1.0, ease="power1.inOut")
        tl.to(Element.EARS, {Prop.ROTATE: -2}, 1.0, position="<0.15")
        tl.call(lambda: print("halfway"), position="+=0.3")
        tl.play()
        await tl.wait()
    """

    def __init__(
        self,
        name: str = "timeline",
        visual: VisualState | None = None,
        clock: AnimationClock | None = None,
        repeat: int = 0,
        yoyo: bool = False,
        on_complete: Callable[[], None] | None = None,
    ) -> None:
        if repeat < -1:
            raise TimelineError("Timeline repeat must be >= -1")
        self._name = name
        self._visual = visual
        self._clock = clock
        self._repeat = repeat
        self._yoyo = yoyo
        self._on_complete = on_complete

        self._children: list[_Child] = []
        self._compiled: _Compiled | None = None
        self._state = PlayState.BUILT
        self._task: asyncio.Task | None = None
        self._playhead = 0.0
        self._started_at = 0.0
        self._next_cue = 0
        self._logger = TimelineLogger(name)

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def to(
        self,
        target: Element,
        props: Mapping[Prop, float],
        duration: float,
        ease: str | EasingFunction | None = None,
        repeat: int = 0,
        yoyo: bool = False,
        delay: float = 0.0,
        position: Position = None,
    ) -> "Timeline":
        """Append a tween. Returns self for chaining."""
        tween = Tween(
            target=target,
            props=dict(props),
            duration=duration,
            ease=ease,
            repeat=repeat,
            yoyo=yoyo,
        )
        return self._insert(tween, self._resolve_position(position) + delay)

    def call(self, fn: Callable[[], None], position: Position = None, label: str = "") -> "Timeline":
        """Place a callback on the timeline."""
        if self._repeat != 0:
            raise TimelineError("Callbacks are not supported on repeating timelines")
        return self._insert(Cue(fn=fn, label=label), self._resolve_position(position))

    def hold(self, duration: float, position: Position = None) -> "Timeline":
        """Append an empty span."""
        if duration < 0:
            raise TimelineError("Hold duration must not be negative")
        return self._insert(Hold(duration), self._resolve_position(position))

    def add(self, child: "Timeline", position: Position = None) -> "Timeline":
        """Insert a fully built sub-timeline as a single unit."""
        if child is self:
            raise TimelineError("A timeline cannot contain itself")
        if child.repeat != 0:
            raise TimelineError("Nested timelines cannot repeat; repeat the steps instead")
        return self._insert(child, self._resolve_position(position))

    def _insert(self, item: "Tween | Cue | Hold | Timeline", start: float) -> "Timeline":
        if self._state is not PlayState.BUILT:
            raise TimelineStateError("modify", self._state.value)
        self._children.append(_Child(item=item, start=max(0.0, start)))
        self._compiled = None
        return self

    def _resolve_position(self, position: Position) -> float:
        end = self.duration
        previous = self._children[-1] if self._children else None
        prev_start = previous.start if previous else 0.0
        prev_end = previous.end if previous else 0.0

        if position is None:
            return end
        if isinstance(position, bool):
            raise InvalidPositionError(position, "booleans are not positions")
        if isinstance(position, (int, float)):
            if position < 0:
                raise InvalidPositionError(position, "absolute positions must be >= 0")
            return float(position)
        if not isinstance(position, str):
            raise InvalidPositionError(position, "unsupported position type")

        text = position.strip()
        try:
            if text.startswith("<"):
                return prev_start + _offset(text[1:])
            if text.startswith(">"):
                return prev_end + _offset(text[1:])
            if text.startswith("+="):
                return end + float(text[2:])
            if text.startswith("-="):
                return max(0.0, end - float(text[2:]))
            value = float(text)
        except ValueError:
            raise InvalidPositionError(position, "expected <, >, +=, -= or a number") from None
        if value < 0:
            raise InvalidPositionError(position, "absolute positions must be >= 0")
        return value

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def _flatten(self, offset: float, tweens: list, cues: list) -> None:
        for child in self._children:
            start = offset + child.start
            if isinstance(child.item, Tween):
                tweens.append((start, child.item))
            elif isinstance(child.item, Cue):
                cues.append((start, child.item))
            elif isinstance(child.item, Timeline):
                child.item._flatten(start, tweens, cues)

    def _compile(self) -> _Compiled:
        if self._visual is None:
            raise TimelineStateError("play", "detached (no visual state)")

        tweens: list[tuple[float, Tween]] = []
        cues: list[tuple[float, Cue]] = []
        self._flatten(0.0, tweens, cues)

        compiled = _Compiled()
        # stable sort keeps insertion order for tweens sharing a start time
        for start, tween in sorted(tweens, key=lambda pair: pair[0]):
            for prop, to_value in tween.props.items():
                key = (tween.target, prop)
                track = compiled.tracks.setdefault(key, [])
                if track:
                    from_value = track[-1].final_value
                else:
                    from_value = self._visual.get(tween.target, prop)
                    compiled.initial[key] = from_value
                track.append(
                    _Segment(start=start, tween=tween, from_value=from_value, to_value=to_value)
                )

        compiled.cues = [
            _CompiledCue(time=t, order=i, cue=cue)
            for i, (t, cue) in enumerate(cues)
        ]
        compiled.cues.sort(key=lambda c: (c.time, c.order))
        self._logger.built(steps=len(tweens) + len(cues), duration_s=self.duration)
        return compiled

    def _ensure_compiled(self) -> _Compiled:
        if self._compiled is None:
            self._compiled = self._compile()
        return self._compiled

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _local_time(self, playhead: float) -> float:
        """Map total playhead to time within one iteration."""
        d = self.duration
        if d == 0:
            return 0.0
        if self._repeat != -1 and playhead >= self.total_duration:
            iteration = self._repeat
            local = d
        else:
            iteration = int(playhead // d)
            local = playhead - iteration * d
        if self._yoyo and iteration % 2 == 1:
            local = d - local
        return local

    def render(self, t: float) -> None:
        """Write every animated property's value at time t (no callbacks)."""
        compiled = self._ensure_compiled()
        local = self._local_time(t)
        for key, segments in compiled.tracks.items():
            value = compiled.initial[key]
            for segment in segments:
                if segment.start > local:
                    break
                value = segment.value_at(local)
            self._visual.set(key[0], key[1], value)

    def _fire_cues(self, t: float) -> None:
        compiled = self._ensure_compiled()
        while self._next_cue < len(compiled.cues) and compiled.cues[self._next_cue].time <= t:
            cue = compiled.cues[self._next_cue].cue
            self._next_cue += 1
            self._invoke(cue.fn)
            if self._state is not PlayState.PLAYING:
                return

    def _invoke(self, fn: Callable[[], None]) -> None:
        try:
            fn()
        except Exception as e:
            self._logger.callback_failed(error=str(e))

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def play(self) -> bool:
        """Start playback from the beginning (or resume if paused).

        Returns:
            True if playback started, False if it was already playing
        """
        if self._state is PlayState.PLAYING:
            self._logger.play_ignored(reason="already playing")
            return False
        if self._state is PlayState.PAUSED:
            return self.resume()
        if self._clock is None:
            raise TimelineStateError("play", "detached (no clock)")

        self._compiled = self._compile()
        self._playhead = 0.0
        self._next_cue = 0
        self._start_task()
        self._logger.started(duration_s=self.total_duration)
        record_timeline_event(self._name, "started")
        return True

    def pause(self) -> bool:
        """Freeze the playhead. Idempotent."""
        if self._state is not PlayState.PLAYING:
            return False
        self._playhead = self._current_playhead()
        self._cancel_task()
        self._state = PlayState.PAUSED
        return True

    def resume(self) -> bool:
        """Continue from the frozen playhead. Idempotent."""
        if self._state is not PlayState.PAUSED:
            return False
        self._start_task()
        return True

    def restart(self) -> bool:
        """Kill and play again from zero, recapturing start values."""
        self.kill()
        self._state = PlayState.BUILT
        return self.play()

    def kill(self) -> bool:
        """Cancel playback without firing on_complete.

        Returns:
            True if the timeline was playing or paused
        """
        if self._state not in (PlayState.PLAYING, PlayState.PAUSED):
            return False
        self._playhead = self._current_playhead()
        self._cancel_task()
        self._state = PlayState.KILLED
        self._logger.killed(playhead_s=self._playhead)
        record_timeline_event(self._name, "killed")
        return True

    async def wait(self) -> None:
        """Wait until the playback task ends (completion, pause or kill)."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait({task})

    def _start_task(self) -> None:
        self._state = PlayState.PLAYING
        self._started_at = self._clock.now() - self._playhead
        self._task = asyncio.create_task(self._run(), name=f"timeline:{self._name}")

    def _cancel_task(self) -> None:
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    def _current_playhead(self) -> float:
        if self._state is PlayState.PLAYING and self._clock is not None:
            return self._clock.now() - self._started_at
        return self._playhead

    async def _run(self) -> None:
        total = self.total_duration
        self._step(self._playhead)
        while self._state is PlayState.PLAYING:
            if self._playhead >= total:
                self._finish()
                return
            await self._clock.next_frame()
            self._playhead = min(self._clock.now() - self._started_at, total)
            self._step(self._playhead)

    def _step(self, playhead: float) -> None:
        self.render(playhead)
        if self._repeat == 0:
            self._fire_cues(playhead)

    def _finish(self) -> None:
        self._state = PlayState.COMPLETED
        self._task = None
        self._logger.completed()
        record_timeline_event(self._name, "completed")
        if self._on_complete is not None:
            self._invoke(self._on_complete)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Timeline name (used in logs and metrics)."""
        return self._name

    @property
    def state(self) -> PlayState:
        """Lifecycle state."""
        return self._state

    @property
    def is_active(self) -> bool:
        """Whether the timeline is playing."""
        return self._state is PlayState.PLAYING

    @property
    def repeat(self) -> int:
        """Extra iterations (-1 = infinite)."""
        return self._repeat

    @property
    def duration(self) -> float:
        """Duration of one iteration in seconds."""
        return max((child.end for child in self._children), default=0.0)

    @property
    def total_duration(self) -> float:
        """Duration including repeats (inf when repeating forever)."""
        if self._repeat == -1:
            return math.inf
        return self.duration * (self._repeat + 1)

    @property
    def playhead(self) -> float:
        """Current playhead in seconds."""
        return self._current_playhead()

    @property
    def animated_keys(self) -> set[PropertyKey]:
        """Every (element, property) pair this timeline writes."""
        tweens: list[tuple[float, Tween]] = []
        self._flatten(0.0, tweens, [])
        return {(tween.target, prop) for _, tween in tweens for prop in tween.props}

    def __len__(self) -> int:
        return len(self._children)


def _offset(text: str) -> float:
    text = text.strip()
    if not text:
        return 0.0
    return float(text)
