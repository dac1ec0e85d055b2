"""Tests for the MascotAnimation engine component.

Tests cover:
- Recipe structure and phase markers
- Mount lifecycle and autoplay
- Re-entrancy guard and single completion
- kill/reset cancellation and idle hand-off
- Property ranges under play/kill/reset interleavings
"""

import asyncio
import random

import pytest

from mascot.animation.elements import Element, Prop
from mascot.animation.idle import IdleLoop
from mascot.animation.mascot import MascotAnimation, MascotPhase, build_tail_wiggle
from mascot.animation.timeline import PlayState


class TestRecipe:
    """Tests for the built timeline."""

    def test_duration(self, engine):
        """The celebration lasts just under 17 authored seconds."""
        assert engine.build().duration == pytest.approx(16.92)

    def test_tail_wiggle_block(self):
        """The nested wiggle alternates 12 and -8 degrees three times."""
        wiggle = build_tail_wiggle()
        assert len(wiggle) == 6
        assert wiggle.duration == pytest.approx(2.4)
        assert wiggle.animated_keys == {(Element.TAIL, Prop.ROTATE)}

    def test_animated_elements(self, engine):
        """The recipe drives every part except the idle-only body."""
        elements = {element for element, _ in engine.build().animated_keys}
        assert Element.BODY not in elements
        assert {Element.EYELIDS, Element.TONGUE, Element.TAIL, Element.FLOOR} <= elements

    def test_build_does_not_play(self, engine):
        """build() only constructs."""
        assert engine.build().state is PlayState.BUILT
        assert engine.is_playing is False


class TestMountLifecycle:
    """Tests for mount/unmount and autoplay."""

    def test_play_when_unmounted_is_ignored(self, engine):
        """An unmounted engine does not play."""
        assert engine.play() is False
        assert engine.timeline is None

    @pytest.mark.asyncio
    async def test_mount_starts_idle(self, engine, idle):
        """Mounting starts the idle loop; unmounting stops it."""
        engine.mount()
        assert engine.is_mounted
        assert idle.is_running
        engine.unmount()
        assert not engine.is_mounted
        assert not idle.is_running

    @pytest.mark.asyncio
    async def test_autoplay_after_delay(self, visual, clock, idle):
        """Autoplay starts a run after the delay."""
        engine = MascotAnimation(visual, clock, idle=idle, autoplay=True, autoplay_delay_s=0.5)
        engine.mount()
        assert engine.is_playing is False
        await clock.sleep(1.0)
        assert engine.is_playing or engine.completions == 1
        engine.unmount()

    @pytest.mark.asyncio
    async def test_unmount_cancels_autoplay(self, visual, clock, idle):
        """Unmounting before the delay prevents the run."""
        engine = MascotAnimation(visual, clock, idle=idle, autoplay=True, autoplay_delay_s=0.5)
        engine.mount()
        engine.unmount()
        await clock.sleep(1.0)
        assert engine.timeline is None

    @pytest.mark.asyncio
    async def test_kill_and_reset_cancel_pending_autoplay(self, visual, clock, idle):
        """kill() then reset() before the delay leaves nothing to fire later."""
        engine = MascotAnimation(visual, clock, idle=idle, autoplay=True, autoplay_delay_s=1.0)
        engine.mount()
        await clock.sleep(0.2)
        engine.kill()
        engine.reset()
        await clock.sleep(2.0)
        assert not engine.is_playing
        assert engine.timeline is None
        assert not idle.is_paused
        engine.unmount()

    @pytest.mark.asyncio
    async def test_reset_alone_cancels_pending_autoplay(self, visual, clock, idle):
        """reset() on an idle engine still drops a scheduled autoplay."""
        engine = MascotAnimation(visual, clock, idle=idle, autoplay=True, autoplay_delay_s=1.0)
        engine.mount()
        engine.reset()
        await clock.sleep(2.0)
        assert engine.timeline is None
        engine.unmount()


class TestPlayback:
    """Tests for play, completion and the idle hand-off."""

    @pytest.mark.asyncio
    async def test_single_run(self, visual, clock, idle):
        """One run walks every phase and completes once."""
        phases = []
        done = []
        engine = MascotAnimation(
            visual,
            clock,
            idle=idle,
            on_complete=lambda: done.append(1),
            on_phase_change=phases.append,
        )
        engine.mount()

        assert engine.play() is True
        assert idle.is_paused
        await asyncio.wait_for(engine.wait(), timeout=5)

        assert done == [1]
        assert engine.is_playing is False
        assert engine.phase is MascotPhase.IDLE
        assert phases == [
            MascotPhase.BLINK,
            MascotPhase.EYES_WIDEN,
            MascotPhase.HEAD_TILT,
            MascotPhase.MOUTH_OPEN,
            MascotPhase.BOUNCE,
            MascotPhase.TONGUE_OUT,
            MascotPhase.TAIL_WIGGLE,
            MascotPhase.SETTLE,
            MascotPhase.IDLE,
        ]
        assert idle.pause_count == 1
        assert idle.resume_count == 1
        assert not idle.is_paused
        engine.unmount()

    @pytest.mark.asyncio
    async def test_expression_reverted(self, engine):
        """After a run the normal expression is back."""
        engine.mount()
        engine.play()
        await asyncio.wait_for(engine.wait(), timeout=5)
        engine.unmount()

        assert engine._visual.get(Element.EYES, Prop.OPACITY) == pytest.approx(1.0)
        assert engine._visual.get(Element.HAPPY_EYES, Prop.OPACITY) == pytest.approx(0.0)
        assert engine._visual.get(Element.MOUTH_CLOSED, Prop.OPACITY) == pytest.approx(1.0)
        assert engine._visual.get(Element.MOUTH_OPEN, Prop.OPACITY) == pytest.approx(0.0)
        assert engine._visual.get(Element.PUPILS, Prop.SCALE) == pytest.approx(1.0)
        assert engine._visual.get(Element.TONGUE, Prop.ROTATE) == pytest.approx(0.0)

    @pytest.mark.asyncio
    async def test_play_while_playing_is_ignored(self, visual, clock, idle):
        """Each accepted play yields exactly one completion."""
        done = []
        engine = MascotAnimation(visual, clock, idle=idle, on_complete=lambda: done.append(1))
        engine.mount()

        assert engine.play() is True
        first = engine.timeline
        assert engine.play() is False
        assert engine.timeline is first
        await asyncio.wait_for(engine.wait(), timeout=5)

        assert engine.play() is True
        await asyncio.wait_for(engine.wait(), timeout=5)

        assert done == [1, 1]
        assert engine.completions == 2
        assert idle.resume_count == 2
        engine.unmount()

    @pytest.mark.asyncio
    async def test_values_stay_in_range(self, visual, slow_clock):
        """No property leaves its authored range during a run."""
        engine = MascotAnimation(visual, slow_clock)
        engine.mount()
        engine.play()
        violations = {}
        while engine.is_playing:
            violations.update(visual.out_of_range())
            await slow_clock.next_frame()
        engine.unmount()
        assert violations == {}


class TestKillAndReset:
    """Tests for cancellation."""

    @pytest.mark.asyncio
    async def test_kill_suppresses_completion(self, visual, slow_clock):
        """A killed run never calls on_complete."""
        done = []
        idle = IdleLoop(visual, slow_clock)
        engine = MascotAnimation(visual, slow_clock, idle=idle, on_complete=lambda: done.append(1))
        engine.mount()
        engine.play()
        await slow_clock.sleep(3.0)
        assert engine.kill() is True
        await slow_clock.sleep(20.0)
        assert done == []
        assert engine.is_playing is False
        engine.unmount()

    @pytest.mark.asyncio
    async def test_kill_then_reset_restores_base(self, visual, slow_clock):
        """reset restores base values and resumes idle exactly once."""
        idle = IdleLoop(visual, slow_clock)
        engine = MascotAnimation(visual, slow_clock, idle=idle)
        engine.mount()
        engine.play()
        await slow_clock.sleep(5.0)
        engine.kill()
        engine.reset()

        assert visual.is_at_base()
        assert engine.phase is MascotPhase.IDLE
        assert idle.resume_count == 1
        assert not idle.is_paused

        engine.reset()
        assert idle.resume_count == 1
        engine.unmount()

    @pytest.mark.asyncio
    async def test_reset_mid_flight(self, visual, slow_clock):
        """reset on a playing engine cancels it."""
        done = []
        idle = IdleLoop(visual, slow_clock)
        engine = MascotAnimation(visual, slow_clock, idle=idle, on_complete=lambda: done.append(1))
        engine.mount()
        engine.play()
        await slow_clock.sleep(2.0)
        engine.reset()
        assert engine.is_playing is False
        assert engine.timeline.state is PlayState.KILLED
        await slow_clock.sleep(20.0)
        assert done == []
        engine.unmount()

    @pytest.mark.asyncio
    async def test_reset_when_idle_is_noop(self, engine, idle, visual):
        """reset with nothing played changes nothing."""
        engine.mount()
        writes = visual.write_count
        engine.reset()
        assert visual.write_count == writes
        assert idle.resume_count == 0
        engine.unmount()

    @pytest.mark.asyncio
    async def test_reset_after_completion_is_noop(self, engine, idle):
        """A completed run leaves nothing for reset to undo."""
        engine.mount()
        engine.play()
        await asyncio.wait_for(engine.wait(), timeout=5)
        timeline = engine.timeline
        engine.reset()
        assert idle.resume_count == 1
        assert engine.timeline is timeline
        assert timeline.state is PlayState.COMPLETED
        engine.unmount()

    @pytest.mark.asyncio
    async def test_interleavings_keep_ranges(self, visual, clock, idle):
        """Random play/kill/reset sequences never leave a property out of range."""
        rng = random.Random(7)
        engine = MascotAnimation(visual, clock, idle=idle)
        engine.mount()
        for _ in range(40):
            action = rng.choice(["play", "kill", "reset", "wait"])
            if action == "play":
                engine.play()
            elif action == "kill":
                engine.kill()
            elif action == "reset":
                engine.reset()
            await clock.sleep(rng.uniform(0.0, 2.0))
            assert visual.out_of_range() == {}
        engine.kill()
        engine.reset()
        assert engine.is_playing is False
        assert not idle.is_paused
        engine.unmount()
