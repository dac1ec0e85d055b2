"""Animation package - timeline engine, idle loop and the mascot recipe."""

from mascot.animation.clock import AnimationClock
from mascot.animation.elements import BASE_VALUES, VALID_RANGES, Element, Prop, VisualState
from mascot.animation.idle import BlinkEvent, IdleLoop
from mascot.animation.mascot import MascotAnimation, MascotPhase
from mascot.animation.timeline import PlayState, Timeline, Tween

__all__ = [
    "AnimationClock",
    "BASE_VALUES",
    "VALID_RANGES",
    "Element",
    "Prop",
    "VisualState",
    "BlinkEvent",
    "IdleLoop",
    "MascotAnimation",
    "MascotPhase",
    "PlayState",
    "Timeline",
    "Tween",
]
