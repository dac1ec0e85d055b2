"""Easing curves.

Each curve maps linear progress in [0, 1] to eased progress with
``f(0) == 0`` and ``f(1) == 1``. Names follow the ``family.direction``
convention used by the authored timelines (``sine.inOut``, ``power2.out``).
"""

import math
from typing import Callable

EasingFunction = Callable[[float], float]


def linear(t: float) -> float:
    return t


def sine_in(t: float) -> float:
    return 1.0 - math.cos(t * math.pi / 2.0)


def sine_out(t: float) -> float:
    return math.sin(t * math.pi / 2.0)


def sine_in_out(t: float) -> float:
    return -(math.cos(math.pi * t) - 1.0) / 2.0


def _power_in(power: int) -> EasingFunction:
    def ease(t: float) -> float:
        return t ** power

    return ease


def _power_out(power: int) -> EasingFunction:
    def ease(t: float) -> float:
        return 1.0 - (1.0 - t) ** power

    return ease


def _power_in_out(power: int) -> EasingFunction:
    def ease(t: float) -> float:
        if t < 0.5:
            return (2.0 ** (power - 1)) * t ** power
        return 1.0 - ((-2.0 * t + 2.0) ** power) / 2.0

    return ease


# powerN follows the exponent N + 1 (power1 is quadratic)
EASINGS: dict[str, EasingFunction] = {
    "none": linear,
    "linear": linear,
    "sine.in": sine_in,
    "sine.out": sine_out,
    "sine.inOut": sine_in_out,
}
for _n in (1, 2, 3, 4):
    EASINGS[f"power{_n}.in"] = _power_in(_n + 1)
    EASINGS[f"power{_n}.out"] = _power_out(_n + 1)
    EASINGS[f"power{_n}.inOut"] = _power_in_out(_n + 1)

DEFAULT_EASE = "power1.out"


def get_easing(name: str | EasingFunction | None) -> EasingFunction:
    """Resolve an easing by name.

    Args:
        name: Registered curve name, a callable, or None for the default

    Raises:
        KeyError: If the name is not registered
    """
    if name is None:
        return EASINGS[DEFAULT_EASE]
    if callable(name):
        return name
    try:
        return EASINGS[name]
    except KeyError:
        raise KeyError(f"Unknown easing: {name}") from None


def ease(name: str | EasingFunction | None, t: float) -> float:
    """Apply an easing to progress, clamping progress to [0, 1]."""
    return get_easing(name)(min(1.0, max(0.0, t)))
