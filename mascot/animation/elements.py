"""Visual Elements - Closed set of addressable mascot parts.

The mascot is a fixed set of named parts, each exposing a few numeric
properties. Timelines address parts by enum handle, never by string
selector, so an unknown target is a construction-time error instead of a
silent runtime miss.

Every (element, property) pair has:
- a base value, restored by reset
- an authored valid range, covering every value any timeline targets
"""

from enum import Enum
from typing import Iterable, Mapping


class Element(Enum):
    """Addressable parts of the mascot."""

    MASCOT = "mascot"
    BODY = "body"
    HEAD = "head"
    EARS = "ears"
    TAIL = "tail"
    EYES = "eyes"
    EYELIDS = "eyelids"
    PUPILS = "pupils"
    EYE_WHITES = "eyeWhites"
    HAPPY_EYES = "happyEyes"
    MOUTH_CLOSED = "mouthClosed"
    MOUTH_OPEN = "mouthOpen"
    TONGUE = "tongue"
    FLOOR = "floor"


class Prop(Enum):
    """Animatable properties."""

    X = "x"
    Y = "y"
    SCALE = "scale"
    SCALE_X = "scaleX"
    SCALE_Y = "scaleY"
    ROTATE = "rotate"
    OPACITY = "opacity"


PropertyKey = tuple[Element, Prop]

BASE_VALUES: dict[Element, dict[Prop, float]] = {
    Element.MASCOT: {Prop.SCALE_X: 1.0, Prop.SCALE_Y: 1.0, Prop.Y: 0.0},
    Element.BODY: {Prop.SCALE_Y: 1.0},
    Element.HEAD: {Prop.ROTATE: 0.0, Prop.Y: 0.0},
    Element.EARS: {Prop.ROTATE: 0.0},
    Element.TAIL: {Prop.ROTATE: 0.0},
    Element.EYES: {Prop.OPACITY: 1.0},
    Element.EYELIDS: {Prop.OPACITY: 0.0},
    Element.PUPILS: {Prop.SCALE: 1.0},
    Element.EYE_WHITES: {Prop.SCALE: 1.0},
    Element.HAPPY_EYES: {Prop.OPACITY: 0.0},
    Element.MOUTH_CLOSED: {Prop.OPACITY: 1.0},
    Element.MOUTH_OPEN: {Prop.OPACITY: 0.0},
    Element.TONGUE: {Prop.SCALE_Y: 1.0, Prop.ROTATE: 0.0},
    Element.FLOOR: {Prop.SCALE_X: 1.0, Prop.OPACITY: 0.15},
}

VALID_RANGES: dict[PropertyKey, tuple[float, float]] = {
    (Element.MASCOT, Prop.SCALE_X): (0.97, 1.04),
    (Element.MASCOT, Prop.SCALE_Y): (0.94, 1.06),
    (Element.MASCOT, Prop.Y): (-15.0, 0.0),
    (Element.BODY, Prop.SCALE_Y): (1.0, 1.015),
    (Element.HEAD, Prop.ROTATE): (0.0, 4.0),
    (Element.HEAD, Prop.Y): (-4.0, 0.0),
    (Element.EARS, Prop.ROTATE): (-2.0, 0.0),
    (Element.TAIL, Prop.ROTATE): (-8.0, 12.0),
    (Element.EYES, Prop.OPACITY): (0.0, 1.0),
    (Element.EYELIDS, Prop.OPACITY): (0.0, 1.0),
    (Element.PUPILS, Prop.SCALE): (1.0, 1.15),
    (Element.EYE_WHITES, Prop.SCALE): (1.0, 1.08),
    (Element.HAPPY_EYES, Prop.OPACITY): (0.0, 1.0),
    (Element.MOUTH_CLOSED, Prop.OPACITY): (0.0, 1.0),
    (Element.MOUTH_OPEN, Prop.OPACITY): (0.0, 1.0),
    (Element.TONGUE, Prop.SCALE_Y): (1.0, 1.08),
    (Element.TONGUE, Prop.ROTATE): (0.0, 3.0),
    (Element.FLOOR, Prop.SCALE_X): (0.8, 1.2),
    (Element.FLOOR, Prop.OPACITY): (0.15, 0.4),
}

# Float slack for range checks after easing arithmetic
RANGE_EPSILON = 1e-9


def base_value(element: Element, prop: Prop) -> float:
    """Base value of a property.

    Raises:
        KeyError: If the element does not expose the property
    """
    try:
        return BASE_VALUES[element][prop]
    except KeyError:
        raise KeyError(f"{element.value} has no animatable {prop.value}") from None


class VisualState:
    """Property store for the mascot's visual elements.

    Resolved once at construction from BASE_VALUES; timelines read and
    write through it.

    Usage:
        state = VisualState()
        state.set(Element.HEAD, Prop.ROTATE, 4.0)
        state.get(Element.HEAD, Prop.ROTATE)  # 4.0
        state.reset()
    """

    def __init__(self) -> None:
        self._values: dict[PropertyKey, float] = {
            (element, prop): value
            for element, props in BASE_VALUES.items()
            for prop, value in props.items()
        }
        self._writes = 0

    def get(self, element: Element, prop: Prop) -> float:
        """Current value of a property."""
        key = (element, prop)
        if key not in self._values:
            raise KeyError(f"{element.value} has no animatable {prop.value}")
        return self._values[key]

    def set(self, element: Element, prop: Prop, value: float) -> None:
        """Write one property."""
        key = (element, prop)
        if key not in self._values:
            raise KeyError(f"{element.value} has no animatable {prop.value}")
        self._values[key] = float(value)
        self._writes += 1

    def apply(self, element: Element, props: Mapping[Prop, float]) -> None:
        """Write several properties of one element."""
        for prop, value in props.items():
            self.set(element, prop, value)

    def snapshot(self, keys: Iterable[PropertyKey] | None = None) -> dict[PropertyKey, float]:
        """Copy of current values, optionally restricted to keys."""
        if keys is None:
            return dict(self._values)
        return {key: self._values[key] for key in keys}

    def reset(self, elements: Iterable[Element] | None = None) -> None:
        """Restore base values, for all elements or the given ones."""
        targets = set(elements) if elements is not None else set(BASE_VALUES)
        for element in targets:
            for prop, value in BASE_VALUES[element].items():
                self._values[(element, prop)] = value
        self._writes += 1

    def is_at_base(self) -> bool:
        """Whether every property holds its base value."""
        return all(
            abs(self._values[(element, prop)] - value) <= RANGE_EPSILON
            for element, props in BASE_VALUES.items()
            for prop, value in props.items()
        )

    def out_of_range(self) -> dict[PropertyKey, float]:
        """Properties currently outside their authored range."""
        violations = {}
        for key, value in self._values.items():
            low, high = VALID_RANGES[key]
            if value < low - RANGE_EPSILON or value > high + RANGE_EPSILON:
                violations[key] = value
        return violations

    @property
    def write_count(self) -> int:
        """Number of writes so far (for change detection)."""
        return self._writes
