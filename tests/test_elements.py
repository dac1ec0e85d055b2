"""Tests for visual elements and the property store."""

import pytest

from mascot.animation.elements import (
    BASE_VALUES,
    VALID_RANGES,
    Element,
    Prop,
    VisualState,
    base_value,
)


class TestBaseValues:
    """Tests for base values and ranges."""

    def test_every_element_has_base_values(self):
        """Each element exposes at least one property."""
        assert set(BASE_VALUES) == set(Element)

    def test_every_property_has_a_range(self):
        """Each (element, property) pair has an authored range."""
        keys = {(e, p) for e, props in BASE_VALUES.items() for p in props}
        assert keys == set(VALID_RANGES)

    def test_base_within_range(self):
        """Base values sit inside their ranges."""
        for element, props in BASE_VALUES.items():
            for prop, value in props.items():
                low, high = VALID_RANGES[(element, prop)]
                assert low <= value <= high

    def test_base_value_unknown_property(self):
        """Asking for a property an element lacks raises KeyError."""
        with pytest.raises(KeyError):
            base_value(Element.TAIL, Prop.OPACITY)


class TestVisualState:
    """Tests for VisualState."""

    def test_starts_at_base(self):
        """A fresh state holds base values."""
        state = VisualState()
        assert state.is_at_base()
        assert state.get(Element.FLOOR, Prop.OPACITY) == 0.15

    def test_set_and_get(self):
        """Writes are visible to reads."""
        state = VisualState()
        state.set(Element.HEAD, Prop.ROTATE, 4)
        assert state.get(Element.HEAD, Prop.ROTATE) == 4.0
        assert not state.is_at_base()

    def test_set_unknown_pair(self):
        """Writing an unknown pair raises KeyError."""
        state = VisualState()
        with pytest.raises(KeyError):
            state.set(Element.EARS, Prop.SCALE, 2.0)

    def test_reset_all(self):
        """reset restores every property."""
        state = VisualState()
        state.apply(Element.MASCOT, {Prop.SCALE_Y: 1.06, Prop.Y: -15})
        state.reset()
        assert state.is_at_base()

    def test_reset_some(self):
        """reset(elements) restores only the given elements."""
        state = VisualState()
        state.set(Element.HEAD, Prop.Y, -4)
        state.set(Element.TAIL, Prop.ROTATE, 12)
        state.reset([Element.HEAD])
        assert state.get(Element.HEAD, Prop.Y) == 0.0
        assert state.get(Element.TAIL, Prop.ROTATE) == 12.0

    def test_out_of_range(self):
        """Values outside the authored range are reported."""
        state = VisualState()
        state.set(Element.TAIL, Prop.ROTATE, 20)
        assert state.out_of_range() == {(Element.TAIL, Prop.ROTATE): 20.0}

    def test_snapshot_subset(self):
        """snapshot can be restricted to keys."""
        state = VisualState()
        snap = state.snapshot([(Element.EYES, Prop.OPACITY)])
        assert snap == {(Element.EYES, Prop.OPACITY): 1.0}

    def test_write_count(self):
        """Writes are counted."""
        state = VisualState()
        state.set(Element.EYES, Prop.OPACITY, 0.5)
        state.set(Element.EYES, Prop.OPACITY, 0.4)
        assert state.write_count == 2
