# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Strategies build instances of the sample domain classes through their
normal constructors, so every generated object is one a user could have
handed to an equality verifier.

Usage:
    from tests.property.conftest import scrambleable

    @given(original=scrambleable)
    def test_clone_is_equal(original: object) -> None:
        ...
"""

# =============================================================================
# Hypothesis Settings
# =============================================================================
#
# For standardized @settings decorators, import from tests.property.settings:
#   from tests.property.settings import STANDARD_SETTINGS, DETERMINISM_SETTINGS
#
# Tiers: DETERMINISM (500), STANDARD (100), QUICK (20)
# =============================================================================

from __future__ import annotations

from hypothesis import strategies as st

from tests.fixtures.domain import (
    Color,
    ColorPoint,
    Constants,
    DataPoint,
    DataPoint3D,
    FrozenPoint,
    Money,
    Person,
    Point,
    SlottedPoint,
    UntypedPoint,
)

# =============================================================================
# Field values
# =============================================================================

ints = st.integers(min_value=-1000, max_value=1000)
texts = st.text(max_size=10)
colors = st.sampled_from(Color)

# =============================================================================
# Domain instances
# =============================================================================

points = st.builds(Point, ints, ints)
color_points = st.builds(ColorPoint, ints, ints, colors)
data_points = st.builds(DataPoint, ints, ints)
data_points_3d = st.builds(DataPoint3D, ints, ints, ints)
frozen_points = st.builds(FrozenPoint, ints, ints)
slotted_points = st.builds(SlottedPoint, ints, ints)
untyped_points = st.builds(UntypedPoint, ints, texts)
constants = st.builds(Constants, ints)
money = st.builds(Money, amount=ints, currency=texts)

persons = st.builds(
    Person,
    name=texts,
    born=st.dates(),
    id=st.uuids(),
    nicknames=st.lists(texts, max_size=3),
    scores=st.dictionaries(texts, ints, max_size=3),
    home=st.none() | points,
    favourite=colors,
    tags=st.frozensets(texts, max_size=3),
)

# Subclass instances: own fields plus inherited ones
hierarchies = st.one_of(color_points, data_points_3d)

# Everything scramble() and clone() are expected to handle
scrambleable = st.one_of(
    points,
    color_points,
    data_points,
    data_points_3d,
    frozen_points,
    slotted_points,
    untyped_points,
    money,
    persons,
)
