# tests/property/core/test_clone_properties.py
"""Property-based tests for clone(), clone_into_subclass() and
clone_into_anonymous_subclass().

Clones are shallow: a new object of the right class, field values shared
with the original.
"""

from __future__ import annotations

from typing import Any

from hypothesis import given

from equalscheck.core.object_accessor import ObjectAccessor
from tests.fixtures.domain import ColorPoint, DataPoint, DataPoint3D, Point
from tests.property.conftest import data_points, points, scrambleable
from tests.property.settings import STANDARD_SETTINGS


class TestClone:
    """clone() produces an equal, distinct object of the same class."""

    @given(original=scrambleable)
    @STANDARD_SETTINGS
    def test_clone_equals_original(self, original: object) -> None:
        clone = ObjectAccessor.of(original).clone()

        assert clone == original
        assert clone is not original
        assert type(clone) is type(original)

    @given(original=scrambleable)
    @STANDARD_SETTINGS
    def test_clone_shares_field_values(self, original: object) -> None:
        accessor = ObjectAccessor.of(original)
        clone = accessor.clone()
        clone_accessor: ObjectAccessor[Any] = ObjectAccessor.of(clone)

        for field in accessor.fields():
            assert clone_accessor.field_accessor_for(field).get() is accessor.field_accessor_for(field).get()

    @given(original=scrambleable)
    @STANDARD_SETTINGS
    def test_clone_is_independent(self, original: object) -> None:
        from equalscheck.core.prefab import PrefabValues

        reference = ObjectAccessor.of(original).clone()
        clone = ObjectAccessor.of(original).clone()

        ObjectAccessor.of(clone).scramble(PrefabValues())

        assert clone != original
        assert reference == original


class TestCloneIntoSubclass:
    """Subclass clones carry every field of the wrapped type."""

    @given(original=points)
    @STANDARD_SETTINGS
    def test_plain_subclass(self, original: Point) -> None:
        clone = ObjectAccessor.of(original).clone_into_subclass(ColorPoint)

        assert type(clone) is ColorPoint
        assert (clone.x, clone.y) == (original.x, original.y)

    @given(original=data_points)
    @STANDARD_SETTINGS
    def test_dataclass_subclass(self, original: DataPoint) -> None:
        clone = ObjectAccessor.of(original).clone_into_subclass(DataPoint3D)

        assert type(clone) is DataPoint3D
        assert (clone.x, clone.y) == (original.x, original.y)

    @given(original=scrambleable)
    @STANDARD_SETTINGS
    def test_anonymous_subclass(self, original: object) -> None:
        clone = ObjectAccessor.of(original).clone_into_anonymous_subclass()

        assert isinstance(clone, type(original))
        assert type(clone) is not type(original)
        for field in ObjectAccessor.of(original).fields():
            assert ObjectAccessor.of(original).field_accessor_for(field).get() == getattr(clone, field.name)
