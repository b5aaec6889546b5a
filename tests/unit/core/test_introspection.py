# tests/unit/core/test_introspection.py
"""Tests for field enumeration.

Covers:
- declared_fields() per class shape (plain, dataclass, pydantic, slots)
- Static / final / constant classification
- FieldIterable ordering, deduplication and shallow vs deep iteration
- Undeclared instance attributes
"""

from typing import Any, ClassVar, TypeVar

from equalscheck.contracts.fields import FieldStorage
from equalscheck.core.introspection import FieldIterable, declared_fields, is_pydantic_model, strip_annotated
from tests.fixtures.domain import (
    Account,
    Box,
    CachedArea,
    Car,
    Color,
    ColorPoint,
    Constants,
    DataPoint,
    DataPoint3D,
    FrozenMoney,
    FrozenPoint,
    GhostReference,
    Money,
    Person,
    Point,
    PremiumAccount,
    PseudoFields,
    SlottedDataPoint,
    SlottedPoint,
    TrivialPoint,
    UntypedPoint,
    WithConstants,
)


def _by_name(cls: type) -> dict[str, Any]:
    return {field.name: field for field in declared_fields(cls)}


class TestDeclaredFields:
    """Tests for declared_fields() on individual classes."""

    def test_annotated_plain_class(self) -> None:
        fields = declared_fields(Point)

        assert [f.name for f in fields] == ["x", "y"]
        assert all(f.value_type is int for f in fields)
        assert all(f.declaring_type is Point for f in fields)

    def test_subclass_declares_only_its_own(self) -> None:
        assert [f.name for f in declared_fields(ColorPoint)] == ["color"]
        assert declared_fields(ColorPoint)[0].value_type is Color

    def test_trivial_subclass_declares_nothing(self) -> None:
        assert declared_fields(TrivialPoint) == ()

    def test_foundation_classes_declare_nothing(self) -> None:
        from pydantic import BaseModel

        assert declared_fields(object) == ()
        assert declared_fields(BaseModel) == ()

    def test_result_is_cached(self) -> None:
        assert declared_fields(Point) is declared_fields(Point)

    def test_resolves_generic_annotations(self) -> None:
        fields = _by_name(Person)

        assert fields["nicknames"].value_type == list[str]
        assert fields["scores"].value_type == dict[str, int]
        assert fields["home"].value_type == Point | None

    def test_unresolvable_annotation_degrades_to_any(self) -> None:
        fields = _by_name(GhostReference)

        assert fields["ghost"].value_type is Any
        assert fields["count"].value_type is int

    def test_resolvable_names_survive_an_unresolvable_neighbour(self) -> None:
        class Partial:
            ghost: "DoesNotExist"  # type: ignore[name-defined]  # noqa: F821
            limit: "ClassVar[int]" = 3
            origin: "Point | None"

        fields = {f.name: f for f in declared_fields(Partial)}

        assert fields["ghost"].value_type is Any
        assert fields["limit"].is_static
        assert fields["limit"].value_type is int
        assert fields["origin"].value_type == Point | None

    def test_type_parameter_resolves_to_typevar(self) -> None:
        (field,) = declared_fields(Box)

        assert isinstance(field.value_type, TypeVar)

    def test_dataclass_pseudo_fields_are_skipped(self) -> None:
        assert [f.name for f in declared_fields(PseudoFields)] == ["x", "y"]

    def test_slots_are_fields_with_mangled_private_names(self) -> None:
        assert [f.name for f in declared_fields(SlottedPoint)] == ["x", "y", "_SlottedPoint__secret"]

    def test_slotted_dataclass_has_no_duplicates(self) -> None:
        assert [f.name for f in declared_fields(SlottedDataPoint)] == ["x", "y"]


class TestFieldClassification:
    """Tests for static / final / constant flags."""

    def test_ordinary_field_is_mutable(self) -> None:
        x = _by_name(Constants)["x"]

        assert not x.is_static
        assert not x.is_final
        assert not x.is_immutable

    def test_final_literal_in_plain_class_is_static_constant(self) -> None:
        version = _by_name(Constants)["VERSION"]

        assert version.is_static
        assert version.is_final
        assert version.is_constant
        assert version.storage is FieldStorage.CLASS
        assert version.is_immutable

    def test_classvar_is_static_but_not_final(self) -> None:
        registry = _by_name(Constants)["registry"]

        assert registry.is_static
        assert not registry.is_final
        assert registry.storage is FieldStorage.CLASS

    def test_constant_marker_implies_final(self) -> None:
        label = _by_name(Constants)["label"]

        assert label.is_constant
        assert label.is_final
        assert not label.is_static
        assert label.value_type is str
        assert label.is_immutable

    def test_dataclass_constants(self) -> None:
        fields = _by_name(WithConstants)

        assert not fields["x"].is_immutable
        assert fields["label"].is_immutable
        assert fields["tag"].is_immutable
        assert fields["unit"].is_immutable
        assert fields["counter"].is_static
        assert not fields["counter"].is_final

    def test_frozen_dataclass_is_final_not_constant(self) -> None:
        for field in declared_fields(FrozenPoint):
            assert field.is_final
            assert not field.is_constant
            assert not field.is_immutable

    def test_frozen_model_is_final_not_constant(self) -> None:
        for field in declared_fields(FrozenMoney):
            assert field.is_final
            assert not field.is_immutable

    def test_pydantic_storage(self) -> None:
        fields = _by_name(Account)

        assert fields["owner"].storage is FieldStorage.INSTANCE
        assert fields["limit"].storage is FieldStorage.CLASS
        assert fields["limit"].is_static
        assert fields["_secret"].storage is FieldStorage.PYDANTIC_PRIVATE


class TestFieldIterable:
    """Tests for iteration over a class hierarchy."""

    def test_deep_iteration_is_most_derived_first(self) -> None:
        assert FieldIterable.of(ColorPoint).names() == ["color", "x", "y"]
        assert FieldIterable.of(DataPoint3D).names() == ["z", "x", "y"]

    def test_shallow_iteration_is_own_fields_only(self) -> None:
        assert FieldIterable.of_declared(ColorPoint).names() == ["color"]
        assert FieldIterable.of_declared(TrivialPoint).names() == []

    def test_dataclass_redeclaration_is_deduplicated(self) -> None:
        from dataclasses import dataclass

        @dataclass
        class Redeclared(DataPoint):
            y: int = 0

        assert FieldIterable.of(Redeclared).names() == ["y", "x"]
        assert FieldIterable.of(Redeclared).find("y").declaring_type is Redeclared  # type: ignore[union-attr]

    def test_static_fields_are_not_iterated(self) -> None:
        assert FieldIterable.of(Constants).names() == ["label", "x"]
        assert FieldIterable.of(WithConstants).names() == ["x", "label", "tag", "unit"]

    def test_pydantic_hierarchy(self) -> None:
        assert FieldIterable.of(PremiumAccount).names() == ["tier", "owner", "_secret"]
        assert FieldIterable.of(Money).names() == ["amount", "currency"]

    def test_find(self) -> None:
        field = FieldIterable.of(ColorPoint).find("x")

        assert field is not None
        assert field.declaring_type is Point
        assert FieldIterable.of(ColorPoint).find("missing") is None

    def test_undeclared_attributes_need_an_instance(self) -> None:
        point = UntypedPoint(1, "a")

        assert FieldIterable.of(UntypedPoint).names() == []
        fields = list(FieldIterable.of(UntypedPoint, instance=point))
        assert [f.name for f in fields] == ["x", "y"]
        assert all(not f.declared for f in fields)
        assert all(f.value_type is Any for f in fields)

    def test_undeclared_attributes_only_for_exact_type(self) -> None:
        class SubUntyped(UntypedPoint):
            pass

        point = SubUntyped(1, "a")

        assert FieldIterable.of(UntypedPoint, instance=point).names() == []
        assert FieldIterable.of(SubUntyped, instance=point).names() == ["x", "y"]

    def test_shallow_iteration_skips_undeclared_attributes_below_a_user_base(self) -> None:
        """A base class __init__ may have assigned them, so they are not the subclass's own."""
        car = Car(4, 2)

        assert FieldIterable.of_declared(Car, instance=car).names() == []
        assert FieldIterable.of(Car, instance=car).names() == ["wheels", "seats"]

    def test_shallow_iteration_keeps_undeclared_attributes_without_a_user_base(self) -> None:
        point = UntypedPoint(1, "a")

        assert FieldIterable.of_declared(UntypedPoint, instance=point).names() == ["x", "y"]

    def test_cached_property_is_not_a_field(self) -> None:
        shape = CachedArea(3)
        assert shape.area == 9

        assert FieldIterable.of(CachedArea, instance=shape).names() == ["width"]

    def test_declared_attributes_are_not_reported_twice(self) -> None:
        point = Point(1, 2)

        assert FieldIterable.of(Point, instance=point).names() == ["x", "y"]


class TestHelpers:
    """Tests for small introspection helpers."""

    def test_is_pydantic_model(self) -> None:
        assert is_pydantic_model(Money)
        assert not is_pydantic_model(DataPoint)
        assert not is_pydantic_model(Money(amount=1, currency="EUR"))  # type: ignore[arg-type]

    def test_strip_annotated(self) -> None:
        from typing import Annotated

        assert strip_annotated(Annotated[int, "meta", 3]) == (int, ("meta", 3))
        assert strip_annotated(int) == (int, ())
