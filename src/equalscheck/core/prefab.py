# src/equalscheck/core/prefab.py
"""Prefabricated sample values, two distinct ones per value-type.

Scrambling a field means replacing its value with one that is guaranteed
to differ. PrefabValues holds, per value-type, a "red" and a "black"
sample that are never equal to each other; FieldAccessor.change_field()
picks whichever one the field does not currently hold.

Lookup is keyed by annotation, not just by class:

    values.get(int)              -> PrefabPair(1, 2)
    values.get(list[str])        -> PrefabPair(["one"], ["two"])
    values.get(Optional[Point])  -> same as values.get(Point)

Classes outside the built-in catalogue are generated on first request:
two instances are allocated without running __init__, and every field is
populated from the pair of its own value-type, recursively. A field whose
value-type is already being generated further up the stack is left as
None in both samples, so self-referential classes terminate.

Pairs persist for the lifetime of the PrefabValues object. Lazy
population is guarded by a re-entrant lock, so one pool may be shared
between threads.
"""

from __future__ import annotations

import collections
import collections.abc
import enum
import re
import threading
import types
import uuid
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, timezone
from decimal import Decimal
from fractions import Fraction
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Any, Literal, TypeVar, Union, get_args, get_origin

from equalscheck.contracts.errors import PrefabValueError, type_name
from equalscheck.core.field_accessor import FieldAccessor
from equalscheck.core.instantiator import Instantiator, give_dynamic_subclass
from equalscheck.core.introspection import FieldIterable, strip_annotated
from equalscheck.core.logging import get_logger

if TYPE_CHECKING:
    from equalscheck.core.config import PrefabSettings

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 16


@dataclass(frozen=True, slots=True)
class PrefabPair:
    """Two samples of one value-type that are not equal to each other.

    Attributes:
        red: First sample
        black: Second sample, never equal to red
        red_copy: Optional third sample, equal to red
    """

    red: Any
    black: Any
    red_copy: Any = None


def _default_catalogue() -> dict[Any, PrefabPair]:
    """Built-in pairs for common value-types."""
    return {
        int: PrefabPair(1, 2, 1),
        float: PrefabPair(0.5, 1.0, 0.5),
        complex: PrefabPair(1j, 2j, 1j),
        bool: PrefabPair(True, False, True),
        str: PrefabPair("one", "two", "one"),
        bytes: PrefabPair(b"one", b"two", b"one"),
        bytearray: PrefabPair(bytearray(b"one"), bytearray(b"two"), bytearray(b"one")),
        Decimal: PrefabPair(Decimal("1.0"), Decimal("2.0"), Decimal("1.0")),
        Fraction: PrefabPair(Fraction(1, 2), Fraction(1, 3), Fraction(1, 2)),
        datetime: PrefabPair(
            datetime(2020, 1, 1, 12, 0, tzinfo=UTC),
            datetime(2021, 6, 15, 18, 30, tzinfo=UTC),
            datetime(2020, 1, 1, 12, 0, tzinfo=UTC),
        ),
        date: PrefabPair(date(2020, 1, 1), date(2021, 6, 15), date(2020, 1, 1)),
        time: PrefabPair(time(12, 0), time(18, 30), time(12, 0)),
        timedelta: PrefabPair(timedelta(seconds=1), timedelta(seconds=2), timedelta(seconds=1)),
        timezone: PrefabPair(timezone.utc, timezone(timedelta(hours=1)), timezone(timedelta(0))),
        uuid.UUID: PrefabPair(
            uuid.UUID("00000000-0000-0000-0000-000000000001"),
            uuid.UUID("00000000-0000-0000-0000-000000000002"),
            uuid.UUID("00000000-0000-0000-0000-000000000001"),
        ),
        Path: PrefabPair(Path("one"), Path("two"), Path("one")),
        PurePath: PrefabPair(PurePath("one"), PurePath("two"), PurePath("one")),
        re.Pattern: PrefabPair(re.compile("one"), re.compile("two")),
        range: PrefabPair(range(1), range(2), range(1)),
        object: PrefabPair(object(), object()),
        type: PrefabPair(int, str),
        list: PrefabPair(["one"], ["two"], ["one"]),
        tuple: PrefabPair(("one",), ("two",), ("one",)),
        dict: PrefabPair({"one": 1}, {"two": 2}, {"one": 1}),
        set: PrefabPair({"one"}, {"two"}, {"one"}),
        frozenset: PrefabPair(frozenset({"one"}), frozenset({"two"}), frozenset({"one"})),
        collections.deque: PrefabPair(collections.deque(["one"]), collections.deque(["two"]), collections.deque(["one"])),
    }


# Abstract container interfaces and the concrete class that stands in for them
_ABSTRACT_SUBSTITUTES: dict[Any, type] = {
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}

_SEQUENCE_ORIGINS: frozenset[Any] = frozenset(
    {list, collections.abc.Iterable, collections.abc.Collection, collections.abc.Sequence, collections.abc.MutableSequence}
)
_SET_ORIGINS: frozenset[Any] = frozenset({set, collections.abc.MutableSet})
_FROZENSET_ORIGINS: frozenset[Any] = frozenset({frozenset, collections.abc.Set})
_MAPPING_ORIGINS: frozenset[Any] = frozenset({dict, collections.abc.Mapping, collections.abc.MutableMapping})


class _RecursionDetected(Exception):
    """Raised internally when a value-type is requested while it is being generated."""

    def __init__(self, value_type: type) -> None:
        self.value_type = value_type
        super().__init__(type_name(value_type))


def _are_equal(a: Any, b: Any) -> bool:
    return a is b or bool(a == b)


class PrefabValues:
    """Per-type pool of red/black sample values.

    Example:
        values = PrefabValues()
        values.put(Currency, Currency("EUR"), Currency("USD"))
        pair = values.get(Currency)
        other = values.get_other(int, 1)  # -> 2
    """

    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH, include_defaults: bool = True) -> None:
        """Initialize the pool.

        Args:
            max_depth: Maximum nesting depth when generating values for unknown classes
            include_defaults: Seed the pool with the built-in catalogue
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self._max_depth = max_depth
        self._pairs: dict[Any, PrefabPair] = _default_catalogue() if include_defaults else {}
        self._lock = threading.RLock()
        self._in_progress: list[type] = []

    @classmethod
    def from_settings(cls, settings: PrefabSettings) -> PrefabValues:
        """Create a pool from validated PrefabSettings."""
        return cls(max_depth=settings.max_depth, include_defaults=settings.include_defaults)

    def put(self, value_type: Any, red: Any, black: Any, red_copy: Any = None) -> None:
        """Register (or replace) the pair for a value-type.

        Use this for classes that cannot be generated, and for abstract
        classes or protocols that need a concrete substitute.

        Raises:
            PrefabValueError: If red and black are equal
        """
        if _are_equal(red, black):
            raise PrefabValueError(value_type, f"red and black must differ, both are {red!r}")
        with self._lock:
            self._pairs[value_type] = PrefabPair(red, black, red_copy)

    def __contains__(self, value_type: Any) -> bool:
        return value_type in self._pairs

    def contains(self, value_type: Any) -> bool:
        """Whether a pair is already registered or generated for value_type."""
        return value_type in self

    def get(self, value_type: Any) -> PrefabPair:
        """Return the pair for value_type, generating it on first request.

        Repeated calls for the same value-type return the same pair.

        Raises:
            PrefabValueError: If no two distinct values can be produced
            InstantiationError: If a class in the field graph cannot be allocated
        """
        pair = self._pairs.get(value_type)
        if pair is not None:
            return pair
        with self._lock:
            # Double-checked: another thread may have populated it meanwhile
            pair = self._pairs.get(value_type)
            if pair is not None:
                return pair
            try:
                return self._get(value_type, depth=0)
            except _RecursionDetected as e:
                raise PrefabValueError(e.value_type, "recursive data structure has no values to fall back on") from e

    def get_red(self, value_type: Any) -> Any:
        """Shorthand for get(value_type).red."""
        return self.get(value_type).red

    def get_black(self, value_type: Any) -> Any:
        """Shorthand for get(value_type).black."""
        return self.get(value_type).black

    def get_other(self, value_type: Any, value: Any) -> Any:
        """Return a sample of value_type that is not equal to value.

        Black when value equals red, red otherwise. The choice depends only
        on value and the pair, so equal inputs always get equal outputs.
        """
        pair = self.get(value_type)
        if _are_equal(value, pair.red):
            return pair.black
        return pair.red

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def _get(self, value_type: Any, depth: int) -> PrefabPair:
        pair = self._pairs.get(value_type)
        if pair is not None:
            return pair
        if depth > self._max_depth:
            chain = " -> ".join(type_name(t) for t in self._in_progress)
            raise PrefabValueError(value_type, f"nesting deeper than max_depth={self._max_depth} ({chain})")

        pair = self._create(value_type, depth)
        if _are_equal(pair.red, pair.black):
            raise PrefabValueError(value_type, f"generated samples are equal: {pair.red!r}")
        self._pairs[value_type] = pair
        return pair

    def _create(self, value_type: Any, depth: int) -> PrefabPair:
        inner, _ = strip_annotated(value_type)
        if inner is not value_type:
            return self._get(inner, depth)

        if value_type is Any:
            return self._get(object, depth)
        if isinstance(value_type, TypeVar):
            bound = value_type.__bound__
            return self._get(bound if bound is not None else object, depth)

        origin = get_origin(value_type)
        args = get_args(value_type)

        if origin is Literal:
            if len(args) >= 2:
                return PrefabPair(args[0], args[1], args[0])
            if len(args) == 1:
                return PrefabPair(args[0], None, args[0])
            raise PrefabValueError(value_type, "Literal[] has no values")

        if origin is Union or origin is types.UnionType:
            candidates = [arg for arg in args if arg is not type(None)]
            if not candidates:
                raise PrefabValueError(value_type, "union has no non-None members")
            return self._get(candidates[0], depth)

        if origin is not None:
            return self._create_generic(value_type, origin, args, depth)

        if not isinstance(value_type, type):
            raise PrefabValueError(value_type, "not a class or supported annotation")

        if value_type in _ABSTRACT_SUBSTITUTES:
            return self._get(_ABSTRACT_SUBSTITUTES[value_type], depth)
        if value_type is type(None):
            raise PrefabValueError(value_type, "NoneType has a single value")
        if issubclass(value_type, enum.Enum):
            return self._create_enum(value_type)
        return self._create_instances(value_type, depth)

    def _create_generic(self, value_type: Any, origin: Any, args: tuple[Any, ...], depth: int) -> PrefabPair:
        if not args:
            return self._get(origin, depth)

        if origin in _SEQUENCE_ORIGINS:
            element = self._get(args[0], depth + 1)
            return PrefabPair([element.red], [element.black], [element.red])
        if origin in _SET_ORIGINS:
            element = self._get(args[0], depth + 1)
            return PrefabPair({element.red}, {element.black}, {element.red})
        if origin in _FROZENSET_ORIGINS:
            element = self._get(args[0], depth + 1)
            return PrefabPair(frozenset({element.red}), frozenset({element.black}), frozenset({element.red}))
        if origin in _MAPPING_ORIGINS:
            key = self._get(args[0], depth + 1)
            value = self._get(args[1], depth + 1) if len(args) > 1 else self._get(object, depth + 1)
            return PrefabPair({key.red: value.red}, {key.black: value.black}, {key.red: value.red})
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                element = self._get(args[0], depth + 1)
                return PrefabPair((element.red,), (element.black,), (element.red,))
            if args == ((),):
                raise PrefabValueError(value_type, "empty tuple type has a single value")
            elements = [self._get(arg, depth + 1) for arg in args]
            return PrefabPair(
                tuple(e.red for e in elements),
                tuple(e.black for e in elements),
                tuple(e.red for e in elements),
            )
        if origin is type:
            target = args[0]
            if isinstance(target, type):
                return PrefabPair(target, give_dynamic_subclass(target), target)
            return self._get(type, depth)

        # User generics (Box[int]) and other parameterised classes: use the origin
        return self._get(origin, depth)

    def _create_enum(self, enum_type: type[enum.Enum]) -> PrefabPair:
        members = list(enum_type)
        if len(members) >= 2:
            return PrefabPair(members[0], members[1], members[0])
        if len(members) == 1:
            return PrefabPair(members[0], None, members[0])
        raise PrefabValueError(enum_type, "enum has no members")

    def _create_instances(self, cls: type, depth: int) -> PrefabPair:
        if cls in self._in_progress:
            raise _RecursionDetected(cls)

        self._in_progress.append(cls)
        try:
            instantiator = Instantiator.of(cls)
            red = instantiator.instantiate()
            black = instantiator.instantiate()
            red_copy = instantiator.instantiate()

            for field in FieldIterable.of(instantiator.type):
                if field.is_immutable:
                    continue
                try:
                    pair = self._get(field.value_type, depth + 1)
                except _RecursionDetected as e:
                    logger.debug(
                        "Recursive field left empty",
                        type=cls.__qualname__,
                        field=field.qualified_name,
                        recursive_type=type_name(e.value_type),
                    )
                    pair = PrefabPair(None, None, None)
                except PrefabValueError as e:
                    if e.field is not None:
                        raise
                    raise PrefabValueError(e.type, e.reason, field=field.qualified_name) from e

                FieldAccessor(red, field).set(pair.red)
                FieldAccessor(black, field).set(pair.black)
                FieldAccessor(red_copy, field).set(pair.red)
        finally:
            self._in_progress.pop()

        logger.debug("Generated prefab values", type=cls.__qualname__, depth=depth)
        return PrefabPair(red, black, red_copy)
