# src/equalscheck/contracts/errors.py
"""Error taxonomy for the reflective core.

Every error carries the offending type (and field, where one is involved)
both as attributes and in its message, so an orchestration layer can build
actionable diagnostics without parsing strings.

Attempts to write an immutable field are NOT errors. They are skipped
silently by FieldAccessor and never surface here.
"""

from __future__ import annotations

from typing import Any


def type_name(value_type: Any) -> str:
    """Render a class or annotation for error messages.

    Classes render as ``module.QualName`` (builtins without the module);
    anything else (typing constructs, strings) renders via repr().
    """
    if isinstance(value_type, type):
        if value_type.__module__ == "builtins":
            return value_type.__qualname__
        return f"{value_type.__module__}.{value_type.__qualname__}"
    return repr(value_type)


class EqualsCheckError(Exception):
    """Base class for all errors raised by equalscheck."""

    pass


class InstantiationError(EqualsCheckError):
    """Raised when an instance of a type cannot be allocated.

    Typical causes:
    - The type's native allocator refuses to create an instance without arguments
    - An anonymous subclass was requested for a class that cannot be subclassed
      (marked ``@typing.final``, or rejected by Python itself like ``bool``)
    - The type is an enum, whose members are fixed

    Attributes:
        type: The class that could not be instantiated
        reason: Human-readable cause
    """

    def __init__(self, type_: Any, reason: str) -> None:
        self.type = type_
        self.reason = reason
        super().__init__(f"Cannot instantiate {type_name(type_)}: {reason}")


class PrefabValueError(EqualsCheckError):
    """Raised when two distinct sample values cannot be produced for a type.

    Includes recursive data structures whose generated instances cannot be
    told apart, and types with fewer than two representable values.

    Attributes:
        type: The value-type the pool was asked for
        reason: Human-readable cause
        field: Qualified name of the field being populated, if any
    """

    def __init__(self, type_: Any, reason: str, *, field: str | None = None) -> None:
        self.type = type_
        self.reason = reason
        self.field = field
        location = f" (while populating field {field})" if field is not None else ""
        super().__init__(f"Cannot create prefab values for {type_name(type_)}{location}: {reason}")


class TypeMismatchError(EqualsCheckError):
    """Raised when a requested type is not compatible with the wrapped type.

    Attributes:
        expected: The type the argument had to be assignable to
        actual: The type (or object type) that was supplied
    """

    def __init__(self, expected: Any, actual: Any) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"{type_name(actual)} is not a subtype of {type_name(expected)}")
