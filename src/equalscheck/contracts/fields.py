# src/equalscheck/contracts/fields.py
"""Field metadata shared by the enumerator, the accessors and callers.

A FieldDescriptor identifies one attribute declared by one class. It is
pure metadata: reading or writing the attribute on an object is the job of
core.field_accessor.FieldAccessor.

Immutability:
    The core never writes a field that is static AND final, or final AND
    a compile-time constant. Python has no compile-time constants, so a
    field is treated as one only when it says so explicitly:

        class Config:
            version: Annotated[int, CONSTANT] = 3

        @dataclass
        class Point:
            x: int
            origin: str = constant_field("cartesian")

    or when it is ``Final`` and its class-level default is a literal.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

CONSTANT_METADATA_KEY = "equalscheck.constant"


class _ConstantMarker:
    """Annotated[] marker flagging a field as a compile-time constant."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "CONSTANT"


CONSTANT = _ConstantMarker()


def constant_field(default: Any, **kwargs: Any) -> Any:
    """Declare a dataclass field whose value is a compile-time constant.

    Args:
        default: The constant value
        **kwargs: Passed through to dataclasses.field()

    Returns:
        A dataclasses.Field with the constant flag in its metadata
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[CONSTANT_METADATA_KEY] = True
    return dataclasses.field(default=default, metadata=metadata, **kwargs)


class FieldStorage(StrEnum):
    """Where a field's value lives."""

    INSTANCE = "instance"  # instance __dict__ or a slot
    CLASS = "class"  # class attribute (static field)
    PYDANTIC_PRIVATE = "pydantic_private"  # pydantic __pydantic_private__ dict


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One field declared by one class.

    Attributes:
        name: Attribute name as stored on the object (private slots are mangled)
        declaring_type: The class that declares the field
        value_type: Declared annotation, or Any when undeclared/unresolvable
        is_static: Class-level field (ClassVar, or a Final class constant)
        is_final: Final annotation, frozen dataclass or frozen pydantic field
        is_constant: Explicitly marked or literal-initialised Final field
        storage: Where the value lives
        declared: False for attributes found only in an instance __dict__
    """

    name: str
    declaring_type: type
    value_type: Any = Any
    is_static: bool = False
    is_final: bool = False
    is_constant: bool = False
    storage: FieldStorage = FieldStorage.INSTANCE
    declared: bool = True

    @property
    def is_immutable(self) -> bool:
        """Whether the core must never write this field."""
        return (self.is_static and self.is_final) or (self.is_final and self.is_constant)

    @property
    def qualified_name(self) -> str:
        """``DeclaringClass.name``, used in diagnostics."""
        return f"{self.declaring_type.__qualname__}.{self.name}"

    def __str__(self) -> str:
        return self.qualified_name
