# src/equalscheck/__init__.py
"""
equalscheck: reflective object manipulation for equality contract verification.

Builds, clones and scrambles instances of arbitrary classes so that an
equals/hash verifier can probe every field's contribution to equality
without hand-written per-field test cases.
"""

from equalscheck.contracts import (
    CONSTANT,
    EqualsCheckError,
    FieldDescriptor,
    FieldStorage,
    InstantiationError,
    PrefabValueError,
    TypeMismatchError,
    constant_field,
)
from equalscheck.core import (
    FieldAccessor,
    FieldIterable,
    Instantiator,
    ObjectAccessor,
    PrefabPair,
    PrefabValues,
)

__version__ = "0.1.0"

__all__ = [
    "CONSTANT",
    "EqualsCheckError",
    "FieldAccessor",
    "FieldDescriptor",
    "FieldIterable",
    "FieldStorage",
    "InstantiationError",
    "Instantiator",
    "ObjectAccessor",
    "PrefabPair",
    "PrefabValueError",
    "PrefabValues",
    "TypeMismatchError",
    "constant_field",
]
