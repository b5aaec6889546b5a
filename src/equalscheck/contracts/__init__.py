# src/equalscheck/contracts/__init__.py
"""Shared contracts: field metadata and the error taxonomy.

This package is a LEAF MODULE with no outbound dependencies to core/.
Core modules and external orchestration layers both import from here.
"""

from equalscheck.contracts.errors import (
    EqualsCheckError,
    InstantiationError,
    PrefabValueError,
    TypeMismatchError,
)
from equalscheck.contracts.fields import (
    CONSTANT,
    CONSTANT_METADATA_KEY,
    FieldDescriptor,
    FieldStorage,
    constant_field,
)

__all__ = [
    "CONSTANT",
    "CONSTANT_METADATA_KEY",
    "EqualsCheckError",
    "FieldDescriptor",
    "FieldStorage",
    "InstantiationError",
    "PrefabValueError",
    "TypeMismatchError",
    "constant_field",
]
