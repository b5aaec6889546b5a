# src/equalscheck/core/__init__.py
"""Core: field enumeration, instantiation, prefab values, accessors, config, logging."""

from equalscheck.core.config import (
    EqualsCheckSettings,
    LoggingSettings,
    PrefabSettings,
    load_settings,
)
from equalscheck.core.field_accessor import FieldAccessor
from equalscheck.core.instantiator import Instantiator, give_dynamic_subclass
from equalscheck.core.introspection import FieldIterable, declared_fields
from equalscheck.core.logging import (
    configure_logging,
    get_logger,
)
from equalscheck.core.object_accessor import ObjectAccessor
from equalscheck.core.prefab import PrefabPair, PrefabValues

__all__ = [
    "EqualsCheckSettings",
    "FieldAccessor",
    "FieldIterable",
    "Instantiator",
    "LoggingSettings",
    "ObjectAccessor",
    "PrefabPair",
    "PrefabSettings",
    "PrefabValues",
    "configure_logging",
    "declared_fields",
    "get_logger",
    "give_dynamic_subclass",
    "load_settings",
]
