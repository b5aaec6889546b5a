# src/equalscheck/core/field_accessor.py
"""Read and write one field of one object, bypassing encapsulation.

This is the only module that touches raw attribute storage. Everything
else (cloning, scrambling, prefab generation) goes through FieldAccessor.

Reads and writes go through object.__getattribute__ / object.__setattr__,
so custom __getattr__/__setattr__ hooks, frozen dataclasses and frozen
pydantic models do not get in the way. Static fields live on the
declaring class; pydantic private attributes live in __pydantic_private__.

Immutable fields (static and final, or final and constant) are never
written by set() or change_field(), which silently do nothing for them.
copy_to() still carries instance-stored immutable values over, so a clone
keeps per-instance overrides of a constant default.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from equalscheck.contracts.fields import FieldDescriptor, FieldStorage
from equalscheck.core.logging import get_logger

if TYPE_CHECKING:
    from equalscheck.core.prefab import PrefabValues

logger = get_logger(__name__)

_UNSET = object()


class FieldAccessor:
    """Binding between one object and one of its fields.

    Accessors are cheap and hold no state beyond the binding; create one
    per operation and discard it.
    """

    def __init__(self, obj: object, field: FieldDescriptor) -> None:
        self._object = obj
        self._field = field

    @property
    def object(self) -> object:
        """The bound object."""
        return self._object

    @property
    def field(self) -> FieldDescriptor:
        """The bound field."""
        return self._field

    def can_be_modified(self) -> bool:
        """Whether set() will actually write."""
        return not self._field.is_immutable

    def is_set(self) -> bool:
        """Whether the field currently holds a value on the bound object."""
        return self._read(self._object) is not _UNSET

    def get(self) -> Any:
        """Return the field's value.

        Raises:
            AttributeError: If the field has no value on the bound object
        """
        value = self._read(self._object)
        if value is _UNSET:
            raise AttributeError(f"Field {self._field.qualified_name} is not set on {type(self._object).__qualname__} instance")
        return value

    def set(self, value: Any) -> None:
        """Write the field's value. Does nothing for immutable fields."""
        if not self.can_be_modified():
            logger.debug("Skipping immutable field", field=self._field.qualified_name)
            return
        self._write(self._object, value)

    def copy_to(self, target: object) -> None:
        """Copy this field's value from the bound object into target.

        If the field is unset on the bound object, it is removed from
        target too, so the two agree field-for-field. Immutable fields are
        copied as well when they live on the instance; class-stored fields
        are shared and left alone.
        """
        if self._field.storage is FieldStorage.CLASS:
            return
        value = self._read(self._object)
        if value is _UNSET:
            self._delete(target)
        else:
            self._write(target, value)

    def change_field(self, prefab_values: PrefabValues) -> None:
        """Replace the field's value with a prefab value that differs from it.

        The replacement depends only on the current value and the prefab
        pair for the field's value-type, so two objects whose fields hold
        equal values end up holding equal values again. Untyped fields
        (Any, unbound TypeVar) always use the object pair, never the
        runtime type of the current value.
        """
        if not self.can_be_modified():
            logger.debug("Skipping immutable field", field=self._field.qualified_name)
            return
        current = self._read(self._object)
        self._write(self._object, prefab_values.get_other(self._field.value_type, current))

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    def _read(self, obj: object) -> Any:
        field = self._field
        if field.storage is FieldStorage.CLASS:
            return getattr(field.declaring_type, field.name, _UNSET)
        if field.storage is FieldStorage.PYDANTIC_PRIVATE:
            private = object.__getattribute__(obj, "__pydantic_private__")
            if private is None:
                return _UNSET
            return private.get(field.name, _UNSET)
        try:
            return object.__getattribute__(obj, field.name)
        except AttributeError:
            return _UNSET

    def _write(self, obj: object, value: Any) -> None:
        field = self._field
        if field.storage is FieldStorage.CLASS:
            type.__setattr__(field.declaring_type, field.name, value)
        elif field.storage is FieldStorage.PYDANTIC_PRIVATE:
            private = object.__getattribute__(obj, "__pydantic_private__")
            if private is None:
                private = {}
                object.__setattr__(obj, "__pydantic_private__", private)
            private[field.name] = value
        else:
            object.__setattr__(obj, field.name, value)

    def _delete(self, obj: object) -> None:
        field = self._field
        if field.storage is FieldStorage.CLASS:
            # Class state is shared; there is nothing per-object to remove
            return
        if field.storage is FieldStorage.PYDANTIC_PRIVATE:
            private = object.__getattribute__(obj, "__pydantic_private__")
            if private is not None:
                private.pop(field.name, None)
            return
        try:
            object.__delattr__(obj, field.name)
        except AttributeError:
            # Already absent
            pass
