# src/equalscheck/core/object_accessor.py
"""Wrap an object to clone and scramble it reflectively.

ObjectAccessor is the entry point the equality verifier uses: it binds an
object (optionally viewed as one of its superclasses) and composes the
field enumerator, FieldAccessor, PrefabValues and Instantiator into
whole-object operations.

Clones are shallow: field values are copied, the objects they refer to
are shared.

Scrambling is consistent: given two equal objects, scrambling both with
the same PrefabValues leaves them equal to each other again, because each
field's replacement depends only on its current value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from equalscheck.contracts.errors import TypeMismatchError
from equalscheck.contracts.fields import FieldDescriptor
from equalscheck.core.field_accessor import FieldAccessor
from equalscheck.core.instantiator import Instantiator
from equalscheck.core.introspection import FieldIterable, is_pydantic_model
from equalscheck.core.logging import get_logger

if TYPE_CHECKING:
    from equalscheck.core.prefab import PrefabValues

logger = get_logger(__name__)


class ObjectAccessor[T]:
    """Reflective access to one wrapped object.

    Example:
        accessor = ObjectAccessor.of(point)
        copy = accessor.clone()                 # equal fields, new object
        sub = accessor.clone_into_subclass(ColorPoint)
        accessor.scramble(prefab_values)        # every mutable field changes
    """

    def __init__(self, obj: T, type_: type[T]) -> None:
        """Private: use ObjectAccessor.of()."""
        self._object = obj
        self._type = type_

    @classmethod
    def of(cls, obj: T, as_type: type[T] | None = None) -> ObjectAccessor[T]:
        """Factory method.

        Args:
            obj: The object to wrap
            as_type: Superclass of obj's class to treat it as. Fields declared
                below as_type are then invisible to clone and scramble.

        Raises:
            TypeMismatchError: If obj is not an instance of as_type
        """
        if as_type is None:
            return cls(obj, type(obj))
        if not isinstance(as_type, type) or not isinstance(obj, as_type):
            raise TypeMismatchError(as_type, type(obj))
        return cls(obj, as_type)

    @property
    def type(self) -> type[T]:
        """The class the wrapped object is treated as."""
        return self._type

    def get(self) -> T:
        """Return the wrapped object, unchanged."""
        return self._object

    def fields(self) -> FieldIterable:
        """Fields of the wrapped type and its superclasses."""
        return FieldIterable.of(self._type, instance=self._object)

    def declared_fields(self) -> FieldIterable:
        """Fields declared on the wrapped type itself."""
        return FieldIterable.of_declared(self._type, instance=self._object)

    def field_accessor_for(self, field: FieldDescriptor | str) -> FieldAccessor:
        """Return a FieldAccessor for the wrapped object and a field.

        Args:
            field: A FieldDescriptor, or the attribute name of one of the
                wrapped type's fields

        Raises:
            AttributeError: If a name is given and the wrapped type has no such field
        """
        if isinstance(field, str):
            descriptor = self.fields().find(field)
            if descriptor is None:
                raise AttributeError(f"{self._type.__qualname__} has no field {field!r}")
            field = descriptor
        return FieldAccessor(self._object, field)

    # -------------------------------------------------------------------------
    # Cloning
    # -------------------------------------------------------------------------

    def clone(self) -> T:
        """Create a shallow clone whose class is the wrapped type."""
        clone: T = Instantiator.of(self._type).instantiate()
        return self._clone_into(clone)

    def clone_into_subclass[S](self, subclass: type[S]) -> S:
        """Create a shallow clone whose class is a subclass of the wrapped type.

        Fields the subclass adds are left unset.

        Raises:
            TypeMismatchError: If subclass is not a subclass of the wrapped type
        """
        if not isinstance(subclass, type) or not issubclass(subclass, self._type):
            raise TypeMismatchError(self._type, subclass)
        clone: S = Instantiator.of(subclass).instantiate()
        return self._clone_into(clone)

    def clone_into_anonymous_subclass(self) -> T:
        """Create a shallow clone whose class is a dynamic subclass of the wrapped type.

        Raises:
            InstantiationError: If the wrapped type cannot be subclassed
        """
        clone: T = Instantiator.of(self._type).instantiate_anonymous_subclass()
        return self._clone_into(clone)

    def _clone_into[C](self, clone: C) -> C:
        for field in self.fields():
            FieldAccessor(self._object, field).copy_to(clone)
        if is_pydantic_model(self._type):
            _copy_model_internals(self._object, clone)
        return clone

    # -------------------------------------------------------------------------
    # Scrambling
    # -------------------------------------------------------------------------

    def scramble(self, prefab_values: PrefabValues) -> None:
        """Change every mutable field declared on the wrapped type and its superclasses.

        Immutable fields (static and final, or final and constant) are left
        unmodified.
        """
        self._scramble(self.fields(), prefab_values)

    def shallow_scramble(self, prefab_values: PrefabValues) -> None:
        """Change every mutable field declared on the wrapped type, but not inherited ones.

        Immutable fields (static and final, or final and constant) are left
        unmodified.
        """
        self._scramble(self.declared_fields(), prefab_values)

    def _scramble(self, fields: FieldIterable, prefab_values: PrefabValues) -> None:
        count = 0
        for field in fields:
            FieldAccessor(self._object, field).change_field(prefab_values)
            count += 1
        logger.debug("Scrambled object", type=self._type.__qualname__, fields=count)


def _copy_model_internals(source: Any, target: Any) -> None:
    """Copy the pydantic bookkeeping that takes part in equality."""
    fields_set = object.__getattribute__(source, "__pydantic_fields_set__")
    object.__setattr__(target, "__pydantic_fields_set__", set(fields_set))
    extra = object.__getattribute__(source, "__pydantic_extra__")
    object.__setattr__(target, "__pydantic_extra__", dict(extra) if extra is not None else None)
