# src/equalscheck/core/introspection.py
"""Field enumeration: which attributes make up an object's state.

Fields come from what a class declares about itself:
- its own annotations (dataclasses, pydantic models, annotated plain classes)
- its own __slots__

Declared fields are derived once per class and cached. FieldIterable walks
a class and its superclasses (most-derived first), deduplicates by
attribute name, and optionally adds the undeclared attributes it finds in
an instance's __dict__.

Static fields (ClassVar, Final class constants) are described by
declared_fields() but never yielded by FieldIterable: they are class state,
not instance state, and cloning or scrambling an instance must not touch
them.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import typing
from collections.abc import Iterator
from typing import Annotated, Any, ClassVar, Final, get_args, get_origin

from equalscheck.contracts.fields import CONSTANT, CONSTANT_METADATA_KEY, FieldDescriptor, FieldStorage

# Classes from these modules are plumbing (object, ABC, Generic, BaseModel)
# and contribute no fields even though some of them carry annotations.
_FOUNDATION_MODULES: frozenset[str] = frozenset({"builtins", "abc", "typing", "pydantic.main"})

_IGNORED_SLOTS: frozenset[str] = frozenset({"__dict__", "__weakref__"})

# Values a Final field may be initialised with to count as a constant
_LITERAL_TYPES: tuple[type, ...] = (int, float, complex, str, bytes, bool, type(None))

_MISSING = object()

# Failures of evaluating a string annotation that mean "unknown type"
_UNRESOLVABLE: tuple[type[Exception], ...] = (NameError, AttributeError, SyntaxError, TypeError)


def is_pydantic_model(cls: type) -> bool:
    """Whether cls is a pydantic v2 model class."""
    return isinstance(cls, type) and hasattr(cls, "__pydantic_fields__") and hasattr(cls, "model_construct")


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _mangle(cls: type, name: str) -> str:
    """Apply private name mangling the way the compiler does for __slots__."""
    if name.startswith("__") and not name.endswith("__"):
        return f"_{cls.__name__.lstrip('_')}{name}"
    return name


def _resolve_one(cls: type, name: str, annotation: str, class_locals: dict[str, Any]) -> Any:
    """Evaluate one string annotation in the scope of cls, or return Any."""
    # A single-annotation stand-in lets get_type_hints resolve this name alone
    holder = type(cls.__name__, (), {"__annotations__": {name: annotation}, "__module__": cls.__module__})
    try:
        return typing.get_type_hints(holder, localns=class_locals, include_extras=True)[name]
    except _UNRESOLVABLE:
        return Any


def _own_annotations(cls: type) -> dict[str, Any]:
    """Return the class's own annotations, evaluated where possible.

    String annotations that cannot be evaluated (forward references to
    names that don't exist yet) degrade to Any rather than failing: the
    field still exists, only its value-type is unknown.
    """
    try:
        return dict(inspect.get_annotations(cls, eval_str=True))
    except _UNRESOLVABLE:
        raw = inspect.get_annotations(cls)
    # PEP 695 type parameters are not in the class namespace
    class_locals = {param.__name__: param for param in getattr(cls, "__type_params__", ())}
    class_locals.update(vars(cls))
    return {
        name: _resolve_one(cls, name, annotation, class_locals) if isinstance(annotation, str) else annotation
        for name, annotation in raw.items()
    }


def strip_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split Annotated[T, *extras] into (T, extras)."""
    if get_origin(annotation) is Annotated:
        inner, *extras = get_args(annotation)
        return inner, tuple(extras)
    return annotation, ()


def _is_pseudo_field(annotation: Any) -> bool:
    """KW_ONLY sentinels and InitVar annotations are not stored on the instance."""
    return annotation is dataclasses.KW_ONLY or annotation is dataclasses.InitVar or isinstance(annotation, dataclasses.InitVar)


def _unwrap_qualifier(annotation: Any, qualifier: Any) -> tuple[bool, Any]:
    """Detect ClassVar/Final qualifiers, returning (present, inner annotation)."""
    if annotation is qualifier:
        return True, Any
    if get_origin(annotation) is qualifier:
        args = get_args(annotation)
        return True, args[0] if args else Any
    return False, annotation


def _describe(cls: type, name: str, annotation: Any) -> FieldDescriptor:
    is_dataclass = dataclasses.is_dataclass(cls)
    is_model = is_pydantic_model(cls)

    value_type, extras = strip_annotated(annotation)
    is_static, value_type = _unwrap_qualifier(value_type, ClassVar)
    value_type, more_extras = strip_annotated(value_type)
    declared_final, value_type = _unwrap_qualifier(value_type, Final)
    value_type, final_extras = strip_annotated(value_type)
    extras = extras + more_extras + final_extras
    is_final = declared_final

    default = cls.__dict__.get(name, _MISSING)
    if is_dataclass:
        dc_field = cls.__dataclass_fields__.get(name)
        metadata = dc_field.metadata if dc_field is not None else {}
        if dc_field is not None and dc_field.default is not dataclasses.MISSING:
            default = dc_field.default
        is_final = is_final or cls.__dataclass_params__.frozen
    else:
        metadata = {}

    storage = FieldStorage.INSTANCE
    if is_model:
        model_fields = cls.__pydantic_fields__
        if name in model_fields:
            info = model_fields[name]
            default = info.default
            is_final = is_final or bool(info.frozen) or bool(cls.model_config.get("frozen"))
        elif name in getattr(cls, "__private_attributes__", {}):
            storage = FieldStorage.PYDANTIC_PRIVATE
        else:
            is_static = True
    elif declared_final and not is_dataclass and default is not _MISSING:
        # A Final name assigned in a plain class body is a class constant
        is_static = True

    if is_static:
        storage = FieldStorage.CLASS

    is_constant = (
        any(extra is CONSTANT for extra in extras)
        or bool(metadata.get(CONSTANT_METADATA_KEY))
        or (declared_final and default is not _MISSING and isinstance(default, _LITERAL_TYPES))
    )
    if is_constant and not is_final:
        # An explicit constant marker implies final
        is_final = True

    return FieldDescriptor(
        name=name,
        declaring_type=cls,
        value_type=value_type,
        is_static=is_static,
        is_final=is_final,
        is_constant=is_constant,
        storage=storage,
    )


@functools.lru_cache(maxsize=1024)
def declared_fields(cls: type) -> tuple[FieldDescriptor, ...]:
    """Return the fields declared directly on cls, in declaration order.

    Inherited fields are NOT included; see FieldIterable for that.

    Args:
        cls: Any class

    Returns:
        Tuple of FieldDescriptors, static fields included
    """
    if cls.__module__ in _FOUNDATION_MODULES:
        return ()

    result: list[FieldDescriptor] = []
    seen: set[str] = set()

    for name, annotation in _own_annotations(cls).items():
        if _is_dunder(name) or _is_pseudo_field(annotation):
            continue
        result.append(_describe(cls, name, annotation))
        seen.add(name)

    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    for slot in slots:
        if slot in _IGNORED_SLOTS:
            continue
        name = _mangle(cls, slot)
        if name in seen:
            continue
        result.append(FieldDescriptor(name=name, declaring_type=cls))
        seen.add(name)

    return tuple(result)


def _has_class_descriptor(cls: type, name: str) -> bool:
    attr = inspect.getattr_static(cls, name, _MISSING)
    return attr is not _MISSING and hasattr(type(attr), "__get__")


def dynamic_fields(instance: object, declared_names: set[str]) -> tuple[FieldDescriptor, ...]:
    """Return attributes present in the instance __dict__ but declared nowhere.

    Plain classes that assign attributes in __init__ without annotating them
    have state that no class declares. Those attributes are attributed to the
    instance's runtime class, with an unknown value-type.
    """
    try:
        namespace = object.__getattribute__(instance, "__dict__")
    except AttributeError:
        return ()
    cls = type(instance)
    return tuple(
        FieldDescriptor(name=name, declaring_type=cls, declared=False)
        for name in list(namespace)
        if not _is_dunder(name) and name not in declared_names and not _has_class_descriptor(cls, name)
    )


class FieldIterable:
    """Iterates the instance fields of a class, optionally with its superclasses.

    Example:
        for field in FieldIterable.of(Point3D):
            ...  # z (declared on Point3D), then x, y (declared on Point)

        for field in FieldIterable.of_declared(Point3D):
            ...  # z only
    """

    def __init__(self, type_: type, *, include_superclasses: bool, instance: object | None = None) -> None:
        self._type = type_
        self._include_superclasses = include_superclasses
        self._instance = instance

    @classmethod
    def of(cls, type_: type, instance: object | None = None) -> FieldIterable:
        """Fields declared on type_ and all of its superclasses."""
        return cls(type_, include_superclasses=True, instance=instance)

    @classmethod
    def of_declared(cls, type_: type, instance: object | None = None) -> FieldIterable:
        """Fields declared on type_ itself, ignoring superclasses."""
        return cls(type_, include_superclasses=False, instance=instance)

    def _hierarchy(self) -> tuple[type, ...]:
        if self._include_superclasses:
            return self._type.__mro__
        return (self._type,)

    def _reports_dynamic_fields(self) -> bool:
        # Undeclared attributes are credited to the runtime class, so they are
        # only reported when iterating exactly that class. A shallow view
        # cannot tell which superclass __init__ assigned them, so it reports
        # them only when every superclass is plumbing.
        if type(self._instance) is not self._type:
            return False
        if self._include_superclasses:
            return True
        return all(base.__module__ in _FOUNDATION_MODULES for base in self._type.__mro__[1:])

    def __iter__(self) -> Iterator[FieldDescriptor]:
        seen: set[str] = set()
        for klass in self._hierarchy():
            for field in declared_fields(klass):
                if field.is_static or field.name in seen:
                    continue
                seen.add(field.name)
                yield field

        if self._instance is not None and self._reports_dynamic_fields():
            all_declared = {f.name for klass in self._type.__mro__ for f in declared_fields(klass)}
            yield from dynamic_fields(self._instance, all_declared)

    def names(self) -> list[str]:
        """Attribute names, in iteration order."""
        return [field.name for field in self]

    def find(self, name: str) -> FieldDescriptor | None:
        """Return the field with the given attribute name, or None."""
        for field in self:
            if field.name == name:
                return field
        return None
