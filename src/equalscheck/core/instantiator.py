# src/equalscheck/core/instantiator.py
"""Create instances without running any constructor logic.

Field mutation has to be testable independently of whatever a class's
__init__, __post_init__ or validators enforce, so instances are allocated
directly:

1. Enums are refused (their members are fixed, there is nothing to allocate).
2. Abstract classes are replaced by a dynamic concrete subclass whose
   abstract members are stubs.
3. The instance is allocated by the __new__ of the nearest class in the MRO
   whose __new__ is native (object.__new__, int.__new__, ...). A __new__
   written in Python is user code and is skipped.
4. Pydantic models get their internal bookkeeping slots initialised, which
   their __init__ would otherwise have done.

If allocation still fails, InstantiationError is raised. Nothing is guessed.
"""

from __future__ import annotations

import enum
import inspect
import threading
import types
from typing import Any

from equalscheck.contracts.errors import InstantiationError
from equalscheck.core.introspection import is_pydantic_model
from equalscheck.core.logging import get_logger

logger = get_logger(__name__)

_dynamic_subclasses: dict[type, type] = {}
_dynamic_subclasses_lock = threading.Lock()


def _abstract_stub(base: type, name: str) -> Any:
    """Build a concrete stand-in for an abstract member of base."""
    original = inspect.getattr_static(base, name, None)

    def stub(self: Any, *args: Any, **kwargs: Any) -> Any:
        raise NotImplementedError(f"{type(self).__qualname__}.{name} is abstract in {base.__qualname__}")

    stub.__name__ = name
    stub.__qualname__ = f"{base.__qualname__}.{name}"

    if isinstance(original, property):
        return property(stub)
    if isinstance(original, classmethod):
        return classmethod(stub)
    if isinstance(original, staticmethod):
        return staticmethod(lambda *args, **kwargs: stub(None, *args, **kwargs))
    return stub


def give_dynamic_subclass(base: type) -> type:
    """Return a concrete, runtime-synthesised subclass of base.

    The subclass adds no state and overrides nothing except abstract
    members, so an instance of it has exactly base's fields but a type
    that is not base. It is created once per base and reused.

    Args:
        base: Class to subclass

    Returns:
        The dynamic subclass

    Raises:
        InstantiationError: If base is marked @typing.final or cannot be subclassed
    """
    with _dynamic_subclasses_lock:
        subclass = _dynamic_subclasses.get(base)
        if subclass is not None:
            return subclass

        if getattr(base, "__final__", False) is True:
            raise InstantiationError(base, "class is marked @final and cannot be subclassed")

        namespace: dict[str, Any] = {
            "__module__": base.__module__,
            "__qualname__": f"{base.__qualname__}.<anonymous>",
        }
        # Keep the instance layout identical to base: no __dict__ if base has none
        if base.__dictoffset__ == 0:
            namespace["__slots__"] = ()
        for name in getattr(base, "__abstractmethods__", frozenset()):
            namespace[name] = _abstract_stub(base, name)

        try:
            subclass = types.new_class(f"Anonymous{base.__name__}", (base,), exec_body=lambda ns: ns.update(namespace))
        except TypeError as e:
            raise InstantiationError(base, f"cannot be subclassed: {e}") from e

        _dynamic_subclasses[base] = subclass
        logger.debug("Synthesised dynamic subclass", base=base.__qualname__, subclass=subclass.__name__)
        return subclass


def _native_base(cls: type) -> type:
    """Return the nearest class in cls's MRO whose __new__ is not Python code."""
    for klass in cls.__mro__:
        new = klass.__dict__.get("__new__")
        if isinstance(new, types.BuiltinFunctionType):
            return klass
    return object


def _init_model_internals(instance: Any) -> None:
    """Initialise the slots pydantic's __init__ would have set."""
    cls = type(instance)
    object.__setattr__(instance, "__pydantic_fields_set__", set())
    object.__setattr__(instance, "__pydantic_extra__", {} if cls.model_config.get("extra") == "allow" else None)
    object.__setattr__(instance, "__pydantic_private__", {} if getattr(cls, "__private_attributes__", None) else None)


def allocate(cls: type) -> Any:
    """Allocate an instance of exactly cls without calling __init__.

    Args:
        cls: A concrete class

    Returns:
        A new instance whose type is cls

    Raises:
        InstantiationError: If cls is an enum, abstract, or cannot be allocated natively
    """
    if not isinstance(cls, type):
        raise InstantiationError(cls, "not a class")
    if issubclass(cls, enum.Enum):
        raise InstantiationError(cls, "enum members are fixed and cannot be allocated")
    if inspect.isabstract(cls):
        raise InstantiationError(cls, f"abstract members {sorted(cls.__abstractmethods__)} are not implemented")

    native = _native_base(cls)
    try:
        instance = native.__new__(cls)
    except TypeError as e:
        raise InstantiationError(cls, f"{native.__qualname__}.__new__ refused allocation: {e}") from e

    if is_pydantic_model(cls):
        _init_model_internals(instance)
    return instance


class Instantiator[T]:
    """Creates instances of a class, or of a dynamic subclass of it.

    Usage:
        point = Instantiator.of(Point).instantiate()
        # point.__init__ never ran; its fields are unset

        shape = Instantiator.of(AbstractShape).instantiate()
        # a dynamic concrete subclass of AbstractShape

        other = Instantiator.of(Point).instantiate_anonymous_subclass()
        # isinstance(other, Point) and type(other) is not Point
    """

    def __init__(self, type_: type[T], requested: type[T] | None = None) -> None:
        """Private: use Instantiator.of()."""
        self._type = type_
        self._requested = requested if requested is not None else type_

    @classmethod
    def of(cls, type_: type[T]) -> Instantiator[T]:
        """Factory method.

        Abstract classes are swapped for their dynamic subclass, so that
        instantiate() still yields something usable as a type_.

        Raises:
            InstantiationError: If type_ is not a class, or is abstract and
                cannot be subclassed
        """
        if not isinstance(type_, type):
            raise InstantiationError(type_, "not a class")
        if inspect.isabstract(type_):
            return cls(give_dynamic_subclass(type_), requested=type_)
        return cls(type_)

    @property
    def type(self) -> type[T]:
        """The class instantiate() allocates."""
        return self._type

    def instantiate(self) -> T:
        """Return a new instance of the class, without running __init__."""
        instance: T = allocate(self._type)
        return instance

    def instantiate_anonymous_subclass(self) -> T:
        """Return a new instance of a dynamic subclass, without running __init__.

        Raises:
            InstantiationError: If the class cannot be subclassed
        """
        instance: T = allocate(give_dynamic_subclass(self._requested))
        return instance
