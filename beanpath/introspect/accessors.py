"""
Property accessors.

An accessor is a small immutable object bound to (class, property name)
that knows how to read or write that property on instances of the class
and what type the property is declared with. Accessors are created and
cached by the Introspector and shared between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .types import component_type, key_component_type, raw_type


@runtime_checkable
class ReadAccessor(Protocol):
    """Read capability for one property."""
    name: str
    declared_type: Any

    @property
    def raw_type(self) -> type: ...

    @property
    def raw_component_type(self) -> type | None: ...

    @property
    def raw_key_component_type(self) -> type | None: ...

    def read(self, instance: Any) -> Any: ...


@runtime_checkable
class WriteAccessor(Protocol):
    """Write capability for one property."""
    name: str
    declared_type: Any

    @property
    def raw_type(self) -> type: ...

    @property
    def raw_component_type(self) -> type | None: ...

    @property
    def raw_key_component_type(self) -> type | None: ...

    def write(self, instance: Any, value: Any) -> None: ...


@dataclass(frozen=True)
class _Accessor:
    name: str
    declared_type: Any
    owner: type

    @property
    def raw_type(self) -> type:
        return raw_type(self.declared_type)

    @property
    def raw_component_type(self) -> type | None:
        comp = component_type(self.declared_type)
        return None if comp is None else raw_type(comp)

    @property
    def raw_key_component_type(self) -> type | None:
        key = key_component_type(self.declared_type)
        return None if key is None else raw_type(key)

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.owner.__name__}.{self.name})"


# ---- Method based ----

@dataclass(frozen=True)
class PropertyReader(_Accessor):
    """Reads through a ``property`` getter."""
    fget: Any = None

    def read(self, instance: Any) -> Any:
        return self.fget(instance)


@dataclass(frozen=True)
class PropertyWriter(_Accessor):
    """Writes through a ``property`` setter."""
    fset: Any = None

    def write(self, instance: Any, value: Any) -> None:
        self.fset(instance, value)


@dataclass(frozen=True)
class MethodReader(_Accessor):
    """Reads through an explicit ``get_<name>()`` / ``is_<name>()`` method."""
    method: str = ""

    def read(self, instance: Any) -> Any:
        return getattr(instance, self.method)()


@dataclass(frozen=True)
class MethodWriter(_Accessor):
    """Writes through an explicit ``set_<name>(value)`` method."""
    method: str = ""

    def write(self, instance: Any, value: Any) -> None:
        getattr(instance, self.method)(value)


# ---- Field based ----

@dataclass(frozen=True)
class FieldReader(_Accessor):
    """Reads a plain attribute (annotated field, slot, class attribute)."""

    def read(self, instance: Any) -> Any:
        # unassigned slots read as None
        return getattr(instance, self.name, None)


@dataclass(frozen=True)
class FieldWriter(_Accessor):
    """Writes a plain attribute."""

    def write(self, instance: Any, value: Any) -> None:
        setattr(instance, self.name, value)


__all__ = [
    "ReadAccessor",
    "WriteAccessor",
    "PropertyReader",
    "PropertyWriter",
    "MethodReader",
    "MethodWriter",
    "FieldReader",
    "FieldWriter",
]
