"""
Accessor discovery for Python classes.

Lookup order for a property ``name`` on a class:
  1. method based: a ``property`` (or ``functools.cached_property``),
     then ``get_<name>()`` / ``is_<name>()`` and ``set_<name>(value)`` methods;
  2. field based: annotated fields (dataclasses, pydantic models, plain
     annotated classes), ``__slots__`` entries, non-callable class attributes.

With ``declared=True`` only members defined directly on the exact class are
considered; otherwise the whole MRO (except ``object``) is searched.
"""

from __future__ import annotations

import functools
import inspect
import logging
from dataclasses import is_dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .accessors import (
    FieldReader,
    FieldWriter,
    MethodReader,
    MethodWriter,
    PropertyReader,
    PropertyWriter,
    ReadAccessor,
    WriteAccessor,
)
from .types import is_class_var, resolve_hints

_LOG = logging.getLogger("beanpath.introspect")

DEFAULT_CACHE_SIZE = 1024

_NOT_FOUND = object()


class Introspector:
    """
    Resolves and caches read/write accessors per (class, name, declared).

    Instances are safe to share: the caches are bounded LRU caches holding
    immutable accessor objects, so an evicted entry is simply rebuilt.
    """

    def __init__(self, cache_size: int = DEFAULT_CACHE_SIZE):
        self.cache_size = cache_size
        self._read = functools.lru_cache(maxsize=cache_size)(self._find_reader)
        self._write = functools.lru_cache(maxsize=cache_size)(self._find_writer)
        self._hints = functools.lru_cache(maxsize=cache_size)(self._field_hints)

    # ---- Public API ----

    def resolve_read_accessor(self, tp: type, name: str, declared: bool = False) -> Optional[ReadAccessor]:
        return self._read(tp, name, declared)

    def resolve_write_accessor(self, tp: type, name: str, declared: bool = False) -> Optional[WriteAccessor]:
        return self._write(tp, name, declared)

    def instance_reader(self, instance: Any, name: str) -> Optional[ReadAccessor]:
        """Accessor for an undeclared attribute that lives in the instance ``__dict__``."""
        if name in getattr(instance, "__dict__", {}):
            return FieldReader(name=name, declared_type=object, owner=type(instance))
        return None

    def instance_writer(self, instance: Any, name: str) -> Optional[WriteAccessor]:
        if name in getattr(instance, "__dict__", {}) and not _is_frozen(type(instance)):
            return FieldWriter(name=name, declared_type=object, owner=type(instance))
        return None

    def clear_cache(self) -> None:
        self._read.cache_clear()
        self._write.cache_clear()
        self._hints.cache_clear()

    # ---- Lookup ----

    def _find_reader(self, tp: type, name: str, declared: bool) -> Optional[ReadAccessor]:
        attr = _lookup(tp, name, declared)
        if isinstance(attr, property):
            if attr.fget is not None:
                hint = _return_hint(attr.fget)
                _LOG.debug("reader %s.%s: property (%s)", tp.__name__, name, hint)
                return PropertyReader(name=name, declared_type=hint, owner=tp, fget=attr.fget)
            return None
        if isinstance(attr, functools.cached_property):
            return FieldReader(name=name, declared_type=_return_hint(attr.func), owner=tp)

        for prefix in ("get_", "is_"):
            method = _lookup(tp, prefix + name, declared)
            if inspect.isfunction(method):
                _LOG.debug("reader %s.%s: method %s%s()", tp.__name__, name, prefix, name)
                return MethodReader(name=name, declared_type=_return_hint(method), owner=tp, method=prefix + name)

        hint = self._field_hint(tp, name, declared)
        if hint is not _NOT_FOUND:
            _LOG.debug("reader %s.%s: field (%s)", tp.__name__, name, hint)
            return FieldReader(name=name, declared_type=hint, owner=tp)
        return None

    def _find_writer(self, tp: type, name: str, declared: bool) -> Optional[WriteAccessor]:
        attr = _lookup(tp, name, declared)
        method = _lookup(tp, "set_" + name, declared)
        if isinstance(attr, property):
            if attr.fset is not None:
                hint = _value_hint(attr.fset)
                if hint is None:
                    hint = _return_hint(attr.fget) if attr.fget is not None else Any
                return PropertyWriter(name=name, declared_type=hint, owner=tp, fset=attr.fset)
            # read-only property: only an explicit setter method can write it
            if inspect.isfunction(method):
                return MethodWriter(name=name, declared_type=_value_hint(method) or Any, owner=tp, method="set_" + name)
            return None

        if inspect.isfunction(method):
            hint = _value_hint(method)
            if hint is None:
                reader = self._read(tp, name, declared)
                hint = reader.declared_type if reader is not None else Any
            _LOG.debug("writer %s.%s: method set_%s()", tp.__name__, name, name)
            return MethodWriter(name=name, declared_type=hint, owner=tp, method="set_" + name)

        if _is_frozen(tp):
            return None
        if isinstance(attr, functools.cached_property):
            return FieldWriter(name=name, declared_type=_return_hint(attr.func), owner=tp)
        hint = self._field_hint(tp, name, declared)
        if hint is not _NOT_FOUND:
            _LOG.debug("writer %s.%s: field (%s)", tp.__name__, name, hint)
            return FieldWriter(name=name, declared_type=hint, owner=tp)
        return None

    # ---- Fields ----

    def _field_hint(self, tp: type, name: str, declared: bool) -> Any:
        hints = self._hints(tp, declared)
        if name in hints:
            return hints[name]
        for kls in _classes(tp, declared):
            slots = kls.__dict__.get("__slots__", ())
            if isinstance(slots, str):
                slots = (slots,)
            if name in slots:
                return Any
            if name in kls.__dict__:
                value = kls.__dict__[name]
                if _is_plain_value(name, value):
                    return Any if value is None else type(value)
        return _NOT_FOUND

    def _field_hints(self, tp: type, declared: bool) -> Dict[str, Any]:
        if issubclass(tp, BaseModel):
            fields = tp.model_fields
            own = set(inspect.get_annotations(tp)) if declared else None
            return {
                n: f.annotation if f.annotation is not None else Any
                for n, f in fields.items()
                if own is None or n in own
            }
        hints = {n: h for n, h in resolve_hints(tp).items() if not is_class_var(h)}
        if declared:
            own = set(inspect.get_annotations(tp))
            hints = {n: h for n, h in hints.items() if n in own}
        return hints


# -------------------- Helpers --------------------

def _classes(tp: type, declared: bool):
    if declared:
        return (tp,)
    return tuple(k for k in tp.__mro__ if k is not object)


def _lookup(tp: type, name: str, declared: bool) -> Any:
    for kls in _classes(tp, declared):
        if name in kls.__dict__:
            return kls.__dict__[name]
    return None


def _is_plain_value(name: str, value: Any) -> bool:
    if name.startswith("__"):
        return False
    if isinstance(value, (staticmethod, classmethod, property)):
        return False
    return not callable(value) and not inspect.isdatadescriptor(value)


def _is_frozen(tp: type) -> bool:
    if is_dataclass(tp):
        params = getattr(tp, "__dataclass_params__", None)
        return bool(params is not None and params.frozen)
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        return bool(tp.model_config.get("frozen", False))
    return False


def _return_hint(func: Any) -> Any:
    return resolve_hints(func).get("return", Any)


def _value_hint(func: Any) -> Any:
    """Hint of the value parameter of a setter (first parameter after self)."""
    try:
        params = list(inspect.signature(func).parameters)
    except (TypeError, ValueError):
        return None
    if len(params) < 2:
        return None
    return resolve_hints(func).get(params[1])


__all__ = ["Introspector", "DEFAULT_CACHE_SIZE"]
