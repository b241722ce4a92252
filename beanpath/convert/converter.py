from __future__ import annotations

import collections.abc as cabc
import dataclasses
import logging
import typing as t
from dataclasses import fields, is_dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import PurePath
from types import UnionType
from typing import Any, Callable, Dict, get_args, get_origin

import numpy as np
from pydantic import BaseModel, ValidationError

from ..errors import ConversionFailed
from ..introspect.types import (
    NoneType,
    component_type,
    concrete_type,
    is_collection_type,
    is_untyped,
    key_component_type,
    raw_type,
    resolve_hints,
    strip_annotated,
    type_name,
)

_LOG = logging.getLogger("beanpath.convert")

_TRUE = {"true", "yes", "y", "on", "1"}
_FALSE = {"false", "no", "n", "off", "0", ""}

Converter = Callable[[Any], Any]


class TypeConverter:
    """
    Conversion service: converts values to declared types.

    Lenient where a bean property setter would be (``"42"`` → ``42``,
    ``"yes"`` → ``True``, mapping → dataclass), strict about the result:
    anything that cannot be converted raises ConversionFailed.
    """

    def __init__(self) -> None:
        self._converters: Dict[type, Converter] = {}

    def register(self, target: type, converter: Converter) -> None:
        """Register a custom converter for an exact target class."""
        self._converters[target] = converter

    def unregister(self, target: type) -> None:
        self._converters.pop(target, None)

    # -------------------- Entry points --------------------

    def convert(self, value: Any, target: Any) -> Any:
        tp = strip_annotated(target)
        origin = get_origin(tp)

        if is_untyped(tp):
            return value
        if value is None:
            return None

        if origin is t.Literal:
            return self._to_literal(value, tp)
        if origin in (t.Union, UnionType):
            return self._to_union(value, tp)

        raw = raw_type(tp)
        if raw in self._converters:
            _LOG.debug("custom converter for %s: %r", type_name(raw), value)
            return self._call(self._converters[raw], value, raw)

        if raw is object:
            return value
        if raw is np.ndarray:
            return self._to_ndarray(value, component_type(tp))
        if is_collection_type(raw):
            return self.convert_to_container(value, raw, component_type(tp))
        if isinstance(raw, type) and issubclass(raw, cabc.Mapping):
            return self._to_mapping(value, raw, key_component_type(tp), component_type(tp))
        return self._to_class(value, raw)

    def convert_to_container(self, value: Any, container_type: Any, component: Any = None) -> Any:
        """
        Convert a value to a collection, converting each element to ``component``.

        Scalars become one-element collections; strings are split on commas.
        An instance that already matches is returned as is.
        """
        if value is None:
            return None
        raw = concrete_type(raw_type(container_type))
        if raw is np.ndarray:
            return self._to_ndarray(value, component)

        if isinstance(value, str):
            items = [s.strip() for s in value.split(",")] if value else []
        elif isinstance(value, (bytes, cabc.Mapping)) or not isinstance(value, cabc.Iterable):
            items = [value]
        else:
            items = list(value)

        if isinstance(value, raw) and not isinstance(value, str) and self._elements_match(items, component):
            return value

        converted = [self.convert(v, component) for v in items]
        _LOG.debug("container %s[%s] ← %d item(s)", type_name(raw), type_name(component), len(converted))
        return self._call(raw, converted, raw)

    # -------------------- Branches --------------------

    def _to_literal(self, value: Any, tp: Any) -> Any:
        allowed = get_args(tp)
        if value in allowed:
            return value
        for option in allowed:
            try:
                if self.convert(value, type(option)) == option:
                    return option
            except ConversionFailed:
                continue
        raise ConversionFailed(value, tp, f"expected one of {allowed!r}")

    def _to_union(self, value: Any, tp: Any) -> Any:
        variants = [v for v in get_args(tp) if v is not NoneType]
        for sub in variants:
            if get_origin(sub) is None and self._elements_match([value], sub):
                return value
        errors: list[str] = []
        for sub in variants:
            try:
                res = self.convert(value, sub)
                _LOG.debug("union branch %s matched → %r", type_name(sub), res)
                return res
            except ConversionFailed as e:
                errors.append(str(e))
        raise ConversionFailed(value, tp, " | ".join(errors) or "no variant matched")

    def _to_mapping(self, value: Any, raw: type, key_tp: Any, val_tp: Any) -> Any:
        if not isinstance(value, cabc.Mapping):
            if isinstance(value, BaseModel):
                value = value.model_dump()
            elif is_dataclass(value) and not isinstance(value, type):
                value = {f.name: getattr(value, f.name) for f in fields(value)}
            else:
                raise ConversionFailed(value, raw, f"expected mapping, got {type(value).__name__}")
        if isinstance(value, raw) and self._elements_match(list(value.keys()), key_tp) \
                and self._elements_match(list(value.values()), val_tp):
            return value
        out = {self.convert(k, key_tp): self.convert(v, val_tp) for k, v in value.items()}
        return self._call(concrete_type(raw), out, raw)

    def _to_ndarray(self, value: Any, component: Any) -> Any:
        dtype = _ndarray_dtype(component)
        if isinstance(value, np.ndarray) and (dtype is None or value.dtype == dtype):
            return value
        if isinstance(value, str):
            value = [s.strip() for s in value.split(",")] if value else []
        elif not isinstance(value, cabc.Iterable):
            value = [value]
        try:
            return np.asarray(value, dtype=dtype)
        except (TypeError, ValueError) as e:
            raise ConversionFailed(value, np.ndarray, str(e)) from e

    def _to_class(self, value: Any, raw: type) -> Any:
        if raw is bool:
            return self._to_bool(value)
        if raw is int:
            return self._to_int(value)
        if isinstance(value, raw):
            return value
        if issubclass(raw, Enum):
            return self._to_enum(value, raw)
        if issubclass(raw, BaseModel):
            return self._to_model(value, raw)
        if is_dataclass(raw) and isinstance(value, cabc.Mapping):
            return self._to_dataclass(value, raw)
        if raw is float:
            return self._to_number(value, float)
        if raw is Decimal:
            return self._to_number(value, Decimal)
        if raw is str:
            return self._to_str(value)
        if issubclass(raw, PurePath):
            return self._call(raw, value if isinstance(value, (str, PurePath)) else str(value), raw)
        # unknown class: try the constructor with the value
        _LOG.debug("fallback %s(%r)", type_name(raw), value)
        return self._call(raw, value, raw)

    def _to_bool(self, value: Any) -> bool:
        if isinstance(value, (bool, np.bool_)):
            return bool(value)
        if isinstance(value, (int, float, Decimal, np.number)):
            return value != 0
        if isinstance(value, str):
            s = value.strip().lower()
            if s in _TRUE:
                return True
            if s in _FALSE:
                return False
        raise ConversionFailed(value, bool)

    def _to_int(self, value: Any) -> int:
        if isinstance(value, (bool, np.bool_)):
            return int(value)
        if isinstance(value, (int, np.integer)):
            return int(value)
        if isinstance(value, (float, Decimal, np.floating)):
            try:
                integral = int(value)
            except (ValueError, OverflowError) as e:
                raise ConversionFailed(value, int) from e
            if value != integral:
                raise ConversionFailed(value, int, "fractional value")
            return integral
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                pass
            try:
                return self._to_int(Decimal(value.strip()))
            except InvalidOperation as e:
                raise ConversionFailed(value, int) from e
        raise ConversionFailed(value, int)

    def _to_number(self, value: Any, kind: type) -> Any:
        if isinstance(value, str):
            value = value.strip()
        try:
            return kind(value)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise ConversionFailed(value, kind) from e

    def _to_str(self, value: Any) -> str:
        if isinstance(value, Enum):
            return value.name
        if isinstance(value, bytes):
            return value.decode("utf-8")
        if isinstance(value, cabc.Iterable) and not isinstance(value, cabc.Mapping):
            return ",".join(self._to_str(v) for v in value)
        return str(value)

    def _to_enum(self, value: Any, raw: type) -> Any:
        if isinstance(value, str):
            try:
                return raw[value]  # by name
            except KeyError:
                pass
        try:
            return raw(value)  # by value
        except ValueError as e:
            raise ConversionFailed(value, raw, "no such member") from e

    def _to_model(self, value: Any, raw: type) -> Any:
        if is_dataclass(value) and not isinstance(value, type):
            value = {f.name: getattr(value, f.name) for f in fields(value)}
        try:
            return raw.model_validate(value)
        except ValidationError as e:
            raise ConversionFailed(value, raw, f"pydantic validation error: {e}") from e

    def _to_dataclass(self, value: cabc.Mapping, raw: type) -> Any:
        hints = resolve_hints(raw)
        fld_map = {f.name: f for f in fields(raw)}
        extras = set(value.keys()) - set(fld_map.keys())
        if extras:
            raise ConversionFailed(value, raw, f"unknown key(s): {sorted(extras)}")
        kwargs: dict[str, Any] = {}
        for name, f in fld_map.items():
            if name in value:
                kwargs[name] = self.convert(value[name], hints.get(name, f.type))
            elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                raise ConversionFailed(value, raw, f"required field '{name}' missing")
        return self._call(raw, kwargs, raw, unpack=True)

    # -------------------- Helpers --------------------

    def _elements_match(self, items: list, component: Any) -> bool:
        if is_untyped(component):
            return True
        if get_origin(strip_annotated(component)) is not None:
            return False
        comp_raw = raw_type(component)
        if comp_raw is int:
            return all(v is None or (isinstance(v, int) and not isinstance(v, bool)) for v in items)
        return all(v is None or isinstance(v, comp_raw) for v in items)

    @staticmethod
    def _call(fn: Callable[..., Any], value: Any, target: Any, unpack: bool = False) -> Any:
        try:
            return fn(**value) if unpack else fn(value)
        except ConversionFailed:
            raise
        except Exception as e:
            raise ConversionFailed(value, target, str(e)) from e


def _ndarray_dtype(component: Any) -> Any:
    if is_untyped(component):
        return None
    raw = raw_type(component)
    if issubclass(raw, np.generic) or raw in (bool, int, float, complex, str):
        return np.dtype(raw)
    return np.dtype(object)


__all__ = ["TypeConverter", "Converter"]
