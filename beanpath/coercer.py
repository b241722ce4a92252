"""
Value coercion and default construction bound to a navigation call.

Thin layer over the conversion service: it picks the right conversion
(element-wise for collections) and turns collaborator failures into
BeanNavigationError carrying the path being navigated.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .context import NavigationContext
from .convert import TypeConverter, new_instance
from .errors import ConversionFailed, ErrorKind, InstantiationFailed
from .introspect.types import component_type, is_collection_type, is_untyped, raw_type, type_name

_LOG = logging.getLogger("beanpath.coercer")


class ValueCoercer:
    def __init__(
        self,
        converter: TypeConverter,
        factory: Callable[[Any], Any] = new_instance,
    ):
        self.converter = converter
        self.factory = factory

    def convert(self, value: Any, target: Any, ctx: NavigationContext) -> Any:
        if is_untyped(target):
            return value
        try:
            return self.converter.convert(value, target)
        except ConversionFailed as e:
            raise ctx.error(ErrorKind.CONVERSION_FAILED, str(e)) from e

    def convert_to_container(self, value: Any, container_type: Any, component: Any, ctx: NavigationContext) -> Any:
        try:
            return self.converter.convert_to_container(value, container_type, component)
        except ConversionFailed as e:
            raise ctx.error(ErrorKind.CONVERSION_FAILED, str(e)) from e

    def convert_for_slot(self, value: Any, declared_type: Any, ctx: NavigationContext) -> Any:
        """Convert a value about to be written into a slot declared as ``declared_type``."""
        raw = raw_type(declared_type)
        if is_collection_type(raw):
            return self.convert_to_container(value, raw, component_type(declared_type), ctx)
        return self.convert(value, declared_type, ctx)

    def convert_key(self, raw_key: str, key_type: Any) -> Any:
        """Convert an index string to a mapping key type; the raw string wins on failure."""
        if is_untyped(key_type):
            return raw_key
        try:
            return self.converter.convert(raw_key, key_type)
        except ConversionFailed:
            _LOG.debug("key %r kept verbatim (not a %s)", raw_key, type_name(key_type))
            return raw_key

    def new_instance(self, tp: Any, ctx: NavigationContext) -> Any:
        try:
            return self.factory(tp)
        except InstantiationFailed as e:
            raise ctx.error(ErrorKind.INSTANTIATION_FAILED, str(e)) from e


__all__ = ["ValueCoercer"]
