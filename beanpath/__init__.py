"""
beanpath: read and write nested object graphs by property path.

    >>> from beanpath import set_property, get_property
    >>> set_property(order, "customer.address.lines[1]", "Main St 1")
    >>> get_property(order, "customer.address.lines[1]")
    'Main St 1'
"""

from __future__ import annotations

from .bean import (
    BeanUtil,
    pojo,
    declared,
    silent,
    forced,
    declared_silent,
    declared_forced,
    declared_forced_silent,
    forced_silent,
    get_property,
    get_property_forced,
    set_property,
)
from .context import Mode, NavigationContext
from .convert import TypeConverter, new_instance
from .errors import (
    BeanError,
    BeanNavigationError,
    ConversionFailed,
    ErrorKind,
    InstantiationFailed,
    SettingsError,
)
from .introspect import Introspector
from .navigation import Navigator
from .path import Segment, extract_index, next_dot_boundary, split_path
from .settings import BeanSettings, load_settings

__all__ = [
    # Facade
    "BeanUtil",
    "pojo",
    "declared",
    "silent",
    "forced",
    "declared_silent",
    "declared_forced",
    "declared_forced_silent",
    "forced_silent",
    "get_property",
    "get_property_forced",
    "set_property",
    # Engine
    "Mode",
    "NavigationContext",
    "Navigator",
    "Introspector",
    "TypeConverter",
    "new_instance",
    # Paths
    "Segment",
    "extract_index",
    "next_dot_boundary",
    "split_path",
    # Errors
    "BeanError",
    "BeanNavigationError",
    "ConversionFailed",
    "ErrorKind",
    "InstantiationFailed",
    "SettingsError",
    # Settings
    "BeanSettings",
    "load_settings",
]
