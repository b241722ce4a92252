"""
Exceptions raised by beanpath.

All expected failures of property navigation inherit from BeanError,
so callers can catch one base class. Programming errors (bad arguments
to the API itself) are NOT wrapped and propagate as-is.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class BeanError(Exception):
    """Base class for all beanpath errors."""
    pass


class ConversionFailed(BeanError):
    """Raised by the conversion service when a value cannot be converted."""
    def __init__(self, value: Any, target: Any, reason: str = ""):
        self.value = value
        self.target = target
        self.reason = reason
        msg = f"Cannot convert {value!r} to {_type_name(target)}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InstantiationFailed(BeanError):
    """Raised when a default instance of a type cannot be created."""
    def __init__(self, tp: Any, reason: str = ""):
        self.type = tp
        self.reason = reason
        msg = f"Cannot instantiate {_type_name(tp)}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class SettingsError(BeanError):
    """Invalid beanpath settings (YAML file or environment)."""
    pass


class ErrorKind(str, Enum):
    MALFORMED_INDEX = "malformed-index"
    ACCESSOR_NOT_FOUND = "accessor-not-found"
    CONVERSION_FAILED = "conversion-failed"
    INSTANTIATION_FAILED = "instantiation-failed"
    CONTAINER_GROWTH_FAILED = "container-growth-failed"
    IMMUTABLE_CONTAINER = "immutable-container"
    INVOCATION_FAILED = "invocation-failed"


class BeanNavigationError(BeanError):
    """
    Single error type raised by the navigation engine.

    Carries the full path being navigated, the segment where navigation
    failed and the failure kind. The underlying collaborator error, if any,
    is chained as __cause__.
    """
    def __init__(self, kind: ErrorKind, message: str, path: str, segment: Optional[str] = None):
        self.kind = kind
        self.path = path
        self.segment = segment
        where = f"'{path}'"
        if segment is not None and segment != path:
            where += f" at '{segment}'"
        super().__init__(f"{message} [{kind.value}; path {where}]")


def _type_name(tp: Any) -> str:
    try:
        return tp.__name__  # type: ignore[attr-defined]
    except Exception:
        return str(tp)


__all__ = [
    "BeanError",
    "ConversionFailed",
    "InstantiationFailed",
    "SettingsError",
    "ErrorKind",
    "BeanNavigationError",
]
