"""
Accessor discovery: which properties a class exposes and how to reach them.
"""

from __future__ import annotations

from .accessors import (
    ReadAccessor,
    WriteAccessor,
    PropertyReader,
    PropertyWriter,
    MethodReader,
    MethodWriter,
    FieldReader,
    FieldWriter,
)
from .introspector import Introspector, DEFAULT_CACHE_SIZE

__all__ = [
    # Accessors
    "ReadAccessor",
    "WriteAccessor",
    "PropertyReader",
    "PropertyWriter",
    "MethodReader",
    "MethodWriter",
    "FieldReader",
    "FieldWriter",
    # Introspector
    "Introspector",
    "DEFAULT_CACHE_SIZE",
]
