"""
Default conversion and construction services.
"""

from __future__ import annotations

from .converter import TypeConverter, Converter
from .instantiate import new_instance

__all__ = [
    "TypeConverter",
    "Converter",
    "new_instance",
]
