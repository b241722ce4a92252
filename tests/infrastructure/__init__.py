"""
Shared test infrastructure for beanpath.

Modules:
- beans: sample bean classes covering every accessor and container style
- file_utils: helpers for writing files (settings YAML)
"""

from .file_utils import write, write_yaml
from .beans import (
    Color, Address, Customer, Item, Holder, Fixed, Account, Legacy,
    NeedsArgs, Wrapper, Base, Derived, Plain, Point, Profile, Guarded, RejectingList, Directory,
)

__all__ = [
    # File utilities
    "write", "write_yaml",

    # Beans
    "Color", "Address", "Customer", "Item", "Holder", "Fixed", "Account", "Legacy",
    "NeedsArgs", "Wrapper", "Base", "Derived", "Plain", "Point", "Profile",
    "Guarded", "RejectingList", "Directory",
]
