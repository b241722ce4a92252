"""
Property path parsing.

A property path is a dotted chain of segments, each optionally suffixed
with a bracketed index: ``users[0].address.lines[2]``. Dots inside
brackets are part of the index (``props[a.b].value`` is two segments).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from .errors import BeanNavigationError, ErrorKind

# Reference to the root object itself (``*this`` or ``*this.name``).
THIS_REF = "*this"

_INT_INDEX = re.compile(r"\+?\d+")


@dataclass
class Segment:
    """One path component between dot boundaries."""
    name: str
    index: Optional[str] = None

    @property
    def text(self) -> str:
        """Segment as written in the path."""
        if self.index is None:
            return self.name
        return f"{self.name}[{self.index}]"


PropertyPath = List[Segment]


def next_dot_boundary(path: str) -> int:
    """
    Return position of the first dot that is not inside ``[...]``, or -1.

    Bracket tracking is a single flag: nested brackets are not supported.
    """
    inside_bracket = False
    for ndx, c in enumerate(path):
        if inside_bracket:
            if c == "]":
                inside_bracket = False
        else:
            if c == ".":
                return ndx
            if c == "[":
                inside_bracket = True
    return -1


def split_path(path: str) -> PropertyPath:
    """Split a property path into segments (indexes are not extracted yet)."""
    segments: PropertyPath = []
    rest = path
    while True:
        dot = next_dot_boundary(rest)
        if dot == -1:
            segments.append(Segment(rest))
            return segments
        segments.append(Segment(rest[:dot]))
        rest = rest[dot + 1:]


def extract_index(segment: Segment) -> Optional[str]:
    """
    Strip a trailing ``[...]`` from the segment name.

    On success the index text is stored in ``segment.index`` and returned.
    Otherwise the segment is left untouched and None is returned.
    """
    segment.index = None
    name = segment.name
    if not name.endswith("]"):
        return None
    left = name.rfind("[")
    if left == -1:
        return None
    segment.name = name[:left]
    segment.index = name[left + 1:-1]
    return segment.index


def parse_index(text: str, path: str, segment: str) -> int:
    """
    Parse an array/list index.

    Always raises on malformed input, silent mode or not: a bad index
    is a broken path, not a missing value.
    """
    if not _INT_INDEX.fullmatch(text):
        raise BeanNavigationError(
            ErrorKind.MALFORMED_INDEX, f"Invalid index: {text!r}", path, segment
        )
    return int(text)


def is_this_ref(path: str) -> bool:
    return path == THIS_REF or path.startswith(THIS_REF + ".")


__all__ = [
    "THIS_REF",
    "Segment",
    "PropertyPath",
    "next_dot_boundary",
    "split_path",
    "extract_index",
    "parse_index",
    "is_this_ref",
]
