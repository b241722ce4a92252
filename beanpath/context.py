"""
Per-call navigation state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional

from .errors import BeanError, BeanNavigationError, ErrorKind

_LOG = logging.getLogger("beanpath.navigation")


class Mode(Enum):
    GET = "get"
    FORCED_GET = "forced-get"
    SET = "set"
    # introspection-only walks
    HAS = "has"
    TYPE = "type"

    @property
    def vivifies(self) -> bool:
        """Whether missing intermediate nodes are created on the way."""
        return self in (Mode.FORCED_GET, Mode.SET)


@dataclass
class NavigationContext:
    """
    State of one navigation call. Created per call, discarded afterwards.

    ``undo`` collects the inverse of every structural change made on the way
    (created intermediates, grown containers), so that a walk that fails in
    silent mode can leave the graph as it found it.
    """
    root: Any
    path: str
    mode: Mode
    silent: bool = False
    declared: bool = False
    current: Any = None
    segment: Optional[str] = None
    last: bool = False
    undo: List[Callable[[], Any]] = field(default_factory=list)

    def error(self, kind: ErrorKind, message: str) -> BeanNavigationError:
        return BeanNavigationError(kind, message, self.path, self.segment)

    def invoke(self, what: str, fn: Callable[..., Any], *args: Any) -> Any:
        """
        Call user code (getter, setter, container method).

        Its failures become INVOCATION_FAILED with the original error chained;
        beanpath's own errors pass through unchanged.
        """
        try:
            return fn(*args)
        except BeanError:
            raise
        except Exception as e:
            raise self.error(ErrorKind.INVOCATION_FAILED, f"{what} failed: {type(e).__name__}: {e}") from e

    def record(self, restore: Callable[[], Any]) -> None:
        self.undo.append(restore)

    def rollback(self) -> None:
        """Revert recorded changes, newest first."""
        if self.undo:
            _LOG.debug("rolling back %d change(s) at %r", len(self.undo), self)
        while self.undo:
            restore = self.undo.pop()
            try:
                restore()
            except Exception as e:
                _LOG.warning("rollback step failed at %r: %s", self, e)

    def __repr__(self) -> str:
        return f"NavigationContext(path={self.path!r}, segment={self.segment!r}, mode={self.mode.value})"


__all__ = ["Mode", "NavigationContext"]
