"""
Public facade: property access with a fixed policy.

A BeanUtil instance carries three flags:
  • declared: only members declared on the exact runtime class;
  • forced:   get_property creates missing intermediate nodes;
  • silent:   navigation errors become None / no-op.

Ready-made instances cover every combination (``pojo``, ``declared``,
``silent``, ``forced``, ...). The module-level helpers use the defaults
from settings.
"""

from __future__ import annotations

import functools
from typing import Any, Optional

from .context import Mode
from .errors import BeanNavigationError, ErrorKind
from .navigation import Navigator
from .path import THIS_REF, Segment, extract_index, is_this_ref, split_path
from .settings import get_settings
from .introspect import Introspector


@functools.lru_cache(maxsize=1)
def shared_navigator() -> Navigator:
    """Navigator shared by all BeanUtil instances that were not given one."""
    return Navigator(Introspector(cache_size=get_settings().accessor_cache_size))


class BeanUtil:
    def __init__(
        self,
        *,
        declared: bool = False,
        forced: bool = False,
        silent: bool = False,
        navigator: Optional[Navigator] = None,
    ):
        self.declared = declared
        self.forced = forced
        self.silent = silent
        self._navigator = navigator

    @property
    def navigator(self) -> Navigator:
        return self._navigator or shared_navigator()

    def _copy(self, **flags: bool) -> "BeanUtil":
        params = dict(declared=self.declared, forced=self.forced, silent=self.silent)
        params.update(flags)
        return BeanUtil(navigator=self._navigator, **params)

    def with_declared(self, declared: bool = True) -> "BeanUtil":
        return self._copy(declared=declared)

    def with_forced(self, forced: bool = True) -> "BeanUtil":
        return self._copy(forced=forced)

    def with_silent(self, silent: bool = True) -> "BeanUtil":
        return self._copy(silent=silent)

    def _navigate(self, bean: Any, name: str, mode: Mode, value: Any = None, *, simple: bool = False,
                  silent: Optional[bool] = None) -> Any:
        return self.navigator.navigate(
            bean, name, mode, value,
            silent=self.silent if silent is None else silent,
            declared=self.declared,
            simple=simple,
        )

    # ---- get / set ----

    def get_property(self, bean: Any, name: str) -> Any:
        """Value at ``name``; with ``forced`` missing intermediate nodes are created."""
        return self._navigate(bean, name, Mode.FORCED_GET if self.forced else Mode.GET)

    def get_property_forced(self, bean: Any, name: str) -> Any:
        return self._navigate(bean, name, Mode.FORCED_GET)

    def set_property(self, bean: Any, name: str, value: Any) -> None:
        """
        Set the value at ``name``, converting it to the declared type.

        Missing intermediate nodes are created and arrays/lists grown as needed.
        """
        self._navigate(bean, name, Mode.SET, value)

    def get_simple_property(self, bean: Any, name: str) -> Any:
        """Read one property by its literal name (no dots, no indexes)."""
        return self._navigate(bean, name, Mode.GET, simple=True)

    def set_simple_property(self, bean: Any, name: str, value: Any) -> None:
        self._navigate(bean, name, Mode.SET, value, simple=True)

    # ---- introspection ----

    def has_property(self, bean: Any, name: str) -> bool:
        """
        True when the whole path resolves (intermediate values present, index in range).

        A malformed index is a broken path, not a missing property: it raises.
        """
        return self._has(bean, name, simple=False)

    def has_simple_property(self, bean: Any, name: str) -> bool:
        return self._has(bean, name, simple=True)

    def _has(self, bean: Any, name: str, *, simple: bool) -> bool:
        try:
            return bool(self._navigate(bean, name, Mode.HAS, simple=simple, silent=False))
        except BeanNavigationError as e:
            if e.kind is ErrorKind.MALFORMED_INDEX:
                raise
            return False

    def has_root_property(self, bean: Any, name: str) -> bool:
        """True when the first segment of the path (without its index) resolves on ``bean``."""
        if is_this_ref(name):
            if name == THIS_REF:
                return bean is not None
            name = name[len(THIS_REF) + 1:]
        first = split_path(name)[0]
        seg = Segment(first.name)
        while extract_index(seg) is not None:
            pass
        return self.has_simple_property(bean, seg.name)

    def get_property_type(self, bean: Any, name: str) -> Optional[type]:
        """
        Declared raw class of the property at ``name``.

        For an indexed segment this is the element class. ``object`` when
        nothing is declared; None when an intermediate value is missing.
        """
        return self._navigate(bean, name, Mode.TYPE)

    def __repr__(self) -> str:
        return f"BeanUtil(declared={self.declared}, forced={self.forced}, silent={self.silent})"


pojo = BeanUtil()
declared = BeanUtil(declared=True)
silent = BeanUtil(silent=True)
forced = BeanUtil(forced=True)
declared_silent = BeanUtil(declared=True, silent=True)
declared_forced = BeanUtil(declared=True, forced=True)
declared_forced_silent = BeanUtil(declared=True, forced=True, silent=True)
forced_silent = BeanUtil(forced=True, silent=True)


def _default(silent: Optional[bool], declared: Optional[bool]) -> BeanUtil:
    settings = get_settings()
    return BeanUtil(
        declared=settings.declared if declared is None else declared,
        forced=settings.forced,
        silent=settings.silent if silent is None else silent,
    )


def get_property(root: Any, path: str, *, silent: Optional[bool] = None, declared: Optional[bool] = None) -> Any:
    return _default(silent, declared).get_property(root, path)


def get_property_forced(root: Any, path: str, *, silent: Optional[bool] = None,
                        declared: Optional[bool] = None) -> Any:
    return _default(silent, declared).get_property_forced(root, path)


def set_property(root: Any, path: str, value: Any, *, silent: Optional[bool] = None,
                 declared: Optional[bool] = None) -> None:
    _default(silent, declared).set_property(root, path, value)


__all__ = [
    "BeanUtil",
    "shared_navigator",
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
]
