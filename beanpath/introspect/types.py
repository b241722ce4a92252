"""
Helpers for reducing type hints to raw classes.

A declared type may be any typing construct (``Optional[List[int]]``,
``Annotated[...]``, ``NDArray[np.float64]``, a NewType, a forward ref...).
Navigation only needs three things from it: the raw class, the element
(component) type and, for mappings, the key type.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import sys
import typing as t
from types import UnionType
from typing import Any, get_args, get_origin

import numpy as np

_LOG = logging.getLogger("beanpath.introspect")

NoneType = type(None)

# Abstract collection classes → concrete class used for instantiation.
ABSTRACT_CONCRETE: dict[Any, type] = {
    cabc.Mapping: dict,
    cabc.MutableMapping: dict,
    cabc.Sequence: list,
    cabc.MutableSequence: list,
    cabc.Collection: list,
    cabc.Iterable: list,
    cabc.Set: set,
    cabc.MutableSet: set,
}


def type_name(tp: Any) -> str:
    try:
        return tp.__name__  # type: ignore[attr-defined]
    except Exception:
        return str(tp)


def strip_annotated(tp: Any) -> Any:
    if get_origin(tp) is t.Annotated:
        args = get_args(tp)
        return args[0] if args else Any
    return tp


def strip_optional(tp: Any) -> Any:
    """``Optional[X]`` → ``X``; any other union is returned unchanged."""
    tp = strip_annotated(tp)
    if get_origin(tp) in (t.Union, UnionType):
        variants = [a for a in get_args(tp) if a is not NoneType]
        if len(variants) == 1:
            return strip_annotated(variants[0])
    return tp


def is_untyped(tp: Any) -> bool:
    return tp is None or tp is Any or tp is object


def raw_type(tp: Any) -> type:
    """Raw class behind a type hint; ``object`` when there is none."""
    tp = strip_optional(tp)
    if is_untyped(tp) or isinstance(tp, (str, t.ForwardRef)):
        return object
    # NewType: follow the supertype chain
    while hasattr(tp, "__supertype__"):
        tp = tp.__supertype__
    if isinstance(tp, t.TypeVar):
        return raw_type(tp.__bound__) if tp.__bound__ is not None else object
    origin = get_origin(tp)
    if origin is not None:
        if origin in (t.Union, UnionType, t.Literal):
            return object
        return origin if isinstance(origin, type) else object
    return tp if isinstance(tp, type) else object


def component_type(tp: Any) -> Any:
    """
    Element type hint of a collection/array/mapping hint.

    ``List[int]`` → ``int``; ``Dict[str, X]`` → ``X``; ``Tuple[int, ...]`` → ``int``;
    ``NDArray[np.float64]`` → ``np.float64``. None when the hint says nothing.
    """
    tp = strip_optional(tp)
    origin = get_origin(tp)
    args = get_args(tp)
    if origin is None or not args:
        return None
    if origin is np.ndarray:
        # ndarray[shape, dtype[scalar]]
        if len(args) == 2:
            dt_args = get_args(args[1])
            if dt_args and not isinstance(dt_args[0], t.TypeVar):
                return dt_args[0]
        return None
    if not isinstance(origin, type):
        return None
    if issubclass(origin, cabc.Mapping):
        return args[1] if len(args) == 2 else None
    if issubclass(origin, tuple):
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        # heterogeneous tuple: only a common element type is meaningful
        return args[0] if len(set(args)) == 1 else None
    if issubclass(origin, cabc.Iterable):
        return args[0]
    return None


def key_component_type(tp: Any) -> Any:
    """Key type hint of a mapping hint, or None."""
    tp = strip_optional(tp)
    origin = get_origin(tp)
    args = get_args(tp)
    if isinstance(origin, type) and issubclass(origin, cabc.Mapping) and len(args) == 2:
        return args[0]
    return None


def is_collection_type(raw: Any) -> bool:
    """True for sequence/set classes that are converted element-wise (not str, not mappings)."""
    if not isinstance(raw, type):
        return False
    if issubclass(raw, (str, bytes, bytearray, np.ndarray)):
        return False
    if issubclass(raw, cabc.Mapping):
        return False
    return issubclass(raw, (cabc.Sequence, cabc.Set)) or raw in (cabc.Collection, cabc.Iterable)


def concrete_type(raw: type) -> type:
    return ABSTRACT_CONCRETE.get(raw, raw)


def build_globalns_for(tp: Any) -> dict[str, Any]:
    """
    Global namespace for ``get_type_hints``: the module of the class plus
    its package chain, so dotted names in string annotations evaluate.
    """
    mod = sys.modules.get(getattr(tp, "__module__", ""))
    gns: dict[str, Any] = {}
    if mod is not None and hasattr(mod, "__dict__"):
        gns.update(mod.__dict__)
    pkg_path = getattr(tp, "__module__", "").split(".")
    for i in range(1, len(pkg_path) + 1):
        pkg_name = ".".join(pkg_path[:i])
        pkg = sys.modules.get(pkg_name)
        if pkg is not None:
            gns.setdefault(pkg_name, pkg)
            gns.setdefault(pkg_path[0], sys.modules.get(pkg_path[0]))
    return gns


def resolve_hints(obj: Any) -> dict[str, Any]:
    """
    Evaluated type hints of a class or function.

    Annotations that cannot be evaluated (unknown forward refs) degrade
    to ``Any`` one by one instead of failing the whole lookup.
    """
    owner = obj
    if not isinstance(obj, type):
        owner = sys.modules.get(getattr(obj, "__module__", ""), None)
    gns = build_globalns_for(obj) if isinstance(obj, type) else dict(getattr(owner, "__dict__", {}))
    try:
        return t.get_type_hints(obj, globalns=gns, include_extras=True)
    except (NameError, AttributeError, SyntaxError, TypeError):
        _LOG.debug("type hints of %s resolved one by one", type_name(obj))
    hints: dict[str, Any] = {}
    classes = obj.__mro__[::-1] if isinstance(obj, type) else (obj,)
    for kls in classes:
        for name, ann in getattr(kls, "__annotations__", {}).items():
            hints[name] = _resolve_one(ann, gns) if isinstance(ann, str) else ann
    return hints


def _resolve_one(ann: str, gns: dict[str, Any]) -> Any:
    """Evaluate a single string annotation through get_type_hints; ``Any`` when it does not resolve."""
    def holder() -> None: ...
    holder.__annotations__ = {"value": ann}
    try:
        return t.get_type_hints(holder, globalns=gns, include_extras=True)["value"]
    except (NameError, AttributeError, SyntaxError, TypeError):
        return Any


def is_class_var(hint: Any) -> bool:
    return hint is t.ClassVar or get_origin(hint) is t.ClassVar


__all__ = [
    "NoneType",
    "ABSTRACT_CONCRETE",
    "type_name",
    "strip_annotated",
    "strip_optional",
    "is_untyped",
    "raw_type",
    "component_type",
    "key_component_type",
    "is_collection_type",
    "concrete_type",
    "build_globalns_for",
    "resolve_hints",
    "is_class_var",
]
