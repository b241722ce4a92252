"""
Uniform indexed access over the three container shapes.

  • ArrayView:   fixed length (``numpy.ndarray``; ``tuple`` as a read-only
                  array that is replaced, never mutated). Growing allocates a
                  new array and writes it back through the owning slot.
  • OrderedView: ``MutableSequence``; grows in place by padding with None.
  • KeyedView:   ``Mapping``; never grows, keys converted to the declared
                  key type when known.

The view is chosen once per indexed segment from the runtime value.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import operator
from typing import Any, Callable, Optional, Union

import numpy as np

from .coercer import ValueCoercer
from .context import NavigationContext
from .errors import ErrorKind
from .introspect.types import component_type, is_untyped, key_component_type
from .path import parse_index

_LOG = logging.getLogger("beanpath.containers")

# Writes a replacement container into the place the current one came from
# and returns what was actually stored.
Slot = Callable[[Any], Any]


class _View:
    kind = "container"

    def __init__(
        self,
        value: Any,
        hint: Any,
        ctx: NavigationContext,
        coercer: ValueCoercer,
        owner: Optional[Slot] = None,
    ):
        self.value = value
        self.hint = hint
        self.ctx = ctx
        self.coercer = coercer
        self.owner = owner

    @property
    def component_hint(self) -> Any:
        return component_type(self.hint)

    def _index(self, raw: str) -> int:
        return parse_index(raw, self.ctx.path, self.ctx.segment or "")

    def _put(self, key: Any, value: Any) -> None:
        """Store into the container, remembering what was there."""
        target = self.value
        if isinstance(target, cabc.Mapping):
            existed = key in target
            old = target.get(key)
        else:
            existed, old = True, target[key]
        self.ctx.invoke(f"Storing into {type(target).__name__}", operator.setitem, target, key, value)
        if existed:
            self.ctx.record(lambda: operator.setitem(target, key, old))
        else:
            self.ctx.record(lambda: target.pop(key, None))

    def _replace(self, new: Any) -> None:
        """Swap the whole container through the owning slot."""
        old, owner = self.value, self.owner
        self.value = owner(new)
        self.ctx.record(lambda: _restore(owner, old))


class ArrayView(_View):
    kind = "array"

    @property
    def component_hint(self) -> Any:
        comp = component_type(self.hint)
        if is_untyped(comp) and isinstance(self.value, np.ndarray) and self.value.dtype != object:
            return self.value.dtype.type
        return comp

    def get(self, raw: str) -> Any:
        i = self._index(raw)
        if i >= len(self.value):
            return None
        return _unbox(self.value[i])

    def contains(self, raw: str) -> bool:
        return self._index(raw) < len(self.value)

    def grow_to(self, index: int) -> None:
        n = len(self.value)
        if index < n:
            return
        if self.owner is None:
            raise self.ctx.error(
                ErrorKind.CONTAINER_GROWTH_FAILED,
                f"Cannot grow array to index {index}: no writable owner",
            )
        if isinstance(self.value, np.ndarray):
            shape = (index + 1,) + self.value.shape[1:]
            if self.value.dtype == object:
                new = np.full(shape, None, dtype=object)
            else:
                new = np.zeros(shape, dtype=self.value.dtype)
            new[:n] = self.value
        else:
            new = tuple(self.value) + (None,) * (index + 1 - n)
        _LOG.debug("array grown %d → %d at %r", n, index + 1, self.ctx)
        self._replace(new)

    def forced_get(self, raw: str, grow: bool = True) -> Any:
        i = self._index(raw)
        if grow:
            self.grow_to(i)
        elif i >= len(self.value):
            return None
        value = self.value[i]
        if value is None:
            value = self.coercer.new_instance(self.component_hint, self.ctx)
            self._store(i, value)
        return _unbox(value)

    def forced_set(self, raw: str, value: Any) -> None:
        i = self._index(raw)
        self.grow_to(i)
        self._store(i, self.coercer.convert(value, self.component_hint, self.ctx))

    def element_slot(self, raw: str) -> Optional[Slot]:
        if isinstance(self.value, np.ndarray) and self.value.ndim > 1:
            # rows of a 2-d array are views and cannot be replaced by a longer row
            return None
        i = self._index(raw)

        def write(new: Any) -> Any:
            self._store(i, new)
            return new
        return write

    def _store(self, i: int, value: Any) -> None:
        if isinstance(self.value, np.ndarray):
            self._put(i, value)
            return
        if self.owner is None:
            raise self.ctx.error(ErrorKind.IMMUTABLE_CONTAINER, "Cannot modify a tuple without a writable owner")
        items = list(self.value)
        items[i] = value
        self._replace(tuple(items))


class OrderedView(_View):
    kind = "ordered"

    def get(self, raw: str) -> Any:
        i = self._index(raw)
        return self.value[i] if i < len(self.value) else None

    def contains(self, raw: str) -> bool:
        return self._index(raw) < len(self.value)

    def grow_to(self, index: int) -> None:
        n = len(self.value)
        if n > index:
            return
        target = self.value
        self.ctx.invoke(f"Growing {type(target).__name__}", target.extend, [None] * (index + 1 - n))
        self.ctx.record(lambda: operator.delitem(target, slice(n, None)))
        _LOG.debug("list padded %d → %d at %r", n, len(target), self.ctx)

    def forced_get(self, raw: str, grow: bool = True) -> Any:
        i = self._index(raw)
        if grow:
            self.grow_to(i)
        elif i >= len(self.value):
            return None
        value = self.value[i]
        if value is None:
            value = self.coercer.new_instance(self.component_hint, self.ctx)
            self._put(i, value)
        return value

    def forced_set(self, raw: str, value: Any) -> None:
        i = self._index(raw)
        self.grow_to(i)
        self._put(i, self.coercer.convert(value, self.component_hint, self.ctx))

    def element_slot(self, raw: str) -> Optional[Slot]:
        i = self._index(raw)

        def write(new: Any) -> Any:
            self._put(i, new)
            return new
        return write


class KeyedView(_View):
    kind = "keyed"

    def key(self, raw: str) -> Any:
        return self.coercer.convert_key(raw, key_component_type(self.hint))

    def get(self, raw: str) -> Any:
        return self.value.get(self.key(raw))

    def contains(self, raw: str) -> bool:
        return self.key(raw) in self.value

    def grow_to(self, index: Any) -> None:
        pass

    def forced_get(self, raw: str, grow: bool = True) -> Any:
        key = self.key(raw)
        value = self.value.get(key)
        if value is None:
            self._check_mutable()
            value = self.coercer.new_instance(self.component_hint, self.ctx)
            self._put(key, value)
        return value

    def forced_set(self, raw: str, value: Any) -> None:
        self._check_mutable()
        self._put(self.key(raw), self.coercer.convert(value, self.component_hint, self.ctx))

    def element_slot(self, raw: str) -> Optional[Slot]:
        if not isinstance(self.value, cabc.MutableMapping):
            return None
        key = self.key(raw)

        def write(new: Any) -> Any:
            self._put(key, new)
            return new
        return write

    def _check_mutable(self) -> None:
        if not isinstance(self.value, cabc.MutableMapping):
            raise self.ctx.error(
                ErrorKind.IMMUTABLE_CONTAINER,
                f"Cannot modify read-only mapping {type(self.value).__name__}",
            )


ContainerView = Union[ArrayView, OrderedView, KeyedView]


def view_of(
    value: Any,
    hint: Any,
    ctx: NavigationContext,
    coercer: ValueCoercer,
    owner: Optional[Slot] = None,
) -> Optional[ContainerView]:
    """Pick the container view for a runtime value; None when it is not indexable."""
    if isinstance(value, (np.ndarray, tuple)):
        return ArrayView(value, hint, ctx, coercer, owner)
    if isinstance(value, cabc.MutableSequence):
        return OrderedView(value, hint, ctx, coercer, owner)
    if isinstance(value, cabc.Mapping):
        return KeyedView(value, hint, ctx, coercer, owner)
    return None


def _restore(owner: Slot, old: Any) -> None:
    restore = getattr(owner, "restore", None)
    if restore is not None:
        restore(old)
    else:
        owner(old)


def _unbox(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value


__all__ = ["Slot", "ArrayView", "OrderedView", "KeyedView", "ContainerView", "view_of"]
