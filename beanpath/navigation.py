"""
Navigation engine: walks a property path over an object graph.

One loop serves every shape. Each segment is ``name`` followed by zero or
more ``[index]`` suffixes; the name is resolved through the introspector
(or used as a key when the current object is a mapping), each index through
the container view of the value reached so far.

Errors of every step surface as BeanNavigationError. In silent mode they
end the walk quietly (get → None, set → no-op) and changes made on the way
are rolled back.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from .coercer import ValueCoercer
from .containers import view_of
from .context import Mode, NavigationContext
from .convert import TypeConverter, new_instance
from .errors import BeanNavigationError, ErrorKind
from .introspect import Introspector, ReadAccessor, WriteAccessor
from .introspect.types import component_type, key_component_type, raw_type
from .path import THIS_REF, Segment, extract_index, is_this_ref, split_path

_LOG = logging.getLogger("beanpath.navigation")

# Returned by a step when a plain get meets None before the end of the path.
_STOP = object()


@dataclass(frozen=True)
class _KeyAccessor:
    """Reads/writes a mapping entry as if it were a property."""
    name: str
    key: Any
    declared_type: Any

    def read(self, instance: Any) -> Any:
        return instance.get(self.key)

    def write(self, instance: Any, value: Any) -> None:
        instance[self.key] = value


class _PropertySlot:
    """Owning slot of a value read through a property: writes a replacement back."""

    def __init__(self, coercer: ValueCoercer, ctx: NavigationContext, instance: Any, writer: WriteAccessor):
        self.coercer = coercer
        self.ctx = ctx
        self.instance = instance
        self.writer = writer
        self.declared_type = writer.declared_type
        self.existed = not isinstance(writer, _KeyAccessor) or writer.key in instance

    def __call__(self, new: Any) -> Any:
        value = self.coercer.convert_for_slot(new, self.declared_type, self.ctx)
        _write(self.ctx, self.writer, self.instance, value)
        return value

    def restore(self, old: Any) -> None:
        """Put back what the slot held before; a mapping entry that did not exist is removed."""
        if isinstance(self.writer, _KeyAccessor) and not self.existed:
            self.instance.pop(self.writer.key, None)
            return
        _write(self.ctx, self.writer, self.instance, old)


class Navigator:
    """
    Resolves property paths against object graphs.

    Collaborators are injected; by default a private Introspector and
    TypeConverter are created.
    """

    def __init__(
        self,
        introspector: Optional[Introspector] = None,
        converter: Optional[TypeConverter] = None,
        factory=new_instance,
    ):
        self.introspector = introspector or Introspector()
        self.converter = converter or TypeConverter()
        self.coercer = ValueCoercer(self.converter, factory)

    # -------------------- Entry point --------------------

    def navigate(
        self,
        root: Any,
        path: str,
        mode: Mode,
        value: Any = None,
        *,
        silent: bool = False,
        declared: bool = False,
        simple: bool = False,
    ) -> Any:
        """
        Walk ``path`` from ``root``.

        Args:
            root: Object the path starts from
            path: Property path (``a.b[2].c``); with ``simple`` a single literal name
            mode: What to do at the end of the path
            value: Value to set (SET mode only)
            silent: Turn navigation errors into a None result / no-op
            declared: Only consider members declared on the exact runtime class

        Returns:
            GET/FORCED_GET: the value; SET: None; HAS: bool; TYPE: raw class or None
        """
        ctx = NavigationContext(root=root, path=path, mode=mode, silent=silent, declared=declared)
        try:
            return self._walk(ctx, value, simple)
        except BeanNavigationError as e:
            if silent:
                _LOG.debug("silent %s on %r: %s", mode.value, path, e)
                ctx.rollback()
                return False if mode is Mode.HAS else None
            raise

    # -------------------- Walk --------------------

    def _walk(self, ctx: NavigationContext, value: Any, simple: bool) -> Any:
        if ctx.root is None:
            raise ctx.error(ErrorKind.ACCESSOR_NOT_FOUND, "Root object is None")

        path = ctx.path
        if not simple and is_this_ref(path):
            if path == THIS_REF:
                return self._this(ctx)
            path = path[len(THIS_REF) + 1:]

        segments = [Segment(path)] if simple else split_path(path)
        current, hint = ctx.root, None
        for n, seg in enumerate(segments):
            ctx.current = current
            ctx.segment = seg.name
            ctx.last = n == len(segments) - 1
            indexes = [] if simple else _extract_indexes(seg)
            _LOG.debug("step %r: name=%r indexes=%s", ctx, seg.name, indexes)

            result = self._step(ctx, current, hint, seg.name, indexes, value)
            if result is _STOP:
                _LOG.debug("stop at %r: value is None", ctx)
                return False if ctx.mode is Mode.HAS else None
            if ctx.last:
                return result
            current, hint = result
        return None

    def _this(self, ctx: NavigationContext) -> Any:
        if ctx.mode is Mode.SET:
            raise ctx.error(ErrorKind.ACCESSOR_NOT_FOUND, f"Cannot set {THIS_REF}")
        if ctx.mode is Mode.HAS:
            return True
        if ctx.mode is Mode.TYPE:
            return type(ctx.root)
        return ctx.root

    def _step(
        self,
        ctx: NavigationContext,
        current: Any,
        hint: Any,
        name: str,
        indexes: List[str],
        value: Any,
    ) -> Any:
        mode = ctx.mode

        # ---- the named property ----
        if name == "":
            if not indexes:
                raise ctx.error(ErrorKind.ACCESSOR_NOT_FOUND, "Empty property name")
            node, owner = current, None
        else:
            if ctx.last and not indexes:
                return self._terminal_property(ctx, current, hint, name, value)
            reader = self._reader(ctx, current, hint, name)
            if mode is Mode.TYPE and ctx.last:
                hint = reader.declared_type
                for _ in indexes:
                    hint = component_type(hint)
                return raw_type(hint)
            node = _read(ctx, reader, current)
            owner = self._property_slot(ctx, current, hint, name)
            hint = reader.declared_type
            if node is None:
                if not mode.vivifies:
                    return _STOP
                node = self._vivify(ctx, owner)

        # ---- its indexes ----
        for k, raw in enumerate(indexes):
            view = view_of(node, hint, ctx, self.coercer, owner)
            if view is None:
                raise ctx.error(
                    ErrorKind.ACCESSOR_NOT_FOUND,
                    f"'{name}' is not an array, list or map: {type(node).__name__}",
                )
            if ctx.last and k == len(indexes) - 1:
                return self._terminal_index(ctx, view, raw, value)
            node = view.forced_get(raw) if mode.vivifies else view.get(raw)
            if node is None:
                return _STOP
            hint = view.component_hint
            owner = view.element_slot(raw)

        return node, hint

    # -------------------- Terminal --------------------

    def _terminal_property(self, ctx: NavigationContext, current: Any, hint: Any, name: str, value: Any) -> Any:
        mode = ctx.mode
        if mode is Mode.SET:
            writer = self._writer(ctx, current, hint, name)
            if writer is None:
                raise ctx.error(
                    ErrorKind.ACCESSOR_NOT_FOUND,
                    f"Setter or field not found: {type(current).__name__}.{name}",
                )
            converted = self.coercer.convert_for_slot(value, writer.declared_type, ctx)
            _LOG.debug("set %r ← %r", ctx, converted)
            _write(ctx, writer, current, converted)
            return None

        if mode is Mode.HAS:
            if isinstance(current, cabc.Mapping):
                return self._key(hint, name) in current
            return self._find_reader(ctx, current, name) is not None

        reader = self._reader(ctx, current, hint, name)
        if mode is Mode.TYPE:
            return raw_type(reader.declared_type)
        return _read(ctx, reader, current)

    def _terminal_index(self, ctx: NavigationContext, view: Any, raw: str, value: Any) -> Any:
        mode = ctx.mode
        if mode is Mode.GET:
            return view.get(raw)
        if mode is Mode.FORCED_GET:
            return view.forced_get(raw, grow=False)
        if mode is Mode.HAS:
            return view.contains(raw)
        if mode is Mode.TYPE:
            return raw_type(view.component_hint)
        _LOG.debug("set %r[%s] (%s) ← %r", ctx, raw, view.kind, value)
        view.forced_set(raw, value)
        return None

    # -------------------- Accessors --------------------

    def _key(self, hint: Any, name: str) -> Any:
        return self.coercer.convert_key(name, key_component_type(hint))

    def _find_reader(self, ctx: NavigationContext, current: Any, name: str) -> Optional[ReadAccessor]:
        acc = self.introspector.resolve_read_accessor(type(current), name, ctx.declared)
        if acc is None and not ctx.declared:
            acc = self.introspector.instance_reader(current, name)
        return acc

    def _reader(self, ctx: NavigationContext, current: Any, hint: Any, name: str) -> Any:
        if isinstance(current, cabc.Mapping):
            return _KeyAccessor(name, self._key(hint, name), component_type(hint))
        acc = self._find_reader(ctx, current, name)
        if acc is None:
            raise ctx.error(
                ErrorKind.ACCESSOR_NOT_FOUND,
                f"Getter or field not found: {type(current).__name__}.{name}",
            )
        return acc

    def _writer(self, ctx: NavigationContext, current: Any, hint: Any, name: str) -> Any:
        if isinstance(current, cabc.Mapping):
            if not isinstance(current, cabc.MutableMapping):
                raise ctx.error(
                    ErrorKind.IMMUTABLE_CONTAINER,
                    f"Cannot modify read-only mapping {type(current).__name__}",
                )
            return _KeyAccessor(name, self._key(hint, name), component_type(hint))
        acc = self.introspector.resolve_write_accessor(type(current), name, ctx.declared)
        if acc is None and not ctx.declared:
            acc = self.introspector.instance_writer(current, name)
        return acc

    def _property_slot(self, ctx: NavigationContext, current: Any, hint: Any, name: str) -> Optional[_PropertySlot]:
        if isinstance(current, cabc.Mapping) and not isinstance(current, cabc.MutableMapping):
            return None
        writer = self._writer(ctx, current, hint, name)
        if writer is None:
            return None
        return _PropertySlot(self.coercer, ctx, current, writer)

    def _vivify(self, ctx: NavigationContext, owner: Optional[_PropertySlot]) -> Any:
        if owner is None:
            raise ctx.error(
                ErrorKind.ACCESSOR_NOT_FOUND,
                f"Cannot create '{ctx.segment}': setter or field not found",
            )
        instance = self.coercer.new_instance(owner.declared_type, ctx)
        _LOG.debug("auto-created %s at %r", type(instance).__name__, ctx)
        stored = owner(instance)
        ctx.record(lambda: owner.restore(None))
        return stored


def _read(ctx: NavigationContext, reader: Any, instance: Any) -> Any:
    return ctx.invoke(f"Reading '{reader.name}' of {type(instance).__name__}", reader.read, instance)


def _write(ctx: NavigationContext, writer: Any, instance: Any, value: Any) -> None:
    ctx.invoke(f"Writing '{writer.name}' of {type(instance).__name__}", writer.write, instance, value)


def _extract_indexes(seg: Segment) -> List[str]:
    """Strip all trailing ``[...]`` suffixes, outermost first: ``m[0][1]`` → ``["0", "1"]``."""
    indexes: List[str] = []
    index = extract_index(seg)
    while index is not None:
        indexes.insert(0, index)
        index = extract_index(seg)
    seg.index = indexes[-1] if indexes else None
    return indexes


__all__ = ["Navigator"]
