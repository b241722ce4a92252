from __future__ import annotations

import inspect
import logging
from typing import Any

import numpy as np

from ..errors import InstantiationFailed
from ..introspect.types import concrete_type, raw_type, type_name

_LOG = logging.getLogger("beanpath.convert")


def new_instance(tp: Any) -> Any:
    """
    Create a default instance of a declared type via its no-argument constructor.

    Untyped slots (``Any``/``object``) get a ``dict``, so that navigation can
    continue into them by key. Abstract collection types get their usual
    concrete class; ``numpy.ndarray`` gets an empty object array.
    """
    raw = raw_type(tp)
    if raw is object:
        return {}
    if raw is np.ndarray:
        return np.empty(0, dtype=object)
    raw = concrete_type(raw)
    if inspect.isabstract(raw):
        raise InstantiationFailed(tp, "abstract class")
    try:
        inst = raw()
    except Exception as e:
        raise InstantiationFailed(tp, str(e)) from e
    _LOG.debug("new instance of %s", type_name(raw))
    return inst


__all__ = ["new_instance"]
