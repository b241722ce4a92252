"""
Library settings.

Defaults for the module-level helpers and cache sizes. Sources, in order
of precedence (later wins):
  • built-in defaults;
  • optional YAML file (explicit path or ``BEANPATH_SETTINGS``);
  • environment variables ``BEANPATH_DECLARED``, ``BEANPATH_FORCED``,
    ``BEANPATH_SILENT``, ``BEANPATH_CACHE_SIZE``, ``BEANPATH_DEBUG``.
"""

from __future__ import annotations

import functools
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .convert import TypeConverter
from .errors import ConversionFailed, SettingsError
from .introspect import DEFAULT_CACHE_SIZE

_yaml = YAML(typ="safe")

_LOG = logging.getLogger("beanpath")

_ENV_FIELDS = {
    "BEANPATH_DECLARED": "declared",
    "BEANPATH_FORCED": "forced",
    "BEANPATH_SILENT": "silent",
    "BEANPATH_CACHE_SIZE": "accessor_cache_size",
    "BEANPATH_DEBUG": "debug",
}


@dataclass(frozen=True)
class BeanSettings:
    declared: bool = False
    forced: bool = False
    silent: bool = False
    accessor_cache_size: int = DEFAULT_CACHE_SIZE
    debug: bool = False


def load_settings(path: Optional[Path] = None, env: Optional[Dict[str, str]] = None) -> BeanSettings:
    """
    Build settings from a YAML file and the environment.

    Args:
        path: YAML file with a mapping of BeanSettings fields
              (defaults to ``$BEANPATH_SETTINGS`` when set)
        env: Environment to read overrides from (defaults to ``os.environ``)

    Raises:
        SettingsError: unreadable file, unknown keys or values of wrong type
    """
    env = os.environ if env is None else env
    converter = TypeConverter()

    raw: Dict[str, Any] = {}
    if path is None and env.get("BEANPATH_SETTINGS"):
        path = Path(env["BEANPATH_SETTINGS"])
    if path is not None:
        raw.update(_read_yaml(path))

    for var, field_name in _ENV_FIELDS.items():
        if var in env:
            raw[field_name] = env[var].strip()

    try:
        settings = converter.convert(raw, BeanSettings)
    except ConversionFailed as e:
        raise SettingsError(f"Invalid beanpath settings: {e}") from e
    if settings.accessor_cache_size < 0:
        raise SettingsError(f"accessor_cache_size must be >= 0, got {settings.accessor_cache_size}")

    if settings.debug:
        setup_logging(logging.DEBUG)
    return settings


@functools.lru_cache(maxsize=1)
def get_settings() -> BeanSettings:
    """Process-wide settings, loaded once."""
    return load_settings()


def reset_settings() -> None:
    get_settings.cache_clear()


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = _yaml.load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SettingsError(f"Cannot read settings file {path}: {e}") from e
    except YAMLError as e:
        raise SettingsError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"{path}: expected a mapping, got {type(data).__name__}")
    return data


def setup_logging(level: int = logging.INFO) -> None:
    """Attach a stderr handler to the ``beanpath`` logger once."""
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        _LOG.addHandler(h)


__all__ = [
    "BeanSettings",
    "load_settings",
    "get_settings",
    "reset_settings",
    "setup_logging",
]
