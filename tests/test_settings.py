import pytest

from beanpath import BeanSettings, SettingsError, load_settings
from beanpath.bean import shared_navigator
from beanpath.introspect import DEFAULT_CACHE_SIZE
from beanpath.settings import get_settings, reset_settings

from tests.infrastructure import write, write_yaml


def test_defaults():
    s = load_settings(env={})
    assert s == BeanSettings()
    assert s.accessor_cache_size == DEFAULT_CACHE_SIZE


def test_yaml_file(tmp_path):
    p = write_yaml(tmp_path / "beanpath.yaml", """
        declared: true
        silent: yes
        accessor_cache_size: 16
    """)
    s = load_settings(p, env={})
    assert s.declared is True
    assert s.silent is True
    assert s.forced is False
    assert s.accessor_cache_size == 16


def test_settings_path_from_env(tmp_path):
    p = write_yaml(tmp_path / "conf" / "bp.yaml", "forced: true")
    s = load_settings(env={"BEANPATH_SETTINGS": str(p)})
    assert s.forced is True


def test_env_overrides_file(tmp_path):
    p = write_yaml(tmp_path / "beanpath.yaml", """
        silent: true
        accessor_cache_size: 16
    """)
    s = load_settings(p, env={"BEANPATH_SILENT": "0", "BEANPATH_CACHE_SIZE": " 32 "})
    assert s.silent is False
    assert s.accessor_cache_size == 32


def test_empty_file(tmp_path):
    p = write(tmp_path / "empty.yaml", "")
    assert load_settings(p, env={}) == BeanSettings()


@pytest.mark.parametrize("text", [
    "bogus: 1",
    "silent: maybe",
    "accessor_cache_size: -1",
    "- a\n- b\n",
    "silent: [unclosed",
])
def test_invalid_file(tmp_path, text):
    p = write(tmp_path / "bad.yaml", text)
    with pytest.raises(SettingsError):
        load_settings(p, env={})


def test_missing_file(tmp_path):
    with pytest.raises(SettingsError) as ei:
        load_settings(tmp_path / "absent.yaml", env={})
    assert "absent.yaml" in str(ei.value)


def test_invalid_env():
    with pytest.raises(SettingsError):
        load_settings(env={"BEANPATH_CACHE_SIZE": "many"})


def test_process_settings_are_cached(monkeypatch):
    first = get_settings()
    assert get_settings() is first
    monkeypatch.setenv("BEANPATH_DECLARED", "true")
    assert get_settings().declared is False
    reset_settings()
    assert get_settings().declared is True


def test_shared_navigator_cache_size(monkeypatch):
    monkeypatch.setenv("BEANPATH_CACHE_SIZE", "8")
    reset_settings()
    shared_navigator.cache_clear()
    assert shared_navigator().introspector.cache_size == 8
