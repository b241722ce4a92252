import numpy as np
import pytest

from beanpath import BeanUtil, Navigator
from beanpath.bean import shared_navigator
from beanpath.settings import reset_settings

from tests.infrastructure import Address, Customer, Holder, Item


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    # environment of the developer machine must not leak into tests
    for var in ("BEANPATH_SETTINGS", "BEANPATH_DECLARED", "BEANPATH_FORCED",
                "BEANPATH_SILENT", "BEANPATH_CACHE_SIZE", "BEANPATH_DEBUG"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    shared_navigator.cache_clear()
    yield
    reset_settings()
    shared_navigator.cache_clear()


@pytest.fixture
def nav() -> Navigator:
    """Navigator with private caches."""
    return Navigator()


@pytest.fixture
def bean(nav: Navigator) -> BeanUtil:
    """Strict, non-forced BeanUtil on a private navigator."""
    return BeanUtil(navigator=nav)


@pytest.fixture
def customer() -> Customer:
    return Customer(
        name="Ann",
        age=30,
        address=Address(street="Main St", zip_code=1000, lines=["a", "b"]),
        tags=["vip"],
    )


@pytest.fixture
def holder() -> Holder:
    """Holder with a 3-element object array that has a hole at index 1."""
    h = Holder()
    h.items = np.empty(3, dtype=object)
    h.items[0] = Item("first", 1)
    h.items[2] = Item("third", 3)
    return h
