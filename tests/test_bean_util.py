import numpy as np
import pytest

import beanpath
from beanpath import BeanNavigationError, BeanUtil, ErrorKind

from tests.infrastructure import Address, Customer, Derived, Guarded, Holder, Item, Plain


class TestPresets:

    @pytest.mark.parametrize("util,declared,forced,silent", [
        (beanpath.pojo, False, False, False),
        (beanpath.declared, True, False, False),
        (beanpath.silent, False, False, True),
        (beanpath.forced, False, True, False),
        (beanpath.declared_silent, True, False, True),
        (beanpath.declared_forced, True, True, False),
        (beanpath.declared_forced_silent, True, True, True),
        (beanpath.forced_silent, False, True, True),
    ])
    def test_flags(self, util, declared, forced, silent):
        assert (util.declared, util.forced, util.silent) == (declared, forced, silent)

    def test_fluent_copies(self, bean):
        strict = bean.with_declared().with_silent()
        assert (strict.declared, strict.forced, strict.silent) == (True, False, True)
        assert strict.navigator is bean.navigator
        assert (bean.declared, bean.silent) == (False, False)
        assert bean.with_forced().forced is True

    def test_presets_share_navigator(self):
        assert beanpath.pojo.navigator is beanpath.silent.navigator


class TestGetSet:

    def test_get_and_set(self, bean, customer):
        bean.set_property(customer, "address.zip_code", "2000")
        assert bean.get_property(customer, "address.zip_code") == 2000

    def test_forced_flag_drives_get(self, bean):
        c = Customer()
        assert bean.get_property(c, "address.street") is None
        assert c.address is None
        assert bean.with_forced().get_property(c, "address.street") == ""
        assert isinstance(c.address, Address)

    def test_get_property_forced(self, bean, holder):
        item = bean.get_property_forced(holder, "items[1]")
        assert isinstance(item, Item)
        assert holder.items[1] is item

    def test_silent_util(self, bean, customer):
        quiet = bean.with_silent()
        assert quiet.get_property(customer, "nope.x") is None
        quiet.set_property(customer, "nope.x", 1)
        with pytest.raises(BeanNavigationError):
            bean.get_property(customer, "nope.x")

    def test_silent_util_ignores_malformed_index(self, customer):
        beanpath.silent.set_property(customer, "tags[x]", "v")
        assert beanpath.silent.get_property(customer, "tags[x]") is None
        assert customer.tags == ["vip"]

    def test_silent_util_rolls_back(self):
        c = Customer()
        beanpath.forced_silent.set_property(c, "address.nope.street", "x")
        assert beanpath.forced_silent.get_property(c, "friends[2].nope") is None
        assert c.address is None
        assert c.friends == []

    def test_declared_util(self, bean):
        d = Derived()
        assert bean.get_property(d, "inherited") == 1
        with pytest.raises(BeanNavigationError):
            bean.with_declared().get_property(d, "inherited")

    def test_this(self, bean, customer):
        assert bean.get_property(customer, "*this") is customer
        assert bean.get_property(customer, "*this.name") == "Ann"


class TestSimpleProperty:

    def test_literal_names(self, bean):
        data = {"a.b": 1}
        assert bean.get_simple_property(data, "a.b") == 1
        bean.set_simple_property(data, "x[0]", 2)
        assert data == {"a.b": 1, "x[0]": 2}

    def test_bean(self, bean, customer):
        bean.set_simple_property(customer, "age", "5")
        assert bean.get_simple_property(customer, "age") == 5


class TestHasProperty:

    def test_has_property(self, bean, customer):
        assert bean.has_property(customer, "address.street")
        assert bean.has_property(customer, "tags[0]")
        assert not bean.has_property(customer, "tags[1]")
        assert not bean.has_property(customer, "nope.x")
        assert not bean.has_property(Customer(), "address.street")
        assert not bean.has_property(None, "name")

    def test_has_property_never_creates(self, bean):
        c = Customer()
        bean.with_forced().has_property(c, "address.street")
        assert c.address is None

    def test_malformed_index_raises(self, bean, customer):
        with pytest.raises(BeanNavigationError) as ei:
            bean.has_property(customer, "tags[-1]")
        assert ei.value.kind is ErrorKind.MALFORMED_INDEX
        with pytest.raises(BeanNavigationError):
            bean.with_silent().has_property(customer, "address.lines[x]")

    def test_failing_getter_is_absent(self, bean):
        assert bean.has_property(Guarded(), "broken")
        assert not bean.has_property(Guarded(), "broken.street")

    def test_has_simple_property(self, bean, customer):
        assert bean.has_simple_property(customer, "name")
        assert not bean.has_simple_property(customer, "address.street")
        assert bean.has_simple_property({"a.b": 1}, "a.b")

    def test_has_root_property(self, bean, customer):
        assert bean.has_root_property(customer, "address.nope")
        assert bean.has_root_property(customer, "tags[9]")
        assert bean.has_root_property(customer, "*this.name")
        assert bean.has_root_property(customer, "*this")
        assert not bean.has_root_property(customer, "nope.name")

    def test_declared_and_instance_attributes(self, bean):
        p = Plain()
        assert bean.has_property(p, "dynamic")
        assert not bean.with_declared().has_property(p, "dynamic")


class TestPropertyType:

    def test_declared_types(self, bean, customer):
        assert bean.get_property_type(customer, "address") is Address
        assert bean.get_property_type(customer, "address.zip_code") is int
        assert bean.get_property_type(customer, "tags") is list
        assert bean.get_property_type(customer, "tags[0]") is str
        assert bean.get_property_type(customer, "grid[0]") is list
        assert bean.get_property_type(customer, "grid[0][0]") is int
        assert bean.get_property_type(customer, "*this") is Customer

    def test_array_types(self, bean):
        h = Holder()
        assert bean.get_property_type(h, "items") is np.ndarray
        assert bean.get_property_type(h, "items[0]") is Item
        assert bean.get_property_type(h, "scores[0]") is np.float64
        assert bean.get_property_type(h, "codes[0]") is int

    def test_missing_intermediate(self, bean):
        assert bean.get_property_type(Customer(), "address.street") is None

    def test_unknown_property(self, bean, customer):
        with pytest.raises(BeanNavigationError):
            bean.get_property_type(customer, "nope")
        assert bean.with_silent().get_property_type(customer, "nope") is None


class TestModuleFunctions:

    def test_defaults(self, customer):
        beanpath.set_property(customer, "address.street", "Oak")
        assert beanpath.get_property(customer, "address.street") == "Oak"
        with pytest.raises(BeanNavigationError):
            beanpath.get_property(customer, "nope")
        assert beanpath.get_property(customer, "nope", silent=True) is None

    def test_get_property_forced(self):
        c = Customer()
        assert beanpath.get_property_forced(c, "address.zip_code") == 0
        assert c.address is not None

    def test_declared_argument(self):
        with pytest.raises(BeanNavigationError):
            beanpath.get_property(Derived(), "inherited", declared=True)

    def test_settings_drive_defaults(self, monkeypatch, customer):
        monkeypatch.setenv("BEANPATH_SILENT", "true")
        beanpath.settings.reset_settings()
        assert beanpath.get_property(customer, "nope") is None
        beanpath.set_property(customer, "nope", 1)
        with pytest.raises(BeanNavigationError):
            beanpath.get_property(customer, "nope", silent=False)


def test_repr():
    assert repr(BeanUtil(forced=True)) == "BeanUtil(declared=False, forced=True, silent=False)"
