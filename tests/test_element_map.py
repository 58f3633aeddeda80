# tests/test_element_map.py
"""
Tests for PageElementMap and ValueMap.
"""

import pytest
from uiauto_pages.element import InputElement
from uiauto_pages.element_map import MapIdentifier
from uiauto_pages.xpath import XPathBuilder


def by_id(selector, value):
    return f"{selector}[@id='{value}']"


@pytest.fixture
def nav(store, driver):
    """Map of two navigation links."""
    driver.add("//nav/a[@id='home']", text="Home")
    driver.add("//nav/a[@id='about']", text="About us")
    return store.element_map("//nav/a", MapIdentifier({"home": "home", "about": "about"}, by_id))


class TestMapContent:
    """Tests for member derivation."""

    def test_member_selectors(self, nav, store):
        """Should build one member per key from the base selector."""
        assert list(nav.keys()) == ["home", "about"]
        assert nav["about"].selector == "//nav/a[@id='about']"
        assert nav["home"] is store.element("//nav/a[@id='home']")

    def test_node_id_includes_members(self, nav):
        """Should be identified by its base selector and member ids."""
        assert nav.node_id == "//nav/a|//nav/a[@id='home'];//nav/a[@id='about']"
        assert nav.selector == "//nav/a"

    def test_identity(self, nav, store):
        """Should return the cached map for the same identifier."""
        assert store.element_map("//nav/a", nav.identifier) is nav

    def test_builder_function(self, store, driver):
        """Should accept selector functions built on XPathBuilder."""
        nav = store.element_map(
            "//nav/a",
            MapIdentifier({"home": "Home"}, lambda selector, text: XPathBuilder(selector).text(text).build()),
        )

        assert nav["home"].selector.startswith("//nav/a[")
        assert "Home" in nav["home"].selector


class TestMapChecks:
    """Tests for broadcast checks over map members."""

    def test_has_text(self, nav):
        """Should compare members by key."""
        assert nav.currently.has_text({"home": "Home", "about": "About us"}) is True
        assert nav.currently.has_text({"home": "Home", "about": "About"}) is False
        assert list(nav.last_diff.tree) == ["about"]

    def test_any_check_with_mask(self, nav, driver):
        """Should only check members listed in the mask."""
        driver.nodes["//nav/a[@id='about']"]["text"] = ""

        assert nav.currently.has_any_text({"home": True}) is True
        assert nav.eventually.has_any_text() is False

    def test_getters(self, nav):
        """Should return values keyed by member."""
        assert nav.get_text() == {"home": "Home", "about": "About us"}
        assert nav.currently.get_text({"about": True}) == {"about": "About us"}

    def test_wait(self, nav):
        """Should return the map from waits."""
        assert nav.wait.is_visible() is nav
        assert nav.wait.contains_text({"about": "About"}, filter_mask={"home": False}) is nav


class TestValueMap:
    """Tests for maps of inputs."""

    def test_set_and_get_values(self, store, driver):
        """Should set values per key and read them back."""
        driver.add("//form//input[@id='user']")
        driver.add("//form//input[@id='pass']")
        form = store.input_map("//form//input", MapIdentifier({"user": "user", "password": "pass"}, by_id))

        form.set_value({"user": "admin", "password": "secret"})

        assert isinstance(form["user"], InputElement)
        assert form.get_value() == {"user": "admin", "password": "secret"}
        assert form.currently.has_value({"user": "admin", "password": "secret"}) is True
        assert form.eventually.not_.has_value({"user": "guest", "password": "guest"}) is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
