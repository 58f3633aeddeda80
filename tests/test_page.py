# tests/test_page.py
"""
Tests for the Page base class.
"""

import threading

import pytest
from uiauto_pages.exceptions import TimeoutError
from uiauto_pages.page import Page


class LoginPage(Page):

    @property
    def username(self):
        return self.store.input("//input[@name='user']")

    def is_open(self):
        return self.username.currently.is_visible()

    def is_closed(self):
        return not self.username.currently.exists()


class TestPage:
    """Tests for page open/closed waits."""

    def test_abstract(self, store):
        """Should require is_open and is_closed."""
        with pytest.raises(TypeError):
            Page(store)

    def test_default_timing(self, store):
        """Should take page timings from the current config."""
        page = LoginPage(store)

        assert page.timeout == 30.0
        assert page.interval == 0.5

    def test_wait_is_open(self, store, driver):
        """Should return the page once it is open."""
        page = LoginPage(store, timeout=2, interval=0.05)
        threading.Timer(0.1, lambda: driver.add("//input[@name='user']")).start()

        assert page.wait.is_open() is page

    def test_wait_timeout_message(self, store):
        """Should describe the page that never opened."""
        page = LoginPage(store, timeout=0.2, interval=0.05)

        with pytest.raises(TimeoutError) as exc_info:
            page.wait.is_open()

        assert str(exc_info.value).startswith("Waiting for page LoginPage to be open within 0.2s failed.")

    def test_eventually(self, store, driver):
        """Should answer with booleans instead of raising."""
        page = LoginPage(store, timeout=0.2, interval=0.05)

        assert page.eventually.is_closed() is True
        assert page.eventually.is_open() is False

        driver.add("//input[@name='user']")

        assert page.eventually.is_open(timeout=0.5) is True
        with pytest.raises(TimeoutError):
            page.wait.is_closed(timeout=0.1, interval=0.05)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
