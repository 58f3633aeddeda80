# tests/test_element.py
"""
Tests for PageElement and InputElement facets.
"""

import threading
import time

import pytest
from uiauto_pages.actionlogger import ACTION_LOGGER
from uiauto_pages.context import ActionContextManager
from uiauto_pages.element import PageElement, direct_text
from uiauto_pages.exceptions import ActionError, NotFoundError, NotInteractableError, TimeoutError


def later(delay, func):
    """Run func on a timer thread, to change the document while a wait polls."""
    timer = threading.Timer(delay, func)
    timer.start()
    return timer


class TestDirectText:
    """Tests for direct text extraction."""

    def test_excludes_nested_elements(self):
        """Should keep only the root element's own text nodes."""
        assert direct_text("<div>Total <b>42</b> items</div>") == "Total  items"

    def test_void_tags(self):
        """Should not treat void tags as nesting."""
        assert direct_text("<p>a<br>b</p>") == "ab"


class TestCurrently:
    """Tests for immediate reads."""

    def test_idempotent_reads(self, store, driver):
        """Should return the same answer for repeated reads of a static document."""
        driver.add("//h1", text="Welcome")
        title = store.element("//h1")

        assert title.currently.has_text("Welcome") == title.currently.has_text("Welcome") is True
        assert title.currently.get_text() == "Welcome"

    def test_state_checks(self, store, driver):
        """Should report existence, visibility and enablement."""
        driver.add("//button", visible=False, enabled=False)
        button = store.element("//button")

        assert button.currently.exists() is True
        assert button.currently.is_visible() is False
        assert button.currently.is_enabled() is False
        assert store.element("//missing").currently.exists() is False

    def test_missing_node_raises_outside_polling(self, store):
        """Should surface NotFoundError from immediate reads."""
        with pytest.raises(NotFoundError):
            store.element("//missing").currently.get_text()

    def test_not_negates(self, store, driver):
        """Should negate checks through not_."""
        driver.add("//p", text="Draft")
        paragraph = store.element("//p")

        assert paragraph.currently.not_.has_text("Saved") is True
        assert paragraph.currently.not_.contains_text("raf") is False
        assert paragraph.currently.not_.has_any_text() is False

    def test_not_rejects_getters(self, store):
        """Should expose only checks on the negated view."""
        with pytest.raises(AttributeError):
            store.element("//p").currently.not_.get_text

    def test_attribute_checks(self, store, driver):
        """Should compare attributes and their shortcuts."""
        driver.add("//div", attributes={"class": "card active", "id": "main"})
        card = store.element("//div")

        assert card.currently.contains_class("active")
        assert card.currently.has_id("main")
        assert not card.currently.has_any_attribute("title")

    def test_geometry_tolerance(self, store, driver):
        """Should compare coordinates within the given tolerances."""
        driver.add("//img", location={"x": 100, "y": 50}, size={"width": 200, "height": 80})
        image = store.element("//img")

        assert image.currently.has_x(95, tolerance=5)
        assert not image.currently.has_x(94, tolerance=5)
        assert image.currently.has_location({"x": 102, "y": 50}, tolerances={"x": 2})
        assert image.currently.has_size({"width": 200, "height": 80})
        assert not image.currently.has_height(81)

    def test_direct_text_checks(self, store, driver):
        """Should read direct text from the element's HTML."""
        driver.add("//td", text="Total 42", html="<td>Total <span>42</span></td>")
        cell = store.element("//td")

        assert cell.currently.has_direct_text("Total ")
        assert cell.currently.contains_text("42")
        assert not cell.currently.contains_direct_text("42")

    def test_last_diff(self, store, driver):
        """Should keep the last observed and expected values."""
        driver.add("//p", text="Draft")
        paragraph = store.element("//p")

        paragraph.currently.has_text("Saved")
        diff = paragraph.last_diff

        assert diff.actual == "Draft"
        assert diff.expected == "Saved"
        assert diff.selector == "//p"


class TestWait:
    """Tests for blocking waits."""

    def test_returns_element(self, store, driver):
        """Should return the element itself for chaining."""
        driver.add("//h1", text="Hi")
        title = store.element("//h1")

        assert title.wait.is_visible() is title
        assert title.wait.has_text("Hi").wait.exists() is title

    def test_waits_for_change(self, store, driver):
        """Should succeed once the document changes within the timeout."""
        node = driver.add("//p", text="Saving")
        later(0.1, lambda: node.update(text="Saved"))

        store.element("//p").wait.has_text("Saved", timeout=2)

    def test_property_timeout_message(self, store, driver):
        """Should report the last actual value and the expected value."""
        driver.add("//p", text="Draft")

        with pytest.raises(TimeoutError) as exc_info:
            store.element("//p").wait.has_text("Saved")

        error = exc_info.value
        assert str(error).startswith(
            "PageElement's text \"Draft\" never became \"Saved\" within 0.3s.\n( //p )"
        )
        assert error.selector == "//p"
        assert error.property_name == "text"
        assert error.last_actual == "Draft"
        assert error.expected == "Saved"

    def test_state_timeout_message(self, store):
        """Should name the state the element never reached."""
        with pytest.raises(TimeoutError) as exc_info:
            store.element("//missing").wait.exists()

        assert str(exc_info.value).startswith("PageElement never existed within 0.3s.\n( //missing )")

    def test_any_timeout_message(self, store, driver):
        """Should word any-checks without an expected value."""
        driver.add("//p", text="")

        with pytest.raises(TimeoutError) as exc_info:
            store.element("//p").wait.has_any_text()

        assert str(exc_info.value).startswith("PageElement never any text within 0.3s.\n( //p )")

    def test_reverse_symmetry(self, store, driver):
        """Should wait for the negated condition through not_."""
        node = driver.add("//div[@id='spinner']")
        spinner = store.element("//div[@id='spinner']")
        later(0.1, lambda: node.update(visible=False))

        assert spinner.wait.not_.is_visible(timeout=2) is spinner

    def test_reverse_timeout_message(self, store, driver):
        """Should include 'not' in the message of a reversed wait."""
        driver.add("//p", text="Draft")

        with pytest.raises(TimeoutError) as exc_info:
            store.element("//p").wait.not_.has_text("Draft")

        assert "never not became \"Draft\"" in str(exc_info.value)

    def test_explicit_timeout_overrides_default(self, store):
        """Should use the per-call timeout."""
        start = time.monotonic()

        with pytest.raises(TimeoutError) as exc_info:
            store.element("//missing").wait.exists(timeout=0.1)

        assert time.monotonic() - start < 0.3
        assert exc_info.value.timeout == 0.1

    def test_unexpected_driver_error_propagates(self, store, driver):
        """Should not convert driver failures into timeouts."""
        def broken(selector):
            raise RuntimeError("driver crashed")

        driver.get_text = broken

        with pytest.raises(RuntimeError):
            store.element("//p").wait.has_text("x")


class TestEventually:
    """Tests for non-throwing checks."""

    def test_duality_with_wait(self, store, driver):
        """Should be True exactly when the wait succeeds."""
        driver.add("//p", text="Draft")
        paragraph = store.element("//p")

        assert paragraph.eventually.has_text("Draft") is True
        assert paragraph.eventually.has_text("Saved") is False
        with pytest.raises(TimeoutError):
            paragraph.wait.has_text("Saved")

    def test_missing_node_is_false(self, store):
        """Should answer False for a node that never appears."""
        assert store.element("//missing").eventually.is_visible() is False
        assert store.element("//missing").eventually.not_.exists() is True

    def test_errors_still_raise(self, store, driver):
        """Should only swallow timeouts."""
        def broken(selector):
            raise RuntimeError("driver crashed")

        driver.get_text = broken

        with pytest.raises(RuntimeError):
            store.element("//p").eventually.has_text("x")


class TestInitialWait:
    """Tests for awaited getters."""

    def test_getter_waits_for_visibility(self, store, driver):
        """Should wait until the element is visible before reading."""
        node = driver.add("//p", text="Ready", visible=False)
        later(0.1, lambda: node.update(visible=True))

        assert store.element("//p", timeout=2).get_text() == "Ready"

    def test_getter_times_out(self, store):
        """Should raise TimeoutError when the element never becomes ready."""
        with pytest.raises(TimeoutError):
            store.element("//missing").get_text()

    def test_text_wait_type(self, store, driver):
        """Should wait for any text with the text wait type."""
        driver.add("//p", text="")

        with pytest.raises(TimeoutError):
            store.element("//p", wait="text").get_html()

    def test_invalid_wait_type(self, store):
        """Should reject unknown wait types and value waits on plain elements."""
        with pytest.raises(ValueError):
            store.element("//p", wait="soon")
        with pytest.raises(ValueError):
            store.element("//p", wait="value")


class TestClick:
    """Tests for clicking."""

    def test_click_retries_until_interactable(self, store, driver):
        """Should retry while the driver reports the node as covered."""
        driver.add("//button", blocked_clicks=2)

        store.element("//button").click()

        assert driver.clicks == ["//button"]

    def test_click_times_out_when_always_covered(self, store, driver):
        """Should give up after the click timeout."""
        driver.add("//button", blocked_clicks=1000)

        with pytest.raises(TimeoutError):
            store.element("//button").click()

    def test_click_post_condition(self, store, driver):
        """Should click again until the post condition holds."""
        driver.add("//button")

        store.element("//button").click(post_condition=lambda: len(driver.clicks) >= 2)

        assert len(driver.clicks) == 2

    def test_failed_click_carries_action_trace(self, store):
        """Should attach the running action to errors raised inside it."""
        with pytest.raises(TimeoutError) as exc_info:
            store.element("//missing").click()

        trace = exc_info.value.action_trace.splitlines()
        assert trace[0] == "Action trace (innermost first):"
        assert trace[1].startswith("  X click PageElement '//missing'")

    def test_click_is_logged(self, store, driver, tmp_path):
        """Should record the action in the action log."""
        driver.add("//button")
        log_file = tmp_path / "actions.log"
        ACTION_LOGGER.configure(console=False, file_path=str(log_file))
        ACTION_LOGGER.enable()
        try:
            store.element("//button").click()
        finally:
            ACTION_LOGGER.disable()
            ACTION_LOGGER.configure()

        content = log_file.read_text(encoding="utf-8")
        assert "click" in content
        assert "//button" in content
        assert ActionContextManager.current() is None


class TestInputElement:
    """Tests for value-bearing elements."""

    def test_set_and_read_value(self, store, driver):
        """Should replace and read the value."""
        driver.add("//input")
        field = store.input("//input")

        field.set_value("admin")

        assert field.get_value() == "admin"
        assert field.currently.has_value("admin")
        assert field.wait.contains_value("adm") is field

    def test_set_value_on_readonly_input(self, store, driver):
        """Should raise ActionError with the driver error as cause."""
        driver.add("//input", readonly=True)

        with pytest.raises(ActionError) as exc_info:
            store.input("//input").set_value("admin")

        error = exc_info.value
        assert error.action == "set_value"
        assert error.selector == "//input"
        assert isinstance(error.cause, NotInteractableError)
        assert "set_value InputElement '//input'" in error.action_trace

    def test_value_wait_type(self, store, driver):
        """Should wait for any value with the value wait type."""
        node = driver.add("//input", value="")
        later(0.1, lambda: node.update(value="filled"))

        assert store.input("//input", wait="value", timeout=2).get_value() == "filled"

    def test_value_eventually(self, store, driver):
        """Should check values without raising."""
        driver.add("//input", value="x")
        field = store.input("//input")

        assert field.eventually.has_any_value() is True
        assert field.eventually.not_.has_any_value() is False


class TestNativeWait:
    """Tests for drivers with their own wait implementation."""

    def test_state_waits_use_driver(self, store, driver):
        """Should delegate state waits to the driver when supported."""
        calls = []

        def wait_for(selector, state, timeout, interval, reverse):
            calls.append((selector, state, reverse))
            return state == "visible"

        driver.supports_native_wait = True
        driver.wait_for = wait_for
        element = store.element("//p")

        assert element.wait.is_visible() is element
        assert element.eventually.is_enabled() is False
        assert calls == [("//p", "visible", False), ("//p", "enabled", False)]


class TestElementSubclassing:
    """Tests for custom element types."""

    def test_custom_type_through_store(self, store, driver):
        """Should build user-defined element types with their own helpers."""
        class Badge(PageElement):
            def get_count(self):
                return int(self.get_text())

        driver.add("//span", text="7")

        assert store.get("//span", Badge).get_count() == 7


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
