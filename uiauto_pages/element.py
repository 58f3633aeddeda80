# uiauto_pages/element.py
"""
@file element.py
@brief Page elements with Currently / Wait / Eventually facets.

    element.currently.has_text("Saved")        -> bool, reads once
    element.wait.has_text("Saved")             -> element, or raises TimeoutError
    element.eventually.has_text("Saved")       -> bool, False on timeout
    element.wait.not_.is_visible(timeout=2)    -> waits for the element to hide
"""

from __future__ import annotations

import time
from html.parser import HTMLParser
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .comparisons import contains, equals, has_any, type_to_string, within_tolerance
from .config import TimeConfig
from .context import tracked_action
from .diff import Diff
from .exceptions import ActionError, NotInteractableError, TimeoutError
from .interfaces import Geometric, StateCheckable, TextComparable, ValueComparable
from .node import Negated, PageNode
from .timings import WAIT_TYPES
from .waits import WaitResult, WaitStatus, poll, wait_until_passes

if TYPE_CHECKING:
    from .store import PageNodeStore

CONDITION_WORDS = {
    "has": "became",
    "contains": "contained",
    "any": "any",
    "within": "was in range",
}

VOID_TAGS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}


class _DirectTextParser(HTMLParser):
    """Collects the text nodes that are direct children of the root element."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._depth = 0
        self.parts: List[str] = []

    def handle_starttag(self, tag, attrs):
        if tag not in VOID_TAGS:
            self._depth += 1

    def handle_endtag(self, tag):
        if tag not in VOID_TAGS:
            self._depth -= 1

    def handle_data(self, data):
        if self._depth == 1:
            self.parts.append(data)


def direct_text(html: str) -> str:
    """Return the text of the root element of html, excluding nested elements."""
    parser = _DirectTextParser()
    parser.feed(html)
    parser.close()
    return "".join(parser.parts)


class PageElementCurrently:
    """
    Immediate reads. Every check records the observed value so that a
    later timeout message or diff can report it without re-querying.
    """

    def __init__(self, element: PageElement):
        self._element = element
        self._last_actual_result: Optional[str] = None
        self._last_expected: Any = None

    @property
    def element(self) -> PageElement:
        return self._element

    @property
    def last_actual_result(self) -> Optional[str]:
        return self._last_actual_result

    @property
    def last_expected(self) -> Any:
        return self._last_expected

    @property
    def not_(self) -> Negated:
        return Negated(self)

    def _negated(self, name: str, *args: Any, **kwargs: Any) -> bool:
        return not getattr(self, name)(*args, **kwargs)

    @property
    def _driver(self):
        return self._element.driver

    @property
    def _selector(self) -> str:
        return self._element.selector

    def _record(self, actual: Any, expected: Any = None) -> None:
        self._last_actual_result = type_to_string(actual)
        self._last_expected = expected

    def _compare_has(self, expected: Any, actual: Any) -> bool:
        self._record(actual, expected)
        return equals(actual, expected)

    def _compare_has_any(self, actual: Any) -> bool:
        self._record(actual)
        return has_any(actual)

    def _compare_contains(self, expected: Any, actual: Any) -> bool:
        self._record(actual, expected)
        return contains(actual, expected)

    def _compare_within(self, expected: float, actual: float, tolerance: Optional[float]) -> bool:
        self._record(actual, expected)
        return within_tolerance(actual, expected, tolerance)

    def _compare_within_axes(
        self,
        expected: Dict[str, float],
        actual: Dict[str, float],
        tolerances: Optional[Dict[str, float]],
    ) -> bool:
        self._record(actual, expected)
        tolerances = tolerances or {}
        return all(
            within_tolerance(actual[axis], value, tolerances.get(axis))
            for axis, value in expected.items()
        )

    def _state(self, result: bool) -> bool:
        self._record(bool(result))
        return bool(result)

    # --- state ---

    def exists(self) -> bool:
        return self._state(self._driver.is_existing(self._selector))

    def is_visible(self) -> bool:
        return self._state(self._driver.is_visible(self._selector))

    def is_enabled(self) -> bool:
        return self._state(self._driver.is_enabled(self._selector))

    def is_selected(self) -> bool:
        return self._state(self._driver.is_selected(self._selector))

    # --- getters ---

    def get_text(self) -> str:
        return self._driver.get_text(self._selector)

    def get_direct_text(self) -> str:
        return direct_text(self.get_html())

    def get_html(self) -> str:
        return self._driver.get_html(self._selector)

    def get_attribute(self, name: str) -> str:
        return self._driver.get_attribute(self._selector, name)

    def get_class(self) -> str:
        return self.get_attribute("class")

    def get_id(self) -> str:
        return self.get_attribute("id")

    def get_name(self) -> str:
        return self.get_attribute("name")

    def get_location(self) -> Dict[str, float]:
        return self._driver.get_location(self._selector)

    def get_x(self) -> float:
        return self.get_location()["x"]

    def get_y(self) -> float:
        return self.get_location()["y"]

    def get_size(self) -> Dict[str, float]:
        return self._driver.get_size(self._selector)

    def get_width(self) -> float:
        return self.get_size()["width"]

    def get_height(self) -> float:
        return self.get_size()["height"]

    # --- checks ---

    def has_text(self, text: str) -> bool:
        return self._compare_has(text, self.get_text())

    def has_any_text(self) -> bool:
        return self._compare_has_any(self.get_text())

    def contains_text(self, text: str) -> bool:
        return self._compare_contains(text, self.get_text())

    def has_direct_text(self, text: str) -> bool:
        return self._compare_has(text, self.get_direct_text())

    def has_any_direct_text(self) -> bool:
        return self._compare_has_any(self.get_direct_text())

    def contains_direct_text(self, text: str) -> bool:
        return self._compare_contains(text, self.get_direct_text())

    def has_html(self, html: str) -> bool:
        return self._compare_has(html, self.get_html())

    def has_any_html(self) -> bool:
        return self._compare_has_any(self.get_html())

    def contains_html(self, html: str) -> bool:
        return self._compare_contains(html, self.get_html())

    def has_attribute(self, name: str, value: str) -> bool:
        return self._compare_has(value, self.get_attribute(name))

    def has_any_attribute(self, name: str) -> bool:
        return self._compare_has_any(self.get_attribute(name))

    def contains_attribute(self, name: str, value: str) -> bool:
        return self._compare_contains(value, self.get_attribute(name))

    def has_class(self, value: str) -> bool:
        return self.has_attribute("class", value)

    def has_any_class(self) -> bool:
        return self.has_any_attribute("class")

    def contains_class(self, value: str) -> bool:
        return self.contains_attribute("class", value)

    def has_id(self, value: str) -> bool:
        return self.has_attribute("id", value)

    def has_any_id(self) -> bool:
        return self.has_any_attribute("id")

    def contains_id(self, value: str) -> bool:
        return self.contains_attribute("id", value)

    def has_name(self, value: str) -> bool:
        return self.has_attribute("name", value)

    def has_any_name(self) -> bool:
        return self.has_any_attribute("name")

    def contains_name(self, value: str) -> bool:
        return self.contains_attribute("name", value)

    def has_location(self, coordinates: Dict[str, float], tolerances: Optional[Dict[str, float]] = None) -> bool:
        return self._compare_within_axes(coordinates, self.get_location(), tolerances)

    def has_x(self, x: float, tolerance: Optional[float] = None) -> bool:
        return self._compare_within(x, self.get_x(), tolerance)

    def has_y(self, y: float, tolerance: Optional[float] = None) -> bool:
        return self._compare_within(y, self.get_y(), tolerance)

    def has_size(self, size: Dict[str, float], tolerances: Optional[Dict[str, float]] = None) -> bool:
        return self._compare_within_axes(size, self.get_size(), tolerances)

    def has_width(self, width: float, tolerance: Optional[float] = None) -> bool:
        return self._compare_within(width, self.get_width(), tolerance)

    def has_height(self, height: float, tolerance: Optional[float] = None) -> bool:
        return self._compare_within(height, self.get_height(), tolerance)


class PageElementWait:
    """
    Blocking checks. Each method polls the matching Currently check until it
    holds (or stops holding, with reverse=True) and returns the element.
    """

    def __init__(self, element: PageElement):
        self._element = element

    @property
    def not_(self) -> Negated:
        return Negated(self)

    def _negated(self, name: str, *args: Any, **kwargs: Any) -> Any:
        kwargs["reverse"] = True
        return getattr(self, name)(*args, **kwargs)

    @property
    def _currently(self) -> PageElementCurrently:
        return self._element.currently

    def _finish(self, result: WaitResult) -> Any:
        result.unwrap()
        return self._element

    def _timeout_error(self, message: str, result: WaitResult, property_name: str, expected: Any) -> None:
        error = result.error
        if not isinstance(error, TimeoutError):
            error = TimeoutError(message)
            error.timeout = result.elapsed
            result.error = error
        error.selector = self._element.selector
        error.property_name = property_name
        error.last_actual = self._currently.last_actual_result
        error.expected = expected

    def _wait_state(
        self,
        state: str,
        description: str,
        check: Callable[[], bool],
        timeout: Optional[float],
        interval: Optional[float],
        reverse: bool,
    ) -> Any:
        element = self._element
        timeout, interval = element.resolve_timing(timeout, interval)
        reverse_str = " not" if reverse else ""
        message = (
            f"{type(element).__name__} never{reverse_str} {description} within {timeout}s.\n"
            f"( {element.selector} )"
        )

        driver = element.driver
        if driver.supports_native_wait:
            reached = driver.wait_for(element.selector, state, timeout, interval, reverse)
            if reached:
                result = WaitResult(WaitStatus.OK, value=True)
            else:
                result = WaitResult(WaitStatus.TIMEOUT, elapsed=timeout)
        else:
            result = poll(
                check,
                timeout,
                interval,
                description=f"{element.selector} {description}",
                reverse=reverse,
                message=lambda: message,
            )
        if result.timed_out:
            self._timeout_error(message, result, state, not reverse)
        return self._finish(result)

    def _wait_property(
        self,
        name: str,
        condition_type: str,
        check: Callable[[], bool],
        value: Any = None,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        reverse: bool = False,
    ) -> Any:
        element = self._element
        timeout, interval = element.resolve_timing(timeout, interval)
        reverse_str = " not" if reverse else ""
        condition_str = CONDITION_WORDS[condition_type]

        def message() -> str:
            if condition_type == "any":
                return (
                    f"{type(element).__name__} never{reverse_str} any {name}"
                    f" within {timeout}s.\n( {element.selector} )"
                )
            return (
                f"{type(element).__name__}'s {name} \"{self._currently.last_actual_result or ''}\" never"
                f"{reverse_str} {condition_str} \"{type_to_string(value)}\" within {timeout}s.\n"
                f"( {element.selector} )"
            )

        result = poll(
            check,
            timeout,
            interval,
            description=f"{element.selector} {name}",
            reverse=reverse,
            message=message,
        )
        if result.timed_out:
            self._timeout_error(message(), result, name, value)
        return self._finish(result)

    # --- state ---

    def exists(self, timeout: Optional[float] = None, interval: Optional[float] = None, reverse: bool = False):
        return self._wait_state("exists", "existed", self._currently.exists, timeout, interval, reverse)

    def is_visible(self, timeout: Optional[float] = None, interval: Optional[float] = None, reverse: bool = False):
        return self._wait_state("visible", "became visible", self._currently.is_visible, timeout, interval, reverse)

    def is_enabled(self, timeout: Optional[float] = None, interval: Optional[float] = None, reverse: bool = False):
        return self._wait_state("enabled", "became enabled", self._currently.is_enabled, timeout, interval, reverse)

    def is_selected(self, timeout: Optional[float] = None, interval: Optional[float] = None, reverse: bool = False):
        return self._wait_state("selected", "became selected", self._currently.is_selected, timeout, interval, reverse)

    # --- text ---

    def has_text(self, text: str, timeout=None, interval=None, reverse=False):
        return self._wait_property("text", "has", lambda: self._currently.has_text(text), text, timeout, interval, reverse)

    def has_any_text(self, timeout=None, interval=None, reverse=False):
        return self._wait_property("text", "any", self._currently.has_any_text, None, timeout, interval, reverse)

    def contains_text(self, text: str, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "text", "contains", lambda: self._currently.contains_text(text), text, timeout, interval, reverse
        )

    def has_direct_text(self, text: str, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "direct text", "has", lambda: self._currently.has_direct_text(text), text, timeout, interval, reverse
        )

    def has_any_direct_text(self, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "direct text", "any", self._currently.has_any_direct_text, None, timeout, interval, reverse
        )

    def contains_direct_text(self, text: str, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "direct text", "contains", lambda: self._currently.contains_direct_text(text),
            text, timeout, interval, reverse,
        )

    def has_html(self, html: str, timeout=None, interval=None, reverse=False):
        return self._wait_property("HTML", "has", lambda: self._currently.has_html(html), html, timeout, interval, reverse)

    def has_any_html(self, timeout=None, interval=None, reverse=False):
        return self._wait_property("HTML", "any", self._currently.has_any_html, None, timeout, interval, reverse)

    def contains_html(self, html: str, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "HTML", "contains", lambda: self._currently.contains_html(html), html, timeout, interval, reverse
        )

    # --- attributes ---

    def has_attribute(self, name: str, value: str, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            name, "has", lambda: self._currently.has_attribute(name, value), value, timeout, interval, reverse
        )

    def has_any_attribute(self, name: str, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            name, "any", lambda: self._currently.has_any_attribute(name), None, timeout, interval, reverse
        )

    def contains_attribute(self, name: str, value: str, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            name, "contains", lambda: self._currently.contains_attribute(name, value), value, timeout, interval, reverse
        )

    def has_class(self, value: str, timeout=None, interval=None, reverse=False):
        return self.has_attribute("class", value, timeout, interval, reverse)

    def has_any_class(self, timeout=None, interval=None, reverse=False):
        return self.has_any_attribute("class", timeout, interval, reverse)

    def contains_class(self, value: str, timeout=None, interval=None, reverse=False):
        return self.contains_attribute("class", value, timeout, interval, reverse)

    def has_id(self, value: str, timeout=None, interval=None, reverse=False):
        return self.has_attribute("id", value, timeout, interval, reverse)

    def has_any_id(self, timeout=None, interval=None, reverse=False):
        return self.has_any_attribute("id", timeout, interval, reverse)

    def contains_id(self, value: str, timeout=None, interval=None, reverse=False):
        return self.contains_attribute("id", value, timeout, interval, reverse)

    def has_name(self, value: str, timeout=None, interval=None, reverse=False):
        return self.has_attribute("name", value, timeout, interval, reverse)

    def has_any_name(self, timeout=None, interval=None, reverse=False):
        return self.has_any_attribute("name", timeout, interval, reverse)

    def contains_name(self, value: str, timeout=None, interval=None, reverse=False):
        return self.contains_attribute("name", value, timeout, interval, reverse)

    # --- geometry ---

    def has_location(self, coordinates: Dict[str, float], tolerances=None, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "location", "within", lambda: self._currently.has_location(coordinates, tolerances),
            coordinates, timeout, interval, reverse,
        )

    def has_x(self, x: float, tolerance=None, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "x", "within", lambda: self._currently.has_x(x, tolerance), x, timeout, interval, reverse
        )

    def has_y(self, y: float, tolerance=None, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "y", "within", lambda: self._currently.has_y(y, tolerance), y, timeout, interval, reverse
        )

    def has_size(self, size: Dict[str, float], tolerances=None, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "size", "within", lambda: self._currently.has_size(size, tolerances), size, timeout, interval, reverse
        )

    def has_width(self, width: float, tolerance=None, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "width", "within", lambda: self._currently.has_width(width, tolerance), width, timeout, interval, reverse
        )

    def has_height(self, height: float, tolerance=None, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "height", "within", lambda: self._currently.has_height(height, tolerance), height, timeout, interval, reverse
        )


class PageElementEventually(PageElementWait):
    """
    Non-throwing probes. Same polling as PageElementWait, but a timeout
    yields False instead of an exception. Other errors still propagate.
    """

    def _finish(self, result: WaitResult) -> bool:
        return result.to_bool()


class PageElement(PageNode, StateCheckable, TextComparable, Geometric):
    """
    A single node addressed by an XPath selector.

    Reads through the element itself (get_text(), click(), ...) first run
    initial_wait() according to the element's wait type; reads through
    element.currently never wait.
    """

    currently_class = PageElementCurrently
    wait_class = PageElementWait
    eventually_class = PageElementEventually

    def __init__(
        self,
        selector: str,
        store: PageNodeStore,
        wait: Optional[str] = None,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
    ):
        """
        @param selector XPath selector
        @param store Store that created this element
        @param wait Initial wait type: "exist", "visible", "text" or "value"
        @param timeout Default timeout in seconds for wait/eventually checks
        @param interval Default poll interval in seconds
        """
        super().__init__(selector, store)
        settings = TimeConfig.current().element_wait

        self._wait_type = wait or store.settings.default_wait
        if wait is None and self._wait_type == "value" and not isinstance(self, ValueComparable):
            self._wait_type = "visible"
        if self._wait_type not in WAIT_TYPES:
            raise ValueError(f"Unknown wait type: {self._wait_type}. Use one of {list(WAIT_TYPES)}")
        if self._wait_type == "value" and not isinstance(self, ValueComparable):
            raise ValueError(f"{type(self).__name__} has no value to wait for")

        self._timeout = timeout if timeout is not None else settings.timeout
        self._interval = interval if interval is not None else settings.interval

        self.currently = self.currently_class(self)
        self.wait = self.wait_class(self)
        self.eventually = self.eventually_class(self)

    @property
    def wait_type(self) -> str:
        return self._wait_type

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def last_diff(self) -> Diff:
        return Diff(
            actual=self.currently.last_actual_result,
            expected=self.currently.last_expected,
            selector=self._selector,
        )

    def resolve_timing(self, timeout: Optional[float], interval: Optional[float]):
        return (
            timeout if timeout is not None else self._timeout,
            interval if interval is not None else self._interval,
        )

    def initial_wait(self) -> PageElement:
        """Wait until the element is ready for reads, according to its wait type."""
        if self._wait_type == "exist":
            self.wait.exists()
        elif self._wait_type == "visible":
            self.wait.is_visible()
        elif self._wait_type == "text":
            self.wait.has_any_text()
        elif self._wait_type == "value":
            self.wait.has_any_value()
        return self

    # --- awaited getters ---

    def get_text(self) -> str:
        return self.initial_wait().currently.get_text()

    def get_direct_text(self) -> str:
        return self.initial_wait().currently.get_direct_text()

    def get_html(self) -> str:
        return self.initial_wait().currently.get_html()

    def get_attribute(self, name: str) -> str:
        return self.initial_wait().currently.get_attribute(name)

    def get_class(self) -> str:
        return self.get_attribute("class")

    def get_id(self) -> str:
        return self.get_attribute("id")

    def get_name(self) -> str:
        return self.get_attribute("name")

    def get_location(self) -> Dict[str, float]:
        return self.initial_wait().currently.get_location()

    def get_size(self) -> Dict[str, float]:
        return self.initial_wait().currently.get_size()

    def get_is_enabled(self) -> bool:
        return self.initial_wait().currently.is_enabled()

    def get_is_selected(self) -> bool:
        return self.initial_wait().currently.is_selected()

    # --- actions ---

    @tracked_action("click")
    def click(self, post_condition: Optional[Callable[[], bool]] = None, timeout: Optional[float] = None) -> PageElement:
        """
        Click the element once it is ready.

        Clicks are retried while the driver reports the element as not
        interactable. With a post_condition, the element is clicked again
        (at most click_action.retry_count times) until the condition holds
        or the timeout expires.

        @param post_condition Callable that returns True once the click took effect
        @param timeout Timeout for the post condition, defaults to the element timeout
        @return self for chaining
        """
        self.initial_wait()
        config = TimeConfig.current()
        settings = config.click_action

        wait_until_passes(
            self.driver.click,
            settings.timeout,
            settings.interval,
            (NotInteractableError,),
            f"{self._selector} to become clickable",
            self._selector,
            stage="click",
        )

        if post_condition is not None:
            effective_timeout = timeout if timeout is not None else self._timeout
            reclicks = {"left": settings.retry_count}

            def clicked() -> bool:
                if post_condition():
                    return True
                if reclicks["left"] is not None and reclicks["left"] <= 0:
                    return False
                if self.currently.is_visible() and self.currently.is_enabled():
                    try:
                        self.driver.click(self._selector)
                    except NotInteractableError:
                        return False
                    if reclicks["left"] is not None:
                        reclicks["left"] -= 1
                return False

            poll(
                clicked,
                effective_timeout,
                settings.interval,
                description=f"postcondition of click on {self._selector}",
                stage="click",
                message=lambda: (
                    f"Postcondition for click never became true within {effective_timeout}s.\n"
                    f"( {self._selector} )"
                ),
            ).unwrap()

        if config.after_click_pause:
            time.sleep(config.after_click_pause)
        return self


class InputElementCurrently(PageElementCurrently):

    def get_value(self) -> str:
        return self._driver.get_value(self._selector)

    def has_value(self, value: str) -> bool:
        return self._compare_has(value, self.get_value())

    def has_any_value(self) -> bool:
        return self._compare_has_any(self.get_value())

    def contains_value(self, value: str) -> bool:
        return self._compare_contains(value, self.get_value())


class InputElementWait(PageElementWait):

    def has_value(self, value: str, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "value", "has", lambda: self._currently.has_value(value), value, timeout, interval, reverse
        )

    def has_any_value(self, timeout=None, interval=None, reverse=False):
        return self._wait_property("value", "any", self._currently.has_any_value, None, timeout, interval, reverse)

    def contains_value(self, value: str, timeout=None, interval=None, reverse=False):
        return self._wait_property(
            "value", "contains", lambda: self._currently.contains_value(value), value, timeout, interval, reverse
        )


class InputElementEventually(InputElementWait):

    def _finish(self, result: WaitResult) -> bool:
        return result.to_bool()


class InputElement(PageElement, ValueComparable):
    """An element with a value that can be read and replaced (inputs, textareas)."""

    currently_class = InputElementCurrently
    wait_class = InputElementWait
    eventually_class = InputElementEventually

    def get_value(self) -> str:
        return self.initial_wait().currently.get_value()

    @tracked_action("set_value")
    def set_value(self, value: str) -> InputElement:
        """Replace the element's value once it is ready."""
        self.initial_wait()
        try:
            self.driver.set_value(self._selector, value)
        except NotInteractableError as e:
            raise ActionError("set_value", self._selector, "element does not accept input", cause=e) from e
        pause = TimeConfig.current().after_set_value_pause
        if pause:
            time.sleep(pause)
        return self
