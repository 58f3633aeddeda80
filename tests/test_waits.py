# tests/test_waits.py
"""
Tests for the polling primitive and wait utilities.
"""

import threading
import time

import pytest
from uiauto_pages.waits import (
    WaitStatus,
    eventually,
    poll,
    wait_until,
    wait_until_not,
    wait_until_passes,
)
from uiauto_pages.exceptions import NotFoundError, NotInteractableError, TimeoutError


class TestPoll:
    """Tests for the poll primitive."""

    def test_ok_on_first_attempt(self):
        """Should return OK after a single attempt when predicate is true."""
        result = poll(lambda: "ready", timeout=5)

        assert result.status is WaitStatus.OK
        assert result.value == "ready"
        assert result.attempt_count == 1

    def test_zero_timeout_still_attempts_once(self):
        """Should evaluate the predicate once even with a zero timeout."""
        calls = {"count": 0}

        def predicate():
            calls["count"] += 1
            return False

        result = poll(predicate, timeout=0, interval=0.05)

        assert result.status is WaitStatus.TIMEOUT
        assert calls["count"] == 1

    def test_timeout_arm_carries_error(self):
        """Should return a TimeoutError in the TIMEOUT arm instead of raising."""
        result = poll(lambda: False, timeout=0.2, interval=0.05, description="panel")

        assert result.timed_out
        assert isinstance(result.error, TimeoutError)
        assert result.error.timeout == 0.2
        assert "panel" in str(result.error)
        assert result.attempt_count > 1

    def test_custom_message_is_used(self):
        """Should build the timeout message lazily from the message callable."""
        result = poll(lambda: False, timeout=0.1, interval=0.05, message=lambda: "never became ready")

        assert str(result.error).startswith("never became ready")

    def test_not_found_counts_as_false(self):
        """Should keep polling while the predicate raises NotFoundError."""
        calls = {"count": 0}

        def predicate():
            calls["count"] += 1
            if calls["count"] < 3:
                raise NotFoundError("//div")
            return True

        result = poll(predicate, timeout=2, interval=0.05)

        assert result.ok
        assert calls["count"] == 3

    def test_not_found_kept_as_original_exception(self):
        """Should attach the last NotFoundError to the timeout error."""
        def predicate():
            raise NotFoundError("//div")

        result = poll(predicate, timeout=0.1, interval=0.05)

        assert isinstance(result.error.original_exception, NotFoundError)

    def test_other_errors_stop_immediately(self):
        """Should return the ERROR arm on the first unexpected exception."""
        calls = {"count": 0}

        def predicate():
            calls["count"] += 1
            raise ValueError("broken")

        result = poll(predicate, timeout=5, interval=0.05)

        assert result.status is WaitStatus.ERROR
        assert isinstance(result.error, ValueError)
        assert calls["count"] == 1

    def test_reverse_waits_for_falsy(self):
        """Should succeed once the predicate turns falsy when reverse is set."""
        counter = {"value": 3}

        def predicate():
            counter["value"] -= 1
            return counter["value"] > 0

        result = poll(predicate, timeout=2, interval=0.05, reverse=True)

        assert result.ok
        assert counter["value"] == 0


class TestWaitResult:
    """Tests for unwrapping poll results."""

    def test_to_bool_false_only_on_timeout(self):
        """Should map TIMEOUT to False and re-raise ERROR."""
        assert poll(lambda: True, timeout=1).to_bool() is True
        assert poll(lambda: False, timeout=0.1, interval=0.05).to_bool() is False

        def broken():
            raise KeyError("x")

        with pytest.raises(KeyError):
            poll(broken, timeout=1).to_bool()

    def test_unwrap_raises_timeout(self):
        """Should raise the TimeoutError carried by the result."""
        with pytest.raises(TimeoutError):
            poll(lambda: False, timeout=0.1, interval=0.05).unwrap()


class TestWaitUntil:
    """Tests for the blocking wait helpers."""

    def test_returns_predicate_value(self):
        """Should hand back the truthy value that ended the wait."""
        assert wait_until(lambda: {"x": 1}, timeout=1) == {"x": 1}

    def test_waits_for_document_change(self, driver):
        """Should keep polling until the driver reports the node."""
        threading.Timer(0.15, lambda: driver.add("//dialog")).start()
        start = time.monotonic()

        assert wait_until(lambda: driver.is_existing("//dialog"), timeout=2, interval=0.05) is True
        assert 0.1 <= time.monotonic() - start < 1.5

    def test_timeout_message_and_attributes(self):
        """Should raise a TimeoutError describing the condition."""
        with pytest.raises(TimeoutError) as exc_info:
            wait_until(lambda: False, timeout=0.2, interval=0.05, description="dialog to open", stage="page")

        error = exc_info.value
        assert str(error).startswith("Timed out waiting for dialog to open after 0.2s")
        assert error.timeout == 0.2
        assert error.stage == "page"
        assert error.description == "dialog to open"

    def test_predicate_error_propagates(self):
        """Should surface predicate errors unchanged instead of timing out."""
        def broken():
            raise ValueError("stale handle")

        with pytest.raises(ValueError, match="stale handle"):
            wait_until(broken, timeout=0.3, interval=0.1)

    def test_wait_until_not(self, driver):
        """Should return once the predicate turns falsy."""
        driver.add("//div[@class='spinner']")
        threading.Timer(0.1, lambda: driver.remove("//div[@class='spinner']")).start()

        wait_until_not(lambda: driver.is_existing("//div[@class='spinner']"), timeout=2, interval=0.05)

        with pytest.raises(TimeoutError):
            wait_until_not(lambda: True, timeout=0.2, interval=0.05)


class TestEventually:
    """Tests for the boolean eventually helper."""

    def test_duality_with_wait_until(self):
        """Should be True exactly when wait_until would not raise."""
        assert eventually(lambda: True, timeout=0.2) is True
        assert eventually(lambda: False, timeout=0.2, interval=0.05) is False

    def test_reverse(self):
        """Should look for a falsy predicate when reverse is set."""
        assert eventually(lambda: False, timeout=0.2, reverse=True) is True


class TestWaitUntilPasses:
    """Tests for retrying calls that raise."""

    def test_retries_listed_exceptions(self, driver):
        """Should retry while the driver reports the node as covered."""
        driver.add("//button", blocked_clicks=2)

        wait_until_passes(
            driver.click,
            1,
            0.05,
            (NotInteractableError,),
            "button to become clickable",
            "//button",
        )

        assert driver.clicks == ["//button"]

    def test_timeout_keeps_last_error(self, driver):
        """Should raise TimeoutError chained to the last caught exception."""
        driver.add("//button", blocked_clicks=1000)

        with pytest.raises(TimeoutError) as exc_info:
            wait_until_passes(driver.click, 0.2, 0.05, (NotInteractableError,), "button click", "//button")

        error = exc_info.value
        assert isinstance(error.original_exception, NotInteractableError)
        assert error.__cause__ is error.original_exception
        assert error.attempt_count > 1
        assert "button click" in str(error)

    def test_other_exceptions_propagate(self):
        """Should not retry exceptions outside the given types."""
        calls = []

        def fails():
            calls.append(1)
            raise TypeError("wrong type")

        with pytest.raises(TypeError):
            wait_until_passes(fails, 1, 0.05, (ValueError,))

        assert len(calls) == 1


class TestTimeoutErrorDetails:
    """Tests for TimeoutError formatting."""

    def test_root_cause_through_nested_timeouts(self):
        """Should follow original_exception down to the first non-timeout error."""
        inner = NotFoundError("//div")
        middle = TimeoutError("list never filled")
        middle.original_exception = inner
        outer = TimeoutError("page never opened")
        outer.original_exception = middle

        assert outer.get_root_cause() is inner

    def test_str_appends_details(self):
        """Should append attempts, elapsed time and stage."""
        error = TimeoutError("timed out")
        error.attempt_count = 4
        error.elapsed_time = 1.5
        error.stage = "click"

        assert str(error) == "timed out [Attempts: 4, Elapsed: 1.50s, Stage: click]"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
