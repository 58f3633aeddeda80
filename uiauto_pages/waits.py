# uiauto_pages/waits.py
"""
@file waits.py
@brief Polling primitive and wait/retry utilities shared by every node type.

All waiting in the package funnels through poll(), which never raises for
an unmet condition. It returns a WaitResult whose status is OK, TIMEOUT or
ERROR. Wait facets unwrap that result into an exception, Eventually facets
unwrap it into a boolean.

    result = poll(lambda: driver.is_visible("//div"), timeout=5, interval=0.2)
    result.unwrap()      # value, or raises TimeoutError / the predicate's error
    result.to_bool()     # True / False on timeout / raises the predicate's error
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple, TypeVar

from .exceptions import NotFoundError, TimeoutError
from .timinglogger import TIMING_LOGGER

T = TypeVar("T")


def _now() -> float:
    return time.monotonic()


class WaitStatus(Enum):
    OK = "ok"
    TIMEOUT = "timeout"
    ERROR = "error"


@dataclass
class WaitResult:
    """Outcome of a single poll() call."""
    status: WaitStatus
    value: Any = None
    error: Optional[BaseException] = None
    attempt_count: int = 0
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status is WaitStatus.OK

    @property
    def timed_out(self) -> bool:
        return self.status is WaitStatus.TIMEOUT

    def unwrap(self) -> Any:
        """Return the polled value or raise the TIMEOUT/ERROR arm."""
        if self.status is WaitStatus.OK:
            return self.value
        raise self.error

    def to_bool(self) -> bool:
        """Collapse into a boolean. Only the TIMEOUT arm becomes False."""
        if self.status is WaitStatus.ERROR:
            raise self.error
        return self.status is WaitStatus.OK


class _Attempts:
    """Attempt counter and clock of one poll/retry loop, reporting to TIMING_LOGGER."""

    def __init__(self, kind: str, description: str, stage: Optional[str]):
        self.kind = kind
        self.description = description
        self.stage = stage
        self.count = 0
        self.started = _now()

    @property
    def elapsed(self) -> float:
        return _now() - self.started

    def next(self) -> int:
        self.count += 1
        return self.count

    def report(self, outcome: str, status: str = "info", **metadata: Any) -> None:
        if not TIMING_LOGGER.is_enabled():
            return
        if outcome != "start":
            metadata.setdefault("attempts", self.count)
            metadata.setdefault("elapsed_s", round(self.elapsed, 3))
        metadata["stage"] = self.stage
        TIMING_LOGGER.log(
            event=f"{self.kind}_{outcome}",
            description=self.description,
            status=status,
            metadata=metadata,
        )

    def sleep(self, timeout: float, interval: float) -> bool:
        """Sleep until the next attempt; False once the timeout has passed."""
        time_left = timeout - self.elapsed
        if time_left <= 0:
            return False
        time.sleep(min(interval, time_left))
        return True

    def timeout_error(self, message: str, timeout: float, cause: Optional[BaseException]) -> TimeoutError:
        error = TimeoutError(message)
        error.original_exception = cause
        error.description = self.description
        error.timeout = timeout
        error.attempt_count = self.count
        error.elapsed_time = self.elapsed
        error.stage = self.stage
        return error


def _log_retry_attempt(description: str, attempt: int, stage: Optional[str]) -> None:
    """Emit sampled retry attempt events to the action logger if enabled."""
    from .actionlogger import ACTION_LOGGER

    if ACTION_LOGGER.is_enabled() and ACTION_LOGGER.should_log_retry_attempt(attempt):
        ACTION_LOGGER.log(
            "retry_attempt",
            status="info",
            attempt=attempt,
            metadata={"description": description, "stage": stage or "execute"},
            event="retry_attempt",
        )


def poll(
    predicate: Callable[[], Any],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition",
    reverse: bool = False,
    stage: Optional[str] = None,
    message: Optional[Callable[[], str]] = None,
) -> WaitResult:
    """
    Repeatedly run predicate until it returns a truthy value (falsy when
    reverse is set) or until timeout. The predicate runs at least once.

    NotFoundError raised by the predicate counts as a falsy result. Any other
    exception stops polling immediately and is returned in the ERROR arm.

    @param message Lazily evaluated timeout message, called once on timeout
    """
    attempts = _Attempts("wait", description, stage)
    attempts.report("start", timeout_s=timeout, interval_s=interval, reverse=reverse)
    not_found: Optional[NotFoundError] = None

    while True:
        attempts.next()
        try:
            value = predicate()
        except NotFoundError as e:
            not_found = e
            value = False
        except Exception as e:
            attempts.report("error", "error", error=type(e).__name__)
            return WaitResult(WaitStatus.ERROR, error=e, attempt_count=attempts.count, elapsed=attempts.elapsed)

        if bool(value) != reverse:
            attempts.report("success", "success")
            return WaitResult(WaitStatus.OK, value=value, attempt_count=attempts.count, elapsed=attempts.elapsed)

        if not attempts.sleep(timeout, interval):
            break

    attempts.report("timeout", "error", timeout_s=timeout)
    if message is not None:
        text = message()
    else:
        kept = "truthy" if reverse else "falsy"
        text = f"Timed out waiting for {description} after {timeout}s (condition kept returning {kept})"
    error = attempts.timeout_error(text, timeout, not_found)
    return WaitResult(WaitStatus.TIMEOUT, error=error, attempt_count=attempts.count, elapsed=attempts.elapsed)


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition",
    stage: Optional[str] = None,
) -> T:
    """Block until predicate returns a truthy value and return it."""
    return poll(predicate, timeout, interval, description=description, stage=stage).unwrap()


def wait_until_not(
    predicate: Callable[[], Any],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition to become false",
    stage: Optional[str] = None,
) -> None:
    poll(predicate, timeout, interval, description=description, reverse=True, stage=stage).unwrap()


def eventually(
    predicate: Callable[[], Any],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition",
    reverse: bool = False,
) -> bool:
    """True if predicate held within timeout, False on timeout."""
    return poll(predicate, timeout, interval, description=description, reverse=reverse).to_bool()


def wait_until_passes(
    func: Callable[..., T],
    timeout: float,
    interval: float = 0.2,
    exceptions: Tuple[type, ...] = (Exception,),
    description: str = "operation",
    *args: Any,
    stage: Optional[str] = None,
    **kwargs: Any,
) -> T:
    """
    Call func(*args, **kwargs) until it returns without raising one of
    exceptions. Other exceptions propagate at once.

    @raise TimeoutError carrying the last caught exception as original_exception
    """
    attempts = _Attempts("retry", description, stage)
    attempts.report("start", timeout_s=timeout, interval_s=interval)

    while True:
        _log_retry_attempt(description, attempts.next(), stage)
        try:
            result = func(*args, **kwargs)
        except exceptions as e:
            if attempts.sleep(timeout, interval):
                continue
            attempts.report("timeout", "error")
            error = attempts.timeout_error(
                f"Timed out waiting for {description} after {timeout}s "
                f"({attempts.count} attempts). Last error: {type(e).__name__}: {e}",
                timeout,
                e,
            )
            raise error from e
        attempts.report("success", "success")
        return result
