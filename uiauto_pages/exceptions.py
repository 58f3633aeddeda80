# uiauto_pages/exceptions.py
"""
@file exceptions.py
@brief Exception classes for the page-object state synchronization engine.
"""

from __future__ import annotations
from typing import Any, Optional


class PagesError(Exception):
    """
    Base exception for the framework.

    action_trace is filled in by @tracked_action when the error escapes a
    node action.
    """
    action_trace: Optional[str] = None


class ConfigError(PagesError):
    """Raised when YAML settings are invalid."""
    pass


class NotFoundError(PagesError):
    """
    Raised by a driver when a selector currently matches nothing.

    Inside wait/eventually polling this is treated as "condition false";
    outside of a polling loop it surfaces to the caller.
    """

    def __init__(self, selector: str, message: Optional[str] = None):
        self.selector = selector
        msg = f"No node matched selector '{selector}'"
        if message:
            msg += f": {message}"
        super().__init__(msg)


class NotInteractableError(PagesError):
    """Raised by a driver when a node exists but cannot receive input yet."""

    def __init__(self, selector: str, message: Optional[str] = None):
        self.selector = selector
        msg = f"Node '{selector}' is not interactable"
        if message:
            msg += f": {message}"
        super().__init__(msg)


class TimeoutError(PagesError):
    """
    Raised when a wait never reached its condition within the timeout.

    Attributes:
        original_exception: The last exception raised before timeout
        description: Human-readable description of what was being waited for
        selector: Selector of the node that was waited upon
        property_name: Name of the compared property ("text", "value", ...)
        last_actual: Last observed actual value as a string
        expected: Expected value
        timeout: The timeout value in seconds
        attempt_count: Number of attempts made
        elapsed_time: Actual elapsed time in seconds
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.original_exception: Optional[BaseException] = None
        self.description: Optional[str] = None
        self.selector: Optional[str] = None
        self.property_name: Optional[str] = None
        self.last_actual: Optional[str] = None
        self.expected: Any = None
        self.timeout: Optional[float] = None
        self.attempt_count: Optional[int] = None
        self.elapsed_time: Optional[float] = None
        self.stage: Optional[str] = None

    def __str__(self) -> str:
        base_msg = super().__str__()

        details = []
        if self.original_exception is not None:
            details.append(f"Original exception: {type(self.original_exception).__name__}")
        if self.attempt_count is not None:
            details.append(f"Attempts: {self.attempt_count}")
        if self.elapsed_time is not None:
            details.append(f"Elapsed: {self.elapsed_time:.2f}s")
        if self.stage is not None:
            details.append(f"Stage: {self.stage}")

        if details:
            return f"{base_msg} [{', '.join(details)}]"
        return base_msg

    def get_root_cause(self) -> Optional[BaseException]:
        """
        Get the root cause exception by traversing the chain.

        @return The deepest original_exception in the chain, or None
        """
        current = self.original_exception
        while current is not None:
            if getattr(current, "original_exception", None) is not None:
                current = current.original_exception
            else:
                return current
        return None


class ArityMismatchError(PagesError):
    """
    Raised when a list of expected values does not match the member count
    of a list broadcast.
    """

    def __init__(self, expected_length: int, actual_length: int, selector: str):
        self.expected_length = expected_length
        self.actual_length = actual_length
        self.selector = selector
        super().__init__(self.__str__())

    def __str__(self) -> str:
        return (
            f"Length of expected ({self.expected_length}) did not match "
            f"length of list ({self.actual_length})!\n( {self.selector} )"
        )


class UnsupportedTypeError(PagesError):
    """Raised when two values cannot be compared because no equality hook exists."""

    def __init__(self, actual: Any, expected: Any):
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"Cannot compare {type(actual).__name__} with {type(expected).__name__}: "
            f"no equality hook registered"
        )


class InvalidSelectorError(PagesError):
    """Raised when a selector cannot be used as a store key."""

    def __init__(self, selector: str, reason: str):
        self.selector = selector
        self.reason = reason
        super().__init__(f"Invalid selector '{selector}': {reason}")


class ActionError(PagesError):
    """
    Raised when a node action (click, set_value) fails.

    Contains information about the action, target selector,
    and the underlying cause.
    """

    def __init__(
        self,
        action: str,
        selector: Optional[str] = None,
        details: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.action = action
        self.selector = selector
        self.details = details
        self.cause = cause
        super().__init__(self.__str__())

    def __str__(self) -> str:
        base = f"ActionError: action='{self.action}'"
        if self.selector:
            base += f" selector='{self.selector}'"
        if self.details:
            base += f" details='{self.details}'"
        if self.cause:
            base += f" cause='{type(self.cause).__name__}: {self.cause}'"
        return base


class StoreOptionsWarning(UserWarning):
    """Emitted when a cached selector/type pair is requested with different options."""
    pass
