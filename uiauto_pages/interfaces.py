"""
@file interfaces.py
@brief Abstract driver interface and capability markers.

The driver is the only component that talks to the rendered document.
Node types declare which broadcast operations they support by inheriting
the capability marker classes below; groups and maps dispatch on them.
"""

from abc import ABC, abstractmethod
from typing import Dict


class IDriver(ABC):
    """
    Abstract driver interface addressed by XPath selectors.

    Every read raises NotFoundError when the selector currently matches
    nothing, except is_existing() and count() which report absence.
    """

    supports_native_wait = False

    @abstractmethod
    def is_existing(self, selector: str) -> bool:
        """
        Check whether at least one node matches the selector.

        Args:
            selector: XPath selector

        Returns:
            True if a matching node exists
        """
        pass

    @abstractmethod
    def is_visible(self, selector: str) -> bool:
        """Check whether the first matching node is displayed."""
        pass

    @abstractmethod
    def is_enabled(self, selector: str) -> bool:
        """Check whether the first matching node accepts input."""
        pass

    @abstractmethod
    def is_selected(self, selector: str) -> bool:
        """Check whether the first matching node is selected or checked."""
        pass

    @abstractmethod
    def get_text(self, selector: str) -> str:
        """
        Get the rendered text of the first matching node,
        including the text of nested children.
        """
        pass

    @abstractmethod
    def get_html(self, selector: str) -> str:
        """Get the outer HTML of the first matching node."""
        pass

    @abstractmethod
    def get_attribute(self, selector: str, name: str) -> str:
        """
        Get an attribute of the first matching node.

        Args:
            selector: XPath selector
            name: Attribute name

        Returns:
            Attribute value, or an empty string if the attribute is absent
        """
        pass

    @abstractmethod
    def get_value(self, selector: str) -> str:
        """Get the input value of the first matching node."""
        pass

    @abstractmethod
    def set_value(self, selector: str, value: str) -> None:
        """Replace the input value of the first matching node."""
        pass

    @abstractmethod
    def click(self, selector: str) -> None:
        """
        Click the first matching node.

        Raises NotInteractableError if another node would receive the click.
        """
        pass

    @abstractmethod
    def get_location(self, selector: str) -> Dict[str, float]:
        """
        Get the position of the first matching node.

        Returns:
            Mapping with "x" and "y" keys
        """
        pass

    @abstractmethod
    def get_size(self, selector: str) -> Dict[str, float]:
        """
        Get the size of the first matching node.

        Returns:
            Mapping with "width" and "height" keys
        """
        pass

    @abstractmethod
    def count(self, selector: str) -> int:
        """Count nodes matching the selector (0 if none)."""
        pass

    def wait_for(
        self,
        selector: str,
        state: str,
        timeout: float,
        interval: float,
        reverse: bool = False,
    ) -> bool:
        """
        Block until the node reaches a state, driver-side.

        Only called when supports_native_wait is True.

        Args:
            selector: XPath selector
            state: One of "exists", "visible", "enabled", "selected"
            timeout: Timeout in seconds
            interval: Poll interval in seconds
            reverse: Wait for the state to become false instead

        Returns:
            True if the state was reached within timeout
        """
        raise NotImplementedError(f"{type(self).__name__} has no native wait")


class StateCheckable:
    """Members with exists / is_visible / is_enabled checks."""


class TextComparable:
    """Members with has_text / has_any_text / contains_text checks."""


class ValueComparable:
    """Members with has_value / has_any_value / contains_value checks and set_value."""


class Geometric:
    """Members with location and size checks."""
