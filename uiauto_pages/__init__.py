# uiauto_pages/__init__.py
"""
UIAuto Pages - Page object state synchronization.

This package provides:
- XPathBuilder: Fluent selector construction
- PageNodeStore: Node factory with identity caching
- PageElement / InputElement: Single nodes with currently / wait / eventually checks
- PageElementList / PageElementGroup / PageElementMap: Broadcast over many nodes
- Page: Base class for page objects
- Settings: YAML settings, timing presets and thread-local overrides
"""

from uiauto_pages.config import PageSettings, TimeConfig, load_settings
from uiauto_pages.diff import Diff
from uiauto_pages.element import InputElement, PageElement
from uiauto_pages.element_group import PageElementGroup, ValueGroup
from uiauto_pages.element_list import InputList, ListIdentifier, PageElementList
from uiauto_pages.element_map import MapIdentifier, PageElementMap, ValueMap
from uiauto_pages.exceptions import (
    PagesError,
    ConfigError,
    NotFoundError,
    NotInteractableError,
    TimeoutError,
    ArityMismatchError,
    UnsupportedTypeError,
    InvalidSelectorError,
    ActionError,
    StoreOptionsWarning,
)
from uiauto_pages.comparisons import Comparator
from uiauto_pages.interfaces import IDriver
from uiauto_pages.page import Page
from uiauto_pages.store import PageNodeStore
from uiauto_pages.waits import poll, wait_until
from uiauto_pages.xpath import XPathBuilder
from uiauto_pages import mask

__all__ = [
    "PageSettings",
    "TimeConfig",
    "load_settings",
    "Diff",
    "PageElement",
    "InputElement",
    "PageElementList",
    "InputList",
    "ListIdentifier",
    "PageElementGroup",
    "ValueGroup",
    "PageElementMap",
    "ValueMap",
    "MapIdentifier",
    "PagesError",
    "ConfigError",
    "NotFoundError",
    "NotInteractableError",
    "TimeoutError",
    "ArityMismatchError",
    "UnsupportedTypeError",
    "InvalidSelectorError",
    "ActionError",
    "StoreOptionsWarning",
    "Comparator",
    "IDriver",
    "Page",
    "PageNodeStore",
    "poll",
    "wait_until",
    "XPathBuilder",
    "mask",
]

__version__ = "1.0.0"
