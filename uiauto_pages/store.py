# uiauto_pages/store.py
"""
@file store.py
@brief Node factory that memoizes nodes by (selector, type, options).
"""

from __future__ import annotations

import threading
import warnings
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple, Type, TypeVar, Union

from .config import PageSettings
from .element import InputElement, PageElement
from .element_group import PageElementGroup, ValueGroup
from .element_list import InputList, PageElementList
from .element_map import MapIdentifier, PageElementMap, ValueMap
from .exceptions import InvalidSelectorError, StoreOptionsWarning
from .interfaces import IDriver
from .xpath import XPathBuilder

KEY_DELIMITER = "|||"

NodeT = TypeVar("NodeT")
Selector = Union[str, XPathBuilder]


def freeze_options(value: Any) -> Hashable:
    """
    Canonicalize an option value into a hashable structure.

    Mappings become sorted tuples of pairs and sequences become tuples, so
    two option dicts with equal content freeze to equal keys.
    """
    if isinstance(value, Mapping):
        return tuple(sorted((str(key), freeze_options(item)) for key, item in value.items()))
    if isinstance(value, (list, tuple)):
        return tuple(freeze_options(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze_options(item) for item in value)
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


class PageNodeStore:
    """
    Creates page nodes and returns the cached instance for a repeated
    request. One store belongs to one driver.

        store = PageNodeStore(driver)
        heading = store.element("//h1")
        assert store.element("//h1") is heading
    """

    def __init__(self, driver: IDriver, settings: Optional[PageSettings] = None):
        self._driver = driver
        self._settings = settings or PageSettings()
        self._instances: Dict[Tuple[Any, ...], Any] = {}
        self._options_seen: Dict[Tuple[str, type], Hashable] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, driver: IDriver, settings: PageSettings) -> PageNodeStore:
        """Install the timing settings for this thread and create a store."""
        settings.install()
        return cls(driver, settings)

    @property
    def driver(self) -> IDriver:
        return self._driver

    @property
    def settings(self) -> PageSettings:
        return self._settings

    @property
    def disable_cache(self) -> bool:
        return self._settings.disable_cache

    def __len__(self) -> int:
        return len(self._instances)

    @staticmethod
    def resolve_selector(selector: Selector) -> str:
        if isinstance(selector, XPathBuilder):
            selector = selector.build()
        if KEY_DELIMITER in selector:
            raise InvalidSelectorError(selector, f"selectors must not contain '{KEY_DELIMITER}'")
        return selector

    def get(self, selector: Selector, node_type: Type[NodeT], options: Optional[Mapping[str, Any]] = None) -> NodeT:
        """
        Return the node for (selector, node_type, options), creating it on
        first request.

        Requesting a cached selector and type with different options builds
        a separate node and emits a StoreOptionsWarning.
        """
        selector = self.resolve_selector(selector)
        options = dict(options or {})
        frozen = freeze_options(options)
        key = (selector, node_type, frozen)

        with self._lock:
            node = self._instances.get(key)
            if node is not None:
                return node

            first_options = self._options_seen.get((selector, node_type))
            if first_options is not None and first_options != frozen:
                warnings.warn(
                    f"{node_type.__name__} '{selector}' was already created with different options; "
                    f"creating a separate instance",
                    StoreOptionsWarning,
                    stacklevel=3,
                )

            node = node_type(selector, store=self, **options)
            self._instances[key] = node
            self._options_seen.setdefault((selector, node_type), frozen)
            return node

    def get_group(
        self,
        group_type: Type[NodeT],
        content: Mapping[str, Any],
        options: Optional[Mapping[str, Any]] = None,
    ) -> NodeT:
        """
        Return the group over content, keyed by its member instances. Members
        are themselves memoized by (selector, type, options).
        """
        options = dict(options or {})
        members = tuple((name, node) for name, node in content.items())
        key = (group_type, members, freeze_options(options))

        with self._lock:
            group = self._instances.get(key)
            if group is None:
                group = group_type(dict(content), store=self, **options)
                self._instances[key] = group
            return group

    # --- elements ---

    def element(self, selector: Selector, **options: Any) -> PageElement:
        return self.get(selector, PageElement, options)

    def exist_element(self, selector: Selector, **options: Any) -> PageElement:
        options.setdefault("wait", "exist")
        return self.get(selector, PageElement, options)

    def input(self, selector: Selector, **options: Any) -> InputElement:
        return self.get(selector, InputElement, options)

    # --- lists ---

    def element_list(self, selector: Selector, **options: Any) -> PageElementList:
        options.setdefault("element_type", PageElement)
        return self.get(selector, PageElementList, options)

    def exist_element_list(self, selector: Selector, **options: Any) -> PageElementList:
        options.setdefault("element_type", PageElement)
        element_options = dict(options.get("element_options") or {})
        element_options.setdefault("wait", "exist")
        options["element_options"] = element_options
        options.setdefault("wait", "exist")
        return self.get(selector, PageElementList, options)

    def input_list(self, selector: Selector, **options: Any) -> InputList:
        options.setdefault("element_type", InputElement)
        return self.get(selector, InputList, options)

    # --- maps ---

    def element_map(self, selector: Selector, identifier: MapIdentifier, **options: Any) -> PageElementMap:
        options.setdefault("element_type", PageElement)
        options["identifier"] = identifier
        return self.get(selector, PageElementMap, options)

    def input_map(self, selector: Selector, identifier: MapIdentifier, **options: Any) -> ValueMap:
        options.setdefault("element_type", InputElement)
        options["identifier"] = identifier
        return self.get(selector, ValueMap, options)

    # --- groups ---

    def element_group(self, content: Mapping[str, Any]) -> PageElementGroup:
        return self.get_group(PageElementGroup, content)

    def value_group(self, content: Mapping[str, Any]) -> ValueGroup:
        return self.get_group(ValueGroup, content)


def _scoped(method_name: str):
    def method(self, selector: Selector, *args: Any, **options: Any):
        prefixed = self._prefix + PageNodeStore.resolve_selector(selector)
        return getattr(self._store, method_name)(prefixed, *args, **options)

    method.__name__ = method_name
    return method


class ScopedStore:
    """
    Store view for nodes nested inside another node: every selector is
    appended to the parent's selector.

        row = store.element("//tr[2]")
        cell = row.scope.element("/td[3]")     # //tr[2]/td[3]
    """

    def __init__(self, store: PageNodeStore, prefix: str):
        self._store = store
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    element = _scoped("element")
    exist_element = _scoped("exist_element")
    input = _scoped("input")
    element_list = _scoped("element_list")
    exist_element_list = _scoped("exist_element_list")
    input_list = _scoped("input_list")
    element_map = _scoped("element_map")
    input_map = _scoped("input_map")

    def element_group(self, content: Mapping[str, Any]) -> PageElementGroup:
        return self._store.element_group(content)

    def value_group(self, content: Mapping[str, Any]) -> ValueGroup:
        return self._store.value_group(content)
