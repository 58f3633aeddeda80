# uiauto_pages/element_map.py
"""
@file element_map.py
@brief Keyed maps of homogeneous elements.

A map derives one member selector per key from a shared base selector:

    nav = store.element_map(
        "//nav/a",
        MapIdentifier(
            mapping={"home": "Home", "about": "About us"},
            func=lambda selector, text: XPathBuilder(selector).text(text).build(),
        ),
    )
    nav["about"].click()
    nav.currently.has_any_text({"home": True})
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, NamedTuple, Optional, Type

from .element import InputElement, PageElement
from .element_group import PageElementGroup, ValueGroup

if TYPE_CHECKING:
    from .store import PageNodeStore


class MapIdentifier(NamedTuple):
    """
    @param mapping Maps each map key to the text used to locate its member
    @param func Builds a member selector from (base selector, mapping value)
    """
    mapping: Dict[str, str]
    func: Callable[[str, str], str]


class PageElementMap(PageElementGroup):
    """A group whose members are addressed by a closed set of keys."""

    def __init__(
        self,
        selector: str,
        store: PageNodeStore,
        identifier: MapIdentifier,
        element_type: Type[PageElement] = PageElement,
        element_options: Optional[Mapping[str, Any]] = None,
    ):
        self._identifier = identifier
        self._element_type = element_type
        self._element_options = dict(element_options or {})

        content = {
            key: store.get(identifier.func(selector, value), element_type, self._element_options)
            for key, value in identifier.mapping.items()
        }
        super().__init__(content, store)
        self._member_ids = self._selector
        self._selector = selector

    @property
    def node_id(self) -> str:
        """Base selector plus the member ids."""
        return f"{self._selector}|{self._member_ids}"

    @property
    def identifier(self) -> MapIdentifier:
        return self._identifier

    @property
    def element_type(self) -> Type[PageElement]:
        return self._element_type

    def keys(self):
        return self._content.keys()


class ValueMap(PageElementMap, ValueGroup):
    """A map of input elements with value get/set."""

    def __init__(
        self,
        selector: str,
        store: PageNodeStore,
        identifier: MapIdentifier,
        element_type: Type[PageElement] = InputElement,
        element_options: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(selector, store, identifier, element_type, element_options)
