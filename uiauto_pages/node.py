# uiauto_pages/node.py
"""
@file node.py
@brief Base class shared by elements, lists, groups and maps.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, Callable, Optional

from .diff import Diff

if TYPE_CHECKING:
    from .interfaces import IDriver
    from .store import PageNodeStore, ScopedStore

NEGATABLE_PREFIXES = ("exists", "is_", "has_", "contains_")


class Negated:
    """
    The `not_` view of a facet.

    Attribute access returns the facet's check with its condition reversed;
    each facet decides what reversing means through its _negated() method.
    """

    def __init__(self, facet: Any):
        self._facet = facet

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_") or not name.startswith(NEGATABLE_PREFIXES):
            raise AttributeError(f"'{type(self._facet).__name__}.not_' has no check '{name}'")
        if not callable(getattr(self._facet, name, None)):
            raise AttributeError(f"'{type(self._facet).__name__}' has no check '{name}'")
        return functools.partial(self._facet._negated, name)


class PageNode:
    """
    Something addressable on a page.

    Holds the selector (or, for groups, the derived id), the store that
    created it and the diff of the last failed check.
    """

    is_collection = False

    def __init__(self, selector: str, store: PageNodeStore):
        self._selector = selector
        self._store = store
        self._last_diff: Optional[Diff] = None

    @property
    def selector(self) -> str:
        return self._selector

    @property
    def store(self) -> PageNodeStore:
        return self._store

    @property
    def driver(self) -> IDriver:
        return self._store.driver

    @property
    def node_id(self) -> str:
        return self._selector

    @property
    def last_diff(self) -> Diff:
        diff = self._last_diff or Diff()
        diff.selector = self._selector
        return diff

    @property
    def scope(self) -> ScopedStore:
        """A store whose factories prefix selectors with this node's selector."""
        from .store import ScopedStore

        return ScopedStore(self._store, self._selector)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.node_id!r})"
