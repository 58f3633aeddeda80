# uiauto_pages/element_group.py
"""
@file element_group.py
@brief Named, heterogeneous composites of nodes.

A group broadcasts an operation to every member that declares the needed
capability (see interfaces.py) and is included by the filter mask. Failed
member checks are collected into a diff tree keyed by member name.

    login = store.value_group({
        "username": store.input("//input[@name='user']"),
        "password": store.input("//input[@name='pass']"),
        "errors": store.element_list("//div[@class='error']"),
    })
    login.set_value({"username": "admin", "password": "secret"})
    login.wait.has_value({"username": "admin"})
    login.currently.has_any_text({"errors": True})
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Type

from .diff import Diff
from .interfaces import Geometric, StateCheckable, TextComparable, ValueComparable
from .mask import child_mask, invert, is_included, strip_mask_deep, subset
from .mask import filter_mask as mask_of
from .node import Negated, PageNode

if TYPE_CHECKING:
    from .store import PageNodeStore

FilterMask = Optional[Mapping[str, Any]]

_UNSET = object()


class PageElementGroup(PageNode, StateCheckable, TextComparable):
    """
    A group has no selector of its own; its id is derived from the ids of
    its members, in content order.
    """

    is_collection = True

    def __init__(self, content: Mapping[str, PageNode], store: PageNodeStore):
        super().__init__(";".join(node.node_id for node in content.values()), store)
        self._content: Dict[str, PageNode] = dict(content)

        self.currently = self.currently_class(self)
        self.wait = self.wait_class(self)
        self.eventually = self.eventually_class(self)

    @property
    def currently_class(self):
        return PageElementGroupCurrently

    @property
    def wait_class(self):
        return PageElementGroupWait

    @property
    def eventually_class(self):
        return PageElementGroupEventually

    @property
    def content(self) -> Dict[str, PageNode]:
        return dict(self._content)

    def __getitem__(self, name: str) -> PageNode:
        return self._content[name]

    def __contains__(self, name: object) -> bool:
        return name in self._content

    def __iter__(self) -> Iterator[str]:
        return iter(self._content)

    def __len__(self) -> int:
        return len(self._content)

    # --- broadcast ---

    def _members(
        self,
        capability: Type[Any],
        filter_mask: FilterMask,
        explicit: bool,
    ) -> Iterator[Tuple[str, PageNode, Dict[str, Any]]]:
        """
        Yield (name, node, extra kwargs) for every member with the capability
        that the mask includes. Collection members receive their part of
        the mask as filter_mask.
        """
        if explicit and filter_mask is not None:
            filter_mask = strip_mask_deep(filter_mask) or {}
        for name, node in self._content.items():
            if not isinstance(node, capability):
                continue
            if not is_included(filter_mask, name, explicit):
                continue
            extra: Dict[str, Any] = {}
            if node.is_collection:
                extra["filter_mask"] = child_mask(filter_mask, name)
            yield name, node, extra

    @staticmethod
    def _expected_for(expected: Any, name: str) -> Any:
        if isinstance(expected, Mapping):
            return expected.get(name)
        return expected

    def each_check(
        self,
        capability: Type[Any],
        check: Callable[..., bool],
        expected: Any = _UNSET,
        filter_mask: FilterMask = None,
        explicit: bool = False,
    ) -> bool:
        """
        Run check on every capable, included member.

        A mapping of expected values is matched by member name (a member
        without an entry is compared against None); any other expected value
        is passed to every member. Only an explicit falsy mask entry excludes
        a member from has/contains checks. Without expected, check receives
        the member and the extra kwargs for nested collections.

        @return True if no member failed; the diff tree is kept in last_diff
        """
        tree: Dict[str, Diff] = {}
        for name, node, extra in self._members(capability, filter_mask, explicit):
            if expected is _UNSET:
                passed = check(node, **extra)
            else:
                passed = check(node, self._expected_for(expected, name))
            if not passed:
                tree[name] = node.last_diff
        self._last_diff = Diff(tree=tree)
        return not tree

    def each_get(
        self,
        capability: Type[Any],
        getter: Callable[..., Any],
        filter_mask: FilterMask = None,
    ) -> Dict[str, Any]:
        """Collect getter results by member name. With a mask, only listed members are read."""
        return {
            name: getter(node, **extra)
            for name, node, extra in self._members(capability, filter_mask, explicit=filter_mask is not None)
        }

    def each_wait(
        self,
        capability: Type[Any],
        wait: Callable[..., Any],
        expected: Any = _UNSET,
        filter_mask: FilterMask = None,
        explicit: bool = False,
    ) -> PageElementGroup:
        for name, node, extra in self._members(capability, filter_mask, explicit):
            if expected is _UNSET:
                wait(node, **extra)
            else:
                wait(node, self._expected_for(expected, name))
        return self

    def each_do(
        self,
        capability: Type[Any],
        action: Callable[[PageNode], Any],
        filter_mask: FilterMask = None,
    ) -> PageElementGroup:
        for _, node, _ in self._members(capability, filter_mask, explicit=False):
            action(node)
        return self

    def each_set(
        self,
        capability: Type[Any],
        values: Mapping[str, Any],
        setter: Callable[[PageNode, Any], Any],
    ) -> PageElementGroup:
        """Call setter for every capable member that has an entry in values."""
        for name, node in self._content.items():
            if isinstance(node, capability) and name in values:
                setter(node, values[name])
        return self

    # --- awaited getters ---

    def get_text(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self.each_get(TextComparable, lambda node, **kw: node.get_text(**kw), filter_mask)

    def get_direct_text(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self.each_get(TextComparable, lambda node, **kw: node.get_direct_text(**kw), filter_mask)

    def get_is_enabled(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self.each_get(StateCheckable, lambda node, **kw: node.get_is_enabled(**kw), filter_mask)

    def get_location(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self.each_get(Geometric, lambda node, **kw: node.get_location(), filter_mask)

    def get_size(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self.each_get(Geometric, lambda node, **kw: node.get_size(), filter_mask)

    def mask_where(
        self,
        getter: Callable[..., Mapping[str, Any]],
        predicate: Callable[[Any], bool] = bool,
        negate: bool = False,
    ) -> Dict[str, Any]:
        """
        Build a filter mask from the result of one of this group's getters.

            shown = form.mask_where(form.currently.get_is_visible)
            form.wait.has_value({"user": "admin"}, filter_mask=shown)

        @param negate Select the members that do not satisfy predicate
        """
        mask = mask_of(getter(), predicate)
        return invert(mask) if negate else mask


# Per check: (capability, mask is explicit, nested collections receive the mask)
GROUP_CHECKS: Dict[str, Tuple[Type[Any], bool, bool]] = {
    "exists": (StateCheckable, False, False),
    "is_visible": (StateCheckable, False, True),
    "is_enabled": (StateCheckable, False, True),
    "has_text": (TextComparable, False, False),
    "has_any_text": (TextComparable, True, True),
    "contains_text": (TextComparable, False, False),
    "has_direct_text": (TextComparable, False, False),
    "has_any_direct_text": (TextComparable, True, True),
    "contains_direct_text": (TextComparable, False, False),
}

VALUE_CHECKS: Dict[str, Tuple[Type[Any], bool, bool]] = {
    "has_value": (ValueComparable, False, False),
    "has_any_value": (ValueComparable, True, True),
    "contains_value": (ValueComparable, False, False),
}


def _member_facet(node: PageNode, facet: str, negate: bool) -> Any:
    target = getattr(node, facet)
    return target.not_ if negate else target


class _GroupFacet:
    """Shared dispatch of the group facets over the check table."""

    checks = GROUP_CHECKS

    def __init__(self, group: PageElementGroup):
        self._group = group

    @property
    def not_(self) -> Negated:
        return Negated(self)

    def _check_entry(self, name: str) -> Tuple[Type[Any], bool, bool]:
        try:
            return self.checks[name]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' has no check '{name}'") from None


class PageElementGroupCurrently(_GroupFacet):

    def __init__(self, group: PageElementGroup, negate: bool = False):
        super().__init__(group)
        self._negate = negate

    def _negated(self, name: str, *args: Any, **kwargs: Any) -> bool:
        return getattr(type(self)(self._group, negate=True), name)(*args, **kwargs)

    def _check(self, name: str, expected: Any = _UNSET, filter_mask: FilterMask = None) -> bool:
        capability, explicit, forwards_mask = self._check_entry(name)
        negate = self._negate

        def check(node: PageNode, *value: Any, **extra: Any) -> bool:
            return getattr(_member_facet(node, "currently", negate), name)(*value, **(extra if forwards_mask else {}))

        return self._group.each_check(capability, check, expected, filter_mask, explicit)

    def exists(self, filter_mask: FilterMask = None) -> bool:
        return self._check("exists", filter_mask=filter_mask)

    def is_visible(self, filter_mask: FilterMask = None) -> bool:
        return self._check("is_visible", filter_mask=filter_mask)

    def is_enabled(self, filter_mask: FilterMask = None) -> bool:
        return self._check("is_enabled", filter_mask=filter_mask)

    def has_text(self, text: Any, filter_mask: FilterMask = None) -> bool:
        return self._check("has_text", text, filter_mask)

    def has_any_text(self, filter_mask: FilterMask = None) -> bool:
        return self._check("has_any_text", filter_mask=filter_mask)

    def contains_text(self, text: Any, filter_mask: FilterMask = None) -> bool:
        return self._check("contains_text", text, filter_mask)

    def has_direct_text(self, text: Any, filter_mask: FilterMask = None) -> bool:
        return self._check("has_direct_text", text, filter_mask)

    def has_any_direct_text(self, filter_mask: FilterMask = None) -> bool:
        return self._check("has_any_direct_text", filter_mask=filter_mask)

    def contains_direct_text(self, text: Any, filter_mask: FilterMask = None) -> bool:
        return self._check("contains_direct_text", text, filter_mask)

    # --- getters ---

    def _get(self, capability: Type[Any], element_getter: str, collection_getter: str, filter_mask: FilterMask):
        def getter(node: PageNode, **extra: Any) -> Any:
            if node.is_collection:
                return getattr(node.currently, collection_getter)(**extra)
            return getattr(node.currently, element_getter)()

        return self._group.each_get(capability, getter, filter_mask)

    def get_text(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self._get(TextComparable, "get_text", "get_text", filter_mask)

    def get_direct_text(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self._get(TextComparable, "get_direct_text", "get_direct_text", filter_mask)

    def get_is_visible(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self._get(StateCheckable, "is_visible", "get_is_visible", filter_mask)

    def get_is_enabled(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self._get(StateCheckable, "is_enabled", "get_is_enabled", filter_mask)

    def get_location(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self._group.each_get(Geometric, lambda node, **kw: node.currently.get_location(), filter_mask)

    def get_size(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self._group.each_get(Geometric, lambda node, **kw: node.currently.get_size(), filter_mask)


class PageElementGroupWait(_GroupFacet):
    """
    Waits on each member in turn. The first member to time out raises its
    own TimeoutError.
    """

    member_facet = "wait"

    def _negated(self, name: str, *args: Any, **kwargs: Any) -> Any:
        kwargs["reverse"] = True
        return getattr(self, name)(*args, **kwargs)

    def _check(
        self,
        name: str,
        expected: Any = _UNSET,
        filter_mask: FilterMask = None,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        reverse: bool = False,
    ) -> Any:
        capability, explicit, forwards_mask = self._check_entry(name)
        opts = {"timeout": timeout, "interval": interval, "reverse": reverse}

        def wait(node: PageNode, *value: Any, **extra: Any) -> Any:
            return getattr(getattr(node, self.member_facet), name)(*value, **(extra if forwards_mask else {}), **opts)

        self._group.each_wait(capability, wait, expected, filter_mask, explicit)
        return self._group

    def exists(self, filter_mask: FilterMask = None, **opts: Any) -> Any:
        return self._check("exists", filter_mask=filter_mask, **opts)

    def is_visible(self, filter_mask: FilterMask = None, **opts: Any) -> Any:
        return self._check("is_visible", filter_mask=filter_mask, **opts)

    def is_enabled(self, filter_mask: FilterMask = None, **opts: Any) -> Any:
        return self._check("is_enabled", filter_mask=filter_mask, **opts)

    def has_text(self, text: Any, **opts: Any) -> Any:
        return self._check("has_text", text, **opts)

    def has_any_text(self, filter_mask: FilterMask = None, **opts: Any) -> Any:
        return self._check("has_any_text", filter_mask=filter_mask, **opts)

    def contains_text(self, text: Any, **opts: Any) -> Any:
        return self._check("contains_text", text, **opts)

    def has_direct_text(self, text: Any, **opts: Any) -> Any:
        return self._check("has_direct_text", text, **opts)

    def has_any_direct_text(self, filter_mask: FilterMask = None, **opts: Any) -> Any:
        return self._check("has_any_direct_text", filter_mask=filter_mask, **opts)

    def contains_direct_text(self, text: Any, **opts: Any) -> Any:
        return self._check("contains_direct_text", text, **opts)


class PageElementGroupEventually(PageElementGroupWait):
    """Probes every member through its eventually facet and aggregates a diff tree."""

    member_facet = "eventually"

    def _check(
        self,
        name: str,
        expected: Any = _UNSET,
        filter_mask: FilterMask = None,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        reverse: bool = False,
    ) -> bool:
        capability, explicit, forwards_mask = self._check_entry(name)
        opts = {"timeout": timeout, "interval": interval, "reverse": reverse}

        def probe(node: PageNode, *value: Any, **extra: Any) -> bool:
            return getattr(node.eventually, name)(*value, **(extra if forwards_mask else {}), **opts)

        return self._group.each_check(capability, probe, expected, filter_mask, explicit)


class ValueGroupCurrently(PageElementGroupCurrently):
    checks = {**GROUP_CHECKS, **VALUE_CHECKS}

    def has_value(self, value: Any, filter_mask: FilterMask = None) -> bool:
        return self._check("has_value", value, filter_mask)

    def has_any_value(self, filter_mask: FilterMask = None) -> bool:
        return self._check("has_any_value", filter_mask=filter_mask)

    def contains_value(self, value: Any, filter_mask: FilterMask = None) -> bool:
        return self._check("contains_value", value, filter_mask)

    def get_value(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self._get(ValueComparable, "get_value", "get_value", filter_mask)


class ValueGroupWait(PageElementGroupWait):
    checks = {**GROUP_CHECKS, **VALUE_CHECKS}

    def has_value(self, value: Any, **opts: Any) -> Any:
        return self._check("has_value", value, **opts)

    def has_any_value(self, filter_mask: FilterMask = None, **opts: Any) -> Any:
        return self._check("has_any_value", filter_mask=filter_mask, **opts)

    def contains_value(self, value: Any, **opts: Any) -> Any:
        return self._check("contains_value", value, **opts)


class ValueGroupEventually(ValueGroupWait, PageElementGroupEventually):
    pass


class ValueGroup(PageElementGroup, ValueComparable):
    """A group whose value-bearing members can be read and written together."""

    @property
    def currently_class(self):
        return ValueGroupCurrently

    @property
    def wait_class(self):
        return ValueGroupWait

    @property
    def eventually_class(self):
        return ValueGroupEventually

    def get_value(self, filter_mask: FilterMask = None) -> Dict[str, Any]:
        return self.each_get(ValueComparable, lambda node, **kw: node.get_value(**kw), filter_mask)

    def set_value(self, values: Mapping[str, Any], filter_mask: FilterMask = None) -> ValueGroup:
        """
        Set the members named in values; other members are left untouched.
        With a filter mask, only values the mask lists are written.
        """
        if filter_mask is not None:
            values = subset(values, filter_mask)
        return self.each_set(ValueComparable, values, lambda node, value: node.set_value(value))
