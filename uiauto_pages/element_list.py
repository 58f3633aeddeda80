# uiauto_pages/element_list.py
"""
@file element_list.py
@brief Lists of homogeneous elements, re-derived from the document on access.

A list never stores its members. Every access to `all` counts the current
matches of the list selector and addresses each one as "(selector)[n]".
"""

from __future__ import annotations

from typing import (TYPE_CHECKING, Any, Callable, Dict, Hashable, Iterable, List,
                    Mapping, NamedTuple, Optional, Sequence, Tuple, Type, Union)

from .comparisons import Comparator, type_to_string
from .config import TimeConfig
from .diff import Diff
from .element import InputElement, PageElement
from .exceptions import ArityMismatchError, NotFoundError
from .interfaces import StateCheckable, TextComparable, ValueComparable
from .node import Negated, PageNode
from .timings import WAIT_TYPES
from .waits import WaitResult, poll
from .xpath import ListWhereBuilder, XPathBuilder

if TYPE_CHECKING:
    from .store import PageNodeStore

ListMask = Union[bool, Sequence[bool], None]

_UNSET = object()


def _function_signature(fn: Callable[..., Any]) -> Hashable:
    """
    Hashable description of what fn computes. Functions compiled from the same
    source with equal closure values and defaults share a signature, so an
    inline lambda re-created on every call still hits the identify cache.
    """
    from .store import freeze_options

    code = getattr(fn, "__code__", None)
    if code is None:
        return fn
    cells = tuple(freeze_options(cell.cell_contents) for cell in (fn.__closure__ or ()))
    return (
        code.co_code,
        code.co_consts,
        code.co_names,
        freeze_options(getattr(fn, "__defaults__", None)),
        cells,
        freeze_options(getattr(fn, "__self__", None)),
    )


class ListIdentifier(NamedTuple):
    """
    Default identify() arguments of a list.

    @param mapping Maps caller-chosen names to natural keys
    @param func Computes the natural key of a member
    """
    mapping: Dict[str, str]
    func: Callable[[PageElement], Any]


class PageElementList(PageNode, StateCheckable, TextComparable):
    """
    An ordered list of elements matching one selector.

        todos = store.element_list("//li[@class='todo']")
        todos.wait.has_length(3)
        todos.currently.has_text(["milk", "eggs", "bread"])
        todos.at(0).click()
    """

    is_collection = True

    def __init__(
        self,
        selector: str,
        store: PageNodeStore,
        element_type: Type[PageElement] = PageElement,
        element_options: Optional[Mapping[str, Any]] = None,
        wait: Optional[str] = None,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        identifier: Optional[ListIdentifier] = None,
        disable_cache: Optional[bool] = None,
    ):
        super().__init__(selector, store)
        settings = TimeConfig.current().list_wait

        self._element_type = element_type
        self._element_options = dict(element_options or {})
        self._wait_type = wait or store.settings.default_wait
        if self._wait_type == "value" and not issubclass(element_type, ValueComparable):
            if wait is not None:
                raise ValueError(f"{element_type.__name__} has no value to wait for")
            self._wait_type = "visible"
        if self._wait_type not in WAIT_TYPES:
            raise ValueError(f"Unknown wait type: {self._wait_type}. Use one of {list(WAIT_TYPES)}")
        self._timeout = timeout if timeout is not None else settings.timeout
        self._interval = interval if interval is not None else settings.interval
        self._identifier = identifier
        self._disable_cache = store.disable_cache if disable_cache is None else disable_cache
        self._identify_cache: Dict[Tuple[Hashable, ...], Dict[str, PageElement]] = {}
        self._options = {
            "element_type": element_type,
            "element_options": self._element_options,
            "wait": wait,
            "timeout": timeout,
            "interval": interval,
            "identifier": identifier,
            "disable_cache": disable_cache,
        }

        self.currently = self.currently_class(self)
        self.wait = self.wait_class(self)
        self.eventually = self.eventually_class(self)

    @property
    def currently_class(self):
        return PageElementListCurrently

    @property
    def wait_class(self):
        return PageElementListWait

    @property
    def eventually_class(self):
        return PageElementListEventually

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def interval(self) -> float:
        return self._interval

    def resolve_timing(self, timeout: Optional[float], interval: Optional[float]):
        return (
            timeout if timeout is not None else self._timeout,
            interval if interval is not None else self._interval,
        )

    # --- members ---

    def element_at_selector(self, selector: str) -> PageElement:
        return self._store.get(selector, self._element_type, self._element_options)

    def clone(self, selector: str) -> PageElementList:
        """Create a list over another selector with this list's options."""
        options = {key: value for key, value in self._options.items() if value is not None}
        return self._store.get(selector, type(self), options)

    @property
    def where(self) -> ListWhereBuilder:
        return ListWhereBuilder(self)

    def get_length(self) -> int:
        """Number of current matches; 0 if nothing matches."""
        try:
            return int(self.driver.count(self._selector))
        except NotFoundError:
            return 0

    @property
    def all(self) -> List[PageElement]:
        return [self.at(i) for i in range(self.get_length())]

    def at(self, index: int) -> PageElement:
        """Member at a 0-based position."""
        return self.element_at_selector(XPathBuilder(self._selector).index(index + 1).build())

    @property
    def first(self) -> PageElement:
        return self.at(0)

    @property
    def last(self) -> PageElement:
        return self.element_at_selector(f"({self._selector})[last()]")

    def initial_wait(self) -> PageElementList:
        """Wait until at least one member is ready, according to the list's wait type."""
        if self._wait_type == "exist":
            self.wait.any.exists()
        elif self._wait_type == "visible":
            self.wait.any.is_visible()
        elif self._wait_type == "text":
            self.wait.any.has_any_text()
        elif self._wait_type == "value":
            self.wait.any.has_any_value()
        return self

    def identify(
        self,
        identifier_fn: Optional[Callable[[PageElement], Any]] = None,
        key_table: Optional[Mapping[str, Any]] = None,
        reset_cache: bool = False,
    ) -> Dict[str, PageElement]:
        """
        Key the current members by a natural key.

        identifier_fn computes each member's natural key; key_table renames
        natural keys to caller-chosen names (members missing from key_table
        are left out). Without identifier_fn the key is the member's
        0-based position. Results are cached per (identifier body, key_table)
        until reset_cache is passed or caching is disabled.
        """
        if identifier_fn is None and self._identifier is not None:
            identifier_fn = self._identifier.func
            if key_table is None:
                key_table = self._identifier.mapping

        from .store import freeze_options

        if identifier_fn is None:
            signature: Hashable = ("index",)
        else:
            signature = (_function_signature(identifier_fn), freeze_options(key_table))

        if self._disable_cache or reset_cache:
            self._identify_cache.pop(signature, None)
        elif signature in self._identify_cache:
            return self._identify_cache[signature]

        members = self.all
        if identifier_fn is None:
            identified = {str(i): member for i, member in enumerate(members)}
        else:
            by_key = {str(identifier_fn(member)): member for member in members}
            if key_table is None:
                identified = by_key
            else:
                identified = {
                    name: by_key[str(key)] for name, key in key_table.items() if str(key) in by_key
                }

        if not self._disable_cache:
            self._identify_cache[signature] = identified
        return identified

    # --- broadcast ---

    def _pairs(self, elements: List[PageElement], expected: Any) -> Iterable[Tuple[PageElement, Any]]:
        if isinstance(expected, (list, tuple)):
            if len(expected) != len(elements):
                raise ArityMismatchError(len(expected), len(elements), self._selector)
            return zip(elements, expected)
        return ((element, expected) for element in elements)

    @staticmethod
    def _masked_out(mask_value: Any) -> bool:
        return mask_value is not None and not mask_value

    def each_check(
        self,
        elements: List[PageElement],
        check: Callable[..., bool],
        expected: Any = _UNSET,
        is_filter_mask: bool = False,
    ) -> bool:
        """
        Run check on every element and collect failures into a diff tree
        keyed "[1]", "[2]", ... Succeeds if no element failed, so an empty
        list always passes.

        @param check Callable (element, value) -> bool, or (element) -> bool
            when expected is a filter mask
        @param expected Scalar broadcast to all elements, or one value per element
        @param is_filter_mask Treat expected as per-element include flags
        """
        tree: Dict[str, Diff] = {}
        values = None if expected is _UNSET else expected
        for i, (element, value) in enumerate(self._pairs(elements, values)):
            if is_filter_mask:
                if self._masked_out(value):
                    continue
                passed = check(element)
            elif expected is _UNSET:
                passed = check(element)
            else:
                passed = check(element, value)
            if not passed:
                tree[f"[{i + 1}]"] = element.last_diff
        self._last_diff = Diff(tree=tree)
        return not tree

    def each_get(
        self,
        elements: List[PageElement],
        getter: Callable[[PageElement], Any],
        filter_mask: ListMask = None,
    ) -> List[Any]:
        return [
            getter(element)
            for element, mask_value in self._pairs(elements, filter_mask)
            if not self._masked_out(mask_value)
        ]

    def each_wait(
        self,
        elements: List[PageElement],
        wait: Callable[..., Any],
        expected: Any = _UNSET,
        is_filter_mask: bool = False,
    ) -> PageElementList:
        values = None if expected is _UNSET else expected
        for element, value in self._pairs(elements, values):
            if is_filter_mask:
                if not self._masked_out(value):
                    wait(element)
            elif expected is _UNSET:
                wait(element)
            else:
                wait(element, value)
        return self

    def each_set(
        self,
        elements: List[PageElement],
        values: Any,
        setter: Callable[[PageElement, Any], Any],
    ) -> PageElementList:
        for element, value in self._pairs(elements, values):
            setter(element, value)
        return self

    def each_do(
        self,
        action: Callable[[PageElement], Any],
        filter_mask: ListMask = None,
    ) -> PageElementList:
        for element, mask_value in self._pairs(self.all, filter_mask):
            if not self._masked_out(mask_value):
                action(element)
        return self

    # --- awaited getters ---

    def get_text(self, filter_mask: ListMask = None) -> List[str]:
        return self.each_get(self.all, lambda element: element.get_text(), filter_mask)

    def get_direct_text(self, filter_mask: ListMask = None) -> List[str]:
        return self.each_get(self.all, lambda element: element.get_direct_text(), filter_mask)

    def get_attribute(self, name: str, filter_mask: ListMask = None) -> List[str]:
        return self.each_get(self.all, lambda element: element.get_attribute(name), filter_mask)

    def get_is_enabled(self, filter_mask: ListMask = None) -> List[bool]:
        return self.each_get(self.all, lambda element: element.get_is_enabled(), filter_mask)

    def click(self, filter_mask: ListMask = None) -> PageElementList:
        return self.each_do(lambda element: element.click(), filter_mask)


class _FirstMember:
    """
    Routes `list.wait.any` / `list.eventually.none` style calls to the
    matching facet of the list's first member.
    """

    def __init__(self, element_list: PageElementList, facet: str, negate: bool, returns_list: bool):
        self._list = element_list
        self._facet = facet
        self._negate = negate
        self._returns_list = returns_list

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)

        def call(*args: Any, **kwargs: Any) -> Any:
            facet = getattr(self._list.first, self._facet)
            if self._negate:
                facet = facet.not_
            result = getattr(facet, name)(*args, **kwargs)
            return self._list if self._returns_list else result

        call.__name__ = name
        return call


class PageElementListCurrently:

    def __init__(self, element_list: PageElementList, negate: bool = False):
        self._list = element_list
        self._negate = negate

    @property
    def not_(self) -> Negated:
        return Negated(self)

    def _negated(self, name: str, *args: Any, **kwargs: Any) -> bool:
        if name == "exists":
            return self.is_empty()
        if name in ("is_empty", "has_length"):
            return not getattr(self, name)(*args, **kwargs)
        return getattr(type(self)(self._list, negate=True), name)(*args, **kwargs)

    def _each(self, name: str, *args: Any, filter_mask: ListMask = None) -> bool:
        negate = self._negate

        def member_check(element: PageElement, *value: Any) -> bool:
            facet = element.currently.not_ if negate else element.currently
            return getattr(facet, name)(*value)

        elements = self._list.all
        if args:
            return self._list.each_check(elements, member_check, args[0])
        return self._list.each_check(elements, member_check, filter_mask, is_filter_mask=True)

    def get_length(self) -> int:
        return self._list.get_length()

    def is_empty(self) -> bool:
        return self._list.get_length() == 0

    def has_length(self, length: int, comparator: Union[str, Comparator] = Comparator.EQUAL_TO) -> bool:
        return Comparator.coerce(comparator).compare(self._list.get_length(), length)

    def exists(self) -> bool:
        return not self.is_empty()

    def is_visible(self, filter_mask: ListMask = None) -> bool:
        return self._each("is_visible", filter_mask=filter_mask)

    def is_enabled(self, filter_mask: ListMask = None) -> bool:
        return self._each("is_enabled", filter_mask=filter_mask)

    def has_text(self, text: Union[str, Sequence[str]]) -> bool:
        return self._each("has_text", text)

    def has_any_text(self, filter_mask: ListMask = None) -> bool:
        return self._each("has_any_text", filter_mask=filter_mask)

    def contains_text(self, text: Union[str, Sequence[str]]) -> bool:
        return self._each("contains_text", text)

    def has_direct_text(self, text: Union[str, Sequence[str]]) -> bool:
        return self._each("has_direct_text", text)

    def has_any_direct_text(self, filter_mask: ListMask = None) -> bool:
        return self._each("has_any_direct_text", filter_mask=filter_mask)

    def contains_direct_text(self, text: Union[str, Sequence[str]]) -> bool:
        return self._each("contains_direct_text", text)

    def get_text(self, filter_mask: ListMask = None) -> List[str]:
        return self._list.each_get(self._list.all, lambda element: element.currently.get_text(), filter_mask)

    def get_direct_text(self, filter_mask: ListMask = None) -> List[str]:
        return self._list.each_get(self._list.all, lambda element: element.currently.get_direct_text(), filter_mask)

    def get_is_visible(self, filter_mask: ListMask = None) -> List[bool]:
        return self._list.each_get(self._list.all, lambda element: element.currently.is_visible(), filter_mask)

    def get_is_enabled(self, filter_mask: ListMask = None) -> List[bool]:
        return self._list.each_get(self._list.all, lambda element: element.currently.is_enabled(), filter_mask)


class PageElementListWait:
    """
    Blocking list checks.

    has_length / is_empty poll the member count. `any` and `none` route to
    the first member. Every other check waits on each member in turn.
    """

    def __init__(self, element_list: PageElementList):
        self._list = element_list

    @property
    def not_(self) -> Negated:
        return Negated(self)

    def _negated(self, name: str, *args: Any, **kwargs: Any) -> Any:
        kwargs["reverse"] = True
        return getattr(self, name)(*args, **kwargs)

    @property
    def any(self) -> _FirstMember:
        return _FirstMember(self._list, "wait", negate=False, returns_list=True)

    @property
    def none(self) -> _FirstMember:
        return _FirstMember(self._list, "wait", negate=True, returns_list=True)

    def _finish(self, result: WaitResult) -> Any:
        result.unwrap()
        return self._list

    def _member_facet(self, element: PageElement) -> Any:
        return element.wait

    def _broadcast(self, name: str, expected: Any = _UNSET, filter_mask: ListMask = None, **opts: Any) -> Any:
        def member_wait(element: PageElement, *value: Any) -> Any:
            return getattr(self._member_facet(element), name)(*value, **opts)

        elements = self._list.all
        if expected is not _UNSET:
            return self._list.each_wait(elements, member_wait, expected)
        return self._list.each_wait(elements, member_wait, filter_mask, is_filter_mask=True)

    def has_length(
        self,
        length: int,
        comparator: Union[str, Comparator] = Comparator.EQUAL_TO,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        reverse: bool = False,
    ) -> Any:
        element_list = self._list
        comparator = Comparator.coerce(comparator)
        timeout, interval = element_list.resolve_timing(timeout, interval)
        observed = {"length": None}

        def check() -> bool:
            observed["length"] = element_list.get_length()
            return comparator.compare(observed["length"], length)

        reverse_str = " not" if reverse else ""
        comparator_str = "" if comparator is Comparator.EQUAL_TO else f"{comparator.value} "

        def message() -> str:
            return (
                f"{type(element_list).__name__}'s length \"{type_to_string(observed['length'])}\" never"
                f"{reverse_str} became \"{comparator_str}{length}\" within {timeout}s.\n"
                f"( {element_list.selector} )"
            )

        result = poll(
            check, timeout, interval,
            description=f"{element_list.selector} length", reverse=reverse, message=message,
        )
        if result.timed_out:
            result.error.selector = element_list.selector
            result.error.property_name = "length"
            result.error.last_actual = type_to_string(observed["length"])
            result.error.expected = length
        return self._finish(result)

    def is_empty(self, timeout: Optional[float] = None, interval: Optional[float] = None, reverse: bool = False) -> Any:
        element_list = self._list
        timeout, interval = element_list.resolve_timing(timeout, interval)
        reverse_str = "" if reverse else " not"

        def message() -> str:
            return (
                f"{type(element_list).__name__} never became{reverse_str} empty within {timeout}s.\n"
                f"( {element_list.selector} )"
            )

        result = poll(
            lambda: element_list.get_length() == 0, timeout, interval,
            description=f"{element_list.selector} to be empty", reverse=reverse, message=message,
        )
        if result.timed_out:
            result.error.selector = element_list.selector
            result.error.property_name = "length"
        return self._finish(result)

    def exists(self, timeout: Optional[float] = None, interval: Optional[float] = None, reverse: bool = False) -> Any:
        return self.is_empty(timeout=timeout, interval=interval, reverse=not reverse)

    def is_visible(self, filter_mask: ListMask = None, **opts: Any) -> Any:
        return self._broadcast("is_visible", filter_mask=filter_mask, **opts)

    def is_enabled(self, filter_mask: ListMask = None, **opts: Any) -> Any:
        return self._broadcast("is_enabled", filter_mask=filter_mask, **opts)

    def has_text(self, text: Union[str, Sequence[str]], **opts: Any) -> Any:
        return self._broadcast("has_text", text, **opts)

    def has_any_text(self, filter_mask: ListMask = None, **opts: Any) -> Any:
        return self._broadcast("has_any_text", filter_mask=filter_mask, **opts)

    def contains_text(self, text: Union[str, Sequence[str]], **opts: Any) -> Any:
        return self._broadcast("contains_text", text, **opts)

    def has_direct_text(self, text: Union[str, Sequence[str]], **opts: Any) -> Any:
        return self._broadcast("has_direct_text", text, **opts)

    def has_any_direct_text(self, filter_mask: ListMask = None, **opts: Any) -> Any:
        return self._broadcast("has_any_direct_text", filter_mask=filter_mask, **opts)

    def contains_direct_text(self, text: Union[str, Sequence[str]], **opts: Any) -> Any:
        return self._broadcast("contains_direct_text", text, **opts)


class PageElementListEventually(PageElementListWait):
    """Non-throwing list probes: True if the wait would succeed, False on timeout."""

    @property
    def any(self) -> _FirstMember:
        return _FirstMember(self._list, "eventually", negate=False, returns_list=False)

    @property
    def none(self) -> _FirstMember:
        return _FirstMember(self._list, "eventually", negate=True, returns_list=False)

    def _finish(self, result: WaitResult) -> bool:
        return result.to_bool()

    def _member_facet(self, element: PageElement) -> Any:
        return element.eventually

    def _broadcast(self, name: str, expected: Any = _UNSET, filter_mask: ListMask = None, **opts: Any) -> bool:
        def member_probe(element: PageElement, *value: Any) -> bool:
            return getattr(self._member_facet(element), name)(*value, **opts)

        elements = self._list.all
        if expected is not _UNSET:
            return self._list.each_check(elements, member_probe, expected)
        return self._list.each_check(elements, member_probe, filter_mask, is_filter_mask=True)


class InputListCurrently(PageElementListCurrently):

    def has_value(self, value: Union[str, Sequence[str]]) -> bool:
        return self._each("has_value", value)

    def has_any_value(self, filter_mask: ListMask = None) -> bool:
        return self._each("has_any_value", filter_mask=filter_mask)

    def contains_value(self, value: Union[str, Sequence[str]]) -> bool:
        return self._each("contains_value", value)

    def get_value(self, filter_mask: ListMask = None) -> List[str]:
        return self._list.each_get(self._list.all, lambda element: element.currently.get_value(), filter_mask)


class InputListWait(PageElementListWait):

    def has_value(self, value: Union[str, Sequence[str]], **opts: Any) -> Any:
        return self._broadcast("has_value", value, **opts)

    def has_any_value(self, filter_mask: ListMask = None, **opts: Any) -> Any:
        return self._broadcast("has_any_value", filter_mask=filter_mask, **opts)

    def contains_value(self, value: Union[str, Sequence[str]], **opts: Any) -> Any:
        return self._broadcast("contains_value", value, **opts)


class InputListEventually(InputListWait, PageElementListEventually):
    pass


class InputList(PageElementList, ValueComparable):
    """A list of input elements with value broadcast."""

    def __init__(self, selector: str, store: PageNodeStore, element_type: Type[PageElement] = InputElement, **options: Any):
        super().__init__(selector, store, element_type=element_type, **options)

    @property
    def currently_class(self):
        return InputListCurrently

    @property
    def wait_class(self):
        return InputListWait

    @property
    def eventually_class(self):
        return InputListEventually

    def get_value(self, filter_mask: ListMask = None) -> List[str]:
        return self.each_get(self.all, lambda element: element.get_value(), filter_mask)

    def set_value(self, values: Union[str, Sequence[str]]) -> InputList:
        """Set one value on every member, or one value per member."""
        return self.each_set(self.all, values, lambda element, value: element.set_value(value))
