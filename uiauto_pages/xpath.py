# uiauto_pages/xpath.py
"""
@file xpath.py
@brief Fluent XPath selector builder and the list "where" facade.

Example:
    XPathBuilder("//div").class_("row").has_child("/span", lambda b: b.text("Total")).index(2).build()
    -> "(//div[@class='row'][./span[. = 'Total']])[2]"
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional

if TYPE_CHECKING:
    from .element import PageElement
    from .element_list import PageElementList

BuilderFunc = Callable[["XPathBuilder"], object]


def _literal(value: str) -> str:
    """Quote a string value as an XPath literal."""
    value = str(value)
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


class XPathBuilder:
    """
    A construction session over one XPath expression.

    Modifiers append predicate brackets to the current expression and return
    the builder. build() reads the expression without changing it.
    Builders are plain objects: create one per expression, or pass the same
    instance around explicitly to build incrementally.
    """

    def __init__(self, seed: str = ""):
        self._selector = seed

    def reset(self, seed: str) -> XPathBuilder:
        """Start a new session rooted at seed."""
        self._selector = seed
        return self

    def append(self, text: str) -> XPathBuilder:
        """Append raw XPath text."""
        self._selector += text
        return self

    def child(self, text: str) -> XPathBuilder:
        """Descend to a child path; following modifiers apply to it."""
        return self.append(text)

    def constraint(self, text: str, builder_fn: Optional[BuilderFunc] = None) -> XPathBuilder:
        """
        Add a predicate bracket.

        With builder_fn, a nested session rooted at text is built first and
        its result becomes the predicate.
        """
        if builder_fn is not None:
            nested = XPathBuilder(text)
            builder_fn(nested)
            text = nested.build()
        self._selector += f"[{text}]"
        return self

    def has_child(self, text: str, builder_fn: Optional[BuilderFunc] = None) -> XPathBuilder:
        """Restrict to nodes with a descendant matching text (relative path)."""
        return self.constraint(f".{text}", builder_fn)

    # --- text ---

    def text(self, text: str) -> XPathBuilder:
        return self.constraint(f". = {_literal(text)}")

    def not_text(self, text: str) -> XPathBuilder:
        return self.constraint(f"not(. = {_literal(text)})")

    def text_contains(self, text: str) -> XPathBuilder:
        return self.constraint(f"contains(.,{_literal(text)})")

    def not_text_contains(self, text: str) -> XPathBuilder:
        return self.constraint(f"not(contains(.,{_literal(text)}))")

    # --- attributes ---

    def attribute(self, name: str, value: Optional[str] = None) -> XPathBuilder:
        if value is None:
            return self.constraint(f"@{name}")
        return self.constraint(f"@{name}={_literal(value)}")

    def not_attribute(self, name: str, value: Optional[str] = None) -> XPathBuilder:
        if value is None:
            return self.constraint(f"not(@{name})")
        return self.constraint(f"not(@{name}={_literal(value)})")

    def attribute_contains(self, name: str, value: str) -> XPathBuilder:
        return self.constraint(f"contains(@{name},{_literal(value)})")

    def not_attribute_contains(self, name: str, value: str) -> XPathBuilder:
        return self.constraint(f"not(contains(@{name},{_literal(value)}))")

    def id(self, value: Optional[str] = None) -> XPathBuilder:
        return self.attribute("id", value)

    def not_id(self, value: Optional[str] = None) -> XPathBuilder:
        return self.not_attribute("id", value)

    def id_contains(self, value: str) -> XPathBuilder:
        return self.attribute_contains("id", value)

    def not_id_contains(self, value: str) -> XPathBuilder:
        return self.not_attribute_contains("id", value)

    def class_(self, value: Optional[str] = None) -> XPathBuilder:
        return self.attribute("class", value)

    def not_class(self, value: Optional[str] = None) -> XPathBuilder:
        return self.not_attribute("class", value)

    def class_contains(self, value: str) -> XPathBuilder:
        return self.attribute_contains("class", value)

    def not_class_contains(self, value: str) -> XPathBuilder:
        return self.not_attribute_contains("class", value)

    def name(self, value: Optional[str] = None) -> XPathBuilder:
        return self.attribute("name", value)

    def not_name(self, value: Optional[str] = None) -> XPathBuilder:
        return self.not_attribute("name", value)

    def name_contains(self, value: str) -> XPathBuilder:
        return self.attribute_contains("name", value)

    def not_name_contains(self, value: str) -> XPathBuilder:
        return self.not_attribute_contains("name", value)

    def type(self, value: Optional[str] = None) -> XPathBuilder:
        return self.attribute("type", value)

    def not_type(self, value: Optional[str] = None) -> XPathBuilder:
        return self.not_attribute("type", value)

    def type_contains(self, value: str) -> XPathBuilder:
        return self.attribute_contains("type", value)

    def not_type_contains(self, value: str) -> XPathBuilder:
        return self.not_attribute_contains("type", value)

    # --- boolean attributes ---

    def checked(self) -> XPathBuilder:
        return self.attribute("checked")

    def not_checked(self) -> XPathBuilder:
        return self.not_attribute("checked")

    def disabled(self) -> XPathBuilder:
        return self.attribute("disabled")

    def not_disabled(self) -> XPathBuilder:
        return self.not_attribute("disabled")

    def selected(self) -> XPathBuilder:
        return self.attribute("selected")

    def not_selected(self) -> XPathBuilder:
        return self.not_attribute("selected")

    # --- positions ---

    def level_index(self, index: int) -> XPathBuilder:
        """Select the n-th (1-based) matching sibling on the current level."""
        self._selector += f"[{index}]"
        return self

    def index(self, index: int) -> XPathBuilder:
        """Select the n-th (1-based) match across the whole document."""
        self._selector = f"({self._selector})[{index}]"
        return self

    def build(self) -> str:
        return self._selector

    def __str__(self) -> str:
        return self._selector

    def __repr__(self) -> str:
        return f"XPathBuilder({self._selector!r})"


def _delegate(method_name: str):
    def method(self, *args, **kwargs):
        getattr(self._builder, method_name)(*args, **kwargs)
        return self

    method.__name__ = method_name
    method.__doc__ = getattr(XPathBuilder, method_name).__doc__
    return method


class ListWhereBuilder:
    """
    Narrows a list's selector with XPath modifiers and returns members
    or sub-lists created through the list's store.

        todo_list.where.text_contains("milk").get_first()
    """

    def __init__(self, element_list: PageElementList):
        self._list = element_list
        self._builder = XPathBuilder(element_list.selector)

    def reset(self) -> ListWhereBuilder:
        self._builder.reset(self._list.selector)
        return self

    append = _delegate("append")
    child = _delegate("child")
    constraint = _delegate("constraint")
    has_child = _delegate("has_child")
    text = _delegate("text")
    not_text = _delegate("not_text")
    text_contains = _delegate("text_contains")
    not_text_contains = _delegate("not_text_contains")
    attribute = _delegate("attribute")
    not_attribute = _delegate("not_attribute")
    attribute_contains = _delegate("attribute_contains")
    not_attribute_contains = _delegate("not_attribute_contains")
    id = _delegate("id")
    not_id = _delegate("not_id")
    id_contains = _delegate("id_contains")
    not_id_contains = _delegate("not_id_contains")
    class_ = _delegate("class_")
    not_class = _delegate("not_class")
    class_contains = _delegate("class_contains")
    not_class_contains = _delegate("not_class_contains")
    name = _delegate("name")
    not_name = _delegate("not_name")
    name_contains = _delegate("name_contains")
    not_name_contains = _delegate("not_name_contains")
    type = _delegate("type")
    not_type = _delegate("not_type")
    type_contains = _delegate("type_contains")
    not_type_contains = _delegate("not_type_contains")
    checked = _delegate("checked")
    not_checked = _delegate("not_checked")
    disabled = _delegate("disabled")
    not_disabled = _delegate("not_disabled")
    selected = _delegate("selected")
    not_selected = _delegate("not_selected")
    level_index = _delegate("level_index")
    index = _delegate("index")

    def build(self) -> str:
        return self._builder.build()

    def get_first(self) -> PageElement:
        """Return the first member matching the narrowed selector."""
        return self._list.element_at_selector(XPathBuilder(self._builder.build()).index(1).build())

    def get_at(self, index: int) -> PageElement:
        """Return the member at a 0-based position of the narrowed selector."""
        return self._list.element_at_selector(XPathBuilder(self._builder.build()).index(index + 1).build())

    def get_list(self) -> PageElementList:
        """Return a list over the narrowed selector, with the same options."""
        return self._list.clone(self._builder.build())

    def get_all(self) -> List[PageElement]:
        return self.get_list().all
