# tests/conftest.py
"""
Shared fixtures: an in-memory driver and a store with short timings.
"""

import re
from typing import Any, Dict, List, Optional

import pytest

from uiauto_pages.config import PageSettings, TimeConfig
from uiauto_pages.context import ActionContextManager
from uiauto_pages.exceptions import NotFoundError, NotInteractableError
from uiauto_pages.interfaces import IDriver
from uiauto_pages.store import PageNodeStore

INDEXED_SELECTOR = re.compile(r"^\((.*)\)\[(\d+|last\(\))\]$")


def make_node(**state: Any) -> Dict[str, Any]:
    node = {
        "exists": True,
        "visible": True,
        "enabled": True,
        "selected": False,
        "text": "",
        "html": None,
        "attributes": {},
        "value": "",
        "location": {"x": 0, "y": 0},
        "size": {"width": 0, "height": 0},
        "blocked_clicks": 0,
        "readonly": False,
    }
    node.update(state)
    return node


class FakeDriver(IDriver):
    """
    Driver over a dict of selector -> node state.

    Lists are registered under their base selector; members are addressed
    as "(selector)[n]" or "(selector)[last()]", like the store builds them.
    """

    def __init__(self):
        self.nodes: Dict[str, Dict[str, Any]] = {}
        self.lists: Dict[str, List[Dict[str, Any]]] = {}
        self.clicks: List[str] = []
        self.reads = 0

    def add(self, selector: str, **state: Any) -> Dict[str, Any]:
        node = make_node(**state)
        self.nodes[selector] = node
        return node

    def add_list(self, selector: str, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        self.lists[selector] = [make_node(**item) for item in items]
        return self.lists[selector]

    def remove(self, selector: str) -> None:
        self.nodes.pop(selector, None)
        self.lists.pop(selector, None)

    def _find(self, selector: str) -> Optional[Dict[str, Any]]:
        node = self.nodes.get(selector)
        if node is not None:
            return node if node["exists"] else None

        items = self.lists.get(selector)
        if items:
            return items[0]

        match = INDEXED_SELECTOR.match(selector)
        if match:
            items = self.lists.get(match.group(1)) or []
            position = match.group(2)
            if position == "last()":
                return items[-1] if items else None
            index = int(position) - 1
            if 0 <= index < len(items):
                return items[index]
        return None

    def _node(self, selector: str) -> Dict[str, Any]:
        self.reads += 1
        node = self._find(selector)
        if node is None:
            raise NotFoundError(selector)
        return node

    def is_existing(self, selector: str) -> bool:
        return self._find(selector) is not None

    def is_visible(self, selector: str) -> bool:
        return self._node(selector)["visible"]

    def is_enabled(self, selector: str) -> bool:
        return self._node(selector)["enabled"]

    def is_selected(self, selector: str) -> bool:
        return self._node(selector)["selected"]

    def get_text(self, selector: str) -> str:
        return self._node(selector)["text"]

    def get_html(self, selector: str) -> str:
        node = self._node(selector)
        if node["html"] is not None:
            return node["html"]
        return f"<div>{node['text']}</div>"

    def get_attribute(self, selector: str, name: str) -> str:
        return self._node(selector)["attributes"].get(name, "")

    def get_value(self, selector: str) -> str:
        return self._node(selector)["value"]

    def set_value(self, selector: str, value: str) -> None:
        node = self._node(selector)
        if node["readonly"]:
            raise NotInteractableError(selector, "read-only")
        node["value"] = value

    def click(self, selector: str) -> None:
        node = self._node(selector)
        if node["blocked_clicks"] > 0:
            node["blocked_clicks"] -= 1
            raise NotInteractableError(selector, "covered by another node")
        self.clicks.append(selector)

    def get_location(self, selector: str) -> Dict[str, float]:
        return dict(self._node(selector)["location"])

    def get_size(self, selector: str) -> Dict[str, float]:
        return dict(self._node(selector)["size"])

    def count(self, selector: str) -> int:
        if selector in self.lists:
            return len(self.lists[selector])
        return 1 if self._find(selector) is not None else 0


FAST_SETTINGS = PageSettings(
    default_timeout=0.3,
    polling_interval=0.05,
    timings={"click_action": {"timeout": 0.3, "interval": 0.05}},
)


@pytest.fixture(autouse=True)
def clean_time_config():
    """Reset thread-local timing and action state around every test."""
    TimeConfig.reset_to_defaults()
    ActionContextManager.clear()
    yield
    TimeConfig.reset_to_defaults()
    ActionContextManager.clear()


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def store(driver):
    return PageNodeStore.from_settings(driver, FAST_SETTINGS)
