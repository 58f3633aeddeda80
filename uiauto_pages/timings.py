# uiauto_pages/timings.py
"""
@file timings.py
@brief Timing fields, their defaults and named presets.

A preset only lists the fields it changes; everything else keeps the
default below. Times are in seconds.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict

TIMEOUT_FIELDS: Dict[str, Dict[str, Any]] = {
    "element_wait": {"timeout": 10.0, "interval": 0.2},
    "list_wait": {"timeout": 10.0, "interval": 0.2},
    "page_wait": {"timeout": 30.0, "interval": 0.5},
    "click_action": {"timeout": 5.0, "interval": 0.25, "retry_count": 3},
}

PAUSE_FIELDS: Dict[str, float] = {
    "after_click_pause": 0.0,
    "after_set_value_pause": 0.0,
}

PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fast": {
        "element_wait": {"timeout": 5.0, "interval": 0.1},
        "list_wait": {"timeout": 5.0, "interval": 0.1},
        "page_wait": {"timeout": 15.0, "interval": 0.3},
        "click_action": {"timeout": 3.0, "interval": 0.1, "retry_count": 2},
    },
    "slow": {
        "element_wait": {"timeout": 20.0, "interval": 0.3},
        "list_wait": {"timeout": 20.0, "interval": 0.3},
        "page_wait": {"timeout": 60.0, "interval": 0.6},
        "click_action": {"timeout": 8.0, "interval": 0.3, "retry_count": 4},
        "after_click_pause": 0.15,
        "after_set_value_pause": 0.1,
    },
    "ci": {
        "element_wait": {"timeout": 20.0, "interval": 0.3},
        "list_wait": {"timeout": 20.0, "interval": 0.3},
        "page_wait": {"timeout": 60.0, "interval": 1.0},
        "click_action": {"timeout": 10.0, "interval": 0.3, "retry_count": 5},
        "after_click_pause": 0.2,
        "after_set_value_pause": 0.1,
    },
}

# Initial wait types of nodes, see PageElement.initial_wait()
WAIT_TYPES = ("exist", "visible", "text", "value")


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **deepcopy(PRESET_OVERRIDES)}


def build_preset_values(preset: str) -> Dict[str, Any]:
    """
    Flatten a preset over the defaults.

    @raise ValueError for unknown presets
    """
    name = (preset or "default").lower()
    if name != "default" and name not in PRESET_OVERRIDES:
        raise ValueError(f"Unknown timing preset: {preset}. Use one of {list(list_presets())}")

    values: Dict[str, Any] = {**deepcopy(TIMEOUT_FIELDS), **PAUSE_FIELDS}
    for key, change in PRESET_OVERRIDES.get(name, {}).items():
        if key in TIMEOUT_FIELDS:
            values[key].update(change)
        else:
            values[key] = change
    return values
