# uiauto_pages/mask.py
"""
@file mask.py
@brief Filter mask helpers for groups and maps.

A filter mask mirrors a group's content: each key names a member and each
leaf is a boolean, or a nested mask for a nested group or map.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Mapping, Optional

Mask = Dict[str, Any]


def is_included(mask: Optional[Mapping[str, Any]], key: str, explicit: bool) -> bool:
    """
    Decide whether a member takes part in an operation.

    @param mask Filter mask or None (None includes everything)
    @param key Member name
    @param explicit True for "any"-style checks and filtered getters, where a
        member must be listed with a truthy value; False for has/contains
        checks, where only an explicit falsy value excludes it
    """
    if mask is None:
        return True
    if explicit:
        return bool(mask.get(key))
    if key not in mask:
        return True
    value = mask[key]
    if isinstance(value, Mapping):
        return True
    return bool(value)


def child_mask(mask: Optional[Mapping[str, Any]], key: str) -> Optional[Any]:
    """Return the nested mask handed down to a nested collection, if any."""
    if mask is None:
        return None
    value = mask.get(key)
    if isinstance(value, (Mapping, list)):
        return value
    return None


def invert(mask: Mapping[str, Any]) -> Mask:
    """Flip every boolean leaf of a mask."""
    inverted: Mask = {}
    for key, value in mask.items():
        if isinstance(value, Mapping):
            inverted[key] = invert(value)
        else:
            inverted[key] = not value
    return inverted


def filter_mask(obj: Mapping[str, Any], predicate: Callable[[Any], bool]) -> Mask:
    """
    Build a mask shaped like obj, with predicate(value) at every leaf.

    Non-matching leaves are kept as False so the mask also excludes them
    from has/contains checks.
    """
    result: Mask = {}
    for key, value in obj.items():
        if isinstance(value, Mapping):
            result[key] = filter_mask(value, predicate)
        else:
            result[key] = bool(predicate(value))
    return result


def subset(obj: Mapping[str, Any], mask: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return the part of obj whose keys are truthy in mask."""
    if mask is None:
        return dict(obj)
    result: Dict[str, Any] = {}
    for key, value in mask.items():
        if key not in obj or not value:
            continue
        if isinstance(value, Mapping) and isinstance(obj[key], Mapping):
            result[key] = subset(obj[key], value)
        else:
            result[key] = obj[key]
    return result


def strip_mask_deep(mask: Optional[Mapping[str, Any]]) -> Optional[Mask]:
    """Remove falsy leaves and empty branches. Returns None if nothing is left."""
    if mask is None:
        return None
    stripped: Mask = {}
    for key, value in mask.items():
        if isinstance(value, Mapping):
            nested = strip_mask_deep(value)
            if nested:
                stripped[key] = nested
        elif value:
            stripped[key] = value
    return stripped or None
