# uiauto_pages/comparisons.py
"""
@file comparisons.py
@brief Comparison strategies shared by every node property.
"""

from __future__ import annotations

import operator
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Type

from .exceptions import UnsupportedTypeError

PRIMITIVE_TYPES = (str, int, float, bool, type(None))

_EQUALITY_HOOKS: Dict[Type[Any], Callable[[Any, Any], bool]] = {}


def register_equality(value_type: Type[Any], hook: Callable[[Any, Any], bool]) -> None:
    """
    Register an equality hook for a complex value type.

    @param value_type Type of the actual value the hook handles
    @param hook Callable (actual, expected) -> bool
    """
    _EQUALITY_HOOKS[value_type] = hook


def unregister_equality(value_type: Type[Any]) -> None:
    _EQUALITY_HOOKS.pop(value_type, None)


def _find_hook(value: Any) -> Optional[Callable[[Any, Any], bool]]:
    for klass in type(value).__mro__:
        hook = _EQUALITY_HOOKS.get(klass)
        if hook is not None:
            return hook
    return None


def is_primitive(value: Any) -> bool:
    return isinstance(value, PRIMITIVE_TYPES)


def equals(actual: Any, expected: Any) -> bool:
    """
    Primitive values compare with ==. Complex values need a registered hook,
    looked up on the actual value first and then on the expected value.
    """
    if is_primitive(actual) or is_primitive(expected):
        return actual == expected

    hook = _find_hook(actual) or _find_hook(expected)
    if hook is None:
        raise UnsupportedTypeError(actual, expected)
    return bool(hook(actual, expected))


def has_any(actual: Any) -> bool:
    """True if a value is present. 0 and False count as present."""
    if actual is None:
        return False
    if isinstance(actual, (str, list, tuple, dict, set)):
        return len(actual) > 0
    return True


def _is_empty(value: Any) -> bool:
    return not has_any(value)


def contains(actual: Any, expected: Any) -> bool:
    """Substring test for strings, subset test for lists and mappings."""
    if _is_empty(expected):
        return True
    if _is_empty(actual):
        return False
    if isinstance(actual, str):
        return str(expected) in actual
    if isinstance(actual, Mapping) and isinstance(expected, Mapping):
        return all(key in actual and equals(actual[key], value) for key, value in expected.items())
    if isinstance(actual, (list, tuple, set)):
        if isinstance(expected, (list, tuple, set)):
            return all(item in actual for item in expected)
        return expected in actual
    raise UnsupportedTypeError(actual, expected)


def within_tolerance(actual: float, expected: float, tolerance: Optional[float] = None) -> bool:
    """
    True if max(expected, 0) lies in [actual - tolerance, actual + tolerance],
    with both bounds and the tolerance clamped at 0.
    """
    tolerance = max(tolerance or 0, 0)
    lower = max(actual - tolerance, 0)
    upper = max(actual + tolerance, 0)
    target = max(expected, 0)
    return lower <= target <= upper


def type_to_string(value: Any) -> str:
    """Render a value for diagnostics and timeout messages."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Mapping):
        return ", ".join(f"{key}: {type_to_string(item)}" for key, item in value.items())
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(type_to_string(item) for item in value) + "]"
    return str(value)


class Comparator(Enum):
    EQUAL_TO = "=="
    LESS_THAN = "<"
    GREATER_THAN = ">"
    NOT_EQUAL_TO = "!="

    def compare(self, actual: int, expected: int) -> bool:
        return _COMPARATOR_OPS[self](actual, expected)

    @classmethod
    def coerce(cls, value: Any) -> Comparator:
        if isinstance(value, cls):
            return value
        return cls(value)


_COMPARATOR_OPS = {
    Comparator.EQUAL_TO: operator.eq,
    Comparator.LESS_THAN: operator.lt,
    Comparator.GREATER_THAN: operator.gt,
    Comparator.NOT_EQUAL_TO: operator.ne,
}
