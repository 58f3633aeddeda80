# uiauto_pages/diff.py
"""
@file diff.py
@brief Diff nodes produced by failed checks and broadcast aggregation.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Diff:
    """
    One node of a Diff Tree.

    Leaves describe a single mismatch (actual, expected, selector); inner
    nodes map member keys ("[1]" for list members, names for groups) to
    child diffs.
    """
    actual: Optional[str] = None
    expected: Any = None
    selector: Optional[str] = None
    tree: Dict[str, Diff] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.tree and self.actual is None and self.expected is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.actual is not None:
            data["actual"] = self.actual
        if self.expected is not None:
            data["expected"] = self.expected
        if self.selector is not None:
            data["selector"] = self.selector
        if self.tree:
            data["tree"] = {key: child.to_dict() for key, child in self.tree.items()}
        return data

    def format(self, indent: int = 0) -> List[str]:
        """Render the tree as indented lines for failure messages."""
        pad = "  " * indent
        lines: List[str] = []
        if self.actual is not None or self.expected is not None:
            lines.append(f"{pad}actual: \"{self.actual or ''}\" expected: \"{self.expected}\"")
        if self.selector and not self.tree:
            lines.append(f"{pad}( {self.selector} )")
        for key, child in self.tree.items():
            lines.append(f"{pad}{key}:")
            lines.extend(child.format(indent + 1))
        return lines

    def __str__(self) -> str:
        return "\n".join(self.format())
