"""Canonical rendering of trees back to text."""

from __future__ import annotations

from typing import List

from scenariotree.core.tree.models import Tree
from scenariotree.core.tree.parser import parse_tree

BRANCH = "├── "
LAST_BRANCH = "└── "
CONTINUATION = "│   "
BLANK = "    "


def _render_children(children, prefix: str, lines: List[str]) -> None:
    for idx, node in enumerate(children):
        last = idx == len(children) - 1
        lines.append(f"{prefix}{LAST_BRANCH if last else BRANCH}{node.label}")
        _render_children(node.children, prefix + (BLANK if last else CONTINUATION), lines)


def render_tree(tree: Tree) -> str:
    """Serialise ``tree`` in the canonical notation.

    The canonical form uses box-drawing connectors, a 4-column indent unit and
    the original sibling order, and always ends with a single newline.
    """
    lines = [tree.unit]
    _render_children(tree.children, "", lines)
    return "\n".join(lines) + "\n"


def check_tree_drift(text: str) -> bool:
    """Return True when ``text`` differs from its own canonical rendering."""
    return render_tree(parse_tree(text)) != text


__all__ = ["BLANK", "BRANCH", "CONTINUATION", "LAST_BRANCH", "check_tree_drift", "render_tree"]
