"""
Tree text parser.

Accepted notation (one node per line):

    HashPairTest
    ├── when id is null
    │   └── it should revert
    └── when id is not null
        └── ...

ASCII connectors (``|--``, ``\\--``, ``+--``, `` `-- ``) and plain indentation
are accepted as well. A line's depth is the column where its label starts,
divided by the indent unit (the smallest non-zero label column in the file).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from scenariotree.core.errors import MalformedTreeError
from scenariotree.core.tree.models import Node, NodeKind, Tree, kind_for_label

logger = logging.getLogger(__name__)

TAB_WIDTH = 4
COMMENT_PREFIX = "//"

# Characters that may precede a label: indentation, continuation bars and connectors.
_PREFIX_CHARS = frozenset(" │|├└─-`+\\")


def _split_line(raw: str) -> Tuple[int, str]:
    """Return ``(label column, label text)`` for a raw line."""
    line = raw.expandtabs(TAB_WIDTH).rstrip()
    column = 0
    while column < len(line) and line[column] in _PREFIX_CHARS:
        column += 1
    label = " ".join(line[column:].split())
    return column, label


def _scan(text: str) -> List[Tuple[int, int, str]]:
    """Collect ``(line number, column, label)`` for every meaningful line."""
    entries: List[Tuple[int, int, str]] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        if raw.strip().startswith(COMMENT_PREFIX):
            continue
        column, label = _split_line(raw)
        if not label:
            # Blank lines and spacer lines made only of continuation bars.
            continue
        entries.append((number, column, label))
    return entries


def _freeze(entry: Dict[str, Any]) -> Node:
    return Node(
        kind=entry["kind"],
        label=entry["label"],
        line=entry["line"],
        children=tuple(_freeze(child) for child in entry["children"]),
    )


def _depth(number: int, column: int, label: str, unit_width: int) -> int:
    if unit_width and column % unit_width:
        raise MalformedTreeError(
            f"indentation of {column} columns is not a multiple of {unit_width}",
            line=number,
            text=label,
        )
    return column // unit_width if unit_width else 0


def parse_tree(text: str, *, source: Optional[str] = None) -> Tree:
    """Parse branching-tree text into a Tree.

    Args:
        text: Tree notation, first line being the unit under test
        source: Optional file name recorded on the tree

    Raises:
        MalformedTreeError: Empty input, inconsistent indentation or a keyword
            that does not fit its depth
    """
    entries = _scan(text)
    if not entries:
        raise MalformedTreeError("tree is empty")

    unit_width = min((column for _, column, _ in entries if column > 0), default=0)

    number, column, unit = entries[0]
    if _depth(number, column, unit, unit_width) != 0:
        raise MalformedTreeError("tree must start with the unit name at column 0", line=number, text=unit)
    if kind_for_label(unit) is not None:
        raise MalformedTreeError(
            "first line names the unit under test and cannot start with a node keyword",
            line=number,
            text=unit,
        )

    roots: List[Dict[str, Any]] = []
    # Open ancestors as (depth, entry); the unit line sits at depth 0.
    stack: List[Tuple[int, Dict[str, Any]]] = []
    previous_depth = 0

    for number, column, label in entries[1:]:
        depth = _depth(number, column, label, unit_width)
        if depth == 0:
            raise MalformedTreeError("only one unit line is allowed per tree", line=number, text=label)
        if depth > previous_depth + 1:
            raise MalformedTreeError(
                f"depth {depth} does not follow parent depth {previous_depth}",
                line=number,
                text=label,
            )

        kind = kind_for_label(label)
        if kind is None:
            expected = ", ".join(k.keyword for k in NodeKind)
            raise MalformedTreeError(f"expected a line starting with one of: {expected}", line=number, text=label)

        entry: Dict[str, Any] = {"kind": kind, "label": label, "line": number, "children": []}
        while stack and stack[-1][0] >= depth:
            stack.pop()
        if stack:
            stack[-1][1]["children"].append(entry)
        else:
            roots.append(entry)
        stack.append((depth, entry))
        previous_depth = depth

    tree = Tree(unit=unit, children=tuple(_freeze(entry) for entry in roots), source=source)
    logger.debug("Parsed tree %s: %d node(s)", tree.unit, len(tree.arena()))
    return tree


__all__ = ["parse_tree"]
