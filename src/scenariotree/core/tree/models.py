"""
Branching-tree data models.

These models represent a parsed decision tree for one unit under test:
- NodeKind: Tagged variant for node kinds (when / given / then)
- Node: One line of the tree (a precondition branch or an outcome leaf)
- Tree: The unit under test plus its ordered top-level nodes

Tree Structure:
    HashPairTest                          (unit, not a node)
    ├── when id is null                   position (1,)
    │   └── it should revert              position (1, 1)
    └── when id is not null               position (2,)
        ├── given fully withdrawn         position (2, 1)
        │   └── it should return DEPLETED position (2, 1, 1)
        └── given not fully withdrawn     position (2, 2)

Positions are tuples of 1-based sibling indices. They address nodes as an arena:
every derived value (setup units, names) is keyed by position rather than by
object identity.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field

Position = Tuple[int, ...]


class NodeKind(str, Enum):
    """Kind of a tree node, derived from the leading keyword of its line."""

    WHEN = "when"  # Parameter-driven branch
    GIVEN = "given"  # State-driven branch
    THEN = "then"  # Outcome leaf ("it should ...")

    @property
    def is_branch(self) -> bool:
        return self in (NodeKind.WHEN, NodeKind.GIVEN)

    @property
    def keyword(self) -> str:
        """Keyword that introduces this kind in tree text."""
        if self is NodeKind.THEN:
            return "it"
        return self.value


KEYWORDS: Dict[str, NodeKind] = {kind.keyword: kind for kind in NodeKind}


def kind_for_label(label: str) -> Optional[NodeKind]:
    """Return the node kind introduced by the label's first word, if any."""
    words = label.split(None, 1)
    if not words:
        return None
    return KEYWORDS.get(words[0].lower())


class Node(BaseModel):
    """
    A node in the branching tree.

    Branch nodes (when/given) hold at least one child once validated; leaves
    (then) hold none. The ``line`` field is kept for error reporting only and is
    ignored by ``structure()``.
    """

    kind: NodeKind
    label: str
    children: Tuple[Node, ...] = Field(default_factory=tuple)
    line: int = 0

    model_config = {"frozen": True}

    @property
    def is_leaf(self) -> bool:
        return self.kind is NodeKind.THEN

    @property
    def outcome(self) -> str:
        """Expected outcome declared at a leaf (label without the ``it`` keyword)."""
        words = self.label.split(None, 1)
        return words[1] if len(words) > 1 else ""

    def structure(self) -> Tuple:
        """Line-independent shape of this subtree."""
        return (self.kind.value, self.label, tuple(child.structure() for child in self.children))


def _sibling_at(siblings: Tuple[Node, ...], idx: int, position: Position) -> Node:
    if idx < 1 or idx > len(siblings):
        raise KeyError(f"No node at position {position}")
    return siblings[idx - 1]


class Tree(BaseModel):
    """
    A parsed branching tree for one unit under test.

    The tree is immutable; all traversal helpers walk depth-first, left to right
    so every consumer sees the same visitation order.
    """

    unit: str
    children: Tuple[Node, ...] = Field(default_factory=tuple)
    source: Optional[str] = None

    model_config = {"frozen": True}

    # =========================================================================
    # Traversal
    # =========================================================================

    def walk(self) -> Iterator[Tuple[Position, Node]]:
        """Yield ``(position, node)`` pairs in pre-order."""
        stack: List[Tuple[Position, Node]] = [
            ((idx,), node) for idx, node in reversed(list(enumerate(self.children, start=1)))
        ]
        while stack:
            position, node = stack.pop()
            yield position, node
            for idx in range(len(node.children), 0, -1):
                stack.append((position + (idx,), node.children[idx - 1]))

    def node_at(self, position: Position) -> Node:
        """Return the node addressed by ``position``."""
        if not position:
            raise KeyError("Empty position does not address a node")
        *ancestors, last = position
        siblings = self.children
        for idx in ancestors:
            siblings = _sibling_at(siblings, idx, position).children
        return _sibling_at(siblings, last, position)

    def arena(self) -> Dict[Position, Node]:
        """All nodes keyed by position, in pre-order."""
        return dict(self.walk())

    # =========================================================================
    # Statistics
    # =========================================================================

    def branch_positions(self) -> List[Position]:
        return [position for position, node in self.walk() if node.kind.is_branch]

    def leaf_positions(self) -> List[Position]:
        return [position for position, node in self.walk() if node.is_leaf]

    def count_branches(self) -> int:
        return len(self.branch_positions())

    def count_leaves(self) -> int:
        return len(self.leaf_positions())

    def get_depth(self) -> int:
        """Maximum number of nodes on any root-to-leaf path."""
        return max((len(position) for position, _ in self.walk()), default=0)

    def structure(self) -> Tuple:
        """Line-independent shape of the whole tree, used for structural equality."""
        return (self.unit, tuple(child.structure() for child in self.children))


def parent_of(position: Position) -> Optional[Position]:
    """Position of the parent node, or None for a top-level node."""
    return position[:-1] or None


Node.model_rebuild()

__all__ = ["KEYWORDS", "Node", "NodeKind", "Position", "Tree", "kind_for_label", "parent_of"]
