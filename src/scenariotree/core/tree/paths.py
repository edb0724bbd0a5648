"""Root-to-leaf path enumeration."""

from __future__ import annotations

from typing import Iterator, List, Tuple

from pydantic import BaseModel

from scenariotree.core.tree.models import Node, Position, Tree


class Path(BaseModel):
    """One scenario: the nodes from a top-level branch down to an outcome leaf."""

    positions: Tuple[Position, ...]
    nodes: Tuple[Node, ...]

    model_config = {"frozen": True}

    @property
    def leaf(self) -> Node:
        return self.nodes[-1]

    @property
    def position(self) -> Position:
        """Position of the leaf."""
        return self.positions[-1]

    @property
    def outcome(self) -> str:
        return self.leaf.outcome

    @property
    def labels(self) -> List[str]:
        return [node.label for node in self.nodes]

    @property
    def ancestors(self) -> Tuple[Position, ...]:
        """Positions of the branch nodes that establish this scenario, in order."""
        return self.positions[:-1]

    def describe(self) -> str:
        return " > ".join(self.labels)


class PathSet:
    """Lazy, restartable view over every path of a tree.

    Each iteration walks the tree again depth-first, left to right, so two
    iterations over an unchanged tree yield the same paths in the same order.
    """

    def __init__(self, tree: Tree):
        self.tree = tree

    def __iter__(self) -> Iterator[Path]:
        for position, node in self.tree.walk():
            if not node.is_leaf:
                continue
            positions = tuple(position[:i] for i in range(1, len(position) + 1))
            nodes = tuple(self.tree.node_at(p) for p in positions)
            yield Path(positions=positions, nodes=nodes)

    def __len__(self) -> int:
        return self.tree.count_leaves()


def enumerate_paths(tree: Tree) -> PathSet:
    return PathSet(tree)


__all__ = ["Path", "PathSet", "enumerate_paths"]
