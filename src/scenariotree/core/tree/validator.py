"""Structural validation of parsed trees."""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from scenariotree.core.errors import (
    ChildlessBranchError,
    DanglingLeafError,
    DuplicatePathError,
    DuplicateSiblingLabelError,
    EmptyTreeError,
    SingleChildBranchError,
)
from scenariotree.core.tree.models import Node, NodeKind, Position, Tree

logger = logging.getLogger(__name__)


class TreeValidator:
    """Checks the structural invariants of a tree.

    Checks run in a fixed order (shape, then full label paths, then sibling
    labels) and the first violation found in pre-order is raised, so the same
    broken tree always reports the same error. Two sibling leaves with the same
    label share a full path and are reported as DuplicatePathError, as are
    repeated sibling branches holding a leaf label in common.
    DuplicateSiblingLabelError covers the remaining repeated labels.
    """

    def __init__(self, tree: Tree):
        self.tree = tree

    def validate(self) -> Tree:
        if not self.tree.children:
            raise EmptyTreeError(f"unit '{self.tree.unit}' has no branches")
        self._validate_shape()
        self._validate_paths()
        self._validate_siblings()
        logger.debug("Tree %s passed validation", self.tree.unit)
        return self.tree

    def _labels(self, position: Position) -> List[str]:
        return [self.tree.node_at(position[:i]).label for i in range(1, len(position) + 1)]

    def _validate_shape(self) -> None:
        for position, node in self.tree.walk():
            if node.kind is NodeKind.THEN:
                if len(position) == 1:
                    raise DanglingLeafError(
                        "outcome leaf directly under the unit has no precondition",
                        line=node.line,
                        labels=self._labels(position),
                    )
                if node.children:
                    child = node.children[0]
                    raise DanglingLeafError(
                        "node nested under an outcome leaf",
                        line=child.line,
                        labels=self._labels(position) + [child.label],
                    )
            elif node.kind.is_branch:
                if not node.children:
                    raise ChildlessBranchError(
                        "branch has no children",
                        line=node.line,
                        labels=self._labels(position),
                    )
                if len(node.children) == 1 and node.children[0].kind.is_branch:
                    raise SingleChildBranchError(
                        "branch has a single branch child; add its complement or merge the conditions",
                        line=node.line,
                        labels=self._labels(position),
                    )
            else:  # pragma: no cover - guarded by NodeKind
                raise ValueError(f"Unknown node kind: {node.kind}")

    def _validate_paths(self) -> None:
        seen: Dict[Tuple[str, ...], Position] = {}
        for position in self.tree.leaf_positions():
            labels = tuple(self._labels(position))
            if labels in seen:
                raise DuplicatePathError(
                    "two leaves describe the same scenario",
                    line=self.tree.node_at(position).line,
                    labels=labels,
                )
            seen[labels] = position

    def _validate_siblings(self) -> None:
        self._check_siblings(self.tree.children, ())
        for position, node in self.tree.walk():
            self._check_siblings(node.children, position)

    def _check_siblings(self, siblings: Tuple[Node, ...], parent: Position) -> None:
        seen: Dict[str, Node] = {}
        for node in siblings:
            if node.label in seen:
                labels = (self._labels(parent) if parent else []) + [node.label]
                raise DuplicateSiblingLabelError(
                    f"duplicate sibling label (first seen on line {seen[node.label].line})",
                    line=node.line,
                    labels=labels,
                )
            seen[node.label] = node


def validate_tree(tree: Tree) -> Tree:
    """Return ``tree`` unchanged or raise the first structural violation."""
    return TreeValidator(tree).validate()


__all__ = ["TreeValidator", "validate_tree"]
