"""
Branching-tree module.

Provides the tree model and the text-facing operations on it.

Components:
- Node / NodeKind / Tree: Immutable tree model, addressed by position
- parse_tree: Tree text -> Tree
- render_tree: Tree -> canonical tree text
- enumerate_paths: Restartable root-to-leaf path view

Validation lives in ``scenariotree.core.tree.validator``.

Example:
    from scenariotree.core.tree import parse_tree, render_tree

    tree = parse_tree(path.read_text(encoding="utf-8"))
    assert render_tree(parse_tree(render_tree(tree))) == render_tree(tree)
"""

from scenariotree.core.tree.models import Node, NodeKind, Position, Tree
from scenariotree.core.tree.parser import parse_tree
from scenariotree.core.tree.paths import Path, PathSet, enumerate_paths
from scenariotree.core.tree.renderer import check_tree_drift, render_tree

__all__ = [
    "Node",
    "NodeKind",
    "Position",
    "Tree",
    "Path",
    "PathSet",
    "enumerate_paths",
    "parse_tree",
    "render_tree",
    "check_tree_drift",
]
