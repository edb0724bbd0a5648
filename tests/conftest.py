"""
Shared fixtures for scenariotree tests.
"""

from pathlib import Path

import pytest

from scenariotree.core.tree.models import Tree
from scenariotree.core.tree.parser import parse_tree
from scenariotree.core.tree.validator import validate_tree

HASH_PAIR_TREE = """\
HashPairTest
├── when id is null
│   └── it should revert
└── when id is not null
    ├── given fully withdrawn
    │   └── it should return DEPLETED
    └── given not fully withdrawn
        ├── given canceled
        │   └── it should return CANCELED
        └── given not canceled
            ├── given start time in the future
            │   └── it should return PENDING
            └── given start time not in the future
                └── it should return STREAMING
"""


@pytest.fixture
def hash_pair_text() -> str:
    """Canonical text of the HashPairTest tree (8 branches, 5 scenarios)."""
    return HASH_PAIR_TREE


@pytest.fixture
def hash_pair_tree() -> Tree:
    """Parsed and validated HashPairTest tree."""
    return validate_tree(parse_tree(HASH_PAIR_TREE, source="hash_pair.tree"))


@pytest.fixture
def write_tree(tmp_path: Path):
    """Write tree text to ``tmp_path/<name>`` and return the path as a string."""

    def _write(text: str, name: str = "hash_pair.tree") -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def hash_pair_file(write_tree) -> str:
    """Path of ``hash_pair.tree`` holding the HashPairTest tree."""
    return write_tree(HASH_PAIR_TREE)
