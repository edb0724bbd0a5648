from __future__ import annotations

"""Utilities for resolving tree inputs and scaffold output paths."""

import os
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from scenariotree.io.loaders.tree_loader import TREE_SUFFIX, find_tree_files


def module_name_for(tree_path: str, prefix: str = "test_") -> str:
    """Pytest module file name for a tree file.

    The stem is reduced to identifier characters so pytest can import the module.
    """
    stem = Path(tree_path).name
    if stem.endswith(TREE_SUFFIX):
        stem = stem[: -len(TREE_SUFFIX)]
    stem = re.sub(r"\W", "_", stem) or "tree"
    return f"{prefix}{stem}.py"


def default_output_path(tree_path: str, *, output_dir: Optional[str] = None, prefix: str = "test_") -> str:
    """Scaffold path beside the tree, or inside ``output_dir`` when configured."""
    directory = Path(output_dir) if output_dir else Path(tree_path).parent
    return str(directory / module_name_for(tree_path, prefix))


def resolve_output_path(
    tree_path: str,
    out: Optional[str],
    *,
    output_dir: Optional[str] = None,
    prefix: str = "test_",
) -> str:
    """Explicit ``--out`` wins; otherwise fall back to the default location."""
    if out:
        return out
    return default_output_path(tree_path, output_dir=output_dir, prefix=prefix)


def find_output_clash(work: Iterable[Tuple[str, str]]) -> Optional[Tuple[str, str, str]]:
    """First pair of trees compiling to the same scaffold, as ``(first, second, output)``."""
    owners: Dict[str, str] = {}
    for tree_path, output_path in work:
        normalized = os.path.normcase(os.path.abspath(output_path))
        if normalized in owners:
            return owners[normalized], tree_path, output_path
        owners[normalized] = tree_path
    return None


def expand_tree_paths(paths: Iterable[str]) -> List[str]:
    """Expand directories into their tree files, keeping order and dropping duplicates.

    Raises:
        LoaderError: A given path does not exist
    """
    seen = set()
    expanded: List[str] = []
    for path in paths:
        for tree_path in find_tree_files(path):
            if tree_path not in seen:
                seen.add(tree_path)
                expanded.append(tree_path)
    return expanded


__all__ = [
    "default_output_path",
    "expand_tree_paths",
    "find_output_clash",
    "module_name_for",
    "resolve_output_path",
]
