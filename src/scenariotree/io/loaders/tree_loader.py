from __future__ import annotations

"""Reading tree files and previously emitted scaffolds from disk."""

import glob
import os
from typing import List, Optional

from scenariotree.core.codegen.models import ArtifactSnapshot
from scenariotree.core.codegen.reader import read_artifact
from scenariotree.core.errors import ArtifactFormatError
from scenariotree.io.loaders.errors import LoaderError

TREE_SUFFIX = ".tree"


def read_text_file(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as exc:
        raise LoaderError(path, "File is not valid UTF-8", cause=exc) from exc
    except OSError as exc:
        raise LoaderError(path, "Cannot read file", cause=exc) from exc


def find_tree_files(path: str) -> List[str]:
    """Expand a directory into its ``.tree`` files; a file path is returned as is."""
    if os.path.isdir(path):
        return sorted(glob.glob(os.path.join(path, "**", f"*{TREE_SUFFIX}"), recursive=True))
    if not os.path.exists(path):
        raise LoaderError(path, "Tree file not found")
    return [path]


def parse_previous_artifact(path: str, text: str) -> ArtifactSnapshot:
    try:
        return read_artifact(text)
    except ArtifactFormatError as exc:
        raise LoaderError(path, "Existing scaffold cannot be reconciled", cause=exc) from exc


def load_previous_artifact(path: str) -> Optional[ArtifactSnapshot]:
    """Read the scaffold previously emitted at ``path``, or None when there is none."""
    if not os.path.exists(path):
        return None
    return parse_previous_artifact(path, read_text_file(path))


__all__ = ["TREE_SUFFIX", "find_tree_files", "load_previous_artifact", "parse_previous_artifact", "read_text_file"]
