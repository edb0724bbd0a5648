"""
Scenario drift between two generations.

Entry kinds:
- added: a scenario key exists only in the new generation
- removed: a scenario key exists only in the previous generation
- renamed: a removed and an added key of the same depth that differ in exactly one segment
- reordered: a key present in both whose relative position changed
"""

from __future__ import annotations

import difflib
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from scenariotree.core.naming import KEY_SEPARATOR


class DriftKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    RENAMED = "renamed"
    REORDERED = "reordered"


class DriftEntry(BaseModel):
    path_identity: str
    kind: DriftKind
    previous: Optional[str] = None  # Old key for renamed entries

    model_config = {"frozen": True}


class DriftReport(BaseModel):
    """Drift of one unit's scenarios and tree text."""

    unit: str
    entries: Tuple[DriftEntry, ...] = Field(default_factory=tuple)
    tree_drift: bool = False  # Stored tree text differs from its canonical rendering

    model_config = {"frozen": True}

    @property
    def has_drift(self) -> bool:
        return self.tree_drift or bool(self.entries)

    def count(self, kind: DriftKind) -> int:
        return sum(1 for entry in self.entries if entry.kind is kind)

    def to_records(self) -> List[Dict[str, Optional[str]]]:
        records: List[Dict[str, Optional[str]]] = []
        if self.tree_drift:
            records.append({"unit": self.unit, "path_identity": None, "kind": "tree_format", "previous": None})
        for entry in self.entries:
            records.append(
                {
                    "unit": self.unit,
                    "path_identity": entry.path_identity,
                    "kind": entry.kind.value,
                    "previous": entry.previous,
                }
            )
        return records


def _single_segment_rename(old: str, new: str) -> bool:
    old_parts = old.split(KEY_SEPARATOR)
    new_parts = new.split(KEY_SEPARATOR)
    if len(old_parts) != len(new_parts):
        return False
    return sum(1 for a, b in zip(old_parts, new_parts) if a != b) == 1


def compute_drift(unit: str, previous_keys: Sequence[str], new_keys: Sequence[str]) -> DriftReport:
    """Compare scenario keys of two generations, both in emitted order."""
    old_set = set(previous_keys)
    new_set = set(new_keys)
    removed = [key for key in previous_keys if key not in new_set]
    added = [key for key in new_keys if key not in old_set]

    renamed_from: Dict[str, str] = {}
    for old in removed:
        for new in added:
            if new not in renamed_from and _single_segment_rename(old, new):
                renamed_from[new] = old
                break
    paired_old = set(renamed_from.values())

    old_common = [key for key in previous_keys if key in new_set]
    new_common = [key for key in new_keys if key in old_set]
    matcher = difflib.SequenceMatcher(None, old_common, new_common, autojunk=False)
    in_order = set()
    for block in matcher.get_matching_blocks():
        in_order.update(new_common[block.b : block.b + block.size])

    entries: List[DriftEntry] = []
    for key in new_keys:
        if key in renamed_from:
            entries.append(DriftEntry(path_identity=key, kind=DriftKind.RENAMED, previous=renamed_from[key]))
        elif key not in old_set:
            entries.append(DriftEntry(path_identity=key, kind=DriftKind.ADDED))
        elif key not in in_order:
            entries.append(DriftEntry(path_identity=key, kind=DriftKind.REORDERED))
    for key in removed:
        if key not in paired_old:
            entries.append(DriftEntry(path_identity=key, kind=DriftKind.REMOVED))

    return DriftReport(unit=unit, entries=tuple(entries))


__all__ = ["DriftEntry", "DriftKind", "DriftReport", "compute_drift"]
