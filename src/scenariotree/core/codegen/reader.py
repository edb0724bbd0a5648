"""Recovers scenario keys and hand-written bodies from an emitted module."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from scenariotree.core.codegen.emitter import BODY_END, BODY_START, ORPHAN_TAG, SCENARIO_TAG, UNIT_TAG
from scenariotree.core.codegen.models import ArtifactSnapshot
from scenariotree.core.errors import ArtifactFormatError

logger = logging.getLogger(__name__)


def _uncomment(line: str) -> str:
    if line.startswith("# "):
        return line[2:]
    if line.startswith("#"):
        return line[1:]
    return line


def _read_body(lines: List[str], start: int, *, commented: bool) -> Tuple[str, int]:
    """Return the body following ``start`` and the index of its end marker."""
    idx = start
    while idx < len(lines) and lines[idx].strip() != BODY_START:
        if lines[idx].startswith((SCENARIO_TAG, ORPHAN_TAG)):
            raise ArtifactFormatError("scenario has no body start marker", line=start)
        idx += 1
    if idx == len(lines):
        raise ArtifactFormatError("scenario has no body start marker", line=start)

    body: List[str] = []
    idx += 1
    while idx < len(lines) and lines[idx].strip() != BODY_END:
        if lines[idx].strip() == BODY_START:
            raise ArtifactFormatError("nested body start marker", line=idx + 1)
        body.append(_uncomment(lines[idx]) if commented else lines[idx])
        idx += 1
    if idx == len(lines):
        raise ArtifactFormatError("scenario body is not closed", line=start)
    return "\n".join(body), idx


def read_artifact(text: str) -> ArtifactSnapshot:
    """Parse a module produced by ``emit_module``.

    Raises:
        ArtifactFormatError: Missing unit tag, unbalanced body markers or a
            scenario key that appears twice
    """
    lines = text.splitlines()
    unit: Optional[str] = None
    keys: List[str] = []
    bodies: Dict[str, str] = {}
    orphaned: List[str] = []

    idx = 0
    while idx < len(lines):
        line = lines[idx]
        if line.startswith(UNIT_TAG):
            unit = line[len(UNIT_TAG):].strip()
        elif line.startswith(SCENARIO_TAG) or line.startswith(ORPHAN_TAG):
            is_orphan = line.startswith(ORPHAN_TAG)
            key = line[len(ORPHAN_TAG if is_orphan else SCENARIO_TAG):].strip()
            if key in bodies:
                raise ArtifactFormatError(f"scenario '{key}' appears twice", line=idx + 1)
            body, idx = _read_body(lines, idx + 1, commented=is_orphan)
            bodies[key] = body
            (orphaned if is_orphan else keys).append(key)
        idx += 1

    if unit is None:
        raise ArtifactFormatError("missing unit tag; not a scenariotree scaffold")

    logger.debug("Read %d scenario(s) and %d orphan(s) for %s", len(keys), len(orphaned), unit)
    return ArtifactSnapshot(unit=unit, keys=tuple(keys), bodies=bodies, orphaned=tuple(orphaned))


__all__ = ["read_artifact"]
