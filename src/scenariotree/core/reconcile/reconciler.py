"""
Non-destructive merge of a fresh generation with a previous one.

Rules:
- Setup units always come from the fresh generation.
- A scenario keeps its previous body when its path key still exists.
- A previous scenario whose key is gone becomes an OrphanedScenario. Orphans
  keep their body and are carried into the merged artifact until removed by hand.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from scenariotree.core.codegen.models import ArtifactSnapshot, AssertionUnit, GeneratedArtifact, OrphanedScenario
from scenariotree.core.reconcile.drift import DriftReport, compute_drift
from scenariotree.core.reconcile.store import ArtifactStore

logger = logging.getLogger(__name__)


class ReconcileResult(BaseModel):
    """Merged artifact plus what happened to each scenario."""

    artifact: GeneratedArtifact
    preserved: Tuple[str, ...] = Field(default_factory=tuple)  # Keys whose body was carried over
    fresh: Tuple[str, ...] = Field(default_factory=tuple)  # Keys that received a placeholder
    drift: DriftReport

    model_config = {"frozen": True}

    @property
    def orphaned(self) -> Tuple[OrphanedScenario, ...]:
        return self.artifact.orphaned


def reconcile(new: GeneratedArtifact, previous: Optional[ArtifactSnapshot]) -> ReconcileResult:
    """Merge ``new`` with ``previous``; neither input is modified."""
    if previous is None:
        keys = tuple(new.keys())
        return ReconcileResult(artifact=new, fresh=keys, drift=compute_drift(new.unit, (), keys))

    if previous.unit != new.unit:
        logger.warning("Reconciling %s against a scaffold generated for %s", new.unit, previous.unit)

    assertions: List[AssertionUnit] = []
    preserved: List[str] = []
    fresh: List[str] = []
    for assertion in new.assertion_units:
        if assertion.key in previous.bodies:
            assertions.append(assertion.with_body(previous.bodies[assertion.key]))
            preserved.append(assertion.key)
        else:
            assertions.append(assertion)
            fresh.append(assertion.key)

    live = set(new.keys())
    orphans = [
        OrphanedScenario(key=key, body=previous.bodies[key])
        for key in previous.keys + previous.orphaned
        if key not in live
    ]
    for orphan in orphans:
        logger.warning("Orphaned scenario in %s: %s", new.unit, orphan.key)

    merged = new.model_copy(update={"assertion_units": tuple(assertions), "orphaned": tuple(orphans)})
    logger.info(
        "Reconciled %s: %d preserved, %d fresh, %d orphaned",
        new.unit,
        len(preserved),
        len(fresh),
        len(orphans),
    )
    return ReconcileResult(
        artifact=merged,
        preserved=tuple(preserved),
        fresh=tuple(fresh),
        drift=compute_drift(new.unit, previous.keys, tuple(new.keys())),
    )


class Reconciler:
    """Reconciles fresh artifacts against an explicit store of previous ones."""

    def __init__(self, store: ArtifactStore):
        self.store = store

    def reconcile(self, new: GeneratedArtifact) -> ReconcileResult:
        return reconcile(new, self.store.get(new.unit))


__all__ = ["ReconcileResult", "Reconciler", "reconcile"]
