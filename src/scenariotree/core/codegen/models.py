"""
Generated scaffold models.

- SetupUnit: One precondition fixture per branch node, shared by every scenario below it
- AssertionUnit: One test per leaf, referencing its setup chain by position
- OrphanedScenario: A previously generated scenario whose path no longer exists
- GeneratedArtifact: Ordered setup and assertion units for one unit under test
- ArtifactSnapshot: The reconciliation-relevant view of an artifact (keys and bodies)
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from scenariotree.core.tree.models import NodeKind, Position


class SetupUnit(BaseModel):
    """Establishes the precondition of one branch node."""

    position: Position
    kind: NodeKind
    label: str
    identifier: str
    symbol: str
    parent: Optional[Position] = None

    model_config = {"frozen": True}


class AssertionUnit(BaseModel):
    """Terminal test for one scenario."""

    position: Position
    key: str  # Stable path identity, e.g. "whenIdNotNull.givenFullyWithdrawn.itShouldReturnDEPLETED"
    label: str
    outcome: str
    symbol: str  # Emitted test function name
    chain: Tuple[Position, ...]  # Ancestor setup units, top level first
    body: str

    model_config = {"frozen": True}

    def with_body(self, body: str) -> "AssertionUnit":
        return self.model_copy(update={"body": body})


class OrphanedScenario(BaseModel):
    """A scenario from a previous generation with no counterpart in the current tree."""

    key: str
    body: str

    model_config = {"frozen": True}


class ArtifactSnapshot(BaseModel):
    """Scenario keys and bodies recovered from a previous generation."""

    unit: str
    keys: Tuple[str, ...] = Field(default_factory=tuple)  # Live scenarios, in emitted order
    bodies: Dict[str, str] = Field(default_factory=dict)  # Live and orphaned scenarios
    orphaned: Tuple[str, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}


class GeneratedArtifact(BaseModel):
    """The scaffold for one unit under test, in visitation order."""

    unit: str
    source: Optional[str] = None
    setup_units: Tuple[SetupUnit, ...] = Field(default_factory=tuple)
    assertion_units: Tuple[AssertionUnit, ...] = Field(default_factory=tuple)
    orphaned: Tuple[OrphanedScenario, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    def setup_unit(self, position: Position) -> SetupUnit:
        for unit in self.setup_units:
            if unit.position == position:
                return unit
        raise KeyError(f"No setup unit at position {position}")

    def chain_of(self, assertion: AssertionUnit) -> List[SetupUnit]:
        """Setup units composing ``assertion``'s scenario, top level first."""
        by_position = {unit.position: unit for unit in self.setup_units}
        return [by_position[position] for position in assertion.chain]

    def chain_identifiers(self, assertion: AssertionUnit) -> List[str]:
        return [unit.identifier for unit in self.chain_of(assertion)]

    def keys(self) -> List[str]:
        return [assertion.key for assertion in self.assertion_units]

    def get_assertion(self, key: str) -> Optional[AssertionUnit]:
        for assertion in self.assertion_units:
            if assertion.key == key:
                return assertion
        return None

    def snapshot(self) -> ArtifactSnapshot:
        bodies = {orphan.key: orphan.body for orphan in self.orphaned}
        bodies.update({assertion.key: assertion.body for assertion in self.assertion_units})
        return ArtifactSnapshot(
            unit=self.unit,
            keys=tuple(self.keys()),
            bodies=bodies,
            orphaned=tuple(orphan.key for orphan in self.orphaned),
        )


__all__ = [
    "ArtifactSnapshot",
    "AssertionUnit",
    "GeneratedArtifact",
    "OrphanedScenario",
    "SetupUnit",
]
