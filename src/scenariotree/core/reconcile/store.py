from __future__ import annotations

from typing import Dict, Iterable, Optional

from pydantic import BaseModel, Field

from scenariotree.core.codegen.models import ArtifactSnapshot


class ArtifactStore(BaseModel):
    """Previously emitted artifacts keyed by unit under test."""

    items: Dict[str, ArtifactSnapshot] = Field(default_factory=dict)

    def put(self, snapshot: ArtifactSnapshot) -> None:
        self.items[snapshot.unit] = snapshot

    def get(self, unit: str) -> Optional[ArtifactSnapshot]:
        return self.items.get(unit)

    def all(self) -> Iterable[ArtifactSnapshot]:
        return self.items.values()

    def names(self) -> Iterable[str]:
        return sorted(self.items.keys())
