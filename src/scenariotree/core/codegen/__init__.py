"""Scaffold generation: setup/assertion units and their pytest rendering."""

from scenariotree.core.codegen.emitter import emit_module
from scenariotree.core.codegen.generator import ScaffoldGenerator, generate_artifact, placeholder_body
from scenariotree.core.codegen.models import (
    ArtifactSnapshot,
    AssertionUnit,
    GeneratedArtifact,
    OrphanedScenario,
    SetupUnit,
)
from scenariotree.core.codegen.reader import read_artifact

__all__ = [
    "ArtifactSnapshot",
    "AssertionUnit",
    "GeneratedArtifact",
    "OrphanedScenario",
    "ScaffoldGenerator",
    "SetupUnit",
    "emit_module",
    "generate_artifact",
    "placeholder_body",
    "read_artifact",
]
