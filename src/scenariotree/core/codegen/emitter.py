"""
Pytest module emitter.

Layout of an emitted module:

    # Generated by scenariotree from hash_pair.tree. ...
    # scenariotree: unit HashPairTest
    import pytest

    @pytest.fixture
    def scenario(): ...                       shared state

    @pytest.fixture
    def whenIdNotNull(scenario): ...          one fixture per setup unit

    # scenariotree: scenario whenIdNotNull.givenFullyWithdrawn.itShouldReturnDEPLETED
    def test_whenIdNotNull_givenFullyWithdrawn_itShouldReturnDEPLETED(whenIdNotNull, givenFullyWithdrawn):
        \"\"\"it should return DEPLETED\"\"\"
        # >>> body
        pytest.skip('should return DEPLETED')
        # <<< body

Only the lines between the body markers survive regeneration.
"""

from __future__ import annotations

from typing import List

from scenariotree.core.codegen.generator import BODY_INDENT
from scenariotree.core.codegen.models import AssertionUnit, GeneratedArtifact, OrphanedScenario, SetupUnit

TAG_PREFIX = "# scenariotree:"
UNIT_TAG = f"{TAG_PREFIX} unit "
SCENARIO_TAG = f"{TAG_PREFIX} scenario "
ORPHAN_TAG = f"{TAG_PREFIX} orphaned scenario "
BODY_START = "# >>> body"
BODY_END = "# <<< body"
BASE_FIXTURE = "scenario"


def _docstring(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"""{escaped}"""'


def _header(artifact: GeneratedArtifact) -> List[str]:
    origin = f" from {artifact.source}" if artifact.source else ""
    return [
        f"# Generated by scenariotree{origin}.",
        "# Fixtures and test signatures are rewritten on every compile; only the",
        "# lines between the body markers of each test are preserved.",
        f"{UNIT_TAG}{artifact.unit}",
        "import pytest",
        "",
        "",
        "@pytest.fixture",
        f"def {BASE_FIXTURE}():",
        f"{BODY_INDENT}{_docstring(f'Shared state for {artifact.unit} scenarios.')}",
        f"{BODY_INDENT}return {{}}",
    ]


def _setup_block(artifact: GeneratedArtifact, unit: SetupUnit) -> List[str]:
    dependency = artifact.setup_unit(unit.parent).symbol if unit.parent else BASE_FIXTURE
    return [
        "@pytest.fixture",
        f"def {unit.symbol}({dependency}):",
        f"{BODY_INDENT}{_docstring(unit.label)}",
        f"{BODY_INDENT}return {dependency}",
    ]


def _assertion_block(artifact: GeneratedArtifact, assertion: AssertionUnit) -> List[str]:
    fixtures = ", ".join(unit.symbol for unit in artifact.chain_of(assertion))
    return [
        f"{SCENARIO_TAG}{assertion.key}",
        f"def {assertion.symbol}({fixtures}):",
        f"{BODY_INDENT}{_docstring(assertion.label)}",
        f"{BODY_INDENT}{BODY_START}",
        *assertion.body.splitlines(),
        f"{BODY_INDENT}{BODY_END}",
    ]


def _orphan_block(orphan: OrphanedScenario) -> List[str]:
    lines = [f"{ORPHAN_TAG}{orphan.key}", BODY_START]
    lines.extend(f"# {line}" if line else "#" for line in orphan.body.splitlines())
    lines.append(BODY_END)
    return lines


def emit_module(artifact: GeneratedArtifact) -> str:
    """Render ``artifact`` as a pytest module."""
    blocks: List[List[str]] = [_header(artifact)]
    blocks.extend(_setup_block(artifact, unit) for unit in artifact.setup_units)
    blocks.extend(_assertion_block(artifact, assertion) for assertion in artifact.assertion_units)
    blocks.extend(_orphan_block(orphan) for orphan in artifact.orphaned)
    return "\n\n\n".join("\n".join(block) for block in blocks) + "\n"


__all__ = [
    "BASE_FIXTURE",
    "BODY_END",
    "BODY_START",
    "ORPHAN_TAG",
    "SCENARIO_TAG",
    "UNIT_TAG",
    "emit_module",
]
