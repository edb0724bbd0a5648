"""
Prefix-sharing scaffold generation.

Every path through the tree needs the preconditions of all its ancestors. Paths
that share a prefix share those ancestors, so the generator emits one setup unit
per branch node, on the first path that reaches it, and lets each assertion unit
reference the chain of setup units instead of re-establishing it:

    when id is not null ─┬─ given fully withdrawn ──── it should return DEPLETED
                         └─ given not fully withdrawn ─ ...

    setup units:  whenIdNotNull, givenFullyWithdrawn, givenNotFullyWithdrawn
    DEPLETED:     chain = [whenIdNotNull, givenFullyWithdrawn]

The number of setup units therefore equals the number of branch nodes, not the
number of paths.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional

from scenariotree.core.codegen.models import AssertionUnit, GeneratedArtifact, SetupUnit
from scenariotree.core.naming import NamingEngine
from scenariotree.core.tree.models import Node, NodeKind, Position, Tree, parent_of
from scenariotree.core.tree.paths import Path, enumerate_paths

logger = logging.getLogger(__name__)

PlaceholderStyle = Literal["skip", "fail"]
BODY_INDENT = "    "


def placeholder_body(outcome: str, style: PlaceholderStyle = "skip") -> str:
    """Body emitted for a scenario that has no hand-written implementation yet."""
    message = outcome or "not implemented"
    return f"{BODY_INDENT}pytest.{style}({message!r})"


class ScaffoldGenerator:
    """Maps a validated tree to a GeneratedArtifact."""

    def __init__(
        self,
        tree: Tree,
        *,
        naming: Optional[NamingEngine] = None,
        placeholder: PlaceholderStyle = "skip",
        test_prefix: str = "test_",
    ):
        self.tree = tree
        self.naming = naming or NamingEngine(tree)
        self.placeholder = placeholder
        self.test_prefix = test_prefix

    def generate(self) -> GeneratedArtifact:
        setup_units: Dict[Position, SetupUnit] = {}
        assertion_units: List[AssertionUnit] = []

        for path in enumerate_paths(self.tree):
            for position, node in zip(path.ancestors, path.nodes[:-1]):
                if position not in setup_units:
                    setup_units[position] = self._setup_unit(position, node)
            assertion_units.append(self._assertion_unit(path))

        logger.info(
            "Generated %d setup unit(s) and %d scenario(s) for %s",
            len(setup_units),
            len(assertion_units),
            self.tree.unit,
        )
        return GeneratedArtifact(
            unit=self.tree.unit,
            source=self.tree.source,
            setup_units=tuple(setup_units.values()),
            assertion_units=tuple(assertion_units),
        )

    def _setup_unit(self, position: Position, node: Node) -> SetupUnit:
        if node.kind is NodeKind.WHEN or node.kind is NodeKind.GIVEN:
            unit = SetupUnit(
                position=position,
                kind=node.kind,
                label=node.label,
                identifier=self.naming.identifier(position),
                symbol=self.naming.symbol(position),
                parent=parent_of(position),
            )
            logger.debug("Setup unit %s at %s", unit.symbol, position)
            return unit
        if node.kind is NodeKind.THEN:
            raise ValueError(f"Outcome leaf at {position} cannot establish a precondition")
        raise ValueError(f"Unknown node kind: {node.kind}")  # pragma: no cover

    def _assertion_unit(self, path: Path) -> AssertionUnit:
        chain = self.naming.chain(path.position)
        return AssertionUnit(
            position=path.position,
            key=self.naming.path_key(path.position),
            label=path.leaf.label,
            outcome=path.outcome,
            symbol=self.test_prefix + "_".join(chain),
            chain=path.ancestors,
            body=placeholder_body(path.outcome, self.placeholder),
        )


def generate_artifact(
    tree: Tree,
    *,
    naming: Optional[NamingEngine] = None,
    placeholder: PlaceholderStyle = "skip",
    test_prefix: str = "test_",
) -> GeneratedArtifact:
    return ScaffoldGenerator(tree, naming=naming, placeholder=placeholder, test_prefix=test_prefix).generate()


__all__ = ["BODY_INDENT", "PlaceholderStyle", "ScaffoldGenerator", "generate_artifact", "placeholder_body"]
