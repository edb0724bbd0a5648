"""Compile Service: Runs the tree-to-scaffold pipeline for one or many tree files."""

from __future__ import annotations

import concurrent.futures
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel

from scenariotree.core.codegen.emitter import emit_module
from scenariotree.core.codegen.generator import generate_artifact
from scenariotree.core.codegen.models import ArtifactSnapshot
from scenariotree.core.config import CompilerConfig
from scenariotree.core.errors import ScenarioTreeError
from scenariotree.core.naming import NamingEngine
from scenariotree.core.reconcile.drift import DriftReport
from scenariotree.core.reconcile.reconciler import ReconcileResult, reconcile
from scenariotree.core.tree.models import Tree
from scenariotree.core.tree.parser import parse_tree
from scenariotree.core.tree.renderer import render_tree
from scenariotree.core.tree.validator import validate_tree
from scenariotree.io.loaders.errors import LoaderError
from scenariotree.io.loaders.tree_loader import parse_previous_artifact, read_text_file
from scenariotree.utils.logging import log_calls

logger = logging.getLogger(__name__)


class CompileResult(BaseModel):
    """Outcome of compiling one tree file."""

    tree_path: str
    output_path: str
    tree: Tree
    reconciled: ReconcileResult
    module_text: str
    canonical_text: str
    tree_drift: bool  # Tree text is not in canonical form
    stale: bool  # Scaffold on disk differs from module_text
    written: bool = False

    @property
    def unit(self) -> str:
        return self.tree.unit

    @property
    def drift(self) -> DriftReport:
        return self.reconciled.drift.model_copy(update={"tree_drift": self.tree_drift})

    @property
    def has_drift(self) -> bool:
        return self.tree_drift or self.stale


class CompileOutcome(BaseModel):
    """Result or failure for one file of a batch compile."""

    tree_path: str
    result: Optional[CompileResult] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def write_atomic(path: str, text: str) -> None:
    """Replace ``path`` with ``text`` in one step; a failed write leaves the old file intact."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_path, target)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


class CompileService:
    """
    Service for compiling branching trees into pytest scaffolds.

    Each tree compiles independently: parse, validate, generate, reconcile
    against the scaffold already on disk, then write. Nothing is written for a
    tree that fails at any step.
    """

    def __init__(self, config: CompilerConfig | None = None):
        self.config = config or CompilerConfig()

    def compile_text(
        self,
        text: str,
        *,
        source: Optional[str] = None,
        previous: Optional[ArtifactSnapshot] = None,
    ) -> Tuple[Tree, ReconcileResult, str]:
        """
        Run the in-memory pipeline for one tree text.

        Args:
            text: Tree notation
            source: File name recorded in the emitted header
            previous: Snapshot of the scaffold generated last time, if any

        Returns:
            Tuple of (validated tree, reconcile result, emitted module text)
        """
        tree = validate_tree(parse_tree(text, source=source))
        naming = NamingEngine(tree, stopwords=self.config.stopwords)
        artifact = generate_artifact(
            tree,
            naming=naming,
            placeholder=self.config.placeholder,
            test_prefix=self.config.test_prefix,
        )
        # The scaffold is paired with its tree by output path, so a renamed unit
        # still reconciles against the bodies written under its old name.
        reconciled = reconcile(artifact, previous)
        return tree, reconciled, emit_module(reconciled.artifact)

    @log_calls()
    def compile_file(self, tree_path: str, output_path: str, *, check: bool = False) -> CompileResult:
        """
        Compile one tree file.

        Args:
            tree_path: Path of the ``.tree`` file
            output_path: Path of the pytest module to reconcile against and write
            check: Report drift without writing anything

        Raises:
            LoaderError: A file cannot be read or the existing scaffold is corrupt
            ScenarioTreeError: The tree is malformed or structurally invalid
        """
        text = read_text_file(tree_path)
        existing = read_text_file(output_path) if os.path.exists(output_path) else None
        previous = parse_previous_artifact(output_path, existing) if existing is not None else None
        tree, reconciled, module_text = self.compile_text(text, source=Path(tree_path).name, previous=previous)

        canonical = render_tree(tree)
        result = CompileResult(
            tree_path=tree_path,
            output_path=output_path,
            tree=tree,
            reconciled=reconciled,
            module_text=module_text,
            canonical_text=canonical,
            tree_drift=canonical != text,
            stale=existing != module_text,
        )

        if check:
            logger.info("Checked %s: tree_drift=%s stale=%s", tree_path, result.tree_drift, result.stale)
            return result

        if result.stale:
            write_atomic(output_path, module_text)
            logger.info("Wrote scaffold for %s to %s", tree.unit, output_path)
        return result.model_copy(update={"written": result.stale})

    @log_calls()
    def format_file(self, tree_path: str, *, check: bool = False) -> bool:
        """
        Rewrite a tree file in canonical form.

        Returns:
            True when the file was not canonical (and, unless ``check``, was rewritten)
        """
        text = read_text_file(tree_path)
        canonical = render_tree(parse_tree(text, source=Path(tree_path).name))
        if canonical == text:
            return False
        if not check:
            write_atomic(tree_path, canonical)
            logger.info("Formatted %s", tree_path)
        return True

    def compile_many(
        self,
        jobs: Sequence[Tuple[str, str]],
        *,
        check: bool = False,
        workers: Optional[int] = None,
    ) -> List[CompileOutcome]:
        """
        Compile independent ``(tree_path, output_path)`` jobs, possibly in parallel.

        Failures are captured per file; outcomes come back in input order.
        """
        max_workers = max(1, min(workers or self.config.jobs, len(jobs) or 1))
        if max_workers == 1:
            return [self._compile_outcome(tree_path, output_path, check) for tree_path, output_path in jobs]

        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(self._compile_outcome, tree_path, output_path, check)
                for tree_path, output_path in jobs
            ]
            return [future.result() for future in futures]

    def _compile_outcome(self, tree_path: str, output_path: str, check: bool) -> CompileOutcome:
        try:
            result = self.compile_file(tree_path, output_path, check=check)
        except (LoaderError, ScenarioTreeError) as exc:
            logger.error("Failed to compile %s: %s", tree_path, exc)
            return CompileOutcome(tree_path=tree_path, error=str(exc), error_type=type(exc).__name__)
        return CompileOutcome(tree_path=tree_path, result=result)


__all__ = ["CompileOutcome", "CompileResult", "CompileService", "write_atomic"]
