"""Formatting helpers for CLI presentation."""

from __future__ import annotations

import json
from typing import Iterable, List

from rich.markup import escape
from rich.table import Table

from scenariotree.core.codegen.models import GeneratedArtifact
from scenariotree.core.reconcile.drift import DriftKind, DriftReport
from scenariotree.services.compile_service import CompileOutcome

DRIFT_STYLES = {
    DriftKind.ADDED: "green",
    DriftKind.REMOVED: "red",
    DriftKind.RENAMED: "yellow",
    DriftKind.REORDERED: "cyan",
}


def build_drift_table(report: DriftReport) -> Table:
    table = Table(title=f"Drift: {escape(report.unit)}", show_header=True, header_style="bold blue")
    table.add_column("Kind")
    table.add_column("Scenario", overflow="fold")
    table.add_column("Previously", overflow="fold", style="dim")
    if report.tree_drift:
        table.add_row("[magenta]tree format[/magenta]", "tree text is not canonical; run fmt", "")
    for entry in report.entries:
        style = DRIFT_STYLES[entry.kind]
        table.add_row(
            f"[{style}]{entry.kind.value}[/{style}]",
            escape(entry.path_identity),
            escape(entry.previous or ""),
        )
    return table


def build_scenarios_table(artifact: GeneratedArtifact) -> Table:
    table = Table(title=f"Scenarios: {escape(artifact.unit)}", show_header=True, header_style="bold blue")
    table.add_column("#", style="dim")
    table.add_column("Setup chain", style="cyan", overflow="fold")
    table.add_column("Outcome", style="green", overflow="fold")
    for idx, assertion in enumerate(artifact.assertion_units, start=1):
        chain = " > ".join(unit.identifier for unit in artifact.chain_of(assertion))
        table.add_row(str(idx), escape(chain), escape(assertion.label))
    return table


def build_summary_table(outcomes: Iterable[CompileOutcome], *, check: bool) -> Table:
    table = Table(title="Check" if check else "Compile", show_header=True, header_style="bold blue")
    table.add_column("Tree", overflow="fold")
    table.add_column("Status")
    table.add_column("Scenarios", justify="right")
    table.add_column("Orphaned", justify="right")
    for outcome in outcomes:
        result = outcome.result
        if result is None:
            table.add_row(escape(outcome.tree_path), f"[red]{outcome.error_type}[/red]", "-", "-")
            continue
        if check:
            status = "[yellow]drift[/yellow]" if result.has_drift else "[green]up to date[/green]"
        else:
            status = "[green]written[/green]" if result.written else "[dim]unchanged[/dim]"
        table.add_row(
            escape(outcome.tree_path),
            status,
            str(len(result.reconciled.artifact.assertion_units)),
            str(len(result.reconciled.orphaned)),
        )
    return table


def outcome_records(outcome: CompileOutcome) -> List[dict]:
    """Machine-readable records for one outcome (drift entries, orphans and errors)."""
    if outcome.result is None:
        return [{"tree": outcome.tree_path, "kind": "error", "error_type": outcome.error_type, "message": outcome.error}]
    records = [dict(record, tree=outcome.tree_path) for record in outcome.result.drift.to_records()]
    for orphan in outcome.result.reconciled.orphaned:
        records.append(
            {"tree": outcome.tree_path, "unit": outcome.result.unit, "kind": "orphaned", "path_identity": orphan.key}
        )
    return records


def format_jsonl(outcomes: Iterable[CompileOutcome]) -> str:
    lines = []
    for outcome in outcomes:
        lines.extend(json.dumps(record, sort_keys=True) for record in outcome_records(outcome))
    return "".join(f"{line}\n" for line in lines)


__all__ = [
    "build_drift_table",
    "build_scenarios_table",
    "build_summary_table",
    "format_jsonl",
    "outcome_records",
]
