"""
scenariotree CLI: compile branching trees into pytest scaffolds and check for drift.

Commands:
- compile: Generate or reconcile the scaffold of one or more tree files
- fmt: Rewrite tree files in canonical form
- scenarios: List the scenarios and setup chains of a tree
"""

from __future__ import annotations

import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from scenariotree.cli.formatters import (
    build_drift_table,
    build_scenarios_table,
    build_summary_table,
    format_jsonl,
)
from scenariotree.cli.load_helpers import load_or_exit
from scenariotree.cli.paths import expand_tree_paths, find_output_clash, resolve_output_path
from scenariotree.core.codegen.generator import generate_artifact
from scenariotree.core.naming import NamingEngine
from scenariotree.core.tree.parser import parse_tree
from scenariotree.core.tree.validator import validate_tree
from scenariotree.io.loaders.config_loader import load_config
from scenariotree.io.loaders.tree_loader import read_text_file
from scenariotree.services.compile_service import CompileService

app = typer.Typer(help="scenariotree CLI: compile branching trees into pytest scaffolds and check for drift.")
console = Console(soft_wrap=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline details to stderr"),
) -> None:
    """Compile branching trees into pytest scaffolds."""
    _configure_logging(verbose)


@app.command("compile")
def compile_trees(
    trees: List[str] = typer.Argument(..., help="Tree files or directories containing *.tree files"),
    check: bool = typer.Option(False, "--check", help="Report drift without writing; exit 1 when drift is found"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Scaffold path (single tree only)"),
    output_format: str = typer.Option("table", "--format", "-f", help="Report format: 'table' or 'jsonl'"),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", min=1, help="Trees compiled in parallel"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to scenariotree.yaml"),
    verbose_load: bool = typer.Option(False, "--verbose-load", help="Display the underlying cause of load errors"),
) -> None:
    """Generate scaffolds, reconciling with hand-written test bodies already on disk."""
    if output_format not in ("table", "jsonl"):
        console.print("[red]Supported formats[/red]: 'table', 'jsonl'")
        raise typer.Exit(code=2)

    config = load_or_exit(load_config, config_path, console=console, verbose_errors=verbose_load)
    tree_paths = load_or_exit(expand_tree_paths, trees, console=console, verbose_errors=verbose_load)
    if not tree_paths:
        console.print("[red]No tree files found[/red]")
        raise typer.Exit(code=1)
    if out and len(tree_paths) > 1:
        console.print("[red]--out can only be used with a single tree file[/red]")
        raise typer.Exit(code=2)

    work = [
        (
            tree_path,
            resolve_output_path(tree_path, out, output_dir=config.output_dir, prefix=config.test_prefix),
        )
        for tree_path in tree_paths
    ]
    clash = find_output_clash(work)
    if clash:
        first, second, output_path = clash
        console.print(
            f"[red]Output path clash[/red]: {escape(first)} and {escape(second)} both compile to "
            f"{escape(output_path)}",
            highlight=False,
        )
        raise typer.Exit(code=2)
    outcomes = CompileService(config).compile_many(work, check=check, workers=jobs)

    if output_format == "jsonl":
        typer.echo(format_jsonl(outcomes), nl=False)
    else:
        for outcome in outcomes:
            if outcome.result is None:
                console.print(
                    f"[red]{outcome.error_type}[/red] in {escape(outcome.tree_path)}: {escape(outcome.error or '')}",
                    highlight=False,
                )
                continue
            result = outcome.result
            if result.drift.has_drift:
                console.print(build_drift_table(result.drift))
            for orphan in result.reconciled.orphaned:
                console.print(
                    f"[yellow]Orphaned scenario[/yellow] {escape(orphan.key)} kept at the end of "
                    f"{escape(result.output_path)}",
                    highlight=False,
                )
        console.print(build_summary_table(outcomes, check=check))

    failed = any(not outcome.ok for outcome in outcomes)
    drifted = check and any(outcome.result is not None and outcome.result.has_drift for outcome in outcomes)
    if failed or drifted:
        raise typer.Exit(code=1)


@app.command("fmt")
def format_trees(
    trees: List[str] = typer.Argument(..., help="Tree files or directories containing *.tree files"),
    check: bool = typer.Option(False, "--check", help="Only report files that are not canonical"),
) -> None:
    """Rewrite tree files in canonical form."""
    tree_paths = load_or_exit(expand_tree_paths, trees, console=console)
    service = CompileService()
    changed = 0
    for tree_path in tree_paths:
        if load_or_exit(service.format_file, tree_path, check=check, console=console):
            changed += 1
            verb = "Would reformat" if check else "Reformatted"
            console.print(f"[yellow]{verb}[/yellow] {escape(tree_path)}", highlight=False)

    if check:
        console.print(f"{changed} of {len(tree_paths)} tree file(s) not canonical")
    else:
        console.print(f"{changed} file(s) reformatted")
    if check and changed:
        raise typer.Exit(code=1)


@app.command("scenarios")
def list_scenarios(
    tree: str = typer.Argument(..., help="Tree file"),
    keys: bool = typer.Option(False, "--keys", help="Print scenario keys only, one per line"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to scenariotree.yaml"),
) -> None:
    """Show the scenarios of a tree with their setup chains."""
    config = load_or_exit(load_config, config_path, console=console)
    text = load_or_exit(read_text_file, tree, console=console)
    parsed = load_or_exit(parse_tree, text, source=tree, console=console)
    validated = load_or_exit(validate_tree, parsed, console=console)
    artifact = generate_artifact(
        validated,
        naming=NamingEngine(validated, stopwords=config.stopwords),
        test_prefix=config.test_prefix,
    )

    if keys:
        for assertion in artifact.assertion_units:
            typer.echo(assertion.key)
        return

    console.print(f"[bold]{escape(validated.unit)}[/bold]")
    console.print(
        f"Branches: {validated.count_branches()}, Scenarios: {validated.count_leaves()}, "
        f"Depth: {validated.get_depth()}"
    )
    console.print(build_scenarios_table(artifact))


__all__ = ["app"]
