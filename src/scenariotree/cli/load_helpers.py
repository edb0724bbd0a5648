from __future__ import annotations

"""Shared helpers for loading inputs with CLI-friendly errors."""

from typing import Any, Callable, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from scenariotree.core.errors import ScenarioTreeError
from scenariotree.io.loaders import LoaderError

T = TypeVar("T")


def load_or_exit(
    loader_fn: Callable[..., T],
    *args: Any,
    console: Console,
    verbose_errors: bool = False,
    **kwargs: Any,
) -> T:
    try:
        return loader_fn(*args, **kwargs)
    except LoaderError as err:
        if verbose_errors and err.cause:
            console.print(f"[red]Failed to load:[/red] {escape(err.message)}\n{escape(repr(err.cause))}", highlight=False)
        else:
            console.print(f"[red]Failed to load:[/red] {escape(str(err))}", highlight=False)
        raise typer.Exit(code=1)
    except ScenarioTreeError as err:
        console.print(f"[red]{type(err).__name__}:[/red] {escape(str(err))}", highlight=False)
        raise typer.Exit(code=1)


__all__ = ["load_or_exit"]
