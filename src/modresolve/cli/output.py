"""Rich output formatting helpers for the modresolve CLI.

Provides consistent terminal output for resolution plans and version
checks. Reused local downloads are shown in green, fresh downloads in
yellow.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from modresolve.core.dependency import Dependency

console = Console()


def _candidate_label(dep: Dependency) -> str:
    primary = dep.primary
    if primary is None or primary.value is None:
        return "-"
    value = primary.value
    name = value.logical_file_name or value.file_name or primary.key or "?"
    if value.file_version:
        return f"{name} {value.file_version}"
    return name


def print_dependency_plan(dependencies: Sequence[Dependency]) -> None:
    """Print the gathered dependencies as a table.

    Args:
        dependencies: Gatherer output, in installation-plan order.
    """
    if not dependencies:
        console.print(
            Panel("[bold green]Nothing to install[/bold green]", title="Dependency Plan")
        )
        console.print("[dim]All requirements are satisfied or could not be resolved.[/dim]")
        return

    table = Table(title="Dependency Plan", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Requirement", style="bold")
    table.add_column("Candidate")
    table.add_column("Source")

    for idx, dep in enumerate(dependencies, start=1):
        if dep.download is not None:
            source = f"[green]download {dep.download}[/green]"
        else:
            source = "[yellow]remote[/yellow]"
        table.add_row(str(idx), dep.reference.describe(), _candidate_label(dep), source)

    console.print(table)
    reused = sum(1 for dep in dependencies if dep.download is not None)
    console.print(
        f"Total: {len(dependencies)} | Reuse local: {reused} | "
        f"Download: {len(dependencies) - reused}"
    )


def print_version_check(version_match: str, canonical: str | None, fuzzy: bool) -> None:
    """Print the classification of a version match string."""
    console.print(f"  Version match:   [bold]{version_match}[/bold]")
    console.print(f"  Canonical range: {canonical if canonical is not None else '[red]invalid[/red]'}")
    if fuzzy:
        console.print("  Fuzzy:           [yellow]yes[/yellow]")
    else:
        console.print("  Fuzzy:           [green]no[/green]")


def print_json(data: Any) -> None:
    """Print data as plain JSON on stdout."""
    click.echo(json.dumps(data, indent=2, default=str))
