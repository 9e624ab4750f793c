"""Graph CLI command -- static structure report without running any tool."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..exceptions import PlanWolfError
from ..graph import build_dependency_graph, find_cycles, strongly_connected_groups
from ..scanning import scan
from ..wiring import build_registry
from . import app
from ._common import console, resolve_config, resolve_root

MAX_LISTED = 20


@app.command()
def graph(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root to inspect",
        file_okay=False,
        dir_okay=True,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Show the import graph, its cycles, and handler wiring defects.

    Reads source files only: no subprocess is started and the memory file
    is left untouched.
    """
    try:
        root = resolve_root(ctx, path)
        settings = resolve_config(root)
    except PlanWolfError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    files = scan(root, settings.source_dir, settings.extensions, settings.excluded_dirs)
    dep_graph = build_dependency_graph(files)
    cycles = find_cycles(dep_graph)
    groups = strongly_connected_groups(dep_graph)
    registry = build_registry(files, global_object=settings.global_object)
    dangling = registry.dangling()
    duplicates = registry.duplicates()

    if json_output:
        data = {
            **dep_graph.summary(),
            "cycles": [list(c.path) for c in cycles],
            "cyclic_groups": [sorted(g) for g in groups],
            "handlers": registry.handler_count,
            "dangling": [d.describe("dangling") for d in dangling],
            "duplicates": [d.describe("duplicate") for d in duplicates],
            "orphans": registry.orphans(),
        }
        print(json.dumps(data, indent=2))
        return

    summary = Table(title="Dependency Graph", show_header=False, pad_edge=True)
    summary.add_column("Metric", style="bold")
    summary.add_column("Value", justify="right")
    summary.add_row("Files", str(len(dep_graph.all_nodes)))
    summary.add_row("Import edges", str(dep_graph.edge_count))
    summary.add_row("Dynamic imports", str(len(dep_graph.dynamic_edges)))
    summary.add_row("Cycles", str(len(cycles)))
    summary.add_row("Cyclic groups", str(len(groups)))
    summary.add_row("Global handlers", str(registry.handler_count))

    console.print()
    console.print(summary)
    console.print()

    _print_section("Import cycles", "red", [c.describe() for c in cycles])
    _print_section("Dangling handlers", "red", [d.describe("dangling") for d in dangling])
    _print_section("Duplicate handlers", "yellow", [d.describe("duplicate") for d in duplicates])
    _print_section("Orphan handlers", "dim", registry.orphans())

    if not (cycles or dangling or duplicates):
        console.print("[green]No cycles and no handler defects.[/green]")
        console.print()


def _print_section(title: str, color: str, lines: list[str]) -> None:
    if not lines:
        return
    console.print(f"[bold {color}]{title}[/bold {color}] ({len(lines)})")
    for line in lines[:MAX_LISTED]:
        console.print(f"  {line}", highlight=False)
    if len(lines) > MAX_LISTED:
        console.print(f"  [dim]... and {len(lines) - MAX_LISTED} more[/dim]")
    console.print()
