"""History CLI command -- list past audit runs from the memory file."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..exceptions import PlanWolfError
from ..memory import MemoryStore, RunRecord
from . import app
from ._common import console, resolve_config, resolve_root


def _sparkline(values: list) -> str:
    """Generate an ASCII sparkline from a list of numeric values."""
    if not values:
        return ""
    blocks = " ▁▂▃▄▅▆▇█"
    mn, mx = min(values), max(values)
    if mx == mn:
        return blocks[4] * len(values)
    return "".join(blocks[min(8, int((v - mn) / (mx - mn) * 8))] for v in values)


def _trend_direction(scores: list[int]) -> str:
    """Compare the first and second half of the window."""
    if len(scores) < 2:
        return "[dim]n/a[/dim]"
    half = len(scores) // 2
    first = sum(scores[:half]) / max(1, half)
    second = sum(scores[half:]) / max(1, len(scores) - half)
    delta = second - first
    if abs(delta) < 0.5:
        return "[dim]stable[/dim]"
    return "[green]improving[/green]" if delta > 0 else "[red]declining[/red]"


@app.command()
def history(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root holding the memory file",
        file_okay=False,
        dir_okay=True,
    ),
    last_n: int = typer.Option(
        10,
        "--last",
        "-n",
        help="Number of recent runs to show",
        min=1,
        max=1000,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Show recent audit runs with a score sparkline.

    [bold cyan]Examples:[/bold cyan]

      plan-wolf history

      plan-wolf history --last 5 --json
    """
    try:
        root = resolve_root(ctx, path)
        settings = resolve_config(root)
    except PlanWolfError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    memory = MemoryStore(root / settings.memory_file).load()
    runs = memory.runs[-last_n:]

    if not runs:
        console.print(
            "[yellow]No runs recorded yet.[/yellow] "
            "Run [bold]plan-wolf run[/bold] first to start the history."
        )
        raise typer.Exit(0)

    if json_output:
        print(json.dumps([r.to_dict() for r in runs], indent=2))
        return

    _output_rich(runs)


def _output_rich(runs: list[RunRecord]) -> None:
    """Human-readable Rich table output."""
    from rich.table import Table

    table = Table(title="Audit History", show_lines=False, pad_edge=True)
    table.add_column("Date", style="green")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Confidence")
    table.add_column("Mode", style="dim")
    table.add_column("Duration", justify="right")
    table.add_column("Bundle", justify="right")
    table.add_column("Commit", style="cyan")

    for run in runs:
        # Trim timestamp to date + time, no microseconds or timezone
        ts = run.date.replace("T", " ")
        if "." in ts:
            ts = ts[: ts.index(".")]
        if "+" in ts:
            ts = ts[: ts.index("+")]

        table.add_row(
            ts,
            str(run.score),
            run.confidence,
            run.mode,
            f"{run.duration:.1f}s",
            f"{run.bundle_size_kb}KB" if run.bundle_size_kb else "-",
            run.commit[:8] if run.commit else "-",
        )

    scores = [r.score for r in runs]
    console.print()
    console.print(table)
    console.print()
    console.print(
        f"  Score  {_sparkline(scores)}  {scores[0]} -> {scores[-1]}  {_trend_direction(scores)}"
    )
    console.print()
