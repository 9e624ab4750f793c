"""Rich terminal report for a finished audit."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from ..engine import AuditResult
    from ..memory.models import RecommendationRecord

MAX_RECOMMENDATIONS = 10


def phase_icon(percent: int) -> str:
    if percent >= 90:
        return "[green]++[/green]"
    elif percent >= 60:
        return "[cyan]OK[/cyan]"
    elif percent >= 30:
        return "[yellow]!![/yellow]"
    else:
        return "[red bold]XX[/red bold]"


def _score_style(score: int) -> str:
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    return "red"


def _trend_markup(trend: str) -> str:
    if trend.startswith("+"):
        return f"[green]{trend}[/green]"
    if trend.startswith("-"):
        return f"[red]{trend}[/red]"
    return f"[dim]{trend}[/dim]"


def _phase_table(result: "AuditResult") -> Table:
    table = Table(title="Audit Phases", show_lines=False, pad_edge=True)
    table.add_column("", justify="center")
    table.add_column("Phase", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("%", justify="right")

    for phase in result.phases:
        if not phase.scored:
            table.add_row("[dim]--[/dim]", phase.name, "[dim]not scored[/dim]", "")
            continue
        table.add_row(
            phase_icon(phase.percent),
            phase.name,
            f"{phase.score}/{phase.max_score}",
            f"{phase.percent}%",
        )
    return table


def _print_recommendations(
    console: Console, title: str, color: str, recs: list["RecommendationRecord"], verbose: bool
) -> None:
    if not recs:
        return
    console.print(f"[bold {color}]{title}[/bold {color}] ({len(recs)})")
    shown = recs if verbose else recs[:MAX_RECOMMENDATIONS]
    for rec in shown:
        count = f" [dim]x{rec.occurrences}[/dim]" if rec.occurrences > 1 else ""
        console.print(f"  [{color}]>[/{color}] [bold]{rec.title}[/bold]{count}")
        if rec.explain:
            console.print(f"    [dim]{rec.explain}[/dim]", highlight=False)
        if rec.action:
            console.print(f"    Fix: {rec.action}", highlight=False)
        if verbose and rec.impact:
            console.print(f"    [dim]Impact: {rec.impact}[/dim]", highlight=False)
    hidden = len(recs) - len(shown)
    if hidden > 0:
        console.print(f"  [dim]... and {hidden} more (use --verbose)[/dim]")
    console.print()


def render_report(
    result: "AuditResult",
    console: Optional[Console] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """Print the phase table, findings, recommendations and the final score."""
    console = console or Console()

    if not quiet:
        console.print()
        console.print(_phase_table(result))
        console.print()

        for phase in result.phases:
            lines = phase.findings if verbose else [f for f in phase.findings if "FAIL" in f]
            if not lines:
                continue
            console.print(f"[bold]{phase.name}[/bold]")
            for line in lines:
                console.print(f"  [dim]-[/dim] {line}", highlight=False)
        console.print()

        _print_recommendations(console, "Urgent", "red", result.high_priority, verbose)
        _print_recommendations(console, "Improvements", "yellow", result.medium_priority, verbose)

        if result.weak_phases:
            console.print(f"[yellow]Weak phases:[/yellow] {', '.join(result.weak_phases)}")
        if result.strong_phases:
            console.print(f"[green]Strong phases:[/green] {', '.join(result.strong_phases)}")
        if result.followed:
            console.print(f"[green]{result.followed} recommendation(s) followed since last run[/green]")
        if result.new_errors:
            console.print(f"[red]{len(result.new_errors)} new error(s) recorded[/red]")
        if not result.memory_saved:
            console.print("[yellow]Memory file could not be written; history not updated[/yellow]")

    style = _score_style(result.score)
    verdict = "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]"
    console.print(
        Panel(
            f"[bold {style}]{result.score}/100[/bold {style}]  {verdict}\n"
            f"Trend: {_trend_markup(result.trend)}  "
            f"Confidence: {result.confidence}  "
            f"Mode: {result.mode}  "
            f"Duration: {result.duration:.1f}s",
            title="[bold cyan]Plan Wolf[/bold cyan]",
            expand=False,
        )
    )


def format_json(result: "AuditResult") -> str:
    return json.dumps(result.to_dict(), indent=2)


def render_json(result: "AuditResult") -> None:
    """Machine-readable JSON on stdout."""
    print(format_json(result))
