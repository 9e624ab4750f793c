"""Main audit command."""

from pathlib import Path
from typing import Optional

import typer

from ..engine import run_audit
from ..exceptions import PlanWolfError
from ..logging_config import setup_logging
from ..report import render_json, render_report
from . import app
from ._common import console, resolve_config, resolve_root

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_ERROR = 2


@app.callback(invoke_without_command=True, no_args_is_help=False)
def main_callback(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root to audit (default: current directory)",
        file_okay=False,
        dir_okay=True,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Audit a JavaScript web app: build, tests, wiring, dead code, dependencies.

    [bold cyan]Examples:[/bold cyan]

      plan-wolf run

      plan-wolf run --fast --json

      plan-wolf history --last 10

      plan-wolf graph -C /path/to/app
    """
    ctx.ensure_object(dict)
    ctx.obj["path"] = path

    if version:
        from .. import __version__

        console.print(f"[bold cyan]Plan Wolf[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


@app.command()
def run(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root to audit",
        file_okay=False,
        dir_okay=True,
    ),
    fast: bool = typer.Option(
        False,
        "--fast",
        help="Skip slow phases (external performance auditor)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show every finding and debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only print the final score",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Run the full audit and update the memory file.

    Exits 0 when the score reaches the pass threshold, 1 when it does not,
    and 2 when the audit itself crashed.
    """
    logger = setup_logging(verbose=verbose, quiet=quiet or json_output)

    try:
        root = resolve_root(ctx, path)
        settings = resolve_config(root, config, fast=fast, verbose=verbose, quiet=quiet)
        result = run_audit(settings, root)

        if json_output:
            render_json(result)
        else:
            render_report(result, console, verbose=verbose, quiet=quiet)

        raise typer.Exit(EXIT_PASS if result.passed else EXIT_FAIL)

    except typer.Exit:
        raise

    except PlanWolfError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)

    except KeyboardInterrupt:
        logger.info("Audit interrupted by user")
        console.print("\n[yellow]Audit interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during audit")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)
