"""CLI entry point: registers all subcommands."""

import typer

from ._common import console

app = typer.Typer(
    name="plan-wolf",
    help="Plan Wolf - Continuous quality audit for JavaScript web apps",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .run import main_callback as _main_callback  # noqa: F401, E402
from .run import run as _run  # noqa: F401, E402
from .history import history as _history  # noqa: F401, E402
from .graph import graph as _graph  # noqa: F401, E402


def main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "console", "main"]
