"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import AuditConfig, load_config
from ..exceptions import InvalidPathError

console = Console()


def resolve_root(ctx: typer.Context, path: Optional[Path]) -> Path:
    """The project root: the command's own --path, else the group's, else cwd."""
    if path is None:
        obj = ctx.obj or {}
        path = obj.get("path") or Path.cwd()
    root = Path(path).resolve()
    if not root.is_dir():
        raise InvalidPathError(root, "not a directory")
    return root


def resolve_config(
    root: Path,
    config: Optional[Path] = None,
    fast: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> AuditConfig:
    """Build the audit config from CLI options."""
    overrides = {}
    if fast:
        overrides["fast"] = True
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(root, config_file=config, **overrides)
