"""External tool invocation.

Linters, test runners, bundlers and the performance auditor are black
boxes: only the exit status and combined output are kept. A timeout, a
missing binary or a non-zero exit all come back as ``ok=False`` and the
caller degrades its own phase; nothing here raises.
"""

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from ..exceptions import ToolError
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    command: str
    ok: bool
    returncode: int = -1
    output: str = ""
    timed_out: bool = False
    missing: bool = False
    skipped: bool = False

    @property
    def failure_reason(self) -> str:
        if self.skipped:
            return "not configured"
        if self.missing:
            return "tool not installed"
        if self.timed_out:
            return "timed out"
        if not self.ok:
            return f"exit code {self.returncode}"
        return ""


def _spawn(argv: list[str], cwd: Path, timeout: int) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            argv,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (FileNotFoundError, PermissionError) as e:
        raise ToolError(argv[0], str(e)) from e


def run_command(command: str, cwd: Path, timeout: int = 120) -> CommandResult:
    """Run ``command`` (split with shlex, no shell) and capture its output."""
    if not command.strip():
        return CommandResult(command=command, ok=False, skipped=True)

    try:
        argv = shlex.split(command)
    except ValueError as e:
        logger.warning("Cannot parse command %r: %s", command, e)
        return CommandResult(command=command, ok=False, missing=True)

    logger.debug("Running %s (timeout %ds)", command, timeout)
    try:
        proc = _spawn(argv, cwd, timeout)
    except ToolError as e:
        logger.info("%s", e)
        return CommandResult(command=command, ok=False, missing=True)
    except subprocess.TimeoutExpired as e:
        logger.warning("%s timed out after %ds", command, timeout)
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return CommandResult(command=command, ok=False, output=partial, timed_out=True)

    output = (proc.stdout or "") + (proc.stderr or "")
    if proc.returncode != 0:
        logger.debug("%s exited %d", command, proc.returncode)
    return CommandResult(
        command=command,
        ok=proc.returncode == 0,
        returncode=proc.returncode,
        output=output,
    )


class CommandRunner:
    """Runs commands from a fixed project root; phases receive one through the context."""

    def __init__(self, cwd: Path):
        self.cwd = Path(cwd)

    def run(self, command: str, timeout: int = 120) -> CommandResult:
        return run_command(command, self.cwd, timeout)
