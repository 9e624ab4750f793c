"""Audit-time exceptions: external tools and persisted state."""

from pathlib import Path
from typing import Optional

from .base import PlanWolfError


class AuditError(PlanWolfError):
    """Base class for errors raised while auditing a project."""
    pass


class ToolError(AuditError):
    """Raised when an external tool cannot be started at all."""

    def __init__(self, command: str, reason: str):
        super().__init__(
            f"Cannot run external tool: {command}",
            details={"command": command, "reason": reason},
        )
        self.command = command
        self.reason = reason


class MemoryCorruptionError(AuditError):
    """Raised when the memory file exists but does not hold a usable record."""

    def __init__(self, path: Path, reason: str, line: Optional[int] = None):
        details = {"path": str(path), "reason": reason}
        if line is not None:
            details["line"] = str(line)
        super().__init__(f"Unreadable memory file: {path}", details=details)
        self.path = path
        self.reason = reason
