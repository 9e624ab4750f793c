"""Exception hierarchy for Plan Wolf."""

from .audit import AuditError, MemoryCorruptionError, ToolError
from .base import PlanWolfError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError

__all__ = [
    "PlanWolfError",
    "AuditError",
    "ToolError",
    "MemoryCorruptionError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
