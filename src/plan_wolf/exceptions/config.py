"""Errors in what the user asked for: the project path or the settings."""

from pathlib import Path
from typing import Any

from .base import PlanWolfError


class ConfigurationError(PlanWolfError):
    """A config file, environment variable or CLI option cannot be used."""

    pass


class InvalidPathError(ConfigurationError):
    """The project root passed with ``--path`` cannot be audited."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot audit {path}: {reason}", details={"path": str(path)})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """A setting parsed fine but its value is out of range."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(f"Setting {key} = {value!r} {reason}", details={"key": key})
        self.key = key
        self.value = value
        self.reason = reason
