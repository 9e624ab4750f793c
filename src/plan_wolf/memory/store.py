"""JSON file persistence for cross-run memory.

The memory file is read once when a run starts and written once when it
ends. Concurrent runs are not coordinated: the last writer wins.
"""

import json
import os
import tempfile
from pathlib import Path

from ..exceptions import MemoryCorruptionError
from ..logging_config import get_logger
from .models import Memory

logger = get_logger(__name__)


def _parse(path: Path, raw: str) -> Memory:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MemoryCorruptionError(path, e.msg, line=e.lineno) from e
    if not isinstance(data, dict):
        raise MemoryCorruptionError(path, f"top level is {type(data).__name__}, expected object")
    try:
        return Memory.from_dict(data)
    except (TypeError, ValueError, KeyError, AttributeError, OverflowError) as e:
        raise MemoryCorruptionError(path, str(e)) from e


class MemoryStore:
    """Loads and saves the memory file at ``path``."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Memory:
        """Return the stored memory, or a fresh default.

        Never raises: a missing, unreadable or malformed file all yield the
        default schema.
        """
        if not self.path.exists():
            logger.debug("No memory file at %s, starting fresh", self.path)
            return Memory()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Cannot read memory file %s: %s", self.path, e)
            return Memory()
        try:
            memory = _parse(self.path, raw)
        except MemoryCorruptionError as e:
            logger.warning("%s; starting with empty memory", e)
            return Memory()
        logger.debug(
            "Loaded memory: %d runs, %d errors, %d recommendations",
            len(memory.runs),
            len(memory.errors),
            len(memory.recommendations),
        )
        return memory

    def save(self, memory: Memory) -> bool:
        """Write ``memory`` through a temp file and ``os.replace``.

        Returns False (after logging) when the write fails; the run's report
        is still valid without it.
        """
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(memory.to_dict(), f, indent=2)
                f.write("\n")
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            logger.error("Failed to save memory to %s: %s", self.path, e)
            return False
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        return True


def prune(
    memory: Memory,
    max_runs: int = 50,
    max_errors: int = 200,
    max_followed: int = 60,
    max_open: int = 100,
) -> Memory:
    """Bound every list to its most recent tail, in place."""
    memory.runs = memory.runs[-max_runs:]
    memory.errors = memory.errors[-max_errors:]
    followed = [r for r in memory.recommendations if r.followed][-max_followed:]
    still_open = [r for r in memory.recommendations if not r.followed][-max_open:]
    keep = {id(r) for r in followed} | {id(r) for r in still_open}
    memory.recommendations = [r for r in memory.recommendations if id(r) in keep]
    return memory
