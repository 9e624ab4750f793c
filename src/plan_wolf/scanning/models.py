"""Data models for scanned source files."""

from dataclasses import dataclass
from pathlib import PurePosixPath


@dataclass(frozen=True)
class SourceFile:
    """A file read once per run. ``path`` is POSIX and relative to the project root."""

    path: str
    content: str

    @property
    def suffix(self) -> str:
        return PurePosixPath(self.path).suffix.lower()

    @property
    def stem(self) -> str:
        return PurePosixPath(self.path).stem

    @property
    def line_count(self) -> int:
        if not self.content:
            return 0
        return self.content.count("\n") + 1

    @property
    def is_markup(self) -> bool:
        return self.suffix in (".html", ".htm")
