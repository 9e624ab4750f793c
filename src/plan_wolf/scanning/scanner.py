"""Source tree walker.

Reads every matching file exactly once. Unreadable files come back with
empty content so a single bad file never aborts the scan.
"""

import os
from pathlib import Path
from typing import Iterable, Optional

from ..logging_config import get_logger
from .models import SourceFile

logger = get_logger(__name__)

DEFAULT_EXTENSIONS = (".js", ".mjs", ".cjs", ".jsx", ".ts", ".tsx", ".html")
DEFAULT_EXCLUDED_DIRS = ("node_modules", "dist", "build", "coverage")


def _read_text(filepath: Path) -> str:
    try:
        with open(filepath, encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        logger.debug("Cannot read %s: %s", filepath, e)
        return ""


def _walk(
    directory: Path,
    extensions: Iterable[str],
    excluded_dirs: Iterable[str],
) -> Iterable[Path]:
    excluded = set(excluded_dirs)
    suffixes = tuple(e.lower() for e in extensions)

    def _on_error(err: OSError) -> None:
        logger.debug("Cannot list %s: %s", err.filename, err)

    for dirpath, dirnames, filenames in os.walk(directory, onerror=_on_error):
        # Prune in place so os.walk never descends into excluded trees
        dirnames[:] = sorted(d for d in dirnames if not d.startswith(".") and d not in excluded)
        for name in sorted(filenames):
            if name.lower().endswith(suffixes):
                yield Path(dirpath) / name


def scan(
    root: Path,
    source_dir: str = "",
    extensions: Optional[Iterable[str]] = None,
    excluded_dirs: Optional[Iterable[str]] = None,
) -> list[SourceFile]:
    """Walk ``root / source_dir`` and return every matching file.

    Paths in the result are relative to ``root`` so they line up with
    ``git diff --name-only`` output. A missing directory yields an empty list.
    """
    root = Path(root).resolve()
    start = root / source_dir if source_dir else root
    if not start.is_dir():
        logger.info("Source directory %s does not exist", start)
        return []

    files = []
    for filepath in _walk(
        start,
        extensions or DEFAULT_EXTENSIONS,
        excluded_dirs if excluded_dirs is not None else DEFAULT_EXCLUDED_DIRS,
    ):
        rel = filepath.relative_to(root).as_posix()
        files.append(SourceFile(path=rel, content=_read_text(filepath)))

    logger.debug("Scanned %d files under %s", len(files), start)
    return files


def scan_text_corpus(
    root: Path,
    dirs: Iterable[str],
    extensions: Optional[Iterable[str]] = None,
    excluded_dirs: Optional[Iterable[str]] = None,
) -> list[SourceFile]:
    """Read auxiliary directories (tests, scripts) used only for textual lookups."""
    corpus: list[SourceFile] = []
    for d in dirs:
        corpus.extend(scan(root, d, extensions, excluded_dirs))
    return corpus
