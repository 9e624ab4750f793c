"""Dependency graph construction from relative import statements."""

import posixpath
import re
from typing import Optional

from ..logging_config import get_logger
from ..scanning.models import SourceFile
from .models import DependencyGraph

logger = get_logger(__name__)

DEFAULT_EXTENSION = ".js"

# A relative specifier: ".", "..", "./x", "../x/y"
_SPEC = r"""['"](\.\.?(?:/[^'"\n]*)?)['"]"""

_STATIC_PATTERNS = [
    # import x from './a', import { a, b } from '../b' (possibly multi-line)
    re.compile(r"\bimport\s+[^'\";]*?\bfrom\s*" + _SPEC, re.DOTALL),
    # import './side-effect'
    re.compile(r"\bimport\s*" + _SPEC),
    # export { a } from './a', export * from './b'
    re.compile(r"\bexport\s+(?:\*(?:\s+as\s+\w+)?|\{[^}]*\})\s*from\s*" + _SPEC, re.DOTALL),
    # require('./a')
    re.compile(r"\brequire\(\s*" + _SPEC + r"\s*\)"),
]

_DYNAMIC_PATTERN = re.compile(r"\bimport\(\s*" + _SPEC + r"\s*\)")


def extract_relative_imports(content: str) -> list[tuple[str, bool]]:
    """Return ``(specifier, is_dynamic)`` pairs for every relative import.

    Bare module names (``'react'``) are not relative and never returned.
    """
    found: list[tuple[str, bool]] = []
    seen: set[tuple[str, bool]] = set()
    for pattern in _STATIC_PATTERNS:
        for match in pattern.finditer(content):
            item = (match.group(1), False)
            if item not in seen:
                seen.add(item)
                found.append(item)
    for match in _DYNAMIC_PATTERN.finditer(content):
        item = (match.group(1), True)
        if item not in seen:
            seen.add(item)
            found.append(item)
    return found


def resolve_specifier(
    specifier: str,
    importer: str,
    known_paths: set[str],
    extensions: tuple[str, ...] = (DEFAULT_EXTENSION,),
) -> Optional[str]:
    """Resolve a relative specifier against the importing file's directory.

    When the resolved path carries no known extension the default one is
    appended first, then the other scanned extensions, then ``index`` files.
    Returns None when nothing matches a scanned file.
    """
    base = posixpath.dirname(importer)
    resolved = posixpath.normpath(posixpath.join(base, specifier))
    if resolved.startswith(".."):
        return None

    suffix = posixpath.splitext(resolved)[1].lower()
    if suffix in extensions:
        candidates = [resolved]
    else:
        ordered = [DEFAULT_EXTENSION] + [e for e in extensions if e != DEFAULT_EXTENSION]
        candidates = [resolved + ext for ext in ordered]
        candidates += [posixpath.join(resolved, "index" + ext) for ext in ordered]

    for candidate in candidates:
        if candidate in known_paths:
            return candidate
    return None


def build_dependency_graph(files: list[SourceFile]) -> DependencyGraph:
    """Build the forward/reverse import graph over ``files``.

    Unresolvable targets and self-imports are dropped without error.
    """
    all_paths = {f.path for f in files}
    forward: dict[str, list[str]] = {p: [] for p in all_paths}
    reverse: dict[str, list[str]] = {p: [] for p in all_paths}
    dynamic_edges: set[tuple[str, str]] = set()
    extensions = tuple(sorted({f.suffix for f in files if f.suffix} | {DEFAULT_EXTENSION}))
    edge_count = 0

    for sf in files:
        if not sf.content:
            continue
        for specifier, is_dynamic in extract_relative_imports(sf.content):
            target = resolve_specifier(specifier, sf.path, all_paths, extensions)
            if target is None or target == sf.path:
                continue
            if is_dynamic:
                dynamic_edges.add((sf.path, target))
            if target in forward[sf.path]:
                continue
            forward[sf.path].append(target)
            reverse[target].append(sf.path)
            edge_count += 1

    logger.debug("Dependency graph: %d files, %d edges", len(all_paths), edge_count)
    return DependencyGraph(
        forward=forward,
        reverse=reverse,
        all_nodes=all_paths,
        edge_count=edge_count,
        dynamic_edges=dynamic_edges,
    )
