"""Changed-file impact analysis over the reverse dependency graph.

``analyze_impact`` finds every file that transitively imports a changed
file; ``deep_scan`` looks inside one changed file for cheap smells that
the graph cannot see. Neither ever fails the run; they only feed a
bounded score penalty.
"""

import re
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from ..logging_config import get_logger
from ..scanning.models import SourceFile
from ..wiring.handlers import onclick_references
from .models import DependencyGraph

logger = get_logger(__name__)

RISK_CRITICAL = "critical"
RISK_HIGH = "high"
RISK_MEDIUM = "medium"
RISK_LOW = "low"

_MARKER_RE = re.compile(r"\b(?:TODO|FIXME|HACK|XXX)\b")
_STRING_RE = re.compile(r"""(['"])((?:\\.|(?!\1)[^\\\n])*)\1""")
_TRANSLATE_CALL_RE = re.compile(r"\bt\(\s*$")
_EMPTY_FUNCTION_RE = re.compile(
    r"(?:\bfunction\b\s*\*?\s*[\w$]*\s*\([^)]*\)|=>)\s*\{\s*\}"
)

# Path fragments that name a user-facing area of the app
_FEATURE_AREAS = (
    ("modals/", "Modal"),
    ("views/", "View"),
    ("services/", "Service"),
)


@dataclass
class ImpactResult:
    changed: list[str]
    affected: set[str]
    risk_level: str
    touched_critical: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.changed)


def analyze_impact(
    changed_files: Iterable[str],
    graph: DependencyGraph,
    critical_files: Iterable[str] = (),
    high_threshold: int = 20,
    medium_threshold: int = 5,
) -> ImpactResult:
    """Compute the affected-file closure of ``changed_files``.

    Breadth-first over the reverse graph, so every file that imports a
    changed file (directly or through other files) is affected. Changed
    files are always part of the affected set, even when the graph does
    not know them.
    """
    changed = sorted(set(changed_files))
    critical = set(critical_files)

    affected: set[str] = set()
    queue: deque = deque(changed)
    while queue:
        node = queue.popleft()
        if node in affected:
            continue
        affected.add(node)
        for importer in graph.importers_of(node):
            if importer not in affected:
                queue.append(importer)

    touched_critical = [f for f in changed if f in critical]
    if touched_critical:
        risk = RISK_CRITICAL
    elif len(affected) > high_threshold:
        risk = RISK_HIGH
    elif len(affected) > medium_threshold:
        risk = RISK_MEDIUM
    else:
        risk = RISK_LOW

    logger.debug(
        "Impact: %d changed, %d affected, risk=%s", len(changed), len(affected), risk
    )
    return ImpactResult(
        changed=changed,
        affected=affected,
        risk_level=risk,
        touched_critical=touched_critical,
    )


def impacted_features(affected: Iterable[str], critical_files: Iterable[str] = ()) -> list[str]:
    """Human labels for the app areas an affected set touches."""
    critical = set(critical_files)
    labels: set[str] = set()
    for path in affected:
        stem = path.rsplit("/", 1)[-1].split(".", 1)[0]
        for fragment, label in _FEATURE_AREAS:
            if fragment in path:
                labels.add(f"{label}: {stem}")
        if "stores/" in path:
            labels.add("State Management")
        if "i18n/" in path:
            labels.add("Internationalization")
        if path in critical:
            labels.add(f"{path} (CRITICAL)")
    return sorted(labels)


@dataclass
class DeepScanResult:
    """Heuristic smells found inside a single changed file."""

    path: str
    markers: int = 0
    dangling_onclick: list[str] = field(default_factory=list)
    long_strings: int = 0
    line_count: int = 0
    empty_functions: int = 0
    oversized: bool = False

    def penalty(self, max_penalty: int = 3) -> int:
        """One point per smell category present, bounded by ``max_penalty``."""
        points = 0
        if self.markers >= 3:
            points += 1
        if self.dangling_onclick:
            points += 1
        if self.long_strings >= 3:
            points += 1
        if self.oversized:
            points += 1
        if self.empty_functions:
            points += 1
        return min(points, max_penalty)

    def describe(self) -> list[str]:
        notes = []
        if self.markers:
            notes.append(f"{self.path}: {self.markers} TODO/FIXME marker(s)")
        if self.dangling_onclick:
            names = ", ".join(sorted(set(self.dangling_onclick)))
            notes.append(f"{self.path}: dangling onclick handler(s) {names}")
        if self.long_strings:
            notes.append(f"{self.path}: {self.long_strings} long untranslated string(s)")
        if self.oversized:
            notes.append(f"{self.path}: {self.line_count} lines, consider splitting")
        if self.empty_functions:
            notes.append(f"{self.path}: {self.empty_functions} empty function bod(ies)")
        return notes


def _count_untranslated(content: str, min_length: int) -> int:
    count = 0
    for line in content.split("\n"):
        stripped = line.lstrip()
        if stripped.startswith(("import ", "//", "*")) or "require(" in line:
            continue
        for m in _STRING_RE.finditer(line):
            text = m.group(2)
            if len(text) < min_length or " " not in text:
                continue
            if _TRANSLATE_CALL_RE.search(line[: m.start()]):
                continue
            count += 1
    return count


def deep_scan(
    source_file: SourceFile,
    defined_handlers: Iterable[str] = (),
    long_string_length: int = 40,
    long_file_lines: int = 800,
) -> DeepScanResult:
    """Scan one file for markers, local dangling onclicks and other smells."""
    content = source_file.content
    defined = set(defined_handlers)
    line_count = source_file.line_count

    return DeepScanResult(
        path=source_file.path,
        markers=len(_MARKER_RE.findall(content)),
        dangling_onclick=[n for _, n in onclick_references(content) if n not in defined],
        long_strings=_count_untranslated(content, long_string_length),
        line_count=line_count,
        empty_functions=len(_EMPTY_FUNCTION_RE.findall(content)),
        oversized=line_count > long_file_lines,
    )
