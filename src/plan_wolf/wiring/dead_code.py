"""Dead export and dead local function detection.

An export is dead when its file is never imported (statically or through
``import()``), its name never appears in any other file of the tree or the
auxiliary corpus (tests, scripts), and it does not look like a lifecycle
entry point. Local functions are dead when their name occurs only once in
their own file: the definition itself.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..graph.models import DependencyGraph
from ..logging_config import get_logger
from ..scanning.models import SourceFile

logger = get_logger(__name__)

LIFECYCLE_PREFIXES = (
    "render", "init", "handle", "get", "set", "on", "open", "close", "show",
    "hide", "toggle", "create", "update", "load", "save", "reset", "use",
    "setup", "mount",
)

_EXPORT_DECL_RE = re.compile(
    r"^\s*export\s+(?:async\s+)?(?:function\s*\*?|const|let|var|class)\s+([A-Za-z_$][\w$]*)",
    re.MULTILINE,
)
_EXPORT_LIST_RE = re.compile(r"^\s*export\s*\{([^}]*)\}", re.MULTILINE)
_LOCAL_FUNCTION_RE = re.compile(
    r"^\s*(?:async\s+)?function\s*\*?\s+([A-Za-z_$][\w$]*)\s*\("
    r"|^\s*(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*=\s*(?:async\s*)?"
    r"(?:\([^)]*\)|[A-Za-z_$][\w$]*)\s*=>",
    re.MULTILINE,
)


def is_whitelisted(name: str, prefixes: Iterable[str] = LIFECYCLE_PREFIXES) -> bool:
    """True when ``name`` is a prefix word followed by a capital, digit or ``_``.

    ``getUser`` and ``init`` match; ``online`` and ``settle`` do not.
    """
    for prefix in prefixes:
        if name == prefix:
            return True
        if name.startswith(prefix):
            nxt = name[len(prefix)]
            if nxt.isupper() or nxt.isdigit() or nxt == "_":
                return True
    return False


def exported_symbols(content: str) -> list[str]:
    """Names a module exports by declaration or ``export { ... }`` list.

    Re-exports (``export { a } from './a'``) belong to the other file and
    are not returned.
    """
    names = list(dict.fromkeys(_EXPORT_DECL_RE.findall(content)))
    for m in _EXPORT_LIST_RE.finditer(content):
        tail = content[m.end(): m.end() + 40].lstrip()
        if tail.startswith("from"):
            continue
        for item in m.group(1).split(","):
            local = item.strip().split(" as ")[0].strip()
            if local and local != "default" and local not in names:
                names.append(local)
    return names


def _word_count(name: str, content: str) -> int:
    return len(re.findall(r"(?<![\w$])" + re.escape(name) + r"(?![\w$])", content))


@dataclass(frozen=True)
class DeadSymbol:
    name: str
    file: str

    def describe(self) -> str:
        return f"{self.name} ({self.file})"


@dataclass
class DeadCodeResult:
    dead_exports: list[DeadSymbol] = field(default_factory=list)
    dead_local_functions: list[DeadSymbol] = field(default_factory=list)
    total_exports: int = 0

    @property
    def dead_ratio(self) -> float:
        if self.total_exports == 0:
            return 0.0
        return len(self.dead_exports) / self.total_exports

    def score(self, max_score: int) -> int:
        """Deduction proportional to the dead-export ratio, capped at half the points.

        Any dead export costs at least one point; dead local functions cost
        one more point per ten.
        """
        deduction = math.ceil(max_score * self.dead_ratio / 2)
        deduction += len(self.dead_local_functions) // 10
        return max(0, min(max_score, max_score - deduction))


def find_dead_code(
    files: list[SourceFile],
    graph: DependencyGraph,
    corpus: Optional[list[SourceFile]] = None,
    whitelist: Iterable[str] = LIFECYCLE_PREFIXES,
) -> DeadCodeResult:
    """Cross-reference exports against imports and textual usage."""
    prefixes = tuple(whitelist)
    imported = graph.imported_files
    others = list(files) + list(corpus or [])

    result = DeadCodeResult()

    for sf in files:
        if not sf.content or sf.is_markup:
            continue

        exports = exported_symbols(sf.content)
        result.total_exports += len(exports)

        if sf.path not in imported:
            for name in exports:
                if is_whitelisted(name, prefixes):
                    continue
                used_elsewhere = any(
                    o.path != sf.path and name in o.content for o in others
                )
                if not used_elsewhere:
                    result.dead_exports.append(DeadSymbol(name, sf.path))

        exported = set(exports)
        for m in _LOCAL_FUNCTION_RE.finditer(sf.content):
            name = m.group(1) or m.group(2)
            if name in exported or is_whitelisted(name, prefixes):
                continue
            if _word_count(name, sf.content) == 1:
                result.dead_local_functions.append(DeadSymbol(name, sf.path))

    logger.debug(
        "Dead code: %d/%d exports, %d local functions",
        len(result.dead_exports),
        result.total_exports,
        len(result.dead_local_functions),
    )
    return result
