"""Global event-handler registry.

Collects handler *definitions* (``window.name = ...``) and *references*
(``onclick="name(...)"`` attributes and plain calls) across the tree, then
derives the three wiring defects:

- dangling: an inline attribute calls a name nothing defines
- duplicate: a name is assigned in two or more files (last loaded wins)
- orphan: a name is defined but never referenced anywhere
"""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..logging_config import get_logger
from ..scanning.models import SourceFile

logger = get_logger(__name__)

ONCLICK = "onclick"
DIRECT_CALL = "direct_call"

# Browser properties that are assigned on the global object but are not handlers
NON_HANDLER_PROPERTIES = frozenset(
    {
        "addEventListener",
        "removeEventListener",
        "onerror",
        "onload",
        "onunhandledrejection",
        "onresize",
        "onpopstate",
        "onhashchange",
        "onbeforeunload",
        "location",
        "name",
        "status",
    }
)

# Keywords and built-in globals that look like calls but never reference a handler
CALL_BLACKLIST = frozenset(
    {
        "alert", "confirm", "prompt", "open", "close", "history", "location",
        "navigator", "console", "event", "this", "if", "for", "while", "switch",
        "return", "new", "void", "typeof", "delete", "try", "catch", "throw",
        "let", "const", "var", "function", "document", "window", "globalThis",
        "setTimeout", "setInterval", "clearTimeout", "clearInterval",
        "requestAnimationFrame", "fetch", "parseInt", "parseFloat",
        "encodeURIComponent", "decodeURIComponent", "JSON", "Array", "Object",
        "Math", "Date", "String", "Number", "Boolean", "RegExp", "Error",
        "Promise", "Map", "Set", "Symbol", "super", "import", "require",
        "async", "await", "do", "else", "in", "of", "with", "yield", "class",
        "export", "default", "case", "instanceof", "t",
    }
)

_COMMENT_LINE = re.compile(r"^\s*(?://|\*|/\*)")
_ONCLICK_RE = re.compile(
    r"""\bon[a-z]+\s*=\s*["']\s*(?:return\s+)?(?:window\.)?([A-Za-z_$][\w$]*)\s*\("""
)
_CALL_RE = re.compile(r"(?<![\w.$])([A-Za-z_$][\w$]*)\s*\(")
_FUNCTION_DECL_RE = re.compile(r"\bfunction\s*\*?\s+([A-Za-z_$][\w$]*)\s*\(")
_EXPORT_NAMED_RE = re.compile(
    r"\bexport\s+(?:default\s+)?(?:async\s+)?(?:function\s*\*?|const|let|var|class)\s+([A-Za-z_$][\w$]*)"
)
_EXPORT_LIST_RE = re.compile(r"\bexport\s*\{([^}]*)\}")


def _definition_re(global_object: str) -> re.Pattern:
    objects = sorted({global_object, "globalThis"})
    alternation = "|".join(re.escape(o) for o in objects)
    return re.compile(r"(?<![\w.$])(?:" + alternation + r")\.([A-Za-z_$][\w$]*)\s*=(?![=>])")


def _global_use_re(global_object: str) -> re.Pattern:
    objects = sorted({global_object, "globalThis"})
    alternation = "|".join(re.escape(o) for o in objects)
    return re.compile(r"(?<![\w.$])(?:" + alternation + r")\.([A-Za-z_$][\w$]*)\b(?!\s*=(?![=>]))")


def onclick_references(content: str) -> list[tuple[int, str]]:
    """Return ``(line_number, name)`` for every inline attribute call."""
    refs = []
    for lineno, line in enumerate(content.split("\n"), start=1):
        if _COMMENT_LINE.match(line):
            continue
        for m in _ONCLICK_RE.finditer(line):
            if m.group(1) not in CALL_BLACKLIST:
                refs.append((lineno, m.group(1)))
    return refs


def exported_names(content: str) -> set[str]:
    """Names exported by a module, via declarations or ``export { ... }`` lists."""
    names = set(_EXPORT_NAMED_RE.findall(content))
    for group in _EXPORT_LIST_RE.findall(content):
        for item in group.split(","):
            # "a as b" exports the local name a
            local = item.strip().split(" as ")[0].strip()
            if local:
                names.add(local)
    return names


@dataclass(frozen=True)
class HandlerReference:
    name: str
    referencing_file: str
    kind: str  # ONCLICK | DIRECT_CALL


@dataclass(frozen=True)
class HandlerDefect:
    """A dangling or duplicate handler and the files involved."""

    name: str
    files: tuple[str, ...]

    def describe(self, kind: str) -> str:
        if kind == "duplicate":
            return f"Duplicate handler {self.name} defined in: {', '.join(self.files)}"
        return f"Dangling handler {self.name}() referenced in: {', '.join(self.files)}"


@dataclass
class HandlerRegistry:
    definitions: dict[str, list[str]] = field(default_factory=dict)
    references: dict[str, list[HandlerReference]] = field(default_factory=dict)
    # (name, file) pairs assigned behind an ``if (!window.name)`` guard
    guarded: set[tuple[str, str]] = field(default_factory=set)
    # Non-assignment uses like ``window.name?.()`` or ``typeof window.name``
    global_uses: dict[str, set[str]] = field(default_factory=dict)
    exports: set[str] = field(default_factory=set)

    @property
    def handler_count(self) -> int:
        return len(self.definitions)

    def references_of(self, name: str, kind: Optional[str] = None) -> list[HandlerReference]:
        refs = self.references.get(name, [])
        if kind is None:
            return refs
        return [r for r in refs if r.kind == kind]

    def dangling(self) -> list[HandlerDefect]:
        """Inline attribute calls whose name has no definition."""
        result = []
        for name in sorted(self.references):
            if self.definitions.get(name):
                continue
            files = sorted({r.referencing_file for r in self.references_of(name, ONCLICK)})
            if files:
                result.append(HandlerDefect(name=name, files=tuple(files)))
        return result

    def duplicates(self) -> list[HandlerDefect]:
        """Names assigned unguarded in two or more distinct files."""
        result = []
        for name in sorted(self.definitions):
            files = self.definitions[name]
            if len(files) < 2:
                continue
            unguarded = [f for f in files if (name, f) not in self.guarded]
            if len(unguarded) >= 2:
                result.append(HandlerDefect(name=name, files=tuple(sorted(files))))
        return result

    def orphans(self) -> list[str]:
        """Defined names with no reference of any kind."""
        return sorted(
            name
            for name in self.definitions
            if not self.references.get(name)
            and not self.global_uses.get(name)
            and name not in self.exports
        )

    def open_without_close(self) -> list[str]:
        """Modal names that have an open/show handler but no close handler."""
        closes = {n[len("close"):] for n in self.definitions if n.startswith("close")}
        missing = []
        for name in sorted(self.definitions):
            for prefix in ("open", "show"):
                if name.startswith(prefix):
                    subject = name[len(prefix):]
                    if len(subject) > 2 and subject not in closes:
                        missing.append(subject)
                    break
        return sorted(set(missing))


def build_registry(
    files: Iterable[SourceFile],
    global_object: str = "window",
    guard_lookback: int = 200,
) -> HandlerRegistry:
    """Scan every file once and collect handler definitions and references."""
    definition_re = _definition_re(global_object)
    global_use_re = _global_use_re(global_object)

    definitions: dict[str, list[str]] = defaultdict(list)
    references: dict[str, list[HandlerReference]] = defaultdict(list)
    global_uses: dict[str, set[str]] = defaultdict(set)
    guarded: set[tuple[str, str]] = set()
    exports: set[str] = set()

    for sf in files:
        if not sf.content:
            continue
        lines = sf.content.split("\n")
        exports |= exported_names(sf.content)

        for i, line in enumerate(lines):
            if _COMMENT_LINE.match(line):
                continue

            for m in definition_re.finditer(line):
                name = m.group(1)
                if name.startswith("_") or name in NON_HANDLER_PROPERTIES:
                    continue
                if sf.path not in definitions[name]:
                    definitions[name].append(sf.path)
                window = " ".join(lines[max(0, i - guard_lookback):i])
                guard = re.compile(
                    r"if\s*\(\s*!\s*(?:" + re.escape(global_object) + r"|globalThis)\." + re.escape(name) + r"\s*\)"
                )
                if guard.search(window):
                    guarded.add((name, sf.path))

            for m in global_use_re.finditer(line):
                global_uses[m.group(1)].add(sf.path)

            for m in _ONCLICK_RE.finditer(line):
                name = m.group(1)
                if name not in CALL_BLACKLIST:
                    references[name].append(HandlerReference(name, sf.path, ONCLICK))

            # Strip inline attributes so their calls are not counted twice
            code = _ONCLICK_RE.sub("", line)
            for m in _CALL_RE.finditer(code):
                name = m.group(1)
                if name in CALL_BLACKLIST:
                    continue
                if re.search(r"\bfunction\s*\*?\s*$", code[: m.start()]):
                    continue
                references[name].append(HandlerReference(name, sf.path, DIRECT_CALL))

        # Plain script files loaded by markup declare their functions globally
        if sf.is_markup:
            for name in _FUNCTION_DECL_RE.findall(sf.content):
                if sf.path not in definitions[name]:
                    definitions[name].append(sf.path)

    registry = HandlerRegistry(
        definitions=dict(definitions),
        references=dict(references),
        guarded=guarded,
        global_uses=dict(global_uses),
        exports=exports,
    )
    logger.debug(
        "Handler registry: %d definitions, %d referenced names",
        len(registry.definitions),
        len(registry.references),
    )
    return registry
