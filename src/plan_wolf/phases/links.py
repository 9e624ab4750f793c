"""Phase 8: dangling and duplicate handlers, dead local links."""

import posixpath
import re

from .models import AuditContext, Phase

NAME = "Button & Link Audit"
MAX_SCORE = 10
MAX_LINK_PENALTY = 3

_HREF_RE = re.compile(r"""\bhref\s*=\s*["']([^"'#?]+)[^"']*["']""")
_EXTERNAL_PREFIXES = ("http:", "https:", "//", "mailto:", "tel:", "javascript:", "data:")
_LINKABLE_SUFFIXES = (".html", ".htm", ".css", ".js", ".json", ".xml", ".txt", ".pdf", ".md")


def dead_links(ctx: AuditContext) -> list[tuple[str, str]]:
    """Local links in markup files whose target file does not exist.

    Only targets with a file extension are checked, so client-side routes
    like ``/profile`` are never reported. Root-relative links are looked up
    in the project root, ``public/`` and the source directory.
    """
    roots = ["", "public", ctx.config.source_dir]
    broken = []
    for sf in ctx.files:
        if not sf.is_markup:
            continue
        for m in _HREF_RE.finditer(sf.content):
            target = m.group(1).strip()
            if not target or "${" in target or "{{" in target:
                continue
            if target.lower().startswith(_EXTERNAL_PREFIXES):
                continue
            if not target.lower().endswith(_LINKABLE_SUFFIXES):
                continue
            if target.startswith("/"):
                candidates = [posixpath.join(r, target.lstrip("/")) for r in roots]
            else:
                candidates = [posixpath.normpath(posixpath.join(posixpath.dirname(sf.path), target))]
            if not any(ctx.path(c).exists() for c in candidates):
                broken.append((sf.path, target))
    return broken


def button_link_audit(ctx: AuditContext) -> Phase:
    registry = ctx.registry
    findings: list[str] = []
    details: list[str] = []

    dangling = registry.dangling()
    duplicates = registry.duplicates()
    findings.append(f"{len(dangling)} dangling handler(s), {len(duplicates)} duplicate handler(s)")
    details.extend(d.describe("dangling") for d in dangling)
    details.extend(d.describe("duplicate") for d in duplicates)

    score = MAX_SCORE - len(dangling) - 2 * len(duplicates)

    links = dead_links(ctx)
    if links:
        findings.append(f"{len(links)} dead link(s)")
        for source, target in links:
            details.append(f"Dead link: {source} -> {target}")
        score -= min(len(links), MAX_LINK_PENALTY)
    else:
        findings.append("0 dead links")

    return Phase(
        NAME, score, MAX_SCORE, findings, details,
        metrics={"dangling": len(dangling), "duplicates": len(duplicates)},
    )
