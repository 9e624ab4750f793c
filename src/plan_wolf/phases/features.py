"""Phase 5: feature checklist versus the code that actually exists."""

import re

from .models import AuditContext, Phase

NAME = "Feature Inventory"
MAX_SCORE = 15

_CHECKED_RE = re.compile(r"^\s*[-*]\s+\[[xX]\]\s+(.+)")
_UNCHECKED_RE = re.compile(r"^\s*[-*]\s+\[ \]\s+(.+)")


def parse_checklist(content: str) -> tuple[list[str], list[str]]:
    """Return ``(checked, unchecked)`` items of a markdown task list."""
    checked, unchecked = [], []
    for line in content.split("\n"):
        m = _CHECKED_RE.match(line)
        if m:
            checked.append(m.group(1).strip())
            continue
        m = _UNCHECKED_RE.match(line)
        if m:
            unchecked.append(m.group(1).strip())
    return checked, unchecked


def orphan_services(ctx: AuditContext) -> list[str]:
    """Service modules that no other file imports or mentions by name."""
    prefix = f"{ctx.config.source_dir}/services/" if ctx.config.source_dir else "services/"
    orphans = []
    for sf in ctx.files:
        if not sf.path.startswith(prefix) or sf.is_markup:
            continue
        if ctx.graph.importers_of(sf.path):
            continue
        needles = (f"/{sf.stem}'", f'/{sf.stem}"', f"/{sf.stem}.", f"'{sf.stem}'")
        mentioned = any(
            other.path != sf.path and any(n in other.content for n in needles)
            for other in ctx.files
        )
        if not mentioned:
            orphans.append(sf.stem)
    return sorted(orphans)


def feature_inventory(ctx: AuditContext) -> Phase:
    cfg = ctx.config
    findings: list[str] = []
    details: list[str] = []

    if not ctx.path(cfg.features_file).is_file():
        findings.append(f"{cfg.features_file} not found, features cannot be verified")
        return Phase(NAME, 0, MAX_SCORE, findings, details)

    checked, unchecked = parse_checklist(ctx.read(cfg.features_file))
    findings.append(f"Checklist: {len(checked)} features done, {len(unchecked)} pending")
    if unchecked:
        details.append(f"{len(unchecked)} checklist feature(s) still pending")

    checked_lower = [c.lower() for c in checked]
    missing = 0
    for name, rel in sorted(cfg.feature_files.items()):
        if ctx.path(rel).exists():
            continue
        missing += 1
        if any(name.lower() in c for c in checked_lower):
            details.append(f"Stale checklist: '{name}' is marked done but {rel} is gone")
        else:
            details.append(f"Feature '{name}': file missing ({rel})")

    declared = len(cfg.feature_files)
    if declared:
        findings.append(f"Verification: {declared - missing}/{declared} declared features have their code")

    if missing == 0:
        score = 10
    elif missing <= 2:
        score = 7
    else:
        score = 3

    orphans = orphan_services(ctx)
    if orphans:
        score += 2
        findings.append(f"{len(orphans)} orphan service(s)")
        details.append(f"{len(orphans)} orphan service(s) never imported: {', '.join(orphans)}")
    else:
        score += 5
        findings.append("0 orphan services")

    return Phase(NAME, score, MAX_SCORE, findings, details)
