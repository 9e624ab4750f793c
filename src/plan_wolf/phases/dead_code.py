"""Phase 9: dead exports, dead local functions, orphan handlers."""

from ..wiring.dead_code import find_dead_code
from .models import AuditContext, Phase

NAME = "Dead Code"
MAX_SCORE = 10
MAX_LISTED = 10


def _listing(items: list[str]) -> str:
    shown = ", ".join(items[:MAX_LISTED])
    if len(items) > MAX_LISTED:
        shown += f" (+{len(items) - MAX_LISTED} more)"
    return shown


def dead_code_audit(ctx: AuditContext) -> Phase:
    findings: list[str] = []
    details: list[str] = []

    result = find_dead_code(ctx.files, ctx.graph, ctx.corpus)
    score = result.score(MAX_SCORE)

    findings.append(
        f"{len(result.dead_exports)}/{result.total_exports} exports dead "
        f"({round(result.dead_ratio * 100)}%)"
    )
    if result.dead_exports:
        names = [s.describe() for s in result.dead_exports]
        details.append(f"{len(names)} dead export(s): {_listing(names)}")
    if result.dead_local_functions:
        names = [s.describe() for s in result.dead_local_functions]
        findings.append(f"{len(names)} dead local function(s)")
        details.append(f"{len(names)} dead local function(s): {_listing(names)}")

    orphans = ctx.registry.orphans()
    if orphans:
        findings.append(f"{len(orphans)} orphan handler(s)")
        details.append(f"{len(orphans)} orphan handler(s) never referenced: {_listing(orphans)}")
        score -= len(orphans) // 5

    return Phase(
        NAME, score, MAX_SCORE, findings, details,
        metrics={
            "dead_exports": [s.name for s in result.dead_exports],
            "dead_ratio": result.dead_ratio,
        },
    )
