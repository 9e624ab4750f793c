"""Phase 4: what the changes since the last run could break."""

from ..graph.impact import (
    RISK_CRITICAL,
    RISK_HIGH,
    analyze_impact,
    deep_scan,
    impacted_features,
)
from .models import AuditContext, Phase

NAME = "Impact Analysis"
MAX_SCORE = 10


def _has_test(stem: str, ctx: AuditContext) -> bool:
    prefixes = (f"{stem}.test.", f"{stem}.spec.")
    return any(sf.path.rsplit("/", 1)[-1].startswith(prefixes) for sf in ctx.corpus)


def impact_analysis(ctx: AuditContext) -> Phase:
    th = ctx.thresholds
    findings: list[str] = []
    details: list[str] = []

    if not ctx.changed_files:
        findings.append("No source files changed since the last run")
        return Phase(NAME, MAX_SCORE, MAX_SCORE, findings, details)

    result = analyze_impact(
        ctx.changed_files,
        ctx.graph,
        ctx.config.critical_files,
        high_threshold=th.impact_high_files,
        medium_threshold=th.impact_medium_files,
    )
    findings.append(f"{len(result.changed)} file(s) changed, {len(result.affected)} affected")

    if result.risk_level == RISK_CRITICAL:
        score = 3
        touched = ", ".join(result.touched_critical)
        findings.append(f"Critical file(s) changed: {touched}")
        details.append(
            f"Critical file {touched} affects {len(result.affected)} files, test everything"
        )
    elif result.risk_level == RISK_HIGH:
        score = 5
        findings.append(f"High impact: {len(result.affected)} files potentially affected")
    else:
        score = 8
        findings.append(f"{result.risk_level.capitalize()} impact: {len(result.affected)} files affected")

    features = impacted_features(result.affected, ctx.config.critical_files)
    if features:
        findings.append(f"Impacted features: {', '.join(features)}")

    untested = [
        path for path in result.changed
        if not _has_test(path.rsplit("/", 1)[-1].split(".", 1)[0], ctx)
    ]
    if untested:
        score -= 2
        details.append(f"{len(untested)} changed file(s) without a matching unit test")

    defined = set(ctx.registry.definitions)
    penalty = 0
    for path in result.changed:
        sf = ctx.file(path)
        if sf is None:
            continue
        scan = deep_scan(sf, defined, th.long_string_length, th.long_file_lines)
        penalty += scan.penalty(th.deep_scan_max_penalty)
        details.extend(scan.describe())
    penalty = min(penalty, th.deep_scan_max_penalty)
    if penalty:
        findings.append(f"Deep scan penalty: -{penalty}")
        score -= penalty

    return Phase(
        NAME, score, MAX_SCORE, findings, details,
        metrics={"affected_files": len(result.affected), "risk_level": result.risk_level},
    )
