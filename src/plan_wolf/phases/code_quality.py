"""Phase 1: linter, i18n lint and privacy lint."""

from ..tools.parsers import parse_lint_counts
from .models import AuditContext, Phase

NAME = "Code Quality"
MAX_SCORE = 15


def code_quality_audit(ctx: AuditContext) -> Phase:
    cfg = ctx.config
    score = 0
    findings: list[str] = []
    details: list[str] = []

    lint = ctx.run(cfg.lint_command)
    if lint.ok:
        score += 5
        findings.append("Linter: 0 problems")
    elif lint.skipped or lint.missing:
        findings.append(f"Linter: not run ({lint.failure_reason})")
        if lint.missing:
            details.append(f"Lint tool unavailable ({lint.failure_reason}): {cfg.lint_command}")
    else:
        report = ctx.run(cfg.lint_report_command) if cfg.lint_report_command else lint
        errors, warnings = parse_lint_counts(report.output or lint.output)
        if errors == 0:
            score += 3
        findings.append(f"Linter: {errors} errors, {warnings} warnings")
        details.append("Run the linter with --fix to auto-correct lint problems")

    i18n = ctx.run(cfg.i18n_lint_command)
    if i18n.ok:
        score += 5
        findings.append("i18n: all languages complete")
    elif i18n.skipped or i18n.missing:
        findings.append(f"i18n lint: not run ({i18n.failure_reason})")
    else:
        score += 2
        findings.append("i18n: missing translations detected")
        details.append("i18n lint failing: missing translation keys")

    privacy = ctx.run(cfg.privacy_lint_command)
    if privacy.ok:
        score += 5
        findings.append("Privacy: compliant")
    elif privacy.skipped or privacy.missing:
        findings.append(f"Privacy lint: not run ({privacy.failure_reason})")
    else:
        score += 1
        findings.append("Privacy: unregistered storage keys")
        details.append("Privacy lint failing: unregistered storage keys")

    return Phase(NAME, score, MAX_SCORE, findings, details)
