"""Phase 6: replay the checks of previously recorded errors."""

from ..memory.regression import replay_checks
from .models import AuditContext, Phase

NAME = "Regression Guard"
MAX_SCORE = 10


def regression_guard(ctx: AuditContext) -> Phase:
    findings: list[str] = []

    if not ctx.memory.errors:
        findings.append("No errors recorded yet; regressions are tracked from the next run")
        return Phase(NAME, MAX_SCORE, MAX_SCORE, findings)

    report = replay_checks(
        ctx.memory.errors, ctx.root, ctx.runner, ctx.config.regression_timeout_seconds
    )
    if report.regressions == 0:
        findings.append(f"{report.checked} past error(s) verified, 0 regressions")
    else:
        findings.append(f"REGRESSIONS: {report.regressions} of {report.checked} checks failed")

    return Phase(
        NAME,
        MAX_SCORE - 3 * report.regressions,
        MAX_SCORE,
        findings,
        list(report.details),
        metrics={"regressions": report.regressions},
    )
