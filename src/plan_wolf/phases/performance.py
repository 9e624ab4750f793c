"""Phase 12: optional external performance auditor."""

from ..tools.parsers import parse_performance_scores
from .models import AuditContext, Phase

NAME = "Performance"
MAX_SCORE = 10


def performance_audit(ctx: AuditContext) -> Phase:
    cfg = ctx.config
    result = ctx.run(cfg.performance_command, cfg.build_timeout_seconds)

    if not result.ok and not result.output:
        return Phase(
            NAME, 0, MAX_SCORE,
            findings=[f"Performance auditor: not run ({result.failure_reason})"],
            details=[f"Performance auditor failed ({result.failure_reason})"],
            scored=False,
        )

    scores = parse_performance_scores(result.output)
    if not scores:
        return Phase(
            NAME, 0, MAX_SCORE,
            findings=["Performance auditor: output not recognised"],
            details=["Performance auditor output could not be parsed"],
            scored=False,
        )

    average = sum(scores.values()) / len(scores)
    findings = [f"{key}: {value:g}/100" for key, value in sorted(scores.items())]
    details = []
    perf = scores.get("performance")
    if perf is not None and perf < 50:
        details.append(f"Performance score {perf:g}/100, reduce bundle KB and defer scripts")

    return Phase(
        NAME, round(average / 10), MAX_SCORE, findings, details,
        metrics={"performance_scores": scores},
    )
