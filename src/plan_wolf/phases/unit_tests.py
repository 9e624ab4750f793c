"""Phase 2: wiring suite, integration suite, and the full test run."""

from ..tools.parsers import parse_test_counts
from .models import AuditContext, Phase

NAME = "Unit Tests"
MAX_SCORE = 20


def unit_test_audit(ctx: AuditContext) -> Phase:
    cfg = ctx.config
    timeout = cfg.test_timeout_seconds
    score = 0
    findings: list[str] = []
    details: list[str] = []

    wiring = ctx.run(cfg.wiring_test_command, timeout)
    if wiring.ok:
        score += 7
        findings.append("Wiring tests: PASS")
    elif wiring.skipped:
        findings.append("Wiring tests: not configured")
    else:
        findings.append(f"Wiring tests: FAIL ({wiring.failure_reason})")
        details.append("Wiring tests FAIL: handlers or modal flags are broken")

    integration = ctx.run(cfg.integration_test_command, timeout)
    if integration.ok:
        score += 6
        findings.append("Integration tests: PASS")
    elif integration.skipped:
        findings.append("Integration tests: not configured")
    else:
        score += 2
        findings.append(f"Integration tests: FAIL ({integration.failure_reason})")
        details.append("Integration tests FAIL: modals do not render correctly")

    full = ctx.run(cfg.test_command, timeout)
    counts = parse_test_counts(full.output) if full.output else None
    if counts is None:
        findings.append("Tests: results could not be read")
    else:
        passed, failed = counts
        if failed == 0 and passed > 0:
            score += 7
            findings.append(f"All tests: {passed} passed, 0 failed")
        elif failed > 0:
            score += max(0, 7 - failed)
            findings.append(f"Tests: {passed} passed, {failed} FAIL")
            details.append(f"{failed} tests failing, fix these first")
        else:
            findings.append("Tests: no tests ran")

    return Phase(NAME, score, MAX_SCORE, findings, details)
