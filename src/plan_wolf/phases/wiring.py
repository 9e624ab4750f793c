"""Phase 7: handler registration, modal open/close pairing, language files."""

import re

from .models import AuditContext, Phase

NAME = "Wiring Integrity"
MAX_SCORE = 10

_LOCALE_RE = re.compile(r"^[a-z]{2}(?:[-_][A-Za-z]{2})?$")


def language_files(ctx: AuditContext) -> list[str]:
    """Locale files (``fr.js``, ``en-GB.json``) under any ``i18n`` directory."""
    found = {
        sf.stem
        for sf in ctx.files
        if "/i18n/" in f"/{sf.path}" and _LOCALE_RE.match(sf.stem)
    }
    i18n_dir = ctx.path(ctx.config.source_dir) / "i18n"
    if i18n_dir.is_dir():
        for p in i18n_dir.rglob("*.json"):
            if _LOCALE_RE.match(p.stem):
                found.add(p.stem)
    return sorted(found)


def wiring_integrity(ctx: AuditContext) -> Phase:
    th = ctx.thresholds
    registry = ctx.registry
    score = 0
    findings: list[str] = []
    details: list[str] = []

    count = registry.handler_count
    findings.append(f"{count} global handlers registered")
    if count >= th.handler_count_high:
        score += 3
    elif count >= th.handler_count_medium:
        score += 2
    else:
        score += 1
        details.append(
            f"Fewer than {th.handler_count_medium} handlers registered; "
            "some features may be unplugged"
        )

    missing_close = registry.open_without_close()
    if not missing_close:
        score += 4
        findings.append("Every modal has an open and a close handler")
    else:
        if len(missing_close) <= 3:
            score += 2
        findings.append(f"{len(missing_close)} modal(s) without a close handler")
        details.append(
            f"{len(missing_close)} modal(s) without a close handler: {', '.join(missing_close)}"
        )

    languages = language_files(ctx)
    if len(languages) >= th.expected_languages:
        score += 3
        findings.append(f"{len(languages)} language files found")
    else:
        if languages:
            score += 1
        findings.append(f"Only {len(languages)} language file(s) ({th.expected_languages} expected)")
        details.append(
            f"Only {len(languages)} language file(s) found, {th.expected_languages} expected"
        )

    return Phase(NAME, score, MAX_SCORE, findings, details)
