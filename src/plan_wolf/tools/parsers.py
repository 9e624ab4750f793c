"""Tolerant parsers for external tool output.

Tool output drifts between versions and reporters, so each parser tries
several known shapes and returns None (or an empty result) rather than
raising when none of them match.
"""

import json
import re
from typing import Optional

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

_LINT_SUMMARY_RE = re.compile(r"(\d+)\s+problems?\s*\((\d+)\s+errors?,\s*(\d+)\s+warnings?\)")
_LINT_COMPACT_ERROR_RE = re.compile(r",\s*Error\s*-", re.IGNORECASE)
_LINT_COMPACT_WARNING_RE = re.compile(r",\s*Warning\s*-", re.IGNORECASE)

_PASSED_RE = re.compile(r"(\d+)\s+pass(?:ed|ing)?\b", re.IGNORECASE)
_FAILED_RE = re.compile(r"(\d+)\s+fail(?:ed|ing|ures?)?\b", re.IGNORECASE)

_PERF_TEXT_RE = re.compile(
    r"\b(performance|accessibility|best[- ]practices|seo|pwa)\b\s*[:=]?\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def parse_lint_counts(output: str) -> tuple[int, int]:
    """Return ``(errors, warnings)`` from a linter's stylish or compact output."""
    text = strip_ansi(output)
    m = _LINT_SUMMARY_RE.search(text)
    if m:
        return int(m.group(2)), int(m.group(3))
    errors = len(_LINT_COMPACT_ERROR_RE.findall(text))
    warnings = len(_LINT_COMPACT_WARNING_RE.findall(text))
    return errors, warnings


def parse_test_counts(output: str) -> Optional[tuple[int, int]]:
    """Return ``(passed, failed)`` from a test runner summary, or None.

    Prefers the ``Tests`` summary line (vitest/jest) over file-level
    counts; falls back to the last counts found anywhere.
    """
    text = strip_ansi(output)
    lines = [ln for ln in text.split("\n") if ln.strip()]
    summary = [ln for ln in lines if ln.strip().lower().startswith("tests")]
    candidates = summary or lines

    passed = failed = None
    for line in candidates:
        p = _PASSED_RE.search(line)
        f = _FAILED_RE.search(line)
        if p:
            passed = int(p.group(1))
        if f:
            failed = int(f.group(1))

    if passed is None and failed is None:
        return None
    return passed or 0, failed or 0


def _normalize_score(value: float) -> float:
    """Scores in [0, 1] are fractions; anything larger is already a percentage."""
    return round(value * 100, 1) if value <= 1 else round(value, 1)


def _json_payload(text: str) -> Optional[dict]:
    try:
        data = json.loads(text)
    except ValueError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            data = json.loads(text[start: end + 1])
        except ValueError:
            return None
    return data if isinstance(data, dict) else None


def parse_performance_scores(output: str) -> dict[str, float]:
    """Category scores on a 0-100 scale from a performance auditor.

    Accepts a JSON report with ``categories.<name>.score`` (0-1 or 0-100),
    ``Performance: 87`` style lines, or ``performance 0.87``.
    """
    text = strip_ansi(output)
    scores: dict[str, float] = {}

    payload = _json_payload(text)
    if payload is not None:
        categories = payload.get("categories")
        if isinstance(categories, dict):
            for key, value in categories.items():
                raw = value.get("score") if isinstance(value, dict) else value
                if isinstance(raw, (int, float)) and not isinstance(raw, bool):
                    scores[str(key).lower()] = _normalize_score(float(raw))
        if scores:
            return scores

    for m in _PERF_TEXT_RE.finditer(text):
        key = m.group(1).lower().replace(" ", "-")
        scores[key] = _normalize_score(float(m.group(2)))

    return scores
