"""Phase 11: code splitting, SEO, accessibility, security, legal and data checks.

Every check looks at files on disk only; none of them runs a tool.
"""

from pathlib import Path

from .models import AuditContext, Phase

NAME = "Multi-Level Audit"
MAX_SCORE = 15


def _count(directory: Path, pattern: str) -> int:
    if not directory.is_dir():
        return 0
    return sum(1 for p in directory.rglob(pattern) if p.is_file())


def _performance(ctx: AuditContext, findings: list, details: list) -> int:
    assets = ctx.path(ctx.config.dist_dir) / "assets"
    if not assets.is_dir():
        return 0
    chunks = sum(1 for p in assets.iterdir() if p.suffix == ".js")
    styles = sum(1 for p in assets.iterdir() if p.suffix == ".css")
    findings.append(f"Performance: {chunks} JS chunks, {styles} CSS file(s)")
    if chunks >= ctx.thresholds.min_js_chunks:
        return 1
    details.append(f"Only {chunks} JS chunk(s), enable code-splitting for rarely used screens")
    return 0


def _seo(ctx: AuditContext, findings: list, details: list) -> int:
    th = ctx.thresholds
    dist = ctx.path(ctx.config.dist_dir)
    score = 0

    sitemap = (dist / "sitemap.xml").exists() or ctx.path("public/sitemap.xml").exists()
    robots = (dist / "robots.txt").exists() or ctx.path("public/robots.txt").exists()
    if sitemap and robots:
        score += 2
        findings.append("SEO: sitemap.xml and robots.txt present")
    else:
        details.append("SEO: sitemap.xml or robots.txt missing")

    guides = _count(dist / "guides", "*.html")
    if guides:
        findings.append(f"SEO: {guides} guide page(s) generated")
        if guides >= th.seo_guide_pages:
            score += 2

    pages = _count(dist, "*.html") - guides - int((dist / "index.html").exists())
    if pages > 0:
        findings.append(f"SEO: {pages} content page(s) generated")
        if pages >= th.seo_content_pages_high:
            score += 2
        elif pages >= th.seo_content_pages_low:
            score += 1
    return score


def _accessibility(ctx: AuditContext, findings: list, details: list) -> int:
    helpers = [sf for sf in ctx.files if "a11y" in sf.path.lower() or "accessib" in sf.path.lower()]
    if not helpers:
        details.append("Accessibility: no a11y helper module found")
        return 0
    content = "\n".join(sf.content for sf in helpers)
    has_aria = "aria-" in content or "role=" in content
    has_focus = "focus" in content.lower()
    if has_aria and has_focus:
        findings.append("Accessibility: ARIA and focus management helpers present")
        return 2
    findings.append("Accessibility: helpers present but incomplete")
    details.append("Accessibility: a11y helpers lack ARIA attributes or focus management")
    return 1


def _security(ctx: AuditContext, findings: list, details: list) -> int:
    index_html = ctx.read("index.html")
    has_csp = "content-security-policy" in index_html.lower()
    has_sanitizer = any(
        "sanitize" in sf.path.lower() or "dompurify" in sf.content.lower() for sf in ctx.files
    )
    if has_csp or has_sanitizer:
        active = " + ".join(n for n, on in (("CSP", has_csp), ("sanitizer", has_sanitizer)) if on)
        findings.append(f"Security: {active} active")
        return 2
    details.append("Security: no CSP or sanitization detected")
    return 0


def _legal(ctx: AuditContext, findings: list, details: list) -> int:
    missing = []
    if not ctx.path("PRIVACY.md").exists():
        missing.append("PRIVACY.md")
    if not ctx.path("TERMS.md").exists():
        missing.append("TERMS.md")
    if not any("CookieBanner" in sf.content or "cookiebanner" in sf.path.lower() for sf in ctx.files):
        missing.append("CookieBanner")
    if not missing:
        findings.append("Legal: privacy policy, terms and cookie banner present")
        return 2
    details.append(f"Legal: missing {', '.join(missing)}")
    return 0


def _data(ctx: AuditContext, findings: list, details: list) -> int:
    data_files = _count(ctx.path("public/data"), "*.json")
    if not data_files:
        return 0
    findings.append(f"Data: {data_files} data file(s)")
    return 2 if data_files >= ctx.thresholds.data_files_high else 1


_CHECKS = (_performance, _seo, _accessibility, _security, _legal, _data)


def multi_level_audit(ctx: AuditContext) -> Phase:
    findings: list[str] = []
    details: list[str] = []
    score = sum(check(ctx, findings, details) for check in _CHECKS)
    return Phase(NAME, score, MAX_SCORE, findings, details)
