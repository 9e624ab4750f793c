"""Phase 3: production build and bundle size."""

from pathlib import Path
from typing import Optional

from ..logging_config import get_logger
from .models import AuditContext, Phase

logger = get_logger(__name__)

NAME = "Build"
MAX_SCORE = 15
BUNDLE_POINTS = 5


def _size_kb(path: Path) -> int:
    return round(path.stat().st_size / 1024)


def find_main_bundle(assets_dir: Path) -> Optional[Path]:
    """The entry chunk (``index-<hash>.js``), else the largest script."""
    if not assets_dir.is_dir():
        return None
    scripts = sorted(p for p in assets_dir.iterdir() if p.is_file() and p.suffix == ".js")
    if not scripts:
        return None
    entries = [p for p in scripts if p.name.startswith("index-")]
    if entries:
        return entries[0]
    return max(scripts, key=lambda p: p.stat().st_size)


def bundle_points(size_kb: int, limit_kb: int) -> int:
    """Full points within the limit, then a proportional share floored at 1."""
    if size_kb <= limit_kb:
        return BUNDLE_POINTS
    return max(1, int(BUNDLE_POINTS * limit_kb / size_kb))


def production_build(ctx: AuditContext) -> Phase:
    cfg = ctx.config
    th = ctx.thresholds
    score = 0
    findings: list[str] = []
    details: list[str] = []
    metrics: dict = {}

    result = ctx.run(cfg.build_command, cfg.build_timeout_seconds)
    if result.ok:
        score += 10
        findings.append("Production build: OK")
    elif result.skipped:
        findings.append("Production build: not configured, measuring existing output")
    else:
        findings.append(f"Production build: FAIL ({result.failure_reason})")
        details.append("Build FAIL: production build does not compile")
        return Phase(NAME, score, MAX_SCORE, findings, details)

    assets_dir = ctx.path(cfg.dist_dir) / "assets"
    try:
        bundle = find_main_bundle(assets_dir)
        if bundle is None:
            findings.append("Bundle size: no script bundle found")
        else:
            kb = _size_kb(bundle)
            metrics["bundle_size_kb"] = kb
            score += bundle_points(kb, th.bundle_limit_kb)
            if kb <= th.bundle_limit_kb:
                findings.append(f"Bundle: {kb}KB (<= {th.bundle_limit_kb}KB)")
            else:
                findings.append(f"Bundle: {kb}KB (over the {th.bundle_limit_kb}KB limit)")
                details.append(
                    f"Main bundle {kb}KB exceeds the {th.bundle_limit_kb}KB limit, trim imports"
                )

            last = ctx.memory.last_run
            if last is not None and last.bundle_size_kb:
                diff = kb - last.bundle_size_kb
                if diff > th.bundle_growth_kb:
                    details.append(f"Bundle grew by +{diff}KB since the last run")
                elif diff < -10:
                    findings.append(f"Bundle shrank by {-diff}KB")

        for asset in sorted(assets_dir.iterdir()) if assets_dir.is_dir() else []:
            if asset.is_file() and asset.suffix not in (".js", ".css", ".map"):
                kb = _size_kb(asset)
                if kb > th.asset_limit_kb:
                    rel = asset.relative_to(ctx.root).as_posix()
                    details.append(f"Oversized asset {rel} ({kb}KB)")
    except OSError as e:
        logger.info("Cannot measure bundle in %s: %s", assets_dir, e)
        findings.append("Bundle size: could not be measured")

    return Phase(NAME, score, MAX_SCORE, findings, details, metrics)
