"""Audit orchestration: build the shared context, run phases, update memory.

One call to :func:`run_audit` is one run. Memory is read when the run
starts and written exactly once when it ends.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from .config import AuditConfig
from .graph import build_dependency_graph
from .logging_config import get_logger
from .memory import (
    ErrorRecord,
    GraphSummary,
    Memory,
    MemoryStore,
    PhaseSummary,
    RecommendationRecord,
    RunRecord,
    prune,
)
from .phases import AuditContext, Phase, PhaseFunc, select_phases
from .recommendations import (
    build_recommendations,
    deduplicate,
    merge_stored,
    track_follow_through,
    trend_recommendations,
)
from .scanning import scan, scan_text_corpus
from .tools import CommandRunner
from .vcs import changed_files_since, head_commit
from .wiring import build_registry

logger = get_logger(__name__)

CONFIDENCE_HIGH = "HIGH"
CONFIDENCE_MEDIUM = "MEDIUM"
CONFIDENCE_LOW = "LOW"

# Details carrying one of these words are remembered as errors
ERROR_MARKERS = ("FAIL", "REGRESSION", "missing", "broken", "failing")

_SOURCE_PATH = re.compile(r"[\w@.-]+(?:/[\w@.-]+)*\.(?:m?js|cjs|jsx|tsx?|html|css|json|md)\b")


@dataclass
class AuditResult:
    """Everything the report needs about one finished run."""

    score: int
    confidence: str
    trend: str
    passed: bool
    phases: list[Phase]
    recommendations: list[RecommendationRecord] = field(default_factory=list)
    weak_phases: list[str] = field(default_factory=list)
    strong_phases: list[str] = field(default_factory=list)
    new_errors: list[ErrorRecord] = field(default_factory=list)
    followed: int = 0
    mode: str = "full"
    duration: float = 0.0
    date: str = ""
    commit: Optional[str] = None
    memory_saved: bool = False

    @property
    def high_priority(self) -> list[RecommendationRecord]:
        return [r for r in self.recommendations if r.is_high]

    @property
    def medium_priority(self) -> list[RecommendationRecord]:
        return [r for r in self.recommendations if not r.is_high]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "confidence": self.confidence,
            "trend": self.trend,
            "passed": self.passed,
            "mode": self.mode,
            "duration": round(self.duration, 2),
            "date": self.date,
            "commit": self.commit,
            "phases": [
                {
                    "name": p.name,
                    "score": p.score,
                    "max": p.max_score,
                    "scored": p.scored,
                    "findings": list(p.findings),
                    "details": list(p.details),
                }
                for p in self.phases
            ],
            "weak_phases": list(self.weak_phases),
            "strong_phases": list(self.strong_phases),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "new_errors": [e.to_dict() for e in self.new_errors],
            "followed": self.followed,
        }


def aggregate_score(phases: Iterable[Phase]) -> int:
    """``round(100 * sum(score) / sum(max))`` over scored phases, 0 when none."""
    scored = [p for p in phases if p.scored]
    total_max = sum(p.max_score for p in scored)
    if total_max == 0:
        return 0
    return round(100 * sum(p.score for p in scored) / total_max)


def confidence_for(score: int) -> str:
    if score >= 80:
        return CONFIDENCE_HIGH
    if score >= 60:
        return CONFIDENCE_MEDIUM
    return CONFIDENCE_LOW


def trend_label(score: int, previous: Optional[RunRecord]) -> str:
    if previous is None:
        return "first run"
    diff = score - previous.score
    if diff == 0:
        return "stable"
    return f"+{diff}" if diff > 0 else str(diff)


def extract_source_path(text: str) -> Optional[str]:
    """First path-looking token in ``text`` (``src/a.js``), if any."""
    match = _SOURCE_PATH.search(text)
    return match.group(0) if match else None


def collect_errors(
    phases: Iterable[Phase], known: Iterable[ErrorRecord], date: str
) -> list[ErrorRecord]:
    """New error records for failure details not already remembered."""
    seen = {e.description for e in known}
    new: list[ErrorRecord] = []
    for phase in phases:
        for detail in phase.details:
            if detail in seen or not any(m in detail for m in ERROR_MARKERS):
                continue
            seen.add(detail)
            new.append(
                ErrorRecord(
                    phase=phase.name,
                    description=detail,
                    date=date,
                    file=extract_source_path(detail),
                )
            )
    return new


def build_context(config: AuditConfig, root: Path, memory: Memory) -> AuditContext:
    """Scan the tree once and assemble the context every phase reads."""
    files = scan(root, config.source_dir, config.extensions, config.excluded_dirs)
    corpus = scan_text_corpus(root, config.corpus_dirs, config.extensions, config.excluded_dirs)
    graph = build_dependency_graph(files)
    registry = build_registry(files, global_object=config.global_object)

    scanned = {f.path for f in files}
    changed = [
        path for path in changed_files_since(str(root), memory.last_run_commit) if path in scanned
    ]
    logger.info(
        "Scanned %d files (%d corpus), %d import edges, %d changed",
        len(files),
        len(corpus),
        graph.edge_count,
        len(changed),
    )

    return AuditContext(
        root=root,
        config=config,
        files=files,
        corpus=corpus,
        graph=graph,
        registry=registry,
        memory=memory,
        runner=CommandRunner(root),
        changed_files=changed,
    )


def run_phases(ctx: AuditContext, phases: Iterable[PhaseFunc]) -> list[Phase]:
    """Run ``phases`` in order; each result is visible to the phases after it."""
    for func in phases:
        started = time.monotonic()
        phase = func(ctx)
        logger.info(
            "%s: %d/%d (%.1fs)", phase.name, phase.score, phase.max_score, time.monotonic() - started
        )
        ctx.phases.append(phase)
    return ctx.phases


def run_audit(config: AuditConfig, root: Path) -> AuditResult:
    """Run every selected phase against ``root`` and persist the outcome."""
    root = Path(root).resolve()
    started = time.monotonic()
    now = datetime.now(timezone.utc).isoformat()

    store = MemoryStore(root / config.memory_file)
    memory = store.load()
    previous = memory.last_run

    ctx = build_context(config, root, memory)
    phases = run_phases(ctx, select_phases(config))

    score = aggregate_score(phases)
    confidence = confidence_for(score)
    th = config.thresholds
    scored = [p for p in phases if p.scored]
    weak = [p.name for p in scored if p.ratio < th.weak_phase_ratio]
    strong = [p.name for p in scored if p.ratio >= th.strong_phase_ratio]

    recommendations = deduplicate(build_recommendations(phases, now))
    new_errors = collect_errors(phases, memory.errors, now)
    memory.errors.extend(new_errors)

    commit = head_commit(str(root))
    run = RunRecord(
        date=now,
        score=score,
        confidence=confidence,
        phases=[PhaseSummary(p.name, p.score, p.max_score) for p in phases],
        mode=config.mode,
        duration=round(time.monotonic() - started, 2),
        bundle_size_kb=ctx.metric("bundle_size_kb"),
        commit=commit,
        errors=len(new_errors),
        recommendations=len(recommendations),
    )

    recommendations.extend(trend_recommendations(memory.runs + [run], now))
    current_details = [d for p in phases for d in p.details]
    followed, _ = track_follow_through(
        memory.recommendations,
        current_details,
        now,
        open_titles=[r.title for r in recommendations],
    )
    merge_stored(memory.recommendations, recommendations)

    memory.runs.append(run)
    if commit:
        memory.last_run_commit = commit
    memory.dependency_graph = GraphSummary(
        total_files=len(ctx.graph.all_nodes),
        total_links=ctx.graph.edge_count,
        updated_at=now,
    )
    prune(
        memory,
        max_runs=config.max_runs,
        max_errors=config.max_errors,
        max_followed=config.max_followed_recommendations,
        max_open=config.max_open_recommendations,
    )
    saved = store.save(memory)

    result = AuditResult(
        score=score,
        confidence=confidence,
        trend=trend_label(score, previous),
        passed=score >= config.pass_threshold,
        phases=phases,
        recommendations=recommendations,
        weak_phases=weak,
        strong_phases=strong,
        new_errors=new_errors,
        followed=followed,
        mode=config.mode,
        duration=time.monotonic() - started,
        date=now,
        commit=commit,
        memory_saved=saved,
    )
    logger.info("Audit finished: %d/100 (%s)", score, confidence)
    return result
