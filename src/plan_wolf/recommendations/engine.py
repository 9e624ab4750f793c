"""Turns raw phase details into prioritized, deduplicated recommendations."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, Optional

from ..logging_config import get_logger
from ..memory.models import PRIORITY_HIGH, PRIORITY_MEDIUM, RecommendationRecord, RunRecord
from .rules import classify

if TYPE_CHECKING:
    from ..phases.models import Phase

logger = get_logger(__name__)

TREND_SOURCE = "Trend"
TREND_TEXT = "Score has not improved for 3 consecutive runs"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def enrich(
    phase_name: str,
    raw_detail: str,
    phase_score: int,
    phase_max: int,
    created_at: Optional[str] = None,
) -> RecommendationRecord:
    """Classify one raw detail into a recommendation.

    Priority is HIGH when the owning phase scored below half its maximum,
    or when the matching rule always forces HIGH.
    """
    advice = classify(phase_name, raw_detail)
    weak_phase = phase_score < phase_max * 0.5
    priority = PRIORITY_HIGH if (weak_phase or advice.force_high) else PRIORITY_MEDIUM
    return RecommendationRecord(
        source=phase_name,
        text=raw_detail,
        title=advice.title,
        explain=advice.explain,
        action=advice.action,
        impact=advice.impact,
        priority=priority,
        created_at=created_at or _now(),
    )


def build_recommendations(phases: Iterable["Phase"], created_at: Optional[str] = None) -> list[RecommendationRecord]:
    created_at = created_at or _now()
    return [
        enrich(p.name, detail, p.score, p.max_score, created_at)
        for p in phases
        for detail in p.details
    ]


def deduplicate(recommendations: Iterable[RecommendationRecord]) -> list[RecommendationRecord]:
    """Merge recommendations that share a title.

    The first occurrence is kept, its occurrence count is the sum of the
    group, and it is promoted to HIGH if any member is HIGH.
    """
    merged: dict[str, RecommendationRecord] = {}
    for rec in recommendations:
        existing = merged.get(rec.title)
        if existing is None:
            merged[rec.title] = RecommendationRecord(**rec.to_dict())
            continue
        existing.occurrences += rec.occurrences
        if rec.is_high:
            existing.priority = PRIORITY_HIGH
    return list(merged.values())


def track_follow_through(
    stored: Iterable[RecommendationRecord],
    current_details: Iterable[str],
    followed_at: Optional[str] = None,
    open_titles: Iterable[str] = (),
) -> tuple[int, int]:
    """Mark stored recommendations whose raw text no longer appears as followed.

    A record whose title is in ``open_titles`` stays open even when its raw
    text changed, since the same problem was reported again.

    Returns ``(newly_followed, still_open)``.
    """
    details = set(current_details)
    titles = set(open_titles)
    followed_at = followed_at or _now()
    newly_followed = still_open = 0
    for rec in stored:
        if rec.text in details or rec.title in titles:
            still_open += 1
        elif not rec.followed:
            rec.followed = True
            rec.followed_at = followed_at
            newly_followed += 1
    if newly_followed:
        logger.info("%d recommendation(s) followed since the last run", newly_followed)
    return newly_followed, still_open


def merge_stored(
    stored: list[RecommendationRecord], current: Iterable[RecommendationRecord]
) -> list[RecommendationRecord]:
    """Fold this run's recommendations into ``stored``, one record per title.

    A known title gets the latest text and advice, its occurrences added up,
    and is reopened if it had been followed. Unknown titles are appended.
    Returns the appended records.
    """
    by_title: dict[str, RecommendationRecord] = {}
    for rec in stored:
        by_title.setdefault(rec.title, rec)

    fresh = []
    for rec in current:
        existing = by_title.get(rec.title)
        if existing is None:
            record = RecommendationRecord(**rec.to_dict())
            stored.append(record)
            by_title[rec.title] = record
            fresh.append(record)
            continue
        existing.text = rec.text
        existing.explain = rec.explain
        existing.action = rec.action
        existing.impact = rec.impact
        existing.occurrences += rec.occurrences
        if rec.is_high:
            existing.priority = PRIORITY_HIGH
        if existing.followed:
            existing.followed = False
            existing.followed_at = None
    return fresh


def trend_recommendations(
    runs: list[RunRecord], created_at: Optional[str] = None
) -> list[RecommendationRecord]:
    """A HIGH recommendation when the last three scores never rose and fell at least once."""
    if len(runs) < 3:
        return []
    scores = [r.score for r in runs[-3:]]
    non_increasing = all(b <= a for a, b in zip(scores, scores[1:]))
    if not non_increasing or scores[-1] == scores[0]:
        return []
    return [
        RecommendationRecord(
            source=TREND_SOURCE,
            text=TREND_TEXT,
            title="Score is declining",
            explain="The audit score has dropped run after run: the code is slowly "
            "degrading instead of improving.",
            action="Work through the open recommendations below, one at a time.",
            impact="Brings the score back up before problems pile up.",
            priority=PRIORITY_HIGH,
            created_at=created_at or _now(),
        )
    ]
