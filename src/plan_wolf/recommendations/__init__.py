"""Recommendation engine: classify, prioritize and track findings."""

from .engine import (
    build_recommendations,
    deduplicate,
    enrich,
    merge_stored,
    track_follow_through,
    trend_recommendations,
)
from .rules import RULES, Advice, Rule, classify

__all__ = [
    "RULES",
    "Advice",
    "Rule",
    "classify",
    "build_recommendations",
    "deduplicate",
    "enrich",
    "merge_stored",
    "track_follow_through",
    "trend_recommendations",
]
