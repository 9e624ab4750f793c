"""Cross-run memory: persisted history, known errors, recommendations."""

from .models import (
    SCHEMA_VERSION,
    ErrorCheck,
    ErrorRecord,
    GraphSummary,
    Memory,
    PhaseSummary,
    RecommendationRecord,
    RunRecord,
)
from .regression import RegressionReport, replay_checks
from .store import MemoryStore, prune

__all__ = [
    "SCHEMA_VERSION",
    "ErrorCheck",
    "ErrorRecord",
    "GraphSummary",
    "Memory",
    "PhaseSummary",
    "RecommendationRecord",
    "RunRecord",
    "RegressionReport",
    "replay_checks",
    "MemoryStore",
    "prune",
]
