"""
Plan Wolf - Continuous quality audit for JavaScript web applications

Scans a source tree, builds its import graph, cross-checks globally
registered event handlers against their call sites, finds dead exports,
and scores the result across twelve phases. Every run is remembered so
regressions, trends and followed recommendations show up on the next one.
"""

__version__ = "0.1.0"

from .config import AuditConfig, ScoringThresholds, load_config
from .engine import AuditResult, run_audit
from .exceptions import PlanWolfError

__all__ = [
    "run_audit",  # Main entry point
    "AuditConfig",
    "AuditResult",
    "ScoringThresholds",
    "load_config",
    "PlanWolfError",
]
