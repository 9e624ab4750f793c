"""Audit phases, in the fixed order they run.

Later phases read what earlier ones published (the build phase's bundle
size, for instance), so the order below is part of the contract.
"""

from ..config import AuditConfig
from .build import production_build
from .code_quality import code_quality_audit
from .dead_code import dead_code_audit
from .dependencies import dependency_health
from .features import feature_inventory
from .impact import impact_analysis
from .links import button_link_audit
from .models import AuditContext, Phase, PhaseFunc
from .multi_level import multi_level_audit
from .performance import performance_audit
from .regression import regression_guard
from .unit_tests import unit_test_audit
from .wiring import wiring_integrity

ALL_PHASES: list[PhaseFunc] = [
    code_quality_audit,
    unit_test_audit,
    production_build,
    impact_analysis,
    feature_inventory,
    regression_guard,
    wiring_integrity,
    button_link_audit,
    dead_code_audit,
    dependency_health,
    multi_level_audit,
    performance_audit,
]

# Phases left out in fast mode
SLOW_PHASES = frozenset({performance_audit})


def select_phases(config: AuditConfig) -> list[PhaseFunc]:
    """Phases to run for ``config``, in order."""
    selected = []
    for func in ALL_PHASES:
        if config.fast and func in SLOW_PHASES:
            continue
        if func is performance_audit and not config.performance_command:
            continue
        selected.append(func)
    return selected


__all__ = [
    "ALL_PHASES",
    "SLOW_PHASES",
    "AuditContext",
    "Phase",
    "PhaseFunc",
    "select_phases",
]
