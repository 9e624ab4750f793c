"""Import dependency graph: construction, cycles, and impact analysis."""

from .models import Cycle, DependencyGraph
from .builder import build_dependency_graph, extract_relative_imports, resolve_specifier
from .cycles import find_cycles, strongly_connected_groups
from .impact import DeepScanResult, ImpactResult, analyze_impact, deep_scan, impacted_features

__all__ = [
    "Cycle",
    "DependencyGraph",
    "build_dependency_graph",
    "extract_relative_imports",
    "resolve_specifier",
    "find_cycles",
    "strongly_connected_groups",
    "ImpactResult",
    "DeepScanResult",
    "analyze_impact",
    "deep_scan",
    "impacted_features",
]
