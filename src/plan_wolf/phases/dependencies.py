"""Phase 10: import cycles."""

from ..graph.cycles import find_cycles, strongly_connected_groups
from .models import AuditContext, Phase

NAME = "Dependency Health"
MAX_SCORE = 10


def dependency_health(ctx: AuditContext) -> Phase:
    graph = ctx.graph
    cycles = find_cycles(graph)
    groups = strongly_connected_groups(graph)

    findings = [
        f"{len(graph.all_nodes)} files, {graph.edge_count} import links",
        f"{len(cycles)} import cycle(s) in {len(groups)} strongly connected group(s)",
    ]
    details = [f"Import cycle: {c.describe()}" for c in cycles]

    return Phase(
        NAME,
        MAX_SCORE - 2 * len(cycles),
        MAX_SCORE,
        findings,
        details,
        metrics={"cycles": len(cycles), "cycle_groups": len(groups)},
    )
