"""Import cycle detection.

``find_cycles`` walks depth-first from every node with its own visited set
and reports each closed path it meets, deduplicated by member set. This is
not a strongly-connected-components algorithm: it is super-linear on dense
graphs and can miss a loop that is only reachable through a node already
visited from the same start. ``strongly_connected_groups`` (Tarjan) is
provided alongside so callers can compare both notions of a cycle.
"""

from ..logging_config import get_logger
from .models import Cycle, DependencyGraph

logger = get_logger(__name__)


def find_cycles(graph: DependencyGraph) -> list[Cycle]:
    """Find import cycles by per-start-node DFS.

    Uses an explicit stack so deep import chains do not hit Python's
    recursion limit. Cycles come back in discovery order.
    """
    seen_keys: set[str] = set()
    cycles: list[Cycle] = []

    for start in sorted(graph.all_nodes):
        visited = {start}
        path = [start]
        position = {start: 0}
        stack = [(start, iter(graph.forward.get(start, [])))]

        while stack:
            node, neighbors = stack[-1]
            advanced = False
            for nxt in neighbors:
                if nxt in position:
                    cycle = Cycle(path=tuple(path[position[nxt]:]) + (nxt,))
                    if cycle.key not in seen_keys:
                        seen_keys.add(cycle.key)
                        cycles.append(cycle)
                elif nxt not in visited:
                    visited.add(nxt)
                    position[nxt] = len(path)
                    path.append(nxt)
                    stack.append((nxt, iter(graph.forward.get(nxt, []))))
                    advanced = True
                    break
            if not advanced:
                stack.pop()
                path.pop()
                del position[node]

    logger.debug("Found %d import cycles", len(cycles))
    return cycles


def strongly_connected_groups(graph: DependencyGraph) -> list[set[str]]:
    """Tarjan's algorithm (iterative); returns only components with > 1 file."""
    counter = 0
    scc_stack: list[str] = []
    on_stack: set[str] = set()
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    groups: list[set[str]] = []

    for root in sorted(graph.all_nodes):
        if root in index:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)
        call_stack = [(root, iter(graph.forward.get(root, [])))]

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if w not in index:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    scc_stack.append(w)
                    on_stack.add(w)
                    call_stack.append((w, iter(graph.forward.get(w, []))))
                    pushed = True
                    break
                elif w in on_stack:
                    lowlink[v] = min(lowlink[v], index[w])

            if not pushed:
                call_stack.pop()
                if call_stack:
                    caller = call_stack[-1][0]
                    lowlink[caller] = min(lowlink[caller], lowlink[v])

                if lowlink[v] == index[v]:
                    component: set[str] = set()
                    while True:
                        w = scc_stack.pop()
                        on_stack.discard(w)
                        component.add(w)
                        if w == v:
                            break
                    if len(component) > 1:
                        groups.append(component)

    return groups
