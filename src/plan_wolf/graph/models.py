"""Data models for the import dependency graph.

Edges are directed: forward[A] contains B means A imports B. The graph is
rebuilt on every run and never persisted beyond a size summary.
"""

from dataclasses import dataclass, field


@dataclass
class DependencyGraph:
    """Forward/reverse adjacency over scanned source files."""

    forward: dict[str, list[str]] = field(default_factory=dict)
    reverse: dict[str, list[str]] = field(default_factory=dict)
    all_nodes: set[str] = field(default_factory=set)
    edge_count: int = 0

    # Edges whose specifier came from import('...') rather than a static import
    dynamic_edges: set[tuple[str, str]] = field(default_factory=set)

    @property
    def imported_files(self) -> set[str]:
        """Every file that is the target of at least one edge."""
        return {target for target, importers in self.reverse.items() if importers}

    def importers_of(self, path: str) -> list[str]:
        return self.reverse.get(path, [])

    def summary(self) -> dict[str, int]:
        return {"total_files": len(self.all_nodes), "total_links": self.edge_count}


@dataclass(frozen=True)
class Cycle:
    """A closed import loop, stored as the path ``[f1, f2, ..., f1]``."""

    path: tuple[str, ...]

    @property
    def members(self) -> frozenset[str]:
        return frozenset(self.path)

    @property
    def key(self) -> str:
        """Identity of the cycle: its member set, independent of rotation."""
        return "|".join(sorted(self.members))

    def describe(self) -> str:
        return " -> ".join(self.path)
