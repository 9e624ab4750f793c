"""Phase results and the per-run audit context."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from ..config import AuditConfig, ScoringThresholds
from ..graph.models import DependencyGraph
from ..memory.models import Memory
from ..scanning.models import SourceFile
from ..tools.runner import CommandResult, CommandRunner
from ..wiring.handlers import HandlerRegistry


@dataclass
class Phase:
    """Outcome of one audit phase.

    ``findings`` are informational lines for the report; ``details`` are
    actionable problems that feed recommendations and the error log.
    ``metrics`` carries values later phases or the run record need. An
    unscored phase is reported but left out of the aggregate.
    """

    name: str
    score: int
    max_score: int
    findings: list[str] = field(default_factory=list)
    details: list[str] = field(default_factory=list)
    metrics: dict[str, Any] = field(default_factory=dict)
    scored: bool = True

    def __post_init__(self) -> None:
        self.score = max(0, min(self.max_score, int(self.score)))

    @property
    def ratio(self) -> float:
        return self.score / self.max_score if self.max_score else 0.0

    @property
    def percent(self) -> int:
        return round(self.ratio * 100)


@dataclass
class AuditContext:
    """Everything a phase may read. Built once per run by the engine."""

    root: Path
    config: AuditConfig
    files: list[SourceFile]
    corpus: list[SourceFile]
    graph: DependencyGraph
    registry: HandlerRegistry
    memory: Memory
    runner: CommandRunner
    changed_files: list[str] = field(default_factory=list)
    phases: list[Phase] = field(default_factory=list)

    @property
    def thresholds(self) -> ScoringThresholds:
        return self.config.thresholds

    def path(self, relative: str) -> Path:
        return self.root / relative

    def read(self, relative: str) -> str:
        try:
            return self.path(relative).read_text(encoding="utf-8", errors="replace")
        except OSError:
            return ""

    def file(self, relative: str) -> Optional[SourceFile]:
        for sf in self.files:
            if sf.path == relative:
                return sf
        return None

    def run(self, command: str, timeout: Optional[int] = None) -> CommandResult:
        return self.runner.run(command, timeout=timeout or self.config.command_timeout_seconds)

    def metric(self, key: str, default: Any = None) -> Any:
        """Latest value of ``key`` published by an earlier phase."""
        for phase in reversed(self.phases):
            if key in phase.metrics:
                return phase.metrics[key]
        return default


PhaseFunc = Callable[[AuditContext], Phase]
