"""Data models for the persisted cross-run memory.

Every record is a plain dataclass of JSON-friendly values. ``from_dict``
accepts the keys written by older versions of the tool (camelCase) so an
existing memory file keeps its history after an upgrade.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

SCHEMA_VERSION = 3

CHECK_FILE_EXISTS = "file_exists"
CHECK_CONTENT_CONTAINS = "content_contains"
CHECK_TEST_PASSES = "test_passes"
CHECK_TYPES = (CHECK_FILE_EXISTS, CHECK_CONTENT_CONTAINS, CHECK_TEST_PASSES)

PRIORITY_HIGH = "HIGH"
PRIORITY_MEDIUM = "MEDIUM"

_LEGACY_PRIORITIES = {"HAUTE": PRIORITY_HIGH, "MOYENNE": PRIORITY_MEDIUM}


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _optional_str(value: Any) -> Optional[str]:
    """Scalars become strings; lists and objects are a bad shape (TypeError)."""
    if value is None:
        return None
    if isinstance(value, (list, dict)):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return str(value)


def _optional_int(value: Any) -> Optional[int]:
    """``int()`` of the value; a non-numeric string raises ValueError."""
    if value is None:
        return None
    if isinstance(value, (list, dict)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    return int(float(value))


@dataclass
class PhaseSummary:
    name: str
    score: int
    max: int

    @classmethod
    def from_dict(cls, data: dict) -> "PhaseSummary":
        return cls(
            name=str(data.get("name", "")),
            score=int(data.get("score", 0)),
            max=int(_pick(data, "max", "max_score", default=0)),
        )


@dataclass
class RunRecord:
    date: str
    score: int
    confidence: str
    phases: list[PhaseSummary] = field(default_factory=list)
    mode: str = "full"
    duration: float = 0.0
    bundle_size_kb: Optional[int] = None
    commit: Optional[str] = None
    errors: int = 0
    recommendations: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "RunRecord":
        duration = _pick(data, "duration", default=0.0)
        if isinstance(duration, str):
            duration = float(duration.rstrip("s") or 0)
        return cls(
            date=str(data.get("date", "")),
            score=int(data.get("score", 0)),
            confidence=str(data.get("confidence", "")),
            phases=[PhaseSummary.from_dict(p) for p in data.get("phases") or []],
            mode=str(data.get("mode", "full")),
            duration=float(duration),
            bundle_size_kb=_optional_int(_pick(data, "bundle_size_kb", "bundleSize")),
            commit=_optional_str(data.get("commit")),
            errors=int(data.get("errors", 0)),
            recommendations=int(data.get("recommendations", 0)),
        )


@dataclass
class ErrorCheck:
    """How to re-verify that a recorded defect is still fixed."""

    type: str
    value: Optional[str] = None
    cmd: Optional[str] = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["ErrorCheck"]:
        if not isinstance(data, dict) or data.get("type") not in CHECK_TYPES:
            return None
        return cls(
            type=data["type"],
            value=_optional_str(data.get("value")),
            cmd=_optional_str(data.get("cmd")),
        )


@dataclass
class ErrorRecord:
    phase: str
    description: str
    date: str = ""
    file: Optional[str] = None
    check: Optional[ErrorCheck] = None

    def to_dict(self) -> dict:
        return {
            "phase": self.phase,
            "description": self.description,
            "date": self.date,
            "file": self.file,
            "check": self.check.to_dict() if self.check else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ErrorRecord":
        return cls(
            phase=str(data.get("phase", "")),
            description=str(data.get("description", "")),
            date=str(data.get("date", "")),
            file=_optional_str(data.get("file")),
            check=ErrorCheck.from_dict(data.get("check")),
        )


@dataclass
class RecommendationRecord:
    source: str
    text: str
    title: str
    explain: str = ""
    action: str = ""
    impact: str = ""
    priority: str = PRIORITY_MEDIUM
    created_at: str = ""
    followed: bool = False
    followed_at: Optional[str] = None
    occurrences: int = 1

    @property
    def is_high(self) -> bool:
        return self.priority == PRIORITY_HIGH

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "RecommendationRecord":
        priority = str(data.get("priority", PRIORITY_MEDIUM))
        return cls(
            source=str(data.get("source", "")),
            text=str(data.get("text", "")),
            title=str(data.get("title", "")),
            explain=str(data.get("explain", "")),
            action=str(data.get("action", "")),
            impact=str(data.get("impact", "")),
            priority=_LEGACY_PRIORITIES.get(priority, priority),
            created_at=str(_pick(data, "created_at", "createdAt", default="")),
            followed=bool(data.get("followed", False)),
            followed_at=_optional_str(_pick(data, "followed_at", "followedAt")),
            occurrences=int(data.get("occurrences", 1)),
        )


@dataclass
class GraphSummary:
    """File and edge counts of the last dependency graph, kept for trend display."""

    total_files: int = 0
    total_links: int = 0
    updated_at: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["GraphSummary"]:
        if not isinstance(data, dict):
            return None
        return cls(
            total_files=int(_pick(data, "total_files", "totalFiles", default=0)),
            total_links=int(_pick(data, "total_links", "totalLinks", default=0)),
            updated_at=str(_pick(data, "updated_at", "updatedAt", default="")),
        )


@dataclass
class Memory:
    version: int = SCHEMA_VERSION
    runs: list[RunRecord] = field(default_factory=list)
    errors: list[ErrorRecord] = field(default_factory=list)
    recommendations: list[RecommendationRecord] = field(default_factory=list)
    last_run_commit: Optional[str] = None
    dependency_graph: Optional[GraphSummary] = None

    @property
    def last_run(self) -> Optional[RunRecord]:
        return self.runs[-1] if self.runs else None

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "runs": [r.to_dict() for r in self.runs],
            "errors": [e.to_dict() for e in self.errors],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "last_run_commit": self.last_run_commit,
            "dependency_graph": self.dependency_graph.to_dict() if self.dependency_graph else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Memory":
        """Build from parsed JSON. Raises TypeError/ValueError/KeyError on a bad shape."""
        for key in ("runs", "errors", "recommendations"):
            if not isinstance(data.get(key, []), list):
                raise TypeError(f"'{key}' must be a list")
        return cls(
            version=SCHEMA_VERSION,
            runs=[RunRecord.from_dict(r) for r in data.get("runs", [])],
            errors=[ErrorRecord.from_dict(e) for e in data.get("errors", [])],
            recommendations=[
                RecommendationRecord.from_dict(r) for r in data.get("recommendations", [])
            ],
            last_run_commit=_optional_str(_pick(data, "last_run_commit", "lastRunCommit")),
            dependency_graph=GraphSummary.from_dict(
                _pick(data, "dependency_graph", "dependencyGraph")
            ),
        )
