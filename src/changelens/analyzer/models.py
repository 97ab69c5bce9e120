"""Data models for change-impact analysis.

Defines the change events consumed by the analyzer and the analyses,
batch summaries and failure reports it emits.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ChangeType(str, Enum):
    """Kind of filesystem mutation."""

    ADD = "add"
    CHANGE = "change"
    UNLINK = "unlink"


class ImpactScope(str, Enum):
    """Estimated blast radius of a change, narrowest first."""

    FILE = "file"
    MODULE = "module"
    PROJECT = "project"

    @property
    def rank(self) -> int:
        return _SCOPE_ORDER.index(self)

    def escalate(self, other: ImpactScope) -> ImpactScope:
        """Return the wider of this scope and other."""
        return other if other.rank > self.rank else self


_SCOPE_ORDER = (ImpactScope.FILE, ImpactScope.MODULE, ImpactScope.PROJECT)


@dataclass(frozen=True)
class FileChange:
    """A file change event from the change source.

    Attributes:
        path: Path of the changed file
        change_type: 'add', 'change' or 'unlink'
        content: File content, when it was read
        language: Language tag detected from the file extension
        content_hash: sha256 of content, when content was read
        timestamp: Unix timestamp when the change was detected
    """

    path: str
    change_type: ChangeType
    content: str | None = None
    language: str | None = None
    content_hash: str | None = None
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Content is omitted; only its hash travels with the event.
        """
        return {
            "path": self.path,
            "change_type": self.change_type.value,
            "language": self.language,
            "content_hash": self.content_hash,
            "timestamp": self.timestamp,
        }


@dataclass
class Impact:
    """Scored blast radius of a change."""

    scope: ImpactScope = ImpactScope.FILE
    confidence: float = 0.5
    affected_concepts: list[str] = field(default_factory=list)
    suggested_actions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scope": self.scope.value,
            "confidence": round(self.confidence, 4),
            "affected_concepts": list(self.affected_concepts),
            "suggested_actions": list(self.suggested_actions),
        }


@dataclass
class PatternFindings:
    """Patterns the pattern engine reported for a change."""

    detected: list[str] = field(default_factory=list)
    violations: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "detected": list(self.detected),
            "violations": list(self.violations),
            "recommendations": list(self.recommendations),
        }


@dataclass
class Intelligence:
    """What the analysis taught the learning stores."""

    concepts_updated: int = 0
    patterns_learned: int = 0
    insights: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "concepts_updated": self.concepts_updated,
            "patterns_learned": self.patterns_learned,
            "insights": list(self.insights),
        }


@dataclass
class ChangeAnalysis:
    """Scored, explainable analysis of a single change.

    Once returned to a caller or emitted to listeners the analyzer never
    touches the object again.
    """

    change: FileChange
    impact: Impact = field(default_factory=Impact)
    patterns: PatternFindings = field(default_factory=PatternFindings)
    intelligence: Intelligence = field(default_factory=Intelligence)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "change": self.change.to_dict(),
            "impact": self.impact.to_dict(),
            "patterns": self.patterns.to_dict(),
            "intelligence": self.intelligence.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class BatchSummary:
    """Payload of a batch:complete event."""

    count: int
    insights: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"count": self.count, "insights": list(self.insights)}


@dataclass(frozen=True)
class AnalysisFailure:
    """Payload of an analysis:error event.

    Attributes:
        error: The exception that dropped the batch
        remaining: Queue depth after the failed drain
    """

    error: Exception
    remaining: int

    def to_dict(self) -> dict[str, Any]:
        return {"error": str(self.error), "remaining": self.remaining}


@dataclass(frozen=True)
class LearningFailure:
    """Payload of a learning:error event."""

    error: Exception
    analysis: ChangeAnalysis

    def to_dict(self) -> dict[str, Any]:
        return {"error": str(self.error), "path": self.analysis.change.path}


__all__ = [
    "ChangeType",
    "ImpactScope",
    "FileChange",
    "Impact",
    "PatternFindings",
    "Intelligence",
    "ChangeAnalysis",
    "BatchSummary",
    "AnalysisFailure",
    "LearningFailure",
]
