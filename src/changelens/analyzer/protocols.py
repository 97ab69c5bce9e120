"""Contracts of the external collaborators consumed by the analyzer.

The concept extractor, pattern engine and concept store are owned outside
ChangeLens; the analyzer only depends on these shapes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from changelens.analyzer.models import ChangeAnalysis, FileChange


@dataclass(frozen=True)
class Concept:
    """A semantic unit found in file content."""

    name: str
    concept_type: str = "unknown"
    confidence: float = 1.0


@dataclass(frozen=True)
class StoredConcept:
    """A concept row recorded against a file in the concept store."""

    concept_name: str
    file_path: str


@dataclass
class PatternAnalysisResult:
    """Result of the pattern engine's change analysis."""

    detected: list[str] = field(default_factory=list)
    violations: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    learned: list[Any] | None = None


@runtime_checkable
class ConceptExtractor(Protocol):
    """Extracts semantic concepts from file content."""

    async def analyze_file_content(self, path: str, content: str) -> Sequence[Concept]:
        """Return the concepts present in content."""
        ...

    async def update_from_analysis(self, analysis: ChangeAnalysis) -> None:
        """Absorb a completed analysis."""
        ...


@runtime_checkable
class PatternEngine(Protocol):
    """Detects and learns recurring structural idioms."""

    async def analyze_file_change(self, change: FileChange) -> PatternAnalysisResult:
        """Return detected, violated and recommended patterns for change."""
        ...

    async def learn_from_analysis(self, analysis: ChangeAnalysis) -> None:
        """Absorb a completed analysis."""
        ...


@runtime_checkable
class ConceptStore(Protocol):
    """Persisted mapping from file path to recorded concepts."""

    def get_concepts(self, path: str | None = None) -> Sequence[StoredConcept]:
        """Return concepts recorded for path, or the full table when omitted."""
        ...


__all__ = [
    "Concept",
    "StoredConcept",
    "PatternAnalysisResult",
    "ConceptExtractor",
    "PatternEngine",
    "ConceptStore",
]
