"""Impact scoring, insight generation and cross-file correlation.

All functions here are pure: they read already-computed analysis fields and
never call an engine or store.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from changelens.analyzer.heuristics import BASELINE_CONFIDENCE
from changelens.analyzer.models import ChangeAnalysis, Impact, ImpactScope

CONCEPT_CONFIDENCE_STEP = 0.1
CONCEPT_CONFIDENCE_CAP = 0.3
VIOLATION_CONFIDENCE_BOOST = 0.2
PROJECT_DEPENDENTS_BOOST = 0.3
MODULE_DEPENDENTS_BOOST = 0.1
ARCHITECTURAL_CONFIDENCE_STEP = 0.1

PROJECT_SCOPE_INSIGHT = "Change has project-wide impact - consider comprehensive testing"


def clamp_confidence(value: float) -> float:
    """Clamp a confidence value into [0, 1]."""
    return max(0.0, min(1.0, value))


def calculate_impact(
    analysis: ChangeAnalysis,
    dependent_count: int,
    module_threshold: int = 1,
    project_threshold: int = 5,
) -> Impact:
    """Score the blast radius of an analyzed change.

    Starts from a file-scoped baseline and applies, cumulatively:
    a capped boost per affected concept, module scope plus a boost when
    patterns were violated, and module or project scope plus a boost when
    more than module_threshold / project_threshold files depend on it.
    Scope only ever widens within one pass.

    Args:
        analysis: Analysis whose concepts and patterns are already filled in
        dependent_count: Number of files sharing concepts with the changed file
        module_threshold: Dependents above this escalate to module scope
        project_threshold: Dependents above this escalate to project scope

    Returns:
        A new Impact; the analysis itself is not modified
    """
    confidence = BASELINE_CONFIDENCE
    scope = ImpactScope.FILE

    concept_count = len(analysis.impact.affected_concepts)
    if concept_count > 0:
        confidence += min(CONCEPT_CONFIDENCE_CAP, concept_count * CONCEPT_CONFIDENCE_STEP)

    if analysis.patterns.violations:
        scope = scope.escalate(ImpactScope.MODULE)
        confidence += VIOLATION_CONFIDENCE_BOOST

    if dependent_count > project_threshold:
        scope = scope.escalate(ImpactScope.PROJECT)
        confidence += PROJECT_DEPENDENTS_BOOST
    elif dependent_count > module_threshold:
        scope = scope.escalate(ImpactScope.MODULE)
        confidence += MODULE_DEPENDENTS_BOOST

    return Impact(
        scope=scope,
        confidence=clamp_confidence(confidence),
        affected_concepts=list(analysis.impact.affected_concepts),
        suggested_actions=list(analysis.impact.suggested_actions),
    )


def generate_insights(analysis: ChangeAnalysis) -> list[str]:
    """Human-readable insights for an analysis, in a fixed order."""
    insights: list[str] = []

    detected = len(analysis.patterns.detected)
    if detected > 0:
        insights.append(f"Detected {detected} patterns in change")

    violations = len(analysis.patterns.violations)
    if violations > 0:
        insights.append(f"Found {violations} pattern violations")

    if analysis.impact.scope is ImpactScope.PROJECT:
        insights.append(PROJECT_SCOPE_INSIGHT)

    updated = analysis.intelligence.concepts_updated
    if updated > 0:
        insights.append(f"Updated understanding of {updated} concepts")

    return insights


@dataclass(frozen=True)
class ArchitecturalImpact:
    """Shared verdict for a batch that touches many concepts."""

    concept_count: int
    confidence: float
    insights: tuple[str, ...]


def unique_concepts(analyses: Sequence[ChangeAnalysis]) -> list[str]:
    """Union of affected concepts across analyses, first-seen order."""
    seen: dict[str, None] = {}
    for analysis in analyses:
        for name in analysis.impact.affected_concepts:
            seen.setdefault(name, None)
    return list(seen)


def assess_architectural_impact(
    analyses: Sequence[ChangeAnalysis],
    concept_threshold: int = 3,
) -> ArchitecturalImpact | None:
    """Decide whether a batch is an architectural change.

    Returns:
        The shared impact when more than concept_threshold unique concepts
        are affected across the batch, otherwise None
    """
    concepts = unique_concepts(analyses)
    count = len(concepts)
    if count <= concept_threshold:
        return None

    return ArchitecturalImpact(
        concept_count=count,
        confidence=min(1.0, count * ARCHITECTURAL_CONFIDENCE_STEP),
        insights=(
            f"Architectural change detected affecting {count} concepts",
            "Consider updating system documentation",
            "Review integration tests",
        ),
    )


def apply_architectural_impact(
    analyses: Sequence[ChangeAnalysis],
    verdict: ArchitecturalImpact,
) -> None:
    """Force every analysis in a batch to project scope with shared insights."""
    for analysis in analyses:
        analysis.impact.scope = ImpactScope.PROJECT
        analysis.impact.confidence = clamp_confidence(
            max(analysis.impact.confidence, verdict.confidence)
        )
        analysis.intelligence.insights.extend(verdict.insights)


__all__ = [
    "clamp_confidence",
    "calculate_impact",
    "generate_insights",
    "ArchitecturalImpact",
    "unique_concepts",
    "assess_architectural_impact",
    "apply_architectural_impact",
]
