"""Tests for impact scoring, insights and cross-file correlation."""

from __future__ import annotations

import itertools

import pytest

from changelens.analyzer.models import (
    ChangeAnalysis,
    ChangeType,
    FileChange,
    Impact,
    ImpactScope,
    Intelligence,
    PatternFindings,
)
from changelens.analyzer.scoring import (
    apply_architectural_impact,
    assess_architectural_impact,
    calculate_impact,
    clamp_confidence,
    generate_insights,
    unique_concepts,
)


def make_analysis(
    path: str = "src/app.py",
    concepts: list[str] | None = None,
    detected: list[str] | None = None,
    violations: list[str] | None = None,
    concepts_updated: int = 0,
    scope: ImpactScope = ImpactScope.FILE,
) -> ChangeAnalysis:
    return ChangeAnalysis(
        change=FileChange(path=path, change_type=ChangeType.CHANGE),
        impact=Impact(
            scope=scope,
            affected_concepts=list(concepts or []),
            suggested_actions=["Review related tests"],
        ),
        patterns=PatternFindings(detected=list(detected or []), violations=list(violations or [])),
        intelligence=Intelligence(concepts_updated=concepts_updated),
    )


class TestCalculateImpact:
    """Tests for calculate_impact."""

    def test_baseline(self) -> None:
        impact = calculate_impact(make_analysis(), dependent_count=0)

        assert impact.scope == ImpactScope.FILE
        assert impact.confidence == pytest.approx(0.5)
        assert impact.suggested_actions == ["Review related tests"]

    def test_concepts_raise_confidence(self) -> None:
        impact = calculate_impact(make_analysis(concepts=["A", "B"]), dependent_count=0)
        assert impact.confidence == pytest.approx(0.7)

    def test_concept_boost_is_capped(self) -> None:
        impact = calculate_impact(make_analysis(concepts=list("ABCDEFG")), dependent_count=0)
        assert impact.confidence == pytest.approx(0.8)

    def test_violations_escalate_to_module(self) -> None:
        impact = calculate_impact(make_analysis(violations=["god-object"]), dependent_count=0)

        assert impact.scope == ImpactScope.MODULE
        assert impact.confidence == pytest.approx(0.7)

    def test_many_dependents_escalate_to_project(self) -> None:
        impact = calculate_impact(make_analysis(), dependent_count=6)

        assert impact.scope == ImpactScope.PROJECT
        assert impact.confidence == pytest.approx(0.8)

    def test_some_dependents_escalate_to_module(self) -> None:
        impact = calculate_impact(make_analysis(), dependent_count=2)

        assert impact.scope == ImpactScope.MODULE
        assert impact.confidence == pytest.approx(0.6)

    def test_single_dependent_has_no_effect(self) -> None:
        impact = calculate_impact(make_analysis(), dependent_count=1)

        assert impact.scope == ImpactScope.FILE
        assert impact.confidence == pytest.approx(0.5)

    def test_thresholds_are_configurable(self) -> None:
        impact = calculate_impact(make_analysis(), dependent_count=6, module_threshold=3, project_threshold=10)
        assert impact.scope == ImpactScope.MODULE

    def test_confidence_is_clamped(self) -> None:
        analysis = make_analysis(concepts=list("ABCD"), violations=["x"])
        impact = calculate_impact(analysis, dependent_count=20)

        assert impact.scope == ImpactScope.PROJECT
        assert impact.confidence == 1.0

    def test_does_not_modify_analysis(self) -> None:
        analysis = make_analysis(concepts=["A"], violations=["x"])
        impact = calculate_impact(analysis, dependent_count=9)

        assert analysis.impact.scope == ImpactScope.FILE
        assert impact.affected_concepts is not analysis.impact.affected_concepts

    def test_bounds_and_monotonic_scope_over_inputs(self) -> None:
        for concepts, violations, dependents in itertools.product(range(6), range(3), range(9)):
            analysis = make_analysis(
                concepts=[f"c{i}" for i in range(concepts)],
                violations=[f"v{i}" for i in range(violations)],
            )
            impact = calculate_impact(analysis, dependent_count=dependents)

            assert 0.0 <= impact.confidence <= 1.0
            if violations:
                assert impact.scope != ImpactScope.FILE
            if dependents > 5:
                assert impact.scope == ImpactScope.PROJECT

    def test_clamp_confidence(self) -> None:
        assert clamp_confidence(-0.2) == 0.0
        assert clamp_confidence(1.4) == 1.0
        assert clamp_confidence(0.3) == 0.3


class TestGenerateInsights:
    """Tests for generate_insights."""

    def test_empty(self) -> None:
        assert generate_insights(make_analysis()) == []

    def test_order(self) -> None:
        analysis = make_analysis(
            detected=["singleton", "factory"],
            violations=["god-object"],
            concepts_updated=3,
            scope=ImpactScope.PROJECT,
        )

        assert generate_insights(analysis) == [
            "Detected 2 patterns in change",
            "Found 1 pattern violations",
            "Change has project-wide impact - consider comprehensive testing",
            "Updated understanding of 3 concepts",
        ]

    def test_module_scope_has_no_warning(self) -> None:
        insights = generate_insights(make_analysis(scope=ImpactScope.MODULE))
        assert insights == []


class TestArchitecturalImpact:
    """Tests for cross-file correlation."""

    def test_unique_concepts_keeps_first_seen_order(self) -> None:
        analyses = [make_analysis(concepts=["B", "A"]), make_analysis(concepts=["A", "C"])]
        assert unique_concepts(analyses) == ["B", "A", "C"]

    def test_three_concepts_is_not_architectural(self) -> None:
        analyses = [make_analysis(concepts=["A", "B"]), make_analysis(concepts=["B", "C"])]
        assert assess_architectural_impact(analyses) is None

    def test_four_concepts_is_architectural(self) -> None:
        analyses = [make_analysis(concepts=["A", "B"]), make_analysis(concepts=["C", "D"])]
        verdict = assess_architectural_impact(analyses)

        assert verdict is not None
        assert verdict.concept_count == 4
        assert verdict.confidence == pytest.approx(0.4)
        assert verdict.insights[0] == "Architectural change detected affecting 4 concepts"

    def test_confidence_capped_at_one(self) -> None:
        analyses = [make_analysis(concepts=[f"c{i}" for i in range(15)]), make_analysis()]
        verdict = assess_architectural_impact(analyses)

        assert verdict is not None
        assert verdict.confidence == 1.0

    def test_apply_forces_project_scope(self) -> None:
        low = make_analysis(concepts=["A", "B"])
        low.impact.confidence = 0.2
        high = make_analysis(concepts=["C", "D"])
        high.impact.confidence = 0.9
        verdict = assess_architectural_impact([low, high])
        assert verdict is not None

        apply_architectural_impact([low, high], verdict)

        assert low.impact.scope == ImpactScope.PROJECT
        assert high.impact.scope == ImpactScope.PROJECT
        assert low.impact.confidence == pytest.approx(0.4)
        assert high.impact.confidence == pytest.approx(0.9)
        assert "Review integration tests" in low.intelligence.insights
        assert "Consider updating system documentation" in high.intelligence.insights
