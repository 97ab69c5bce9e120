"""Tests for lightweight path heuristics, change models and language detection."""

from __future__ import annotations

import pytest

from changelens.analyzer.heuristics import (
    estimate_scope,
    has_test_marker,
    lightweight_analysis,
    minimal_analysis,
    suggested_actions,
)
from changelens.analyzer.models import ChangeType, FileChange, ImpactScope
from changelens.languages import detect_language, is_statically_typed, is_text_file


def make_change(path: str, change_type: ChangeType = ChangeType.CHANGE, language: str | None = None) -> FileChange:
    return FileChange(path=path, change_type=change_type, language=language)


class TestEstimateScope:
    """Tests for scope estimation from paths."""

    @pytest.mark.parametrize(
        "path",
        ["package.json", "frontend/package.json", "Cargo.toml", "go.mod", "pyproject.toml", "tsconfig.json"],
    )
    def test_manifests_are_project_scoped(self, path: str) -> None:
        assert estimate_scope(make_change(path)) == ImpactScope.PROJECT

    @pytest.mark.parametrize(
        "path",
        [
            "tests/unit/test_api.py",
            "src/__tests__/server.ts",
            "src/server.spec.ts",
            "src/UserServiceTest.java",
            "pkg/handler_test.go",
        ],
    )
    def test_test_files_are_module_scoped(self, path: str) -> None:
        assert estimate_scope(make_change(path)) == ImpactScope.MODULE

    @pytest.mark.parametrize("path", ["src/index.ts", "src/parser/mod.rs", "pkg/__init__.py"])
    def test_module_roots_are_module_scoped(self, path: str) -> None:
        assert estimate_scope(make_change(path)) == ImpactScope.MODULE

    @pytest.mark.parametrize("path", ["src/app.py", "lib/latest.py", "src/inspector.ts", "mypackage.json"])
    def test_other_files_are_file_scoped(self, path: str) -> None:
        assert estimate_scope(make_change(path)) == ImpactScope.FILE

    def test_manifest_wins_over_test_marker(self) -> None:
        assert estimate_scope(make_change("tests/fixtures/package.json")) == ImpactScope.PROJECT

    def test_has_test_marker_uses_whole_words(self) -> None:
        assert has_test_marker("tests/test_foo.py") is True
        assert has_test_marker("src/contest.py") is False


class TestSuggestedActions:
    """Tests for suggested actions keyed by change type."""

    def test_add(self) -> None:
        assert suggested_actions(make_change("a.py", ChangeType.ADD)) == [
            "Update documentation",
            "Add tests if applicable",
        ]

    def test_change(self) -> None:
        assert suggested_actions(make_change("a.py", ChangeType.CHANGE)) == [
            "Review related tests",
            "Check for breaking changes",
        ]

    def test_unlink(self) -> None:
        assert suggested_actions(make_change("a.py", ChangeType.UNLINK)) == [
            "Remove related tests",
            "Update imports/dependencies",
        ]

    def test_statically_typed_language_adds_type_check(self) -> None:
        actions = suggested_actions(make_change("a.ts", ChangeType.CHANGE, language="typescript"))
        assert actions[-1] == "Run type checking"

    def test_dynamic_language_has_no_type_check(self) -> None:
        actions = suggested_actions(make_change("a.py", ChangeType.CHANGE, language="python"))
        assert "Run type checking" not in actions


class TestLightweightAnalysis:
    """Tests for the fast-path analysis builders."""

    def test_manifest_add(self) -> None:
        analysis = lightweight_analysis(make_change("package.json", ChangeType.ADD))

        assert analysis.impact.scope == ImpactScope.PROJECT
        assert analysis.impact.confidence == 0.5
        assert "Update documentation" in analysis.impact.suggested_actions
        assert analysis.impact.affected_concepts == []
        assert analysis.intelligence.insights == []

    def test_minimal_analysis(self) -> None:
        analysis = minimal_analysis(make_change("package.json", ChangeType.ADD, language="json"))

        assert analysis.impact.scope == ImpactScope.FILE
        assert analysis.impact.confidence == 0.1
        assert analysis.impact.suggested_actions == []
        assert analysis.intelligence.insights == ["Real-time analysis disabled"]

    def test_each_call_builds_a_fresh_object(self) -> None:
        change = make_change("src/app.py")
        first = lightweight_analysis(change)
        second = lightweight_analysis(change)

        assert first is not second
        assert first.impact is not second.impact


class TestModels:
    """Tests for change and analysis models."""

    def test_scope_escalation_only_widens(self) -> None:
        assert ImpactScope.FILE.escalate(ImpactScope.MODULE) == ImpactScope.MODULE
        assert ImpactScope.PROJECT.escalate(ImpactScope.MODULE) == ImpactScope.PROJECT
        assert ImpactScope.MODULE.escalate(ImpactScope.FILE) == ImpactScope.MODULE

    def test_file_change_is_immutable(self) -> None:
        change = make_change("src/app.py")
        with pytest.raises(AttributeError):
            change.path = "other.py"  # type: ignore[misc]

    def test_analysis_to_dict(self) -> None:
        analysis = lightweight_analysis(make_change("package.json", ChangeType.ADD, language="json"))
        d = analysis.to_dict()

        assert d["change"]["path"] == "package.json"
        assert d["change"]["change_type"] == "add"
        assert "content" not in d["change"]
        assert d["impact"]["scope"] == "project"
        assert d["patterns"] == {"detected": [], "violations": [], "recommendations": []}
        assert d["intelligence"]["concepts_updated"] == 0


class TestLanguages:
    """Tests for extension-based language detection."""

    def test_detect_language(self) -> None:
        assert detect_language("src/app.tsx") == "typescript"
        assert detect_language("main.RS") == "rust"
        assert detect_language("README") is None

    def test_is_text_file(self) -> None:
        assert is_text_file("notes.txt") is True
        assert is_text_file(".gitignore") is True
        assert is_text_file("image.png") is False

    def test_is_statically_typed(self) -> None:
        assert is_statically_typed("TypeScript") is True
        assert is_statically_typed("python") is False
        assert is_statically_typed(None) is False
