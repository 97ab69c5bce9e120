"""Tests for analysis output formatting."""

from __future__ import annotations

import json

from rich.console import Console

from changelens.analyzer.models import (
    ChangeAnalysis,
    ChangeType,
    FileChange,
    Impact,
    ImpactScope,
    Intelligence,
    PatternFindings,
)
from changelens.output import build_analysis_table, format_analysis_json, print_analysis


def make_analysis() -> ChangeAnalysis:
    return ChangeAnalysis(
        change=FileChange(path="src/service.py", change_type=ChangeType.CHANGE, content="secret = 1\n"),
        impact=Impact(
            scope=ImpactScope.MODULE,
            confidence=0.8,
            affected_concepts=["OrderService"],
            suggested_actions=["Review related tests"],
        ),
        patterns=PatternFindings(violations=["god-object"]),
        intelligence=Intelligence(insights=["Found 1 pattern violations"]),
    )


class TestFormatAnalysisJson:
    """Tests for JSON output."""

    def test_serializes_analysis(self) -> None:
        data = json.loads(format_analysis_json(make_analysis()))

        assert data["change"]["path"] == "src/service.py"
        assert data["impact"]["scope"] == "module"
        assert data["impact"]["confidence"] == 0.8
        assert data["patterns"]["violations"] == ["god-object"]

    def test_content_is_not_serialized(self) -> None:
        assert "secret" not in format_analysis_json(make_analysis())


class TestAnalysisTable:
    """Tests for rich table output."""

    def test_rows(self) -> None:
        table = build_analysis_table(make_analysis())
        console = Console(record=True, width=120)
        console.print(table)
        text = console.export_text()

        assert "change src/service.py" in text
        assert "module" in text
        assert "0.80" in text
        assert "OrderService" in text
        assert "god-object" in text
        assert "Found 1 pattern violations" in text

    def test_empty_rows_are_omitted(self) -> None:
        analysis = ChangeAnalysis(change=FileChange(path="a.py", change_type=ChangeType.ADD))
        console = Console(record=True, width=120)
        console.print(build_analysis_table(analysis))
        text = console.export_text()

        assert "Concepts" not in text
        assert "Violations" not in text

    def test_print_analysis_json(self) -> None:
        console = Console(record=True, width=120)
        print_analysis(console, make_analysis(), as_json=True)

        assert json.loads(console.export_text())["impact"]["scope"] == "module"
