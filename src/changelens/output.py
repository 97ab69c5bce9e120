"""Output formatting for analyses printed by CLI commands."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from changelens.analyzer.models import ChangeAnalysis, ImpactScope

SCOPE_STYLES = {
    ImpactScope.FILE: "green",
    ImpactScope.MODULE: "yellow",
    ImpactScope.PROJECT: "red",
}


def format_analysis_json(analysis: ChangeAnalysis) -> str:
    """Serialize an analysis as a single JSON line."""
    return json.dumps(analysis.to_dict())


def build_analysis_table(analysis: ChangeAnalysis) -> Table:
    """Build a two-column table summarizing an analysis."""
    impact = analysis.impact
    style = SCOPE_STYLES[impact.scope]

    table = Table(
        title=f"{analysis.change.change_type.value} {analysis.change.path}",
        show_header=False,
        title_justify="left",
    )
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Scope", f"[{style}]{impact.scope.value}[/{style}]")
    table.add_row("Confidence", f"{impact.confidence:.2f}")
    if impact.affected_concepts:
        table.add_row("Concepts", ", ".join(impact.affected_concepts))
    if analysis.patterns.detected:
        table.add_row("Patterns", ", ".join(analysis.patterns.detected))
    if analysis.patterns.violations:
        table.add_row("Violations", ", ".join(analysis.patterns.violations))
    if analysis.patterns.recommendations:
        table.add_row("Recommendations", "\n".join(analysis.patterns.recommendations))
    if impact.suggested_actions:
        table.add_row("Actions", "\n".join(impact.suggested_actions))
    if analysis.intelligence.insights:
        table.add_row("Insights", "\n".join(analysis.intelligence.insights))

    return table


def print_analysis(console: Console, analysis: ChangeAnalysis, as_json: bool = False) -> None:
    """Print an analysis as a table, or as JSON when requested."""
    if as_json:
        console.print_json(format_analysis_json(analysis))
    else:
        console.print(build_analysis_table(analysis))


__all__ = [
    "format_analysis_json",
    "build_analysis_table",
    "print_analysis",
]
