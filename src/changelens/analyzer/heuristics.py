"""Path heuristics for the lightweight analysis fast path.

Everything here is local and synchronous: no engine or store is consulted.
"""

from __future__ import annotations

import re
from pathlib import PurePath

from changelens.analyzer.models import (
    ChangeAnalysis,
    ChangeType,
    FileChange,
    Impact,
    ImpactScope,
    Intelligence,
)
from changelens.languages import is_statically_typed

BASELINE_CONFIDENCE = 0.5
DISABLED_CONFIDENCE = 0.1
DISABLED_INSIGHT = "Real-time analysis disabled"

# Build and package manifests: touching one affects the whole project
PROJECT_MANIFESTS = frozenset(
    {
        "package.json",
        "tsconfig.json",
        "Cargo.toml",
        "go.mod",
        "pyproject.toml",
        "setup.py",
        "setup.cfg",
        "requirements.txt",
        "Pipfile",
        "pom.xml",
        "build.gradle",
        "build.gradle.kts",
        "composer.json",
        "Gemfile",
        "CMakeLists.txt",
        "Makefile",
    }
)

# Files that act as the root of a module or package
MODULE_ROOTS = frozenset(
    {
        "index.ts",
        "index.tsx",
        "index.js",
        "index.jsx",
        "mod.rs",
        "lib.rs",
        "__init__.py",
        "package-info.java",
    }
)

TEST_MARKERS = frozenset({"test", "tests", "spec", "specs", "testing"})

SUGGESTED_ACTIONS: dict[ChangeType, tuple[str, ...]] = {
    ChangeType.ADD: ("Update documentation", "Add tests if applicable"),
    ChangeType.CHANGE: ("Review related tests", "Check for breaking changes"),
    ChangeType.UNLINK: ("Remove related tests", "Update imports/dependencies"),
}

TYPE_CHECK_ACTION = "Run type checking"

# Splits camelCase and snake/kebab/dotted names into lowercase-able words
_WORD_RE = re.compile(r"[A-Z]?[a-z0-9]+|[A-Z]+(?![a-z])")


def _path_tokens(path: str) -> set[str]:
    return {word.lower() for word in _WORD_RE.findall(path)}


def has_test_marker(path: str) -> bool:
    """Check whether a path names a test or spec file or directory."""
    return not TEST_MARKERS.isdisjoint(_path_tokens(path))


def estimate_scope(change: FileChange) -> ImpactScope:
    """Estimate a change's scope from its path alone."""
    name = PurePath(change.path).name

    if name in PROJECT_MANIFESTS:
        return ImpactScope.PROJECT
    if has_test_marker(change.path):
        return ImpactScope.MODULE
    if name in MODULE_ROOTS:
        return ImpactScope.MODULE
    return ImpactScope.FILE


def suggested_actions(change: FileChange) -> list[str]:
    """Follow-up actions for a change, keyed by its type."""
    actions = list(SUGGESTED_ACTIONS.get(change.change_type, ()))
    if is_statically_typed(change.language):
        actions.append(TYPE_CHECK_ACTION)
    return actions


def lightweight_analysis(change: FileChange) -> ChangeAnalysis:
    """Build a fresh heuristic analysis for change."""
    return ChangeAnalysis(
        change=change,
        impact=Impact(
            scope=estimate_scope(change),
            confidence=BASELINE_CONFIDENCE,
            suggested_actions=suggested_actions(change),
        ),
    )


def minimal_analysis(change: FileChange) -> ChangeAnalysis:
    """Fixed analysis returned while real-time analysis is disabled."""
    return ChangeAnalysis(
        change=change,
        impact=Impact(scope=ImpactScope.FILE, confidence=DISABLED_CONFIDENCE),
        intelligence=Intelligence(insights=[DISABLED_INSIGHT]),
    )


__all__ = [
    "PROJECT_MANIFESTS",
    "MODULE_ROOTS",
    "has_test_marker",
    "estimate_scope",
    "suggested_actions",
    "lightweight_analysis",
    "minimal_analysis",
]
