"""In-memory collaborators for wiring the analyzer without external engines.

These implement the collaborator protocols without a parser or a pattern
detector: concepts come from a lexical scan of declarations and imports.
Real extractors and engines are plugged in through the [engines] config
section.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from changelens.analyzer.protocols import Concept, PatternAnalysisResult, StoredConcept

if TYPE_CHECKING:
    from changelens.analyzer.models import ChangeAnalysis, FileChange


# Type-like declarations: class, interface, struct, trait, enum, type alias
DECLARATION_RE = re.compile(
    r"^\s*(?:export\s+)?(?:default\s+)?(?:abstract\s+|data\s+|sealed\s+)?"
    r"(?:pub(?:\([\w\s]+\))?\s+)?(?:public\s+|private\s+|internal\s+)?"
    r"(class|interface|struct|trait|enum|type)\s+([A-Z]\w*)",
    re.MULTILINE,
)
PY_FROM_IMPORT_RE = re.compile(
    r"^[ \t]*from[ \t]+[\w.]+[ \t]+import[ \t]+(?:\(([^)]*)\)|([\w \t,]+))", re.MULTILINE
)
JS_NAMED_IMPORT_RE = re.compile(
    r"^\s*import\s+(?:type\s+)?(?:(\w+)\s*,?\s*)?(?:\{([^}]*)\})?\s*from\s",
    re.MULTILINE,
)
RUST_USE_RE = re.compile(
    r"^\s*(?:pub\s+)?use\s+[\w:]*?(?:::)?(?:\{([^}]*)\}|(\w+))\s*;",
    re.MULTILINE,
)

_TYPE_NAME_RE = re.compile(r"^[A-Z]\w*$")


def _imported_names(fragment: str) -> list[str]:
    """Type-like names from an import list, honoring 'X as Y' aliases."""
    names: list[str] = []
    for item in fragment.split(","):
        words = item.split()
        if not words:
            continue
        # "User as Account" imports the User concept
        name = words[0]
        if _TYPE_NAME_RE.match(name):
            names.append(name)
    return names


def extract_concepts(content: str) -> list[Concept]:
    """Find declared and imported type names in source text.

    A lexical scan, not a parser: declarations become concepts typed by
    their keyword, and capitalized names pulled in by Python, JS/TS and
    Rust imports become "import" concepts. Files that declare a type and
    files that import it therefore share that concept.
    """
    found: dict[str, Concept] = {}

    for match in DECLARATION_RE.finditer(content):
        name = match.group(2)
        found.setdefault(name, Concept(name, concept_type=match.group(1)))

    imported: list[str] = []
    for match in PY_FROM_IMPORT_RE.finditer(content):
        imported.extend(_imported_names(match.group(1) or match.group(2)))
    for match in JS_NAMED_IMPORT_RE.finditer(content):
        default, named = match.groups()
        imported.extend(_imported_names(default or ""))
        imported.extend(_imported_names(named or ""))
    for match in RUST_USE_RE.finditer(content):
        imported.extend(_imported_names(match.group(1) or match.group(2) or ""))

    for name in imported:
        found.setdefault(name, Concept(name, concept_type="import"))

    return list(found.values())


class InMemoryConceptStore:
    """Concept store backed by a dict of file path to concept names."""

    def __init__(self) -> None:
        self._concepts: dict[str, list[str]] = {}

    def record(self, file_path: str, concept_names: Iterable[str]) -> None:
        """Replace the concepts recorded for a file."""
        self._concepts[file_path] = list(dict.fromkeys(concept_names))

    def remove(self, file_path: str) -> None:
        """Forget all concepts recorded for a file."""
        self._concepts.pop(file_path, None)

    def get_concepts(self, path: str | None = None) -> list[StoredConcept]:
        if path is not None:
            return [StoredConcept(name, path) for name in self._concepts.get(path, [])]
        return [
            StoredConcept(name, file_path)
            for file_path, names in self._concepts.items()
            for name in names
        ]

    def __len__(self) -> int:
        return sum(len(names) for names in self._concepts.values())


class StoreConceptExtractor:
    """Extractor that scans declarations and imports and records them in a store.

    Stands in where no semantic engine is configured. Concepts reach the
    store through update_from_analysis once a batch confirms them, which
    is what dependent lookup and cross-file correlation read.
    """

    def __init__(self, store: InMemoryConceptStore | None = None) -> None:
        self.store = store

    async def analyze_file_content(self, path: str, content: str) -> Sequence[Concept]:
        return extract_concepts(content)

    async def update_from_analysis(self, analysis: ChangeAnalysis) -> None:
        if self.store is None:
            return
        self.store.record(analysis.change.path, analysis.impact.affected_concepts)


class NullPatternEngine:
    """Pattern engine that detects nothing and counts learning calls."""

    def __init__(self, store: object | None = None) -> None:
        self.learn_calls = 0

    async def analyze_file_change(self, change: FileChange) -> PatternAnalysisResult:
        return PatternAnalysisResult()

    async def learn_from_analysis(self, analysis: ChangeAnalysis) -> None:
        self.learn_calls += 1


__all__ = [
    "extract_concepts",
    "InMemoryConceptStore",
    "StoreConceptExtractor",
    "NullPatternEngine",
]
