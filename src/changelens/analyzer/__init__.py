"""ChangeLens Analyzer - incremental change-impact analysis.

Receives file-change events and:
- Answers each one immediately with a heuristic scope estimate
- Debounces bursts into batches bounded by batch_size
- Runs the concept extractor and pattern engine per change
- Scores blast radius from concepts, violations and dependent files
- Correlates a batch to detect architectural changes
- Writes confirmed findings back into the engines

Example:
    >>> from changelens.analyzer import ChangeAnalyzer, ChangeType, FileChange
    >>> from changelens.analyzer.memory import (
    ...     InMemoryConceptStore, NullPatternEngine, StoreConceptExtractor,
    ... )
    >>>
    >>> store = InMemoryConceptStore()
    >>> analyzer = ChangeAnalyzer(StoreConceptExtractor(store), NullPatternEngine(), store)
    >>> analyzer.subscribe("analysis:complete", on_analysis)
    >>> quick = await analyzer.analyze_change(
    ...     FileChange(path="package.json", change_type=ChangeType.ADD)
    ... )
    >>> quick.impact.scope
    <ImpactScope.PROJECT: 'project'>

Events:
    analysis:complete  - ChangeAnalysis from a batch
    batch:complete     - BatchSummary(count, insights)
    analysis:error     - AnalysisFailure(error, remaining)
    learning:error     - LearningFailure(error, analysis)
"""

from changelens.analyzer.analyzer import ChangeAnalyzer
from changelens.analyzer.dependents import find_dependent_files
from changelens.analyzer.events import AnalyzerEvent, ListenerRegistry
from changelens.analyzer.models import (
    AnalysisFailure,
    BatchSummary,
    ChangeAnalysis,
    ChangeType,
    FileChange,
    Impact,
    ImpactScope,
    Intelligence,
    LearningFailure,
    PatternFindings,
)
from changelens.analyzer.protocols import (
    Concept,
    ConceptExtractor,
    ConceptStore,
    PatternAnalysisResult,
    PatternEngine,
    StoredConcept,
)
from changelens.analyzer.scheduler import DeferredTask

__all__ = [
    # Analyzer
    "ChangeAnalyzer",
    "find_dependent_files",
    "DeferredTask",
    # Events
    "AnalyzerEvent",
    "ListenerRegistry",
    # Models
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
    # Collaborator contracts
    "Concept",
    "StoredConcept",
    "PatternAnalysisResult",
    "ConceptExtractor",
    "PatternEngine",
    "ConceptStore",
]
