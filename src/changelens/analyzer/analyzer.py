"""Change analyzer: incremental change-impact analysis.

Answers each change immediately with a heuristic analysis, queues it, and
drains the queue in debounced batches that run the concept extractor and
pattern engine, score impact, correlate the batch, and write confirmed
findings back into the engines.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable

from changelens.analyzer.dependents import find_dependent_files
from changelens.analyzer.events import AnalyzerEvent, Listener, ListenerRegistry
from changelens.analyzer.heuristics import lightweight_analysis, minimal_analysis
from changelens.analyzer.models import (
    AnalysisFailure,
    BatchSummary,
    ChangeAnalysis,
    ChangeType,
    FileChange,
    LearningFailure,
)
from changelens.analyzer.protocols import ConceptExtractor, ConceptStore, PatternEngine
from changelens.analyzer.scheduler import DeferredTask
from changelens.analyzer.scoring import (
    apply_architectural_impact,
    assess_architectural_impact,
    calculate_impact,
    generate_insights,
)
from changelens.config import AnalyzerOptions
from changelens.errors import LearningError

logger = logging.getLogger(__name__)


class ChangeAnalyzer:
    """Analyze file changes incrementally with debounced batching.

    States: idle, batch-scheduled (debounce timer armed) and batch-running
    (is_analyzing). Every enqueue re-arms the timer; when it fires at most
    batch_size changes are drained and analyzed in FIFO order. Only one
    batch runs at a time, and leftover changes re-arm the timer once the
    batch finishes. All state lives on one event loop, so no locks are used.

    Attributes:
        extractor: Concept extractor for full analysis and learning
        pattern_engine: Pattern engine for full analysis and learning
        store: Concept store used for dependent-file lookups
        options: Analyzer options, fixed at construction
    """

    def __init__(
        self,
        extractor: ConceptExtractor,
        pattern_engine: PatternEngine,
        store: ConceptStore,
        options: AnalyzerOptions | None = None,
    ) -> None:
        """Initialize the change analyzer.

        Args:
            extractor: Concept extractor
            pattern_engine: Pattern engine
            store: Concept store
            options: Analyzer options (defaults if omitted)
        """
        self.extractor = extractor
        self.pattern_engine = pattern_engine
        self.store = store
        self.options = options or AnalyzerOptions()

        self._real_time = self.options.enable_real_time_analysis
        self._queue: deque[FileChange] = deque()
        self._analyzing = False
        # Set whenever no batch is running
        self._idle = asyncio.Event()
        self._idle.set()
        self._timer = DeferredTask(self._on_timer)
        self._listeners = ListenerRegistry()
        self._learning_tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Listener registration
    # ------------------------------------------------------------------

    def subscribe(self, event: AnalyzerEvent | str, callback: Listener) -> None:
        """Subscribe an async callback to an analyzer event."""
        self._listeners.subscribe(event, callback)

    def unsubscribe(self, event: AnalyzerEvent | str, callback: Listener) -> None:
        """Remove a previously subscribed callback."""
        self._listeners.unsubscribe(event, callback)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def analyze_change(self, change: FileChange) -> ChangeAnalysis:
        """Analyze a change immediately and queue it for batch analysis.

        Never calls an engine or store and never raises for a well-formed
        change. With real-time analysis disabled the change is not queued
        and a fixed minimal analysis is returned.

        Args:
            change: The file change to analyze

        Returns:
            Heuristic analysis of the change
        """
        if not self._real_time:
            return minimal_analysis(change)

        self._queue.append(change)
        self._schedule_batch()

        return lightweight_analysis(change)

    async def analyze_batch(self, changes: list[FileChange]) -> list[ChangeAnalysis]:
        """Fully analyze changes in order, then correlate them.

        Does not touch the queue; process_batch() drains it through here.

        Args:
            changes: Changes to analyze

        Returns:
            One analysis per change, in input order
        """
        analyses: list[ChangeAnalysis] = []
        for change in changes:
            analyses.append(await self.analyze_full(change))

        if len(analyses) > 1:
            self._correlate(analyses)

        return analyses

    async def analyze_full(self, change: FileChange) -> ChangeAnalysis:
        """Run the full single-change analysis.

        A failure at any step is recorded as an insight and the partially
        built analysis is returned.
        """
        analysis = lightweight_analysis(change)

        try:
            if change.content and change.change_type is not ChangeType.UNLINK:
                concepts = await self.extractor.analyze_file_content(change.path, change.content)
                names = list(dict.fromkeys(c.name for c in concepts))
                analysis.impact.affected_concepts = names
                analysis.intelligence.concepts_updated = len(names)

            result = await self.pattern_engine.analyze_file_change(change)
            analysis.patterns.detected = list(result.detected)
            analysis.patterns.violations = list(result.violations)
            analysis.patterns.recommendations = list(result.recommendations)
            analysis.intelligence.patterns_learned = len(result.learned or [])

            dependents = find_dependent_files(self.store, change.path)
            analysis.impact = calculate_impact(
                analysis,
                len(dependents),
                module_threshold=self.options.module_dependent_threshold,
                project_threshold=self.options.project_dependent_threshold,
            )

            analysis.intelligence.insights = generate_insights(analysis)
        except Exception as e:
            logger.warning(f"Analysis of {change.path} failed: {e}")
            analysis.intelligence.insights.append(f"Analysis error: {e}")

        return analysis

    # ------------------------------------------------------------------
    # Batch scheduling
    # ------------------------------------------------------------------

    def _schedule_batch(self) -> None:
        self._timer.arm(self.options.analysis_delay_ms)

    async def _on_timer(self) -> None:
        if self._queue and not self._analyzing:
            await self.process_batch()

    async def process_batch(self) -> list[ChangeAnalysis]:
        """Drain and analyze up to batch_size queued changes.

        A no-op while another batch is running or the queue is empty.
        Errors that escape the batch are reported on analysis:error; the
        busy flag is always released and leftover changes re-arm the timer.

        Returns:
            Analyses emitted for this batch (empty if none ran or it failed)
        """
        if self._analyzing or not self._queue:
            return []

        self._analyzing = True
        self._idle.clear()
        emitted: list[ChangeAnalysis] = []

        try:
            size = min(self.options.batch_size, len(self._queue))
            batch = [self._queue.popleft() for _ in range(size)]
            logger.debug(f"Processing batch of {len(batch)} changes")

            analyses = await self.analyze_batch(batch)

            for analysis in analyses:
                await self._listeners.emit(AnalyzerEvent.ANALYSIS_COMPLETE, analysis)
                emitted.append(analysis)
                if self.options.enable_pattern_learning:
                    self._schedule_learning(analysis)

            await self._listeners.emit(
                AnalyzerEvent.BATCH_COMPLETE,
                BatchSummary(
                    count=len(analyses),
                    insights=[i for a in analyses for i in a.intelligence.insights],
                ),
            )
            logger.info(f"Analyzed batch of {len(analyses)} changes")

        except Exception as e:
            logger.error(f"Batch analysis failed: {e}")
            await self._listeners.emit(
                AnalyzerEvent.ANALYSIS_ERROR,
                AnalysisFailure(error=e, remaining=len(self._queue)),
            )
            emitted = []
        finally:
            self._analyzing = False
            self._idle.set()
            if self._queue:
                self._schedule_batch()

        return emitted

    async def flush(self) -> list[ChangeAnalysis]:
        """Drain the whole queue now, batch after batch.

        Disarms the debounce timer first. Useful for shutdown and one-shot
        analysis. If a batch is already running, waits for it to finish.

        Returns:
            All analyses emitted while flushing
        """
        analyses: list[ChangeAnalysis] = []
        while self._queue or self._analyzing:
            self._timer.cancel()
            if self._analyzing:
                await self._idle.wait()
                continue
            analyses.extend(await self.process_batch())
        self._timer.cancel()
        return analyses

    def _correlate(self, analyses: list[ChangeAnalysis]) -> None:
        verdict = assess_architectural_impact(
            analyses,
            concept_threshold=self.options.architectural_concept_threshold,
        )
        if verdict is not None:
            logger.info(f"Architectural change across {verdict.concept_count} concepts")
            apply_architectural_impact(analyses, verdict)

    # ------------------------------------------------------------------
    # Learning write-back
    # ------------------------------------------------------------------

    def _schedule_learning(self, analysis: ChangeAnalysis) -> None:
        if not analysis.patterns.detected and analysis.intelligence.concepts_updated <= 0:
            return
        task = asyncio.get_running_loop().create_task(self._learn_from_change(analysis))
        self._learning_tasks.add(task)
        task.add_done_callback(self._learning_tasks.discard)

    async def _learn_from_change(self, analysis: ChangeAnalysis) -> None:
        if analysis.patterns.detected:
            await self._write_back(
                "pattern engine", self.pattern_engine.learn_from_analysis, analysis
            )
        if analysis.intelligence.concepts_updated > 0:
            await self._write_back(
                "concept extractor", self.extractor.update_from_analysis, analysis
            )

    async def _write_back(
        self,
        target: str,
        learn: Callable[[ChangeAnalysis], Awaitable[None]],
        analysis: ChangeAnalysis,
    ) -> None:
        path = analysis.change.path
        try:
            await learn(analysis)
        except Exception as e:
            error = LearningError(
                f"Learning from {path} failed in {target}: {e}",
                path=path,
                target=target,
            )
            logger.warning(error.message)
            await self._listeners.emit(
                AnalyzerEvent.LEARNING_ERROR,
                LearningFailure(error=error, analysis=analysis),
            )

    async def wait_for_learning(self) -> None:
        """Wait until all outstanding learning write-backs have settled."""
        while self._learning_tasks:
            await asyncio.gather(*list(self._learning_tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def enable_real_time_analysis(self) -> None:
        self._real_time = True

    def disable_real_time_analysis(self) -> None:
        self._real_time = False

    @property
    def real_time_enabled(self) -> bool:
        return self._real_time

    @property
    def queue_size(self) -> int:
        """Number of changes waiting for batch analysis."""
        return len(self._queue)

    @property
    def is_analyzing(self) -> bool:
        """True while a batch is being drained."""
        return self._analyzing

    @property
    def batch_scheduled(self) -> bool:
        """True while the debounce timer is armed."""
        return self._timer.armed

    def clear_queue(self) -> None:
        """Drop all pending changes and disarm the debounce timer.

        A batch already running is not interrupted.
        """
        self._queue.clear()
        self._timer.cancel()

    async def close(self) -> None:
        """Disarm the timer and wait for outstanding learning write-backs."""
        self._timer.cancel()
        await self.wait_for_learning()


__all__ = ["ChangeAnalyzer"]
