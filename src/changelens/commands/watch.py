"""ChangeLens watch command - Analyze changes as files are edited."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from changelens.analyzer import ChangeAnalyzer
    from changelens.cli import ChangeLensContext
    from changelens.config import ChangeLensConfig


@click.command("watch")
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option("--delay", type=int, default=None, help="Batch debounce delay in milliseconds")
@click.option("--batch-size", type=int, default=None, help="Maximum changes per batch")
@click.option("--no-learning", is_flag=True, help="Do not write findings back into the engines")
@click.option("--json", "as_json", is_flag=True, help="Print analyses as JSON")
@click.pass_obj
def watch(
    ctx: ChangeLensContext,
    path: Path,
    delay: int | None,
    batch_size: int | None,
    no_learning: bool,
    as_json: bool,
) -> None:
    """Watch a directory and analyze changes as they happen.

    Press Ctrl+C to stop.

    \b
    Examples:
        changelens watch .
        changelens watch src --delay 500 --batch-size 10
        changelens watch . --json
    """
    from changelens.cli import require_config
    from changelens.commands.utils import analyzer_options
    from changelens.errors import ConfigError, ExitCode
    from changelens.logging import print_error, print_info

    config = require_config(ctx)

    try:
        options = analyzer_options(
            config,
            analysis_delay_ms=delay,
            batch_size=batch_size,
            enable_pattern_learning=False if no_learning else None,
        )
        config = config.model_copy(update={"analyzer": options})
    except ConfigError as e:
        print_error(e.message)
        sys.exit(ExitCode.CONFIG_ERROR)

    print_info(f"Watching {path.resolve()}")
    print_info("Press Ctrl+C to stop")

    try:
        asyncio.run(run_watch(config, path, as_json))
    except ConfigError as e:
        print_error(e.message)
        sys.exit(ExitCode.CONFIG_ERROR)
    except KeyboardInterrupt:
        print_info("\nStopped")


def attach_printers(analyzer: ChangeAnalyzer, as_json: bool) -> None:
    """Print analyzer events to the console."""
    from changelens.analyzer import AnalysisFailure, AnalyzerEvent, ChangeAnalysis, LearningFailure
    from changelens.logging import console, print_error, print_warning
    from changelens.output import print_analysis

    async def on_analysis(analysis: ChangeAnalysis) -> None:
        print_analysis(console, analysis, as_json=as_json)

    async def on_error(failure: AnalysisFailure) -> None:
        print_error(f"Batch dropped ({failure.remaining} changes still queued): {failure.error}")

    async def on_learning_error(failure: LearningFailure) -> None:
        print_warning(str(failure.error))

    analyzer.subscribe(AnalyzerEvent.ANALYSIS_COMPLETE, on_analysis)
    analyzer.subscribe(AnalyzerEvent.ANALYSIS_ERROR, on_error)
    analyzer.subscribe(AnalyzerEvent.LEARNING_ERROR, on_learning_error)


def _forget(analyzer: ChangeAnalyzer, path: str) -> None:
    remove = getattr(analyzer.store, "remove", None)
    if callable(remove):
        remove(path)


def forget_unlinked_files(analyzer: ChangeAnalyzer) -> None:
    """Forget a deleted file's concepts after its batch analysis is emitted.

    Dependent lookup for the unlink itself still sees the old concepts, so
    removing a widely used file is scored by what depended on it.
    """
    from changelens.analyzer import AnalyzerEvent, ChangeAnalysis, ChangeType

    async def on_analysis(analysis: ChangeAnalysis) -> None:
        if analysis.change.change_type is ChangeType.UNLINK:
            _forget(analyzer, analysis.change.path)

    analyzer.subscribe(AnalyzerEvent.ANALYSIS_COMPLETE, on_analysis)


async def run_watch(
    config: ChangeLensConfig,
    path: Path,
    as_json: bool,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Run the watcher and analyzer until stop_event is set or cancelled."""
    from changelens.analyzer import ChangeType, FileChange
    from changelens.analyzer.factory import create_analyzer
    from changelens.logging import get_logger
    from changelens.watcher import FileWatcher

    logger = get_logger()
    analyzer = create_analyzer(config)
    attach_printers(analyzer, as_json)
    forget_unlinked_files(analyzer)

    async def on_change(change: FileChange) -> None:
        quick = await analyzer.analyze_change(change)
        logger.debug(f"{change.change_type.value} {change.path}: {quick.impact.scope.value} scope")
        # Not queued, so no batch will forget it later
        if change.change_type is ChangeType.UNLINK and not analyzer.real_time_enabled:
            _forget(analyzer, change.path)

    watcher = FileWatcher([path], on_change, config.watcher)
    await watcher.start()
    try:
        await (stop_event or asyncio.Event()).wait()
    finally:
        await watcher.stop()
        await analyzer.flush()
        await analyzer.close()


__all__ = ["watch", "run_watch", "attach_printers", "forget_unlinked_files"]
