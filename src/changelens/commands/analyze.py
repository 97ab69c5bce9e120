"""ChangeLens analyze command - Run one change through the full pipeline."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from changelens.analyzer import ChangeAnalysis, ChangeType
    from changelens.cli import ChangeLensContext
    from changelens.config import ChangeLensConfig


@click.command("analyze")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--type",
    "change_type",
    type=click.Choice(["add", "change", "unlink"]),
    default="change",
    help="Kind of change to analyze",
)
@click.option("--json", "as_json", is_flag=True, help="Print the analysis as JSON")
@click.pass_obj
def analyze(ctx: ChangeLensContext, file: Path, change_type: str, as_json: bool) -> None:
    """Analyze a single file change.

    The file must exist unless --type unlink is given.

    \b
    Examples:
        changelens analyze src/app.py
        changelens analyze package.json --type add --json
    """
    from changelens.analyzer import ChangeType
    from changelens.cli import require_config
    from changelens.errors import ConfigError, ExitCode
    from changelens.logging import console, print_error
    from changelens.output import print_analysis

    config = require_config(ctx)
    kind = ChangeType(change_type)

    if kind is not ChangeType.UNLINK and not file.exists():
        print_error(f"File not found: {file}")
        sys.exit(ExitCode.CONFIG_ERROR)

    try:
        analysis = asyncio.run(analyze_file(config, file, kind))
    except ConfigError as e:
        print_error(e.message)
        sys.exit(ExitCode.CONFIG_ERROR)
    except PermissionError:
        print_error(f"Permission denied: {file}")
        sys.exit(ExitCode.CONFIG_ERROR)
    except OSError as e:
        print_error(f"Failed to read {file}: {e}")
        sys.exit(ExitCode.FATAL_ERROR)

    print_analysis(console, analysis, as_json=as_json)


async def analyze_file(config: ChangeLensConfig, file: Path, change_type: ChangeType) -> ChangeAnalysis:
    """Analyze one file change, returning the deepest analysis available.

    With real-time analysis disabled the minimal analysis is returned.
    """
    from changelens.analyzer.factory import create_analyzer
    from changelens.watcher import build_file_change

    analyzer = create_analyzer(config)
    change = build_file_change(
        change_type,
        file,
        include_content=config.watcher.include_content,
        max_file_size_kb=config.watcher.max_file_size_kb,
    )

    quick = await analyzer.analyze_change(change)
    analyses = await analyzer.flush()
    await analyzer.close()

    return analyses[0] if analyses else quick


__all__ = ["analyze", "analyze_file"]
