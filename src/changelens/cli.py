"""ChangeLens command-line interface."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

# Load .env before config reads CHANGELENS_* variables
load_dotenv()

import click  # noqa: E402

from changelens import __version__  # noqa: E402
from changelens.commands.lazy import LazyGroup  # noqa: E402

if TYPE_CHECKING:
    from changelens.config import ChangeLensConfig
    from changelens.logging import Verbosity


class ChangeLensContext:
    """Shared context for CLI commands."""

    def __init__(self) -> None:
        self.config: ChangeLensConfig | None = None
        self.config_error: str | None = None
        self.verbosity: Verbosity = "normal"


pass_context = click.make_pass_decorator(ChangeLensContext, ensure=True)


LAZY_COMMANDS: dict[str, str] = {
    "init": "changelens.commands.init_cmd:init",
    "watch": "changelens.commands.watch:watch",
    "analyze": "changelens.commands.analyze:analyze",
}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output")
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.version_option(version=__version__, prog_name="changelens")
@pass_context
def cli(ctx: ChangeLensContext, verbose: bool, quiet: bool, config: Path | None) -> None:
    """ChangeLens - change-impact analysis for codebases.

    \b
    Commands:
      init         Create a .changelens.toml configuration
      watch        Watch a directory and analyze changes as they happen
      analyze      Analyze a single file change

    Use 'changelens <command> --help' for details.
    """
    from changelens.config import ChangeLensConfig
    from changelens.errors import ConfigError
    from changelens.logging import setup_logging

    if quiet:
        ctx.verbosity = "quiet"
    elif verbose:
        ctx.verbosity = "verbose"
    else:
        ctx.verbosity = "normal"

    setup_logging(ctx.verbosity)

    # Commands that need config report the error themselves (init does not)
    try:
        ctx.config = ChangeLensConfig.load(config)
    except ConfigError as e:
        ctx.config_error = e.message


def require_config(ctx: ChangeLensContext) -> ChangeLensConfig:
    """Return the loaded config, exiting with CONFIG_ERROR if it failed to load."""
    import sys

    from changelens.errors import ExitCode
    from changelens.logging import print_error

    if ctx.config is None:
        print_error(ctx.config_error or "Configuration not loaded")
        sys.exit(ExitCode.CONFIG_ERROR)
    return ctx.config


def main() -> None:
    """Entry point for the changelens console script."""
    cli()


if __name__ == "__main__":
    main()
