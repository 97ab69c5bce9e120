"""ChangeLens init command - Initialize .changelens.toml configuration."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from changelens.cli import ChangeLensContext


@click.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing .changelens.toml")
@click.pass_obj
def init(ctx: ChangeLensContext, force: bool) -> None:
    """Initialize a new .changelens.toml configuration file.

    Creates a configuration file with default analyzer, watcher and engine
    settings in the current directory.
    """
    from changelens.config import get_default_config_toml
    from changelens.errors import ExitCode
    from changelens.logging import print_error, print_info, print_success, print_warning
    from changelens.paths import get_config_path

    config_path = get_config_path(Path.cwd())

    if config_path.exists() and not force:
        print_warning(f"Configuration file already exists: {config_path}")
        print_info("Use --force to overwrite")
        sys.exit(ExitCode.CONFIG_ERROR)

    try:
        config_path.write_text(get_default_config_toml())
        print_success(f"Created {config_path}")
        print_info("\nNext steps:")
        print_info("  1. Point [engines] at your concept extractor and pattern engine")
        print_info("  2. Run 'changelens watch .' to analyze changes as you edit")
    except PermissionError:
        print_error(f"Permission denied: {config_path}")
        sys.exit(ExitCode.CONFIG_ERROR)
    except OSError as e:
        print_error(f"Failed to create config file: {e}")
        sys.exit(ExitCode.FATAL_ERROR)


__all__ = ["init"]
