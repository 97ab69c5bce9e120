"""Logging and console output for ChangeLens.

Analyses go to stdout so ``watch --json`` can be piped; log records and
error/warning lines go to stderr.
"""

from __future__ import annotations

import logging
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)

Verbosity = Literal["quiet", "normal", "verbose"]

LOGGER_NAME = "changelens"

_LEVELS: dict[Verbosity, int] = {
    "quiet": logging.ERROR,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: Verbosity = "normal") -> logging.Logger:
    """Route changelens and watchfiles records to a rich stderr handler.

    watchfiles logs every batch of raw filesystem events at INFO, which
    would interleave with analysis output, so it is held at WARNING
    unless verbose. Calling this again replaces the previous handlers.
    """
    verbose = verbosity == "verbose"
    handler = RichHandler(
        console=err_console,
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    for name, level in (
        (LOGGER_NAME, _LEVELS[verbosity]),
        ("watchfiles", logging.DEBUG if verbose else max(logging.WARNING, _LEVELS[verbosity])),
    ):
        target = logging.getLogger(name)
        target.handlers.clear()
        target.setLevel(level)
        target.addHandler(handler)

    return logging.getLogger(LOGGER_NAME)


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def print_error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    err_console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    console.print(message)
