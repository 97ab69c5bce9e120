"""Error handling framework for ChangeLens."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ExitCode(IntEnum):
    """ChangeLens CLI exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1  # Configuration error (user fixable)
    PARTIAL_SUCCESS = 2  # Some analyses degraded
    FATAL_ERROR = 3  # Unexpected crash


class ChangeLensError(Exception):
    """Base exception for ChangeLens errors."""

    exit_code: ExitCode = ExitCode.FATAL_ERROR

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON output."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "exit_code": self.exit_code,
            **self.context,
        }


class ConfigError(ChangeLensError):
    """Configuration-related errors."""

    exit_code = ExitCode.CONFIG_ERROR


class LearningError(ChangeLensError):
    """Learning write-back into an engine failed."""

    exit_code = ExitCode.PARTIAL_SUCCESS


__all__ = [
    "ExitCode",
    "ChangeLensError",
    "ConfigError",
    "LearningError",
]
