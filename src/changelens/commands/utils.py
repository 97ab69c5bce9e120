"""Shared helpers for ChangeLens commands."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from changelens.config import AnalyzerOptions, ChangeLensConfig
from changelens.errors import ConfigError


def analyzer_options(config: ChangeLensConfig, **overrides: Any) -> AnalyzerOptions:
    """Merge command-line overrides into the configured analyzer options.

    Overrides whose value is None are ignored.

    Raises:
        ConfigError: If the merged options are invalid.
    """
    data = config.analyzer.model_dump()
    data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return AnalyzerOptions(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid analyzer options: {e}") from e


__all__ = ["analyzer_options"]
