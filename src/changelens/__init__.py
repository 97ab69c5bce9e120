"""ChangeLens - incremental change-impact analysis for codebases."""

__version__ = "0.1.0"
