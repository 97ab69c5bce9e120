"""Centralized path definitions for ChangeLens files.

The configuration file (.changelens.toml) lives at the project root, with a
per-user fallback in the home directory.
"""

from __future__ import annotations

from pathlib import Path

# Config file at project root (user-editable)
CONFIG_FILE = ".changelens.toml"


def get_config_path(root: Path | str = ".") -> Path:
    """Get the project-level config file path.

    Args:
        root: Project root directory (default: current directory)

    Returns:
        Path to .changelens.toml under root
    """
    return Path(root) / CONFIG_FILE


def get_user_config_path() -> Path:
    """Get the per-user config file path."""
    return Path.home() / CONFIG_FILE


__all__ = [
    "CONFIG_FILE",
    "get_config_path",
    "get_user_config_path",
]
