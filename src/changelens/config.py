"""Configuration models for ChangeLens."""

from __future__ import annotations

import importlib
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from changelens.errors import ConfigError
from changelens.paths import get_config_path, get_user_config_path


class AnalyzerOptions(BaseModel):
    """Options for the change analyzer.

    Fixed at construction; the analyzer only toggles its own copy of the
    real-time flag through enable/disable controls.
    """

    model_config = ConfigDict(frozen=True)

    enable_real_time_analysis: bool = Field(
        default=True,
        description="Answer each change immediately and queue it for batch analysis",
    )
    enable_pattern_learning: bool = Field(
        default=True,
        description="Write confirmed findings back into the engines after each batch",
    )
    batch_size: int = Field(
        default=5,
        gt=0,
        description="Maximum number of changes drained per batch",
    )
    analysis_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Debounce delay in milliseconds before a batch runs",
    )
    module_dependent_threshold: int = Field(
        default=1,
        ge=0,
        description="Dependent-file count above which a change is module scoped",
    )
    project_dependent_threshold: int = Field(
        default=5,
        ge=0,
        description="Dependent-file count above which a change is project scoped",
    )
    architectural_concept_threshold: int = Field(
        default=3,
        ge=0,
        description="Unique concepts in a batch above which it is architectural",
    )

    @model_validator(mode="after")
    def _check_thresholds(self) -> AnalyzerOptions:
        if self.project_dependent_threshold < self.module_dependent_threshold:
            raise ValueError(
                "project_dependent_threshold must not be lower than module_dependent_threshold"
            )
        return self


class WatcherConfig(BaseModel):
    """Filesystem watcher configuration."""

    debounce_ms: int = Field(
        default=100,
        ge=0,
        description="Debounce delay for raw filesystem events in milliseconds",
    )
    include_content: bool = Field(
        default=True,
        description="Read text file content into change events",
    )
    max_file_size_kb: int = Field(
        default=1000,
        gt=0,
        description="Maximum file size to read in KB",
    )
    ignore_dirs: list[str] = Field(
        default=[
            ".git",
            ".hg",
            ".svn",
            "node_modules",
            "__pycache__",
            ".venv",
            "venv",
            "dist",
            "build",
            ".next",
            "target",
            ".pytest_cache",
            ".mypy_cache",
            ".ruff_cache",
        ],
        description="Directory names skipped while watching",
    )


class EnginesConfig(BaseModel):
    """Import paths ("module:attr") of the external collaborators."""

    concept_store: str = Field(
        default="changelens.analyzer.memory:InMemoryConceptStore",
        description="Factory for the concept store, called with no arguments",
    )
    concept_extractor: str = Field(
        default="changelens.analyzer.memory:StoreConceptExtractor",
        description="Factory for the concept extractor, called with the store",
    )
    pattern_engine: str = Field(
        default="changelens.analyzer.memory:NullPatternEngine",
        description="Factory for the pattern engine, called with the store",
    )


class ChangeLensConfig(BaseSettings):
    """Main ChangeLens configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CHANGELENS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    version: str = Field(default="1.0", description="Config version")
    analyzer: AnalyzerOptions = Field(default_factory=AnalyzerOptions)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
    engines: EnginesConfig = Field(default_factory=EnginesConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> ChangeLensConfig:
        """Load configuration from file and environment.

        The first file found is used:
        1. Provided config file path
        2. .changelens.toml in current directory
        3. .changelens.toml in home directory

        Sections missing from the file fall back to CHANGELENS_* environment
        variables, then to built-in defaults.

        Raises:
            ConfigError: If the file cannot be parsed or values are invalid.
        """
        config_data: dict[str, Any] = {}

        locations = []
        if config_path:
            locations.append(config_path)
        locations.extend([get_config_path(Path.cwd()), get_user_config_path()])

        for loc in locations:
            if loc.exists():
                try:
                    with open(loc, "rb") as f:
                        config_data = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"Invalid TOML in {loc}: {e}", path=str(loc)) from e
                break

        # Top-level [changelens] table carries plain settings
        config_data.update(config_data.pop("changelens", {}))

        try:
            return cls(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def load_component(import_path: str) -> Any:
    """Resolve a "module:attr" import path to the named object.

    Raises:
        ConfigError: If the path is malformed or cannot be imported.
    """
    module_path, sep, attr_name = import_path.partition(":")
    if not sep or not module_path or not attr_name:
        raise ConfigError(
            f"Invalid import path '{import_path}', expected 'module:attr'",
            import_path=import_path,
        )
    try:
        module = importlib.import_module(module_path)
        return getattr(module, attr_name)
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"Failed to load '{import_path}': {e}", import_path=import_path) from e


def get_default_config_toml() -> str:
    """Generate default .changelens.toml content."""
    return """# ChangeLens Configuration

[changelens]
version = "1.0"

[analyzer]
enable_real_time_analysis = true
enable_pattern_learning = true
batch_size = 5
analysis_delay_ms = 1000  # Debounce before a batch runs
module_dependent_threshold = 1  # More dependents than this -> module scope
project_dependent_threshold = 5  # More dependents than this -> project scope
architectural_concept_threshold = 3  # Unique concepts per batch

[watcher]
debounce_ms = 100
include_content = true
max_file_size_kb = 1000
ignore_dirs = [
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
    ".next",
    "target",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
]

[engines]
concept_store = "changelens.analyzer.memory:InMemoryConceptStore"
concept_extractor = "changelens.analyzer.memory:StoreConceptExtractor"
pattern_engine = "changelens.analyzer.memory:NullPatternEngine"
"""


__all__ = [
    "AnalyzerOptions",
    "WatcherConfig",
    "EnginesConfig",
    "ChangeLensConfig",
    "load_component",
    "get_default_config_toml",
]
