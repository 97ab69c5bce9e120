"""Build a ChangeAnalyzer from configuration."""

from __future__ import annotations

import logging

from changelens.analyzer.analyzer import ChangeAnalyzer
from changelens.analyzer.protocols import ConceptExtractor, ConceptStore, PatternEngine
from changelens.config import AnalyzerOptions, ChangeLensConfig, load_component
from changelens.errors import ConfigError

logger = logging.getLogger(__name__)


def create_analyzer(
    config: ChangeLensConfig,
    options: AnalyzerOptions | None = None,
) -> ChangeAnalyzer:
    """Load the configured collaborators and wire them into an analyzer.

    The store factory is called with no arguments; the extractor and
    pattern engine factories are called with the store.

    Args:
        config: Loaded configuration
        options: Analyzer options overriding config.analyzer

    Raises:
        ConfigError: If a factory cannot be loaded or returns an object
            that does not satisfy its collaborator protocol.
    """
    engines = config.engines

    try:
        store = load_component(engines.concept_store)()
        extractor = load_component(engines.concept_extractor)(store)
        pattern_engine = load_component(engines.pattern_engine)(store)
    except TypeError as e:
        raise ConfigError(f"Engine factory has the wrong signature: {e}") from e

    for name, obj, protocol in (
        ("concept_store", store, ConceptStore),
        ("concept_extractor", extractor, ConceptExtractor),
        ("pattern_engine", pattern_engine, PatternEngine),
    ):
        if not isinstance(obj, protocol):
            raise ConfigError(
                f"{name} factory returned {type(obj).__name__}, "
                f"which does not implement {protocol.__name__}",
                component=name,
            )

    logger.debug(
        f"Analyzer wired with {type(extractor).__name__}, "
        f"{type(pattern_engine).__name__}, {type(store).__name__}"
    )
    return ChangeAnalyzer(extractor, pattern_engine, store, options or config.analyzer)


__all__ = ["create_analyzer"]
