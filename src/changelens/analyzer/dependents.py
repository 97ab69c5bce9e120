"""Dependent-file lookup against the concept store."""

from __future__ import annotations

import logging

from changelens.analyzer.protocols import ConceptStore

logger = logging.getLogger(__name__)


def find_dependent_files(store: ConceptStore, file_path: str) -> list[str]:
    """Find other files that share a recorded concept with file_path.

    This is a point-in-time read of whatever the store currently holds;
    it never triggers re-analysis of the dependents. Store failures are
    logged and reported as no dependents.

    Args:
        store: The concept store to query
        file_path: Path of the changed file

    Returns:
        De-duplicated dependent paths in first-seen order
    """
    try:
        own_names = {c.concept_name for c in store.get_concepts(file_path)}
        if not own_names:
            return []

        dependents: dict[str, None] = {}
        for concept in store.get_concepts():
            if concept.concept_name in own_names and concept.file_path != file_path:
                dependents.setdefault(concept.file_path, None)
        return list(dependents)
    except Exception as e:
        logger.warning(f"Could not find dependent files for {file_path}: {e}")
        return []


__all__ = ["find_dependent_files"]
