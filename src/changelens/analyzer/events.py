"""Analyzer event kinds and listener registry.

Downstream features subscribe async callbacks per event kind; a failing
listener is logged and never disturbs the analyzer or other listeners.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[[Any], Awaitable[None]]


class AnalyzerEvent(str, Enum):
    """Observable analyzer events and their payload types."""

    ANALYSIS_COMPLETE = "analysis:complete"  # ChangeAnalysis
    BATCH_COMPLETE = "batch:complete"  # BatchSummary
    ANALYSIS_ERROR = "analysis:error"  # AnalysisFailure
    LEARNING_ERROR = "learning:error"  # LearningFailure


class ListenerRegistry:
    """Per-event lists of async listeners, notified in subscription order."""

    def __init__(self) -> None:
        self._listeners: dict[AnalyzerEvent, list[Listener]] = {event: [] for event in AnalyzerEvent}

    def subscribe(self, event: AnalyzerEvent | str, callback: Listener) -> None:
        """Subscribe to an event.

        Args:
            event: Event kind, as an AnalyzerEvent or its string value
            callback: Async callback invoked with the event payload
        """
        self._listeners[AnalyzerEvent(event)].append(callback)

    def unsubscribe(self, event: AnalyzerEvent | str, callback: Listener) -> None:
        """Unsubscribe from an event.

        Args:
            event: Event kind the callback was subscribed to
            callback: The callback to remove
        """
        listeners = self._listeners[AnalyzerEvent(event)]
        if callback in listeners:
            listeners.remove(callback)

    def listener_count(self, event: AnalyzerEvent | str) -> int:
        return len(self._listeners[AnalyzerEvent(event)])

    async def emit(self, event: AnalyzerEvent, payload: Any) -> None:
        """Notify all listeners of an event."""
        # Copy so listeners may unsubscribe while being notified
        for callback in list(self._listeners[event]):
            try:
                await callback(payload)
            except Exception as e:
                logger.error(f"Error notifying {event.value} listener: {e}")


__all__ = [
    "AnalyzerEvent",
    "Listener",
    "ListenerRegistry",
]
