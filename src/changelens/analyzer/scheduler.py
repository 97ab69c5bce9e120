"""Single-slot deferred task used for batch debouncing."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class DeferredTask:
    """Run a callback once after a delay, with at most one run armed.

    Arming replaces any previously armed run, so a burst of arm() calls
    collapses into a single callback invocation. Once the delay elapses the
    slot is released before the callback starts: cancel() and arm() from
    inside the callback never cancel the running callback itself.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Initialize the deferred task.

        Args:
            callback: Async callable invoked when the delay elapses
        """
        self._callback = callback
        self._task: asyncio.Task[None] | None = None
        # Strong reference to a run whose callback is in progress
        self._running: asyncio.Task[None] | None = None

    def arm(self, delay_ms: float) -> None:
        """Schedule the callback, replacing any armed run.

        Must be called from a running event loop.
        """
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run_after(delay_ms / 1000.0))

    def cancel(self) -> None:
        """Disarm the pending run, if any."""
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

    @property
    def armed(self) -> bool:
        """True while a run is waiting for its delay to elapse."""
        return self._task is not None and not self._task.done()

    async def _run_after(self, delay: float) -> None:
        await asyncio.sleep(delay)

        current = asyncio.current_task()
        if self._task is current:
            self._task = None
        self._running = current

        try:
            await self._callback()
        except Exception as e:
            logger.error(f"Deferred task failed: {e}")
        finally:
            if self._running is current:
                self._running = None


__all__ = ["DeferredTask"]
