"""Keyed debouncing of deferred callbacks.

Each key has at most one pending run. Scheduling again for the same key
cancels the earlier run, so a burst of edit notifications for one document
coalesces into a single call after the quiet period.
"""

import asyncio
from typing import Callable, Optional

from tasktree.utils.logging import get_logger


logger = get_logger(__name__)


class Debouncer:
    """Cancellable scheduled callbacks keyed by document identifier.

    Must be used from within a running asyncio event loop.

    Example:
        >>> debouncer = Debouncer()
        >>> debouncer.schedule("notes.md", 0.2, lambda: print("run"))
        >>> debouncer.schedule("notes.md", 0.2, lambda: print("run"))  # replaces the first
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Task] = {}

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> asyncio.Task:
        """Schedule callback after delay seconds, replacing any pending run for key.

        Args:
            key: Coalescing key (document identifier)
            delay: Quiet period in seconds
            callback: Zero-argument callable run on the event loop

        Returns:
            The scheduled task
        """
        superseded = self.cancel(key)
        task = asyncio.create_task(self._fire(key, delay, callback))
        self._pending[key] = task
        logger.debug("debounce_scheduled", key=key, delay=delay, superseded=superseded)
        return task

    async def _fire(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        await asyncio.sleep(delay)
        if self._pending.get(key) is asyncio.current_task():
            del self._pending[key]
        callback()

    def cancel(self, key: str) -> bool:
        """Cancel the pending run for key.

        Returns:
            True if a pending run was cancelled
        """
        task: Optional[asyncio.Task] = self._pending.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        for key in list(self._pending):
            self.cancel(key)

    def is_pending(self, key: str) -> bool:
        task = self._pending.get(key)
        return task is not None and not task.done()
