"""
Periodic Timer

Cancellable recurring callback on top of an asyncio task.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTimer:
    """
    Runs an async callback every `interval` seconds until cancelled.

    The first call happens one full interval after start(). Errors raised
    by the callback are logged and the timer keeps running. Once cancel()
    has been called the callback is never invoked again.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], Awaitable[None]],
        name: str = "periodic-timer",
    ):
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}")
        self.interval = interval
        self.name = name
        self._callback = callback
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the timer on the running event loop"""
        if self._cancelled:
            raise RuntimeError(f"Timer {self.name} was cancelled and cannot be restarted")
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.debug(f"Started {self.name} (every {self.interval}s)")

    def cancel(self) -> None:
        """Stop the timer without waiting for the task to finish"""
        self._cancelled = True
        if self._task is None or self._task.done():
            return
        # Called from inside our own callback: let it finish, the loop exits
        if self._task is not asyncio.current_task():
            self._task.cancel()
        logger.debug(f"Cancelled {self.name}")

    async def stop(self) -> None:
        """Cancel the timer and wait for its task to exit"""
        self.cancel()
        task, self._task = self._task, None
        if task is None or task is asyncio.current_task():
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while not self._cancelled:
            await asyncio.sleep(self.interval)
            if self._cancelled:
                break
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"{self.name} callback failed: {e}", exc_info=True)
