"""Periodic refresh task bound to the view lifecycle."""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class RefreshTask:
    """Runs ``refresh`` immediately and then every ``interval_seconds``.

    Created on mount with ``start`` and cancelled on unmount with ``stop``.
    A failing cycle is logged and the next one runs on schedule.
    """

    refresh: Callable[[], Awaitable[object]]
    interval_seconds: float = 1.0
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the loop on the running event loop; no-op if already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="calorie-tracker-refresh")
        logger.info(
            "Refresh task started", extra={"interval_seconds": self.interval_seconds}
        )

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Refresh task stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except Exception:
                logger.exception("Refresh cycle failed")
            await asyncio.sleep(self.interval_seconds)
