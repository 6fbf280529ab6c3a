"""
Fixed-interval pollers.

Each poller is an independent asyncio task; pollers hitting the same
endpoint are not coordinated with each other.
"""

import asyncio
from contextlib import suppress
from typing import Awaitable, Callable

from command_centre.core.logging import get_logger

log = get_logger(__name__)

NOTIFIER_INTERVAL = 30.0
ENQUIRIES_VIEW_INTERVAL = 60.0
OVERVIEW_GLANCE_INTERVAL = 60.0


class Poller:
    """Runs a coroutine immediately and then every ``interval`` seconds until stopped."""

    def __init__(self, name: str, interval: float, callback: Callable[[], Awaitable[None]]):
        self.name = name
        self.interval = interval
        self.callback = callback
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        log.debug("poller_started", poller=self.name, interval=self.interval)

    async def _run(self) -> None:
        while True:
            try:
                await self.callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                log.warning("poll_failed", poller=self.name, error=str(e))
            await asyncio.sleep(self.interval)

    async def stop(self) -> None:
        """Cancel the task; nothing survives teardown."""
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        log.debug("poller_stopped", poller=self.name)
