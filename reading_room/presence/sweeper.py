from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .registry import PositionRegistry

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL: float = 5.0


class RegistrySweeper:
    """
    Periodically evicts stale readers so the registry does not wait for the
    next snapshot to shrink. Runs as a task on the server's event loop.
    """

    def __init__(self, registry: PositionRegistry, interval: float = DEFAULT_SWEEP_INTERVAL):
        self.registry = registry
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info("Position sweeper started. Check interval: %s seconds.", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Position sweeper stopped.")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            removed = self.registry.sweep()
            if removed:
                logger.debug("Swept %d inactive readers", len(removed))
