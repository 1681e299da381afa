from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..core.constants import DEFAULT_RECHECK_INTERVAL_SECONDS
from ..core.enums import ScanState
from ..core.exceptions import TransientIOError
from .session import ScanSession

logger = logging.getLogger(__name__)


class PreconditionWatcher:
    """Timer task that re-checks an idle session's preconditions.

    Tied to the owning scope: ``async with PreconditionWatcher(session):``
    starts the task on entry and cancels it on exit.
    """

    def __init__(self, session: ScanSession, *, interval: float = DEFAULT_RECHECK_INTERVAL_SECONDS):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._session = session
        self._interval = float(interval)
        self._task: Optional[asyncio.Task] = None
        self.checks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "PreconditionWatcher":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def check_once(self) -> None:
        """Query in a worker thread, then apply the result on the loop."""

        self.checks += 1
        if self._session.state is not ScanState.IDLE:
            return
        try:
            found = await asyncio.to_thread(self._session.check_preconditions)
        except TransientIOError as e:
            # State is left unchanged; the next tick tries again.
            logger.warning("precondition check failed for class %s: %s", self._session.class_id, e)
            return
        self._session.apply_preconditions(found)

    async def _run(self) -> None:
        while True:
            await self.check_once()
            await asyncio.sleep(self._interval)
