"""Polling drift detection, the safety net behind :mod:`event_watcher`.

One call to :meth:`PollWatcher.poll_once` is one pass through the state
machine::

    FETCHING --error--> WAIT_LONG   (error_backoff, 60 s)
    FETCHING --ok-----> COMPARE
    COMPARE  --equal--> WAIT_NORMAL (poll_interval, 30 s)
    COMPARE  --drift--> CORRECTING --> WAIT_SHORT (correction_recheck, 5 s)

Every wait leads back to FETCHING unless the stop handle was called, in
which case the loop ends in STOPPED before fetching again. An iteration
already running is never interrupted.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable
from typing import Protocol

from namelock.clock import AsyncioClock, Clock
from namelock.config import LockConfig
from namelock.corrector import Corrector
from namelock.models.thread import ThreadInfo

_logger = logging.getLogger(__name__)


class ThreadReader(Protocol):
    async def get_thread_info(self, thread_id: str) -> ThreadInfo:
        ...


class PollState(enum.StrEnum):
    IDLE = "idle"
    FETCHING = "fetching"
    COMPARE = "compare"
    CORRECTING = "correcting"
    WAIT_NORMAL = "wait_normal"
    WAIT_SHORT = "wait_short"
    WAIT_LONG = "wait_long"
    STOPPED = "stopped"


class PollWatcher:
    """Periodically read the thread title and correct drift."""

    def __init__(
        self,
        reader: ThreadReader,
        corrector: Corrector,
        config: LockConfig,
        *,
        clock: Clock | None = None,
        interval: float | None = None,
    ) -> None:
        self._reader = reader
        self._corrector = corrector
        self._config = config
        self._clock = clock or AsyncioClock()
        self._interval = interval if interval is not None else config.poll_interval
        self._stopped = False
        self._task: asyncio.Task[None] | None = None
        self.state = PollState.IDLE

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    def stop(self) -> None:
        """Prevent the next iteration; the current one runs to completion."""
        self._stopped = True

    def start(self, interval: float | None = None) -> Callable[[], None]:
        """Schedule the loop on the running event loop and return its stop handle.

        Raises
        ------
        RuntimeError
            When a loop started earlier is still running.
        """
        if self._task is not None and not self._task.done():
            raise RuntimeError("Poll watcher is already running")
        if interval is not None:
            self._interval = interval
        self._stopped = False
        self._task = asyncio.create_task(self.run())
        return self.stop

    async def run(self) -> None:
        while True:
            if self._stopped:
                self.state = PollState.STOPPED
                return
            delay = await self.poll_once()
            await self._clock.sleep(delay)

    async def poll_once(self) -> float:
        """Run one fetch/compare/correct pass and return the delay before the next."""
        thread_id = self._config.thread_id
        locked_name = self._config.locked_name

        self.state = PollState.FETCHING
        try:
            info = await self._reader.get_thread_info(thread_id)
        except Exception as exc:
            _logger.error("Polling: error fetching thread %s info: %s", thread_id, exc)
            self.state = PollState.WAIT_LONG
            return self._config.error_backoff

        self.state = PollState.COMPARE
        current_name = info.current_name
        if current_name == locked_name:
            self.state = PollState.WAIT_NORMAL
            return self._interval

        _logger.warning("Polling detected name change (%r), resetting", current_name)
        self.state = PollState.CORRECTING
        await self._corrector.correct()
        self.state = PollState.WAIT_SHORT
        return self._config.correction_recheck
