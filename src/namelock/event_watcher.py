"""Event-driven drift detection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Protocol

from namelock._mqtt import StreamItem
from namelock.classify import extract_thread_id, is_title_change
from namelock.clock import AsyncioClock, Clock
from namelock.config import LockConfig
from namelock.corrector import Corrector
from namelock.exceptions import NotificationStreamError
from namelock.models.notification import Notification

_logger = logging.getLogger(__name__)


class NotificationSource(Protocol):
    def listen(self) -> AsyncIterator[StreamItem]:
        ...


class EventWatcher:
    """Correct the title as soon as a rename notification arrives.

    Each matching notification schedules its own settle-then-correct task so
    the stream keeps being consumed during the settle delay. There is no
    stop control and the subscription is never restarted: stream errors are
    logged and listening continues.
    """

    def __init__(
        self,
        source: NotificationSource,
        corrector: Corrector,
        config: LockConfig,
        *,
        clock: Clock | None = None,
    ) -> None:
        self._source = source
        self._corrector = corrector
        self._config = config
        self._clock = clock or AsyncioClock()
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of settle tasks not yet finished."""
        return len(self._pending)

    async def watch(self) -> None:
        """Consume the notification stream until it ends."""
        async for item in self._source.listen():
            if isinstance(item, NotificationStreamError):
                _logger.error("Notification stream error: %s", item)
                continue
            self.handle(item)

    def handle(self, notification: Notification) -> bool:
        """Classify one notification; return whether a correction was scheduled."""
        _logger.debug(
            "Event received: %s thread: %s",
            notification.log_message_type or notification.type,
            notification.thread_id,
        )
        if not is_title_change(notification):
            return False
        if extract_thread_id(notification) != self._config.thread_id:
            return False

        _logger.warning("Title change detected for thread %s", self._config.thread_id)
        task = asyncio.create_task(self._settle_and_correct())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def _settle_and_correct(self) -> None:
        await self._clock.sleep(self._config.settle_delay)
        outcome = await self._corrector.correct()
        if outcome.success:
            _logger.info("Event-driven reset executed for thread %s", outcome.thread_id)
        else:
            _logger.error(
                "Event-driven reset failed for thread %s, relying on poll fallback: %s",
                outcome.thread_id,
                outcome.error,
            )

    async def drain(self) -> None:
        """Wait for every scheduled correction to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
