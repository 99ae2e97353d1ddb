"""Single write path that restores the locked title."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from namelock.config import LockConfig

_logger = logging.getLogger(__name__)


class TitleWriter(Protocol):
    async def set_title(self, title: str, thread_id: str) -> None:
        ...


@dataclass(frozen=True, slots=True)
class CorrectionOutcome:
    """Result of one write attempt."""

    title: str
    thread_id: str
    error: Exception | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class Corrector:
    """Write the locked title once per call.

    There is no retry here. Callers decide when to try again; a failed
    write is reported in the outcome and never raised.
    """

    def __init__(self, api: TitleWriter, config: LockConfig) -> None:
        self._api = api
        self._config = config

    async def correct(
        self,
        title: str | None = None,
        thread_id: str | None = None,
    ) -> CorrectionOutcome:
        """Set the thread title, defaulting to the configured lock."""
        title = title if title is not None else self._config.locked_name
        thread_id = thread_id if thread_id is not None else self._config.thread_id
        try:
            await self._api.set_title(title, thread_id)
        except Exception as exc:
            _logger.error("Failed to set title %r on thread %s: %s", title, thread_id, exc)
            return CorrectionOutcome(title=title, thread_id=thread_id, error=exc)
        _logger.info("Thread %s title set to %r", thread_id, title)
        return CorrectionOutcome(title=title, thread_id=thread_id)
