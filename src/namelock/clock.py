"""Injectable time source for the watcher loops."""

from __future__ import annotations

import asyncio
from typing import Protocol


class Clock(Protocol):
    """Sleep, swappable for a virtual clock in tests."""

    async def sleep(self, seconds: float) -> None:
        ...


class AsyncioClock:
    """Wall-clock implementation backed by :func:`asyncio.sleep`."""

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
