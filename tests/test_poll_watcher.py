from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import pytest

from namelock.config import LockConfig
from namelock.corrector import Corrector
from namelock.exceptions import TransportError
from namelock.models.thread import ThreadInfo
from namelock.poll_watcher import PollState, PollWatcher

THREAD_ID = "25225211533747620"
LOCKED = "L0CK3D"


@dataclass
class FakeThread:
    """Thread backend with a scripted sequence of read failures."""

    title: str = LOCKED
    read_errors: list[Exception] = field(default_factory=list)
    reads: int = 0
    writes: list[str] = field(default_factory=list)
    fail_writes: bool = False
    use_thread_name_field: bool = False

    async def get_thread_info(self, thread_id: str) -> ThreadInfo:
        assert thread_id == THREAD_ID
        self.reads += 1
        if self.read_errors:
            raise self.read_errors.pop(0)
        key = "threadName" if self.use_thread_name_field else "name"
        return ThreadInfo.model_validate({"threadID": thread_id, key: self.title})

    async def set_title(self, title: str, thread_id: str) -> None:
        self.writes.append(title)
        if self.fail_writes:
            raise TransportError("HTTP 503 from /threads", status_code=503)
        self.title = title


class VirtualClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def config() -> LockConfig:
    return LockConfig(thread_id=THREAD_ID, locked_name=LOCKED)


def _watcher(thread: FakeThread, config: LockConfig, clock: VirtualClock | None = None) -> PollWatcher:
    return PollWatcher(thread, Corrector(thread, config), config, clock=clock or VirtualClock())


@pytest.mark.asyncio
async def test_matching_title_waits_normal_interval(config: LockConfig) -> None:
    thread = FakeThread()
    watcher = _watcher(thread, config)

    delay = await watcher.poll_once()

    assert delay == 30.0
    assert watcher.state is PollState.WAIT_NORMAL
    assert thread.writes == []


@pytest.mark.asyncio
async def test_custom_interval_is_used(config: LockConfig) -> None:
    thread = FakeThread()
    watcher = PollWatcher(thread, Corrector(thread, config), config, interval=12.5)

    assert await watcher.poll_once() == 12.5


@pytest.mark.asyncio
async def test_drift_is_corrected_and_rechecked_quickly(
    config: LockConfig,
    caplog: pytest.LogCaptureFixture,
) -> None:
    thread = FakeThread(title="Hijacked")
    watcher = _watcher(thread, config)

    with caplog.at_level(logging.WARNING, logger="namelock.poll_watcher"):
        delay = await watcher.poll_once()

    assert delay == 5.0
    assert watcher.state is PollState.WAIT_SHORT
    assert thread.writes == [LOCKED]
    assert thread.title == LOCKED
    assert "Hijacked" in caplog.text


@pytest.mark.asyncio
async def test_thread_name_field_is_a_fallback(config: LockConfig) -> None:
    thread = FakeThread(use_thread_name_field=True)
    watcher = _watcher(thread, config)

    assert await watcher.poll_once() == 30.0


@pytest.mark.asyncio
async def test_fetch_error_backs_off_long(config: LockConfig, caplog: pytest.LogCaptureFixture) -> None:
    thread = FakeThread(read_errors=[TransportError("Request to /threads failed: timeout")])
    watcher = _watcher(thread, config)

    with caplog.at_level(logging.ERROR, logger="namelock.poll_watcher"):
        delay = await watcher.poll_once()

    assert delay == 60.0
    assert watcher.state is PollState.WAIT_LONG
    assert thread.writes == []
    assert "timeout" in caplog.text


@pytest.mark.asyncio
async def test_failed_correction_still_rechecks_quickly(config: LockConfig) -> None:
    thread = FakeThread(title="Hijacked", fail_writes=True)
    watcher = _watcher(thread, config)

    assert await watcher.poll_once() == 5.0
    assert watcher.state is PollState.WAIT_SHORT
    assert thread.writes == [LOCKED]


@pytest.mark.asyncio
async def test_loop_schedule_follows_backoff_asymmetry(config: LockConfig) -> None:
    clock = VirtualClock()
    thread = FakeThread(title="Hijacked", read_errors=[TransportError("boom")])
    watcher = _watcher(thread, config, clock)

    original_sleep = clock.sleep

    async def sleep_then_stop(seconds: float) -> None:
        await original_sleep(seconds)
        if len(clock.sleeps) == 3:
            watcher.stop()

    clock.sleep = sleep_then_stop  # type: ignore[method-assign]

    await watcher.run()

    # error -> 60 s, drift corrected -> 5 s, title matches -> 30 s
    assert clock.sleeps == [60.0, 5.0, 30.0]
    assert thread.reads == 3
    assert thread.writes == [LOCKED]
    assert watcher.state is PollState.STOPPED


@pytest.mark.asyncio
async def test_convergence_within_one_interval_plus_recheck(config: LockConfig) -> None:
    clock = VirtualClock()
    thread = FakeThread()
    watcher = _watcher(thread, config, clock)

    await watcher.poll_once()
    thread.title = "Drifted right after a poll"

    # Next poll happens one interval later and corrects immediately.
    delay = await watcher.poll_once()
    assert thread.title == LOCKED
    assert delay == config.correction_recheck
    assert await watcher.poll_once() == config.poll_interval


@pytest.mark.asyncio
async def test_stop_handle_prevents_next_iteration_only(config: LockConfig) -> None:
    clock = VirtualClock()
    thread = FakeThread()
    watcher = _watcher(thread, config, clock)
    read_started = asyncio.Event()
    release_read = asyncio.Event()

    original_read = thread.get_thread_info

    async def slow_read(thread_id: str) -> ThreadInfo:
        read_started.set()
        await release_read.wait()
        return await original_read(thread_id)

    thread.get_thread_info = slow_read  # type: ignore[method-assign]

    stop = watcher.start()
    await read_started.wait()
    stop()
    assert watcher.stopped

    release_read.set()
    assert watcher.task is not None
    await asyncio.wait_for(watcher.task, timeout=1.0)

    # The in-flight iteration completed and slept, then the loop exited.
    assert thread.reads == 1
    assert clock.sleeps == [30.0]
    assert watcher.state is PollState.STOPPED


@pytest.mark.asyncio
async def test_stop_before_first_iteration_fetches_nothing(config: LockConfig) -> None:
    thread = FakeThread()
    watcher = _watcher(thread, config)

    stop = watcher.start(interval=1.0)
    stop()
    assert watcher.task is not None
    await watcher.task

    assert thread.reads == 0
    assert watcher.state is PollState.STOPPED
    assert watcher.interval == 1.0


@pytest.mark.asyncio
async def test_non_string_title_counts_as_drift(config: LockConfig) -> None:
    class OddShapeThread(FakeThread):
        async def get_thread_info(self, thread_id: str) -> ThreadInfo:
            self.reads += 1
            return ThreadInfo.model_validate({"threadID": thread_id, "name": True})

    thread = OddShapeThread()
    watcher = _watcher(thread, config)

    assert await watcher.poll_once() == config.correction_recheck
    assert thread.writes == [LOCKED]


@pytest.mark.asyncio
async def test_second_start_while_running_is_refused(config: LockConfig) -> None:
    thread = FakeThread()
    watcher = _watcher(thread, config)

    stop = watcher.start()
    first_task = watcher.task
    with pytest.raises(RuntimeError):
        watcher.start()
    assert watcher.task is first_task

    stop()
    assert first_task is not None
    await asyncio.wait_for(first_task, timeout=1.0)

    # A finished loop may be started again.
    stop = watcher.start()
    assert watcher.task is not first_task
    stop()
    await asyncio.wait_for(watcher.task, timeout=1.0)
    assert watcher.state is PollState.STOPPED
