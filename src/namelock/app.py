"""Process composition: credentials, client, liveness and both watchers."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
from collections.abc import Sequence

from namelock.appstate import load_appstate
from namelock.client import ThreadClient
from namelock.config import LockConfig
from namelock.corrector import Corrector
from namelock.event_watcher import EventWatcher
from namelock.exceptions import AppStateError, ConfigError, NameLockError
from namelock.liveness import start_liveness
from namelock.models.appstate import AppStateCookie
from namelock.poll_watcher import PollWatcher

_logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="namelock",
        description="Keep a group thread's title locked to a fixed name.",
    )
    parser.add_argument("--thread-id", help="Thread to lock (env NAMELOCK_THREAD_ID).")
    parser.add_argument("--name", dest="locked_name", help="Locked title (env NAMELOCK_LOCKED_NAME).")
    parser.add_argument("--appstate", dest="appstate_path", help="App state cookie file (env NAMELOCK_APPSTATE).")
    parser.add_argument(
        "--poll-interval-ms",
        type=int,
        default=None,
        help="Poll interval in milliseconds while the title is correct (default 30000).",
    )
    parser.add_argument("--port", type=int, default=None, help="Liveness endpoint port (env PORT, default 3000).")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args(argv)


async def run(config: LockConfig, appstate: Sequence[AppStateCookie]) -> None:
    """Run the lock until the process is killed.

    The liveness endpoint comes up first and stays up even when login
    fails, so uptime monitors keep the host awake while the operator
    refreshes the app state.
    """
    runner = await start_liveness(config.port)
    try:
        async with ThreadClient(config, appstate) as client:
            try:
                await client.login()
            except NameLockError as exc:
                _logger.error("Login failed: %s", exc)
                await asyncio.Event().wait()
                return

            _logger.info("Logged in. Locking thread %s to %r", config.thread_id, config.locked_name)
            corrector = Corrector(client, config)
            events = EventWatcher(client, corrector, config)
            poller = PollWatcher(client, corrector, config)

            stop_polling = poller.start()
            try:
                await events.watch()
            finally:
                stop_polling()
                await events.drain()
                if poller.task is not None:
                    # The loop may be parked in a long sleep; do not wait it out.
                    poller.task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await poller.task
    finally:
        await runner.cleanup()


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    poll_interval = args.poll_interval_ms / 1000.0 if args.poll_interval_ms is not None else None
    try:
        config = LockConfig.from_env(
            thread_id=args.thread_id,
            locked_name=args.locked_name,
            appstate_path=args.appstate_path,
            poll_interval=poll_interval,
            port=args.port,
        )
    except ConfigError as exc:
        _logger.error("Invalid configuration: %s", exc)
        return 1

    try:
        appstate = load_appstate(config.appstate_path)
    except AppStateError as exc:
        _logger.error("Error reading app state: %s", exc)
        return 1

    try:
        asyncio.run(run(config, appstate))
    except KeyboardInterrupt:
        pass
    return 0
