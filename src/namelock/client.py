"""Async client for the messaging gateway."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any
from urllib.parse import quote

import aiohttp

from namelock._mqtt import NotificationRuntime, StreamItem, build_mqtt_bootstrap
from namelock._transport import GatewayTransport, Transport
from namelock.config import LockConfig
from namelock.exceptions import AuthenticationError, NameLockError, NotificationStreamError
from namelock.models.appstate import AppStateCookie
from namelock.models.thread import ThreadInfo
from namelock.session import Session

_logger = logging.getLogger(__name__)


def _thread_path(thread_id: str) -> str:
    return f"/threads/{quote(thread_id, safe='')}"


class ThreadClient:
    """Async client for the messaging gateway.

    Usage::

        async with ThreadClient(config, appstate) as client:
            await client.login()
            info = await client.get_thread_info(config.thread_id)
    """

    def __init__(
        self,
        config: LockConfig,
        appstate: Sequence[AppStateCookie],
        *,
        http_session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._appstate = list(appstate)
        self._external_session = http_session is not None
        self._http_session = http_session
        self._transport = transport
        self._session: Session | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._runtime: NotificationRuntime | None = None
        self._queue: asyncio.Queue[StreamItem] = asyncio.Queue()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ThreadClient:
        self._loop = asyncio.get_running_loop()
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._stop_runtime()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._loop = None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self) -> Session:
        """Build the session from app state and open the notification stream.

        Raises
        ------
        AuthenticationError
            When the app state lacks the account cookie.
        """
        session = Session.from_appstate(self._appstate)
        self._session = session
        if self._transport is None:
            if self._http_session is None:
                raise NameLockError("Client not initialized. Use 'async with ThreadClient(...) as client:'")
            self._transport = GatewayTransport(self._config, session, self._http_session)
        await self._start_runtime(session)
        _logger.debug("Logged in as user_id=%s", session.user_id)
        return session

    def _require_transport(self) -> Transport:
        if self._transport is None or self._session is None:
            raise AuthenticationError("Not logged in; call login() first", code="not_logged_in")
        return self._transport

    # ------------------------------------------------------------------
    # Notification stream
    # ------------------------------------------------------------------

    async def _start_runtime(self, session: Session) -> None:
        loop = self._loop or asyncio.get_running_loop()
        runtime = NotificationRuntime(
            loop=loop,
            on_item=self._queue.put_nowait,
            keepalive=self._config.mqtt_keepalive,
            logger=_logger,
        )
        try:
            # paho connects synchronously (DNS, TCP, TLS); keep it off the loop.
            await loop.run_in_executor(None, runtime.start, build_mqtt_bootstrap(self._config, session))
        except Exception as exc:
            # Polling still works without the stream.
            _logger.error("Notification stream unavailable: %s", exc, exc_info=True)
            self._queue.put_nowait(NotificationStreamError(f"MQTT start failed: {exc}"))
            return
        self._runtime = runtime

    async def _stop_runtime(self) -> None:
        runtime = self._runtime
        self._runtime = None
        if runtime is None:
            return
        loop = self._loop or asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, runtime.stop)
        except Exception:
            _logger.debug("MQTT runtime stop failed", exc_info=True)

    async def listen(self) -> AsyncIterator[StreamItem]:
        """Yield notifications and stream errors for the life of the client."""
        while True:
            yield await self._queue.get()

    # ------------------------------------------------------------------
    # Thread endpoints
    # ------------------------------------------------------------------

    async def get_thread_info(self, thread_id: str) -> ThreadInfo:
        """Fetch the current state of a thread."""
        transport = self._require_transport()
        body = await transport.request_json("GET", _thread_path(thread_id))
        return ThreadInfo.model_validate(body)

    async def set_title(self, title: str, thread_id: str) -> None:
        """Set the title of a thread."""
        transport = self._require_transport()
        await transport.request_json("POST", f"{_thread_path(thread_id)}/title", {"title": title})
