"""JSON-over-HTTP transport for the messaging gateway."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from namelock._redact import redact_for_log
from namelock.config import LockConfig
from namelock.exceptions import ApiError, TransportError
from namelock.session import Session

_logger = logging.getLogger(__name__)

USER_AGENT = "namelock/1 (+aiohttp)"


class Transport(Protocol):
    """Structural transport interface used by :class:`ThreadClient`.

    Tests pass small fakes implementing this instead of patching aiohttp.
    """

    async def request_json(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        ...


class GatewayTransport:
    """aiohttp transport that sends the session cookies with every request."""

    def __init__(
        self,
        config: LockConfig,
        session: Session,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._session = session
        self._http = http_session

    async def request_json(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON object.

        Raises
        ------
        TransportError
            Network failure, non-200 status or a body that is not a JSON
            object.
        ApiError
            The body carries an ``error`` member.
        """
        headers: dict[str, str] = {
            "accept": "application/json",
            "cookie": self._session.cookie_header(),
            "user-agent": USER_AGENT,
        }
        url = f"{self._config.base_url}{endpoint}"

        _logger.debug(
            "%s %s headers=%s payload=%s",
            method,
            url,
            redact_for_log(headers),
            redact_for_log(payload),
        )

        try:
            async with self._http.request(method, url, json=payload, headers=headers) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise TransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except TransportError:
            raise
        except aiohttp.ClientError as exc:
            raise TransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return {}

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(body, dict):
            raise TransportError(f"Expected a JSON object from {endpoint}", endpoint=endpoint)
        _logger.debug("%s %s response=%s", method, url, redact_for_log(body))

        error = body.get("error")
        if error:
            code = str(error.get("code", "")) if isinstance(error, dict) else ""
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ApiError(f"{endpoint} failed: code={code} message={message}", code=code, endpoint=endpoint)

        return body
