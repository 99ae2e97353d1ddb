"""Keepalive HTTP responder for external uptime checks."""

from __future__ import annotations

import logging

from aiohttp import web

_logger = logging.getLogger(__name__)

ALIVE_TEXT = "Group name locker is alive!"


async def _alive(_request: web.Request) -> web.Response:
    return web.Response(text=ALIVE_TEXT)


def build_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/", _alive)
    return app


async def start_liveness(port: int, host: str = "0.0.0.0") -> web.AppRunner:  # noqa: S104
    """Serve the liveness route; the caller owns ``runner.cleanup()``."""
    runner = web.AppRunner(build_app())
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    _logger.info("Web server running on port %d", port)
    return runner
