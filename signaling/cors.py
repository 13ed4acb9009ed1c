"""
CORS setup - allowed origins come from CORS_ORIGIN
"""
import logging
from typing import Iterable

import aiohttp_cors
from aiohttp import web

logger = logging.getLogger("signaling")


def setup_cors(app: web.Application, origins: Iterable[str]) -> aiohttp_cors.CorsConfig:
    """Apply the origin allow-list to every route registered so far"""
    options = aiohttp_cors.ResourceOptions(
        allow_credentials=False,
        expose_headers="*",
        allow_headers="*",
        allow_methods=["GET", "POST"],
    )
    cors = aiohttp_cors.setup(app, defaults={origin: options for origin in origins})
    for route in list(app.router.routes()):
        cors.add(route)
    return cors


def websocket_origin_middleware(origins: Iterable[str]):
    """Browsers do not enforce CORS on WebSocket upgrades, so check Origin here"""
    allowed = frozenset(origins)
    allow_any = "*" in allowed

    @web.middleware
    async def middleware(request, handler):
        origin = request.headers.get("Origin")
        is_upgrade = request.headers.get("Upgrade", "").lower() == "websocket"
        if is_upgrade and origin and not allow_any and origin not in allowed:
            logger.warning(f"Rejected WebSocket from origin {origin}")
            raise web.HTTPForbidden(text="origin not allowed")
        return await handler(request)

    return middleware
