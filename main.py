#!/usr/bin/env python3
"""
Signaling server - entry point
One sender, many receivers, WebSocket relay for the WebRTC handshake
"""
import logging
import sys
from typing import Iterable, Optional

from aiohttp import web

from signaling import config
from signaling.api import api_status, index, ws_signaling
from signaling.cors import setup_cors, websocket_origin_middleware
from signaling.hub import Hub
from signaling.router import SignalingRouter
from signaling.state import SessionState, session

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("signaling")


def create_app(
    origins: Iterable[str] = config.CORS_ORIGINS,
    ping_interval_ms: int = config.PING_INTERVAL_MS,
    state: Optional[SessionState] = None,
) -> web.Application:
    """Create and configure the aiohttp application"""
    app = web.Application(middlewares=[websocket_origin_middleware(origins)])

    hub = Hub()
    app["hub"] = hub
    app["router"] = SignalingRouter(state if state is not None else session, hub)
    app["ping_interval_ms"] = ping_interval_ms

    app.router.add_get("/", index)
    app.router.add_get("/status", api_status)
    app.router.add_get("/ws", ws_signaling)
    setup_cors(app, origins)

    logger.info(f"Allowed origins: {', '.join(origins)}")
    return app


def main():
    app = create_app()
    host, port = config.SERVER_HOST, config.PORT

    logger.info(f"Signaling server listening on {host}:{port}")
    try:
        web.run_app(app, host=host, port=port, print=None)
    except OSError as e:
        logger.error(f"Failed to start signaling server on {host}:{port}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
