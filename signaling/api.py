"""
HTTP and WebSocket handlers for the signaling server
Health check, status snapshot, and the signaling channel
"""
import json
import logging

from aiohttp import web

from .heartbeat import Heartbeat
from .utils import generate_client_id

logger = logging.getLogger("signaling")

# ============================================================
# HEALTH / STATUS
# ============================================================

async def index(request: web.Request) -> web.Response:
    """Static liveness string for health checks"""
    return web.Response(text="Signaling server is running")


async def api_status(request: web.Request) -> web.Response:
    """Current session shape: is a sender present, how many receivers"""
    snapshot = request.app["router"].snapshot()
    return web.json_response({"ok": True, **snapshot})

# ============================================================
# WEBSOCKET SIGNALING CHANNEL
# ============================================================

def parse_frame(raw: str):
    """Decode a {"type", "data"} envelope. Returns None for anything malformed."""
    try:
        message = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(message, dict) or not isinstance(message.get("type"), str):
        return None
    return message["type"], message.get("data")


async def ws_signaling(request: web.Request) -> web.WebSocketResponse:
    """One signaling connection per client"""
    app = request.app
    router = app["router"]
    hub = app["hub"]

    ws = web.WebSocketResponse()
    await ws.prepare(request)

    client_id = generate_client_id()
    while client_id in hub:
        client_id = generate_client_id()

    hub.attach(client_id, ws)
    await router.connect(client_id)
    heartbeat = Heartbeat(client_id, hub, app["ping_interval_ms"])
    heartbeat.start()

    try:
        async for msg in ws:
            if msg.type == web.WSMsgType.TEXT:
                frame = parse_frame(msg.data)
                if frame is None:
                    logger.debug(f"Ignoring malformed frame from {client_id}")
                    continue
                await router.dispatch(client_id, *frame)
            elif msg.type == web.WSMsgType.ERROR:
                logger.debug(f"WebSocket error for {client_id}: {ws.exception()}")
    finally:
        heartbeat.stop()
        await router.disconnect(client_id)
        hub.detach(client_id)

    return ws
