"""
WebSocket connection hub - addressing by client id
Unicast and "everyone except caller" broadcast over aiohttp WebSockets

Sends never wait on the peer: each client has a bounded outbound queue
drained by its own writer task, so a slow reader only delays itself.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger("signaling")

QUEUE_SIZE = 256


def envelope(msg_type: str, data: Any = None) -> dict:
    message = {"type": msg_type}
    if data is not None:
        message["data"] = data
    return message


class Hub:
    """Open WebSocket and writer task per client id"""

    def __init__(self, queue_size: int = QUEUE_SIZE):
        self.queue_size = queue_size
        self.sockets: Dict[str, Any] = {}
        self.queues: Dict[str, asyncio.Queue] = {}
        self.writers: Dict[str, asyncio.Task] = {}

    def __len__(self):
        return len(self.sockets)

    def __contains__(self, client_id):
        return client_id in self.sockets

    def attach(self, client_id: str, ws):
        queue = asyncio.Queue(maxsize=self.queue_size)
        self.sockets[client_id] = ws
        self.queues[client_id] = queue
        self.writers[client_id] = asyncio.create_task(self._writer(client_id, ws, queue))

    def detach(self, client_id: str):
        self.sockets.pop(client_id, None)
        self.queues.pop(client_id, None)
        writer = self.writers.pop(client_id, None)
        if writer is not None:
            writer.cancel()

    async def _writer(self, client_id: str, ws, queue: asyncio.Queue):
        while True:
            message = await queue.get()
            try:
                if not ws.closed:
                    await ws.send_json(message)
            except Exception as e:
                logger.debug(f"Failed to send {message['type']} to {client_id}: {e}")
            finally:
                queue.task_done()

    def send(self, client_id: str, msg_type: str, data: Any = None) -> bool:
        """Queue one message for one client. Unknown, dead or backed-up targets are a no-op."""
        ws = self.sockets.get(client_id)
        if ws is None or ws.closed:
            logger.debug(f"Dropping {msg_type} for gone client {client_id}")
            return False

        try:
            self.queues[client_id].put_nowait(envelope(msg_type, data))
        except asyncio.QueueFull:
            logger.warning(f"Dropping {msg_type} for {client_id}: outbound queue full")
            return False
        return True

    def broadcast(self, msg_type: str, data: Any = None, skip: Optional[str] = None) -> int:
        """Queue for every connected client except `skip`. Returns queued count."""
        queued = 0
        for client_id in list(self.sockets):
            if client_id == skip:
                continue
            if self.send(client_id, msg_type, data):
                queued += 1
        return queued

    async def drain(self, *client_ids: str):
        """Wait until the given clients' queues (default: all) are written out."""
        ids = client_ids or tuple(self.queues)
        queues = [self.queues[cid] for cid in ids if cid in self.queues]
        await asyncio.gather(*(q.join() for q in queues))
