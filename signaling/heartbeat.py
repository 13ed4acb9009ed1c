"""
Per-connection keep-alive ping

Keeps intermediaries from timing out idle sockets. There is no liveness
check: pong replies are accepted and ignored by the router.
"""
import asyncio
import logging
from typing import Optional

from .hub import Hub
from .utils import now_ms

logger = logging.getLogger("signaling")


class Heartbeat:
    def __init__(self, client_id: str, hub: Hub, interval_ms: int):
        self.client_id = client_id
        self.hub = hub
        self.interval = interval_ms / 1000.0
        self._task: Optional[asyncio.Task] = None
        self._stopped = False

    def start(self):
        if self._task is None and not self._stopped:
            self._task = asyncio.create_task(self._run())

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            self.hub.send(self.client_id, "ping", {"t": now_ms()})

    def stop(self) -> bool:
        """Cancel the timer. Only the first call has an effect."""
        if self._stopped:
            return False
        self._stopped = True
        if self._task is not None:
            self._task.cancel()
        logger.debug(f"heartbeat stopped for {self.client_id}")
        return True

    @property
    def running(self) -> bool:
        return self._task is not None and not self._stopped and not self._task.done()
