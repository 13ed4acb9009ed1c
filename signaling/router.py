"""
Signaling router - role registration, handshake relay, disconnect cleanup

All handlers run under a single lock so each one observes and updates the
session state as one step. Notifications are queued on the hub inside that
step and written out by per-client writers after it.
"""
import asyncio
import logging
from typing import Any

from .hub import Hub
from .state import Role, SessionState

logger = logging.getLogger("signaling")


class SignalingRouter:
    def __init__(self, state: SessionState, hub: Hub):
        self.state = state
        self.hub = hub
        self._lock = asyncio.Lock()
        self._handlers = {
            "register": self.register,
            "offer": self.offer,
            "answer": self.answer,
            "ice-candidate": self.ice_candidate,
            "stop": self.stop,
            "pong": self.pong,
        }

    # ============================================================
    # CONNECTION LIFECYCLE
    # ============================================================

    async def connect(self, client_id: str):
        async with self._lock:
            self.state.add_client(client_id)
        logger.info(f"+ connected {client_id}")

    async def disconnect(self, client_id: str):
        """Remove every trace of client_id. Safe to call twice."""
        async with self._lock:
            state = self.state

            if client_id == state.current_sender:
                state.current_sender = None
                state.remove_client(client_id)
                self.hub.broadcast("receiver-disconnected", skip=client_id)
                logger.info(f"- sender disconnected {client_id}")

            elif client_id in state.receivers:
                state.receivers.discard(client_id)
                state.remove_client(client_id)
                if state.current_sender is not None:
                    self.hub.send(
                        state.current_sender, "receiver-count", {"count": len(state.receivers)}
                    )
                logger.info(f"- receiver disconnected {client_id}")

            elif state.remove_client(client_id) is not None:
                logger.info(f"- disconnected {client_id}")

    # ============================================================
    # INBOUND MESSAGES
    # ============================================================

    async def dispatch(self, client_id: str, msg_type: str, data: Any = None):
        handler = self._handlers.get(msg_type)
        if handler is None:
            logger.debug(f"Ignoring unknown message {msg_type!r} from {client_id}")
            return
        if msg_type in ("stop", "pong"):
            await handler(client_id)
        else:
            await handler(client_id, data)

    async def register(self, client_id: str, payload: Any = None):
        if not isinstance(payload, dict):
            payload = {}
        role = Role.parse(payload.get("role"))

        async with self._lock:
            state = self.state
            if state.get(client_id) is None:
                logger.debug(f"register from unknown client {client_id}")
                return

            if role is Role.SENDER:
                evicted = state.make_sender(client_id)
                if evicted is not None:
                    self.hub.send(evicted, "sender-replaced")
                    logger.info(f"sender {evicted} replaced by {client_id}")
                logger.info(f"sender = {client_id}")

                if state.receivers:
                    self.hub.send(client_id, "receiver-ready", {"count": len(state.receivers)})
            else:
                if state.make_receiver(client_id):
                    logger.info(f"sender {client_id} re-registered as receiver")
                logger.info(f"receiver joined {client_id}")

                if state.current_sender is not None:
                    self.hub.send(
                        state.current_sender,
                        "receiver-ready",
                        {"receiverId": client_id, "count": len(state.receivers)},
                    )

    async def offer(self, client_id: str, payload: Any = None):
        async with self._lock:
            if client_id != self.state.current_sender:
                logger.debug(f"Dropping offer from non-sender {client_id}")
                return
            self.hub.broadcast("offer", payload, skip=client_id)

    async def answer(self, client_id: str, payload: Any = None):
        async with self._lock:
            sender = self.state.current_sender
            if sender is None:
                logger.debug(f"Dropping answer from {client_id}: no sender")
                return
            self.hub.send(sender, "answer", payload)

    async def ice_candidate(self, client_id: str, payload: Any = None):
        async with self._lock:
            if self.state.role_of(client_id) is Role.SENDER:
                self.hub.broadcast("ice-candidate", payload, skip=client_id)
                return

            sender = self.state.current_sender
            if sender is None:
                logger.debug(f"Dropping ice-candidate from {client_id}: no sender")
                return
            self.hub.send(sender, "ice-candidate", payload)

    async def stop(self, client_id: str):
        async with self._lock:
            if self.state.role_of(client_id) is not Role.SENDER:
                return
            self.hub.broadcast("stream-stopped", skip=client_id)
            logger.info(f"stream stopped by {client_id}")

    async def pong(self, client_id: str):
        pass

    # ============================================================
    # STATUS
    # ============================================================

    def snapshot(self) -> dict:
        return {
            "sender": self.state.current_sender is not None,
            "receivers": len(self.state.receivers),
            "clients": len(self.state.clients),
        }
