"""Shared fixtures: a router over a real Hub with recording sockets."""

import inspect

import pytest

from signaling.hub import Hub
from signaling.router import SignalingRouter
from signaling.state import SessionState


class FakeSocket:
    """Stands in for web.WebSocketResponse; records every JSON message sent."""

    def __init__(self):
        self.closed = False
        self.sent = []

    async def send_json(self, data):
        if self.closed:
            raise ConnectionResetError("socket closed")
        self.sent.append(data)

    def types(self):
        return [m["type"] for m in self.sent]

    def of_type(self, msg_type):
        return [m for m in self.sent if m["type"] == msg_type]


@pytest.fixture
def state():
    return SessionState()


@pytest.fixture
def hub():
    return Hub()


class DrainingRouter:
    """Wraps a router so each awaited call returns once queued messages are written."""

    def __init__(self, router, hub):
        self._router = router
        self._hub = hub

    def __getattr__(self, name):
        attr = getattr(self._router, name)
        if not inspect.iscoroutinefunction(attr):
            return attr

        async def call(*args, **kwargs):
            result = await attr(*args, **kwargs)
            await self._hub.drain()
            return result

        return call


@pytest.fixture
def router(state, hub):
    return DrainingRouter(SignalingRouter(state, hub), hub)


@pytest.fixture
def connect(router, hub):
    """Open a fake connection and return its socket."""

    async def _connect(client_id):
        ws = FakeSocket()
        hub.attach(client_id, ws)
        await router.connect(client_id)
        return ws

    return _connect
