"""
In-memory session state for the signaling relay
One global session: at most one sender, any number of receivers
"""
from enum import Enum
from typing import Dict, Optional, Set


class InvariantError(Exception):
    """Session state views disagree with each other"""


class Role(str, Enum):
    UNASSIGNED = "unassigned"
    SENDER = "sender"
    RECEIVER = "receiver"

    @classmethod
    def parse(cls, value) -> "Role":
        """
        Registration boundary for client-supplied roles

        Only the literal "receiver" selects RECEIVER. Anything else,
        including a missing or malformed value, defaults to SENDER.
        """
        if value == cls.RECEIVER.value:
            return cls.RECEIVER
        return cls.SENDER


class Client:
    def __init__(self, client_id: str):
        self.id = client_id
        self.role = Role.UNASSIGNED

    def __repr__(self):
        return f"Client({self.id!r}, {self.role.value})"


class SessionState:
    """
    Clients plus the two aggregate views over their roles

    current_sender and receivers are derived from Client.role and must only
    be changed through the helpers below so both views move together.
    """

    def __init__(self):
        self.clients: Dict[str, Client] = {}
        self.current_sender: Optional[str] = None
        self.receivers: Set[str] = set()

    def add_client(self, client_id: str) -> Client:
        client = Client(client_id)
        self.clients[client_id] = client
        return client

    def remove_client(self, client_id: str) -> Optional[Client]:
        return self.clients.pop(client_id, None)

    def get(self, client_id: str) -> Optional[Client]:
        return self.clients.get(client_id)

    def role_of(self, client_id: str) -> Role:
        client = self.clients.get(client_id)
        return client.role if client else Role.UNASSIGNED

    def make_sender(self, client_id: str) -> Optional[str]:
        """Give client_id the sender role. Returns the evicted sender id, if any."""
        evicted = None
        previous = self.current_sender
        if previous is not None and previous != client_id:
            evicted = previous
            old = self.clients.get(previous)
            if old is not None:
                old.role = Role.UNASSIGNED

        self.receivers.discard(client_id)
        self.current_sender = client_id
        self.clients[client_id].role = Role.SENDER
        return evicted

    def make_receiver(self, client_id: str) -> bool:
        """Give client_id the receiver role. Returns True if it vacated the sender slot."""
        vacated = self.current_sender == client_id
        if vacated:
            self.current_sender = None
        self.receivers.add(client_id)
        self.clients[client_id].role = Role.RECEIVER
        return vacated

    def check_invariants(self):
        senders = {cid for cid, c in self.clients.items() if c.role is Role.SENDER}
        if len(senders) > 1:
            raise InvariantError(f"multiple senders: {sorted(senders)}")

        expected_sender = next(iter(senders), None)
        if self.current_sender != expected_sender:
            raise InvariantError(
                f"current_sender={self.current_sender!r} but sender role held by {expected_sender!r}"
            )

        if self.current_sender is not None and self.current_sender in self.receivers:
            raise InvariantError(f"sender {self.current_sender!r} is also a receiver")

        expected_receivers = {cid for cid, c in self.clients.items() if c.role is Role.RECEIVER}
        if self.receivers != expected_receivers:
            raise InvariantError(
                f"receivers={sorted(self.receivers)} but receiver roles={sorted(expected_receivers)}"
            )


# Process-wide session, lives for the process lifetime
session = SessionState()
