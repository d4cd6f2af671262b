# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""In-memory registry of connected cameras and monitors."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable

from signaling.errors import DuplicateClientIdError
from signaling.messages import Role, ServerMessage


@runtime_checkable
class Channel(Protocol):
    """Send side of a client's connection."""

    def send(self, message: ServerMessage) -> bool:
        """Queue a message for delivery; return False if it was not accepted."""
        ...


@dataclass
class Client:
    """A registered peer."""

    id: str
    role: Role
    display_name: str
    channel: Channel = field(repr=False, compare=False)

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "role": self.role.value, "name": self.display_name}


class ClientRegistry:
    """Maps client ids to registered clients.

    Not thread-safe. All mutation happens from synchronous handlers running
    on one event loop, which serializes registration, routing and
    disconnect handling.
    """

    def __init__(self) -> None:
        self._clients: dict[str, Client] = {}

    def insert(
        self, client_id: str, role: Role, display_name: str, channel: Channel
    ) -> Client:
        if client_id in self._clients:
            raise DuplicateClientIdError(client_id)
        client = Client(
            id=client_id, role=role, display_name=display_name, channel=channel
        )
        self._clients[client_id] = client
        return client

    def remove(self, client_id: str) -> Optional[Client]:
        """Remove and return the client, or None if it is not registered."""
        return self._clients.pop(client_id, None)

    def get(self, client_id: str) -> Optional[Client]:
        return self._clients.get(client_id)

    def list_by_role(self, role: Role) -> tuple[Client, ...]:
        """Snapshot of the clients with ``role``, in registration order."""
        return tuple(c for c in self._clients.values() if c.role == role)

    def count_by_role(self) -> dict[str, int]:
        counts = {role.value: 0 for role in Role}
        for client in self._clients.values():
            counts[client.role.value] += 1
        return counts

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def __iter__(self) -> Iterator[Client]:
        return iter(tuple(self._clients.values()))
