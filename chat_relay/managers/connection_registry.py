import asyncio
import uuid
from dataclasses import dataclass, field
from typing import NamedTuple

from chat_relay.exceptions import AlreadyRegistered, NameTaken
from chat_relay.logging import logger
from chat_relay.managers.outbox import PeerOutbox


@dataclass(eq=False)
class Connection:
    """
    One live transport-level session.

    Attributes:
        outbox: Outbound queue bound to the transport.
        connection_id: Opaque identifier, never sent to clients.
        display_name: Name bound by ConnectionRegistry.admit(), None while
            the connection is anonymous.
    """

    outbox: PeerOutbox
    connection_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    display_name: str | None = None


class RegistrySnapshot(NamedTuple):
    connections: list[Connection]
    names: list[str]


class ConnectionRegistry:
    """
    Authoritative set of attached connections and their display names.

    Every read and write goes through a single asyncio.Lock, so name
    uniqueness holds under any interleaving of concurrent connects,
    registrations and disconnects.
    """

    def __init__(self) -> None:
        """
        `connections` maps connection ids to every attached connection,
        anonymous ones included. `names` maps display names to connection
        ids in admission order.
        """
        self.connections: dict[str, Connection] = {}
        self.names: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def attach(self, connection: Connection) -> None:
        """
        Start tracking a transport-attached connection so it receives
        broadcasts. Attaching the same connection twice is a no-op.

        Args:
            connection: The newly accepted connection.
        """
        async with self._lock:
            self.connections.setdefault(connection.connection_id, connection)

        logger.debug(
            f"connection {connection.connection_id} attached to registry"
        )

    async def admit(self, connection: Connection, name: str) -> None:
        """
        Bind a connection to a display name.

        Args:
            connection: Connection requesting the name.
            name: Requested display name (exact, case-sensitive match).

        Raises:
            NameTaken: If another admitted connection holds `name`.
            AlreadyRegistered: If `connection` already holds a name.
        """
        async with self._lock:
            if connection.display_name is not None:
                raise AlreadyRegistered(
                    f"Connection {connection.connection_id} is already "
                    f"registered as {connection.display_name!r}"
                )

            if name in self.names:
                raise NameTaken(name)

            connection.display_name = name
            self.names[name] = connection.connection_id
            self.connections.setdefault(connection.connection_id, connection)

        logger.debug(
            f"connection {connection.connection_id} admitted as {name!r}"
        )

    async def evict(self, connection: Connection) -> str | None:
        """
        Stop tracking a connection.

        Evicting an unknown or already evicted connection is a no-op.

        Args:
            connection: The connection whose transport closed.

        Returns:
            The display name the connection held, or None if it was never
            admitted.
        """
        async with self._lock:
            self.connections.pop(connection.connection_id, None)

            name = connection.display_name
            if name is None or self.names.get(name) != connection.connection_id:
                return None

            del self.names[name]

        logger.debug(
            f"connection {connection.connection_id} ({name!r}) evicted"
        )
        return name

    async def lookup(self, connection: Connection) -> str | None:
        """
        Return the display name of a currently admitted connection.

        Returns:
            The bound name, or None if the connection is anonymous or has
            been evicted.
        """
        async with self._lock:
            name = connection.display_name
            if name is not None and self.names.get(name) == connection.connection_id:
                return name
            return None

    async def list_names(self) -> list[str]:
        """Snapshot of all admitted display names in admission order."""
        async with self._lock:
            return [name for name in self.names if name]

    async def get_connections(self) -> list[Connection]:
        """Snapshot of every attached connection, anonymous ones included."""
        async with self._lock:
            return list(self.connections.values())

    async def snapshot(self) -> RegistrySnapshot:
        """
        Take attached connections and admitted names under one lock
        acquisition, so a participants list always matches its recipients.
        """
        async with self._lock:
            return RegistrySnapshot(
                connections=list(self.connections.values()),
                names=[name for name in self.names if name],
            )
