from enum import Enum

from chat_relay.constants import WS_NAME_TAKEN_CODE, WS_NAME_TAKEN_REASON
from chat_relay.exceptions import MalformedEvent, NameTaken
from chat_relay.logging import logger, set_log_context
from chat_relay.managers.broadcaster import Broadcaster
from chat_relay.managers.connection_registry import Connection, ConnectionRegistry
from chat_relay.schemas.events import (
    ConnectedEvent,
    DisconnectedEvent,
    InboundMessageEvent,
    MessageEvent,
    RegisterEvent,
    parse_inbound_event,
)
from chat_relay.utils.metrics import ws_connections_total, ws_malformed_events_total


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    REGISTERED = "registered"
    CLOSED = "closed"


class ChatSession:
    """
    Chat protocol for a single connection.

    A session starts ANONYMOUS, becomes REGISTERED after its display name
    is admitted and ends CLOSED, either because the name was taken or
    because the transport went away. The session knows nothing about the
    transport beyond the connection's outbox, so it can be driven directly
    in tests.
    """

    def __init__(
        self,
        connection: Connection,
        registry: ConnectionRegistry,
        broadcaster: Broadcaster,
    ) -> None:
        self.connection = connection
        self.registry = registry
        self.broadcaster = broadcaster
        self.state = SessionState.ANONYMOUS

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    async def open(self) -> None:
        """Attach the connection so it receives broadcasts while anonymous."""
        await self.registry.attach(self.connection)

    async def handle(self, raw: str | bytes | None) -> None:
        """
        Process one inbound frame.

        Malformed frames are logged and dropped; the connection stays open.

        Args:
            raw: Frame payload as received from the transport.
        """
        if self.closed:
            logger.debug("Ignoring frame received after session closed")
            return

        try:
            event = parse_inbound_event(raw)
        except MalformedEvent as ex:
            ws_malformed_events_total.inc()
            logger.debug(f"Dropped malformed event: {ex}")
            return

        if isinstance(event, RegisterEvent):
            await self.on_register(event)
        elif isinstance(event, InboundMessageEvent):
            await self.on_message(event)

    async def on_register(self, event: RegisterEvent) -> None:
        if self.state is not SessionState.ANONYMOUS:
            logger.debug(
                f"Ignoring register as {event.author!r}, session is "
                f"{self.state.value}"
            )
            return

        try:
            await self.registry.admit(self.connection, event.author)
        except NameTaken:
            self.state = SessionState.CLOSED
            ws_connections_total.labels(status="rejected_name").inc()
            logger.info(
                f"Rejected registration, {event.author!r} is already in use"
            )
            self.connection.outbox.close(
                WS_NAME_TAKEN_CODE, WS_NAME_TAKEN_REASON
            )
            return

        self.state = SessionState.REGISTERED
        set_log_context(author=event.author)
        logger.info(f"{event.author!r} joined the chat")

        await self.broadcaster.broadcast(ConnectedEvent(author=event.author))
        await self.broadcaster.broadcast_participants()

    async def on_message(self, event: InboundMessageEvent) -> None:
        if self.state is not SessionState.REGISTERED:
            logger.debug("Dropped message from unregistered connection")
            return

        # Author always comes from the registry, never from the client
        author = await self.registry.lookup(self.connection)
        if author is None:
            return

        await self.broadcaster.broadcast(
            MessageEvent(author=author, text=event.text)
        )

    async def close(self) -> None:
        """
        Evict the connection after its transport closed.

        Peers are notified only if the connection had registered. Calling
        close() more than once is a no-op.
        """
        self.state = SessionState.CLOSED

        author = await self.registry.evict(self.connection)
        if author is None:
            return

        logger.info(f"{author!r} left the chat")
        await self.broadcaster.broadcast(DisconnectedEvent(author=author))
        await self.broadcaster.broadcast_participants()
