from chat_relay.exceptions import PeerSendFailure
from chat_relay.logging import logger
from chat_relay.managers.connection_registry import Connection, ConnectionRegistry
from chat_relay.schemas.events import OutboundEvent, ParticipantsEvent
from chat_relay.utils.metrics import chat_events_broadcast_total, chat_participants


class Broadcaster:
    """
    Fan-out of outbound events to every attached connection.

    Events are serialized once and queued on each peer's outbox without
    awaiting the network. Queueing one event for all peers never yields to
    the event loop, so every receiver observes the same global order of
    broadcasts.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    async def broadcast(self, event: OutboundEvent) -> int:
        """
        Push an event to every connection currently attached to the
        registry, anonymous ones included.

        Failures to queue for one peer are logged and never abort delivery
        to the others.

        Args:
            event: The event to broadcast.

        Returns:
            Number of peers the event was queued for.
        """
        connections = await self.registry.get_connections()
        return self._fan_out(event, connections)

    async def broadcast_participants(self) -> int:
        """
        Broadcast the current list of registered display names.

        The list and the recipients come from a single registry snapshot.

        Returns:
            Number of peers the event was queued for.
        """
        snapshot = await self.registry.snapshot()
        chat_participants.set(len(snapshot.names))
        return self._fan_out(
            ParticipantsEvent(participants=snapshot.names), snapshot.connections
        )

    def _fan_out(
        self, event: OutboundEvent, connections: list[Connection]
    ) -> int:
        payload = event.model_dump_json()
        delivered = 0

        for connection in connections:
            try:
                connection.outbox.push(payload)
                delivered += 1
            except PeerSendFailure as e:
                logger.warning(
                    f"Dropped {event.type} event for connection "
                    f"{connection.connection_id}: {e}"
                )

        chat_events_broadcast_total.labels(type=event.type).inc()
        logger.debug(
            f"Broadcast {event.type} event to {delivered}/{len(connections)} peers"
        )
        return delivered
