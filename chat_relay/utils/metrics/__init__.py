"""
Prometheus metrics definitions.

All metrics are re-exported here so callers can import them directly:

    from chat_relay.utils.metrics import ws_connections_active
"""

from chat_relay.utils.metrics.websocket import (
    chat_events_broadcast_total,
    chat_participants,
    ws_connections_active,
    ws_connections_total,
    ws_malformed_events_total,
    ws_messages_received_total,
    ws_messages_sent_total,
    ws_send_failures_total,
)

__all__ = [
    "chat_events_broadcast_total",
    "chat_participants",
    "ws_connections_active",
    "ws_connections_total",
    "ws_malformed_events_total",
    "ws_messages_received_total",
    "ws_messages_sent_total",
    "ws_send_failures_total",
]
