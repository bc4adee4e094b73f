"""
Prometheus metrics for chat connection monitoring.

This module defines metrics for tracking WebSocket connections, registered
participants, inbound frames and broadcast delivery.
"""

from chat_relay.utils.metrics._helpers import (
    _get_or_create_counter,
    _get_or_create_gauge,
)

# WebSocket Connection Metrics
ws_connections_active = _get_or_create_gauge(
    "ws_connections_active", "Number of active WebSocket connections"
)

ws_connections_total = _get_or_create_counter(
    "ws_connections_total",
    "Total WebSocket connections",
    ["status"],  # accepted, rejected_name
)

chat_participants = _get_or_create_gauge(
    "chat_participants", "Number of registered chat participants"
)

# Message Metrics
ws_messages_received_total = _get_or_create_counter(
    "ws_messages_received_total", "Total WebSocket frames received"
)

ws_messages_sent_total = _get_or_create_counter(
    "ws_messages_sent_total", "Total WebSocket frames sent"
)

ws_malformed_events_total = _get_or_create_counter(
    "ws_malformed_events_total", "Total inbound frames dropped as malformed"
)

ws_send_failures_total = _get_or_create_counter(
    "ws_send_failures_total",
    "Total per-peer delivery failures",
    ["reason"],  # outbox_full, outbox_closed, send_error
)

chat_events_broadcast_total = _get_or_create_counter(
    "chat_events_broadcast_total",
    "Total events broadcast to all peers",
    ["type"],
)


__all__ = [
    "ws_connections_active",
    "ws_connections_total",
    "chat_participants",
    "ws_messages_received_total",
    "ws_messages_sent_total",
    "ws_malformed_events_total",
    "ws_send_failures_total",
    "chat_events_broadcast_total",
]
