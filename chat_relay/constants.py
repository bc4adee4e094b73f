"""
Application-level constants for hardcoded protocol behavior.

These values are part of the wire protocol the chat clients rely on and
should NEVER be changed via environment variables or configuration.

For configurable values (ports, paths, queue sizes, etc.), see
chat_relay/settings.py where values can be overridden via environment
variables.
"""

# ============================================================================
# WebSocket Protocol Constants
# ============================================================================

# Close code sent when a display name is already registered.
# Private-use range 4000-4999, see RFC 6455 section 7.4.2
WS_NAME_TAKEN_CODE = 4000
WS_NAME_TAKEN_REASON = "Username already in use."

# Close code sent to a peer that stopped draining its outbox.
# 1008 (policy violation), see RFC 6455 section 7.4.1
WS_OUTBOX_OVERFLOW_CODE = 1008
WS_OUTBOX_OVERFLOW_REASON = "Too many pending events"

# Timeout (seconds) when flushing a pending close frame to a peer
# Ensures a disconnecting peer does not hold its endpoint open
WS_CLOSE_TIMEOUT_SECONDS = 5
