"""
Custom exception classes for the chat relay.

This module defines the errors raised by the connection registry, the
inbound event parser and the per-peer send path.
"""


class RegistrationError(Exception):
    """
    Display name registration failed.

    Base class for errors raised by ConnectionRegistry.admit().
    """

    pass


class NameTaken(RegistrationError):
    """
    Display name already in use.

    Raised when another admitted connection already holds the requested
    name (exact, case-sensitive match).
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"Display name {name!r} is already in use")
        self.name = name


class AlreadyRegistered(RegistrationError):
    """
    Connection already holds a display name.

    Names are bound once per connection; renaming is not supported.
    """

    pass


class MalformedEvent(Exception):
    """
    Inbound frame could not be parsed into a known event.

    Raised for binary frames, invalid JSON, unknown event types and
    missing or invalid fields.
    """

    pass


class PeerSendFailure(Exception):
    """
    Event could not be delivered to a single peer.

    Raised when a peer outbox is closed or full. Never aborts a broadcast.
    """

    pass
