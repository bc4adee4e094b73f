"""
Wire-level chat events.

Every frame is one JSON object tagged by ``type``. Inbound frames form a
closed tagged union (``register`` or ``message``); outbound events carry a
server-stamped ``time`` in milliseconds since epoch.
"""

import time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from typing_extensions import Annotated

from chat_relay.exceptions import MalformedEvent


def now_ms() -> int:
    """Current time in milliseconds since epoch."""
    return int(time.time() * 1000)


# Inbound events


class RegisterEvent(BaseModel):
    """
    Request to bind the connection to a display name.

    Attributes:
        type: Always "register".
        author: Requested display name, matched exactly (case-sensitive).
    """

    type: Literal["register"]
    author: Annotated[str, Field(min_length=1)]


class InboundMessageEvent(BaseModel):
    """
    Chat message sent by a client.

    Any client-supplied ``author`` or ``time`` is ignored; the relay stamps
    both when re-broadcasting.
    """

    type: Literal["message"]
    text: str


InboundEvent = Annotated[
    RegisterEvent | InboundMessageEvent, Field(discriminator="type")
]

inbound_event_adapter = TypeAdapter(InboundEvent)


def parse_inbound_event(
    raw: str | bytes | None,
) -> RegisterEvent | InboundMessageEvent:
    """
    Parse one inbound frame into a typed event.

    Args:
        raw: Frame payload as received from the transport.

    Returns:
        The parsed RegisterEvent or InboundMessageEvent.

    Raises:
        MalformedEvent: If the frame is binary, is not valid JSON, is not
            an object, has an unknown ``type`` or misses required fields.
    """
    if not isinstance(raw, str):
        raise MalformedEvent("Only UTF-8 text frames are supported")

    try:
        return inbound_event_adapter.validate_json(raw)
    except ValidationError as ex:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'frame'}: {err['msg']}"
            for err in ex.errors()
        )
        raise MalformedEvent(errors) from ex


# Outbound events


class OutboundEvent(BaseModel):
    """Base class for events pushed to peers."""

    model_config = ConfigDict(frozen=True)

    type: str
    time: int = Field(default_factory=now_ms)


class MessageEvent(OutboundEvent):
    type: Literal["message"] = "message"
    author: str
    text: str


class ConnectedEvent(OutboundEvent):
    type: Literal["connected"] = "connected"
    author: str


class DisconnectedEvent(OutboundEvent):
    type: Literal["disconnected"] = "disconnected"
    author: str


class ParticipantsEvent(OutboundEvent):
    type: Literal["participants"] = "participants"
    participants: list[str]
