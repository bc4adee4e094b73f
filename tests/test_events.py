"""Tests for wire event parsing and serialization."""

import json

import pytest

from chat_relay.exceptions import MalformedEvent
from chat_relay.schemas.events import (
    ConnectedEvent,
    DisconnectedEvent,
    InboundMessageEvent,
    MessageEvent,
    ParticipantsEvent,
    RegisterEvent,
    now_ms,
    parse_inbound_event,
)


class TestParseInboundEvent:
    """Tests for parse_inbound_event()."""

    def test_register_event(self):
        event = parse_inbound_event('{"type": "register", "author": "alice"}')

        assert isinstance(event, RegisterEvent)
        assert event.author == "alice"

    def test_message_event_ignores_extra_fields(self):
        """Test client-side author and time are not part of the parsed event."""
        event = parse_inbound_event(
            '{"type": "message", "text": "hi", "author": "bob", "time": 5}'
        )

        assert isinstance(event, InboundMessageEvent)
        assert event.text == "hi"
        assert not hasattr(event, "author")

    def test_empty_text_allowed(self):
        event = parse_inbound_event('{"type": "message", "text": ""}')

        assert event.text == ""

    def test_unknown_type_rejected(self):
        with pytest.raises(MalformedEvent):
            parse_inbound_event('{"type": "connected", "author": "alice"}')

    def test_invalid_json_rejected(self):
        with pytest.raises(MalformedEvent):
            parse_inbound_event('{"type": "message", "text": ')

    def test_binary_frame_rejected(self):
        with pytest.raises(MalformedEvent, match="text frames"):
            parse_inbound_event(b'{"type": "register", "author": "alice"}')

    def test_error_message_names_field(self):
        """Test validation details are kept for diagnostics."""
        with pytest.raises(MalformedEvent, match="author"):
            parse_inbound_event('{"type": "register"}')


class TestOutboundEvents:
    """Tests for outbound event models."""

    def test_time_stamped_on_creation(self):
        before = now_ms()
        event = ConnectedEvent(author="alice")
        after = now_ms()

        assert before <= event.time <= after

    @pytest.mark.parametrize(
        "event, fields",
        [
            (MessageEvent(author="alice", text="hi"), {"author": "alice", "text": "hi"}),
            (ConnectedEvent(author="alice"), {"author": "alice"}),
            (DisconnectedEvent(author="alice"), {"author": "alice"}),
            (ParticipantsEvent(participants=["alice", "bob"]), {"participants": ["alice", "bob"]}),
        ],
    )
    def test_wire_shape(self, event, fields):
        """Test every outbound event carries its type, time and own fields."""
        payload = json.loads(event.model_dump_json())

        assert payload == {"type": event.type, "time": event.time, **fields}
