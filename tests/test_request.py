"""Tests for request envelope decoding."""

import pytest
from conftest import encode, envelope

from alexa_skillserver.errors import RequestDecodeError
from alexa_skillserver.models.request import (
    IntentRequest,
    LaunchRequest,
    OtherRequest,
    SessionEndedRequest,
)
from alexa_skillserver.services.dispatcher import decode_envelope


def test_decode_launch_request() -> None:
    decoded = decode_envelope(encode(envelope({"type": "LaunchRequest"})))

    assert isinstance(decoded.request, LaunchRequest)
    assert decoded.request_type == "LaunchRequest"
    assert decoded.intent_name == "LaunchRequest"
    assert decoded.session_id == "amzn1.echo-api.session.1"
    assert decoded.user_id == "amzn1.ask.account.1"
    assert decoded.all_slots() == {}


def test_decode_intent_request_with_slots() -> None:
    """Test that intent name, slots and dialog state are populated."""
    payload = envelope(
        {
            "type": "IntentRequest",
            "locale": "en-GB",
            "dialogState": "IN_PROGRESS",
            "intent": {
                "name": "GreetIntent",
                "confirmationStatus": "NONE",
                "slots": {"name": {"name": "name", "value": "Ada"}, "city": {"name": "city"}},
            },
        }
    )
    decoded = decode_envelope(encode(payload))

    assert isinstance(decoded.request, IntentRequest)
    assert decoded.intent_name == "GreetIntent"
    assert decoded.request.dialogState == "IN_PROGRESS"
    assert decoded.locale == "en-GB"
    assert decoded.get_slot_value("name") == "Ada"
    assert decoded.get_slot_value("city") is None
    with pytest.raises(KeyError):
        decoded.get_slot("missing")


def test_decode_session_ended_request() -> None:
    payload = envelope({"type": "SessionEndedRequest", "reason": "USER_INITIATED"})
    decoded = decode_envelope(encode(payload))

    assert isinstance(decoded.request, SessionEndedRequest)
    assert decoded.request.reason == "USER_INITIATED"


def test_decode_unknown_kind_keeps_payload() -> None:
    """Test that unmodelled kinds decode as OtherRequest with their fields."""
    payload = envelope({"type": "AudioPlayer.PlaybackStarted", "token": "track-1"})
    decoded = decode_envelope(encode(payload))

    assert isinstance(decoded.request, OtherRequest)
    assert decoded.request_type == "AudioPlayer.PlaybackStarted"
    assert decoded.request.model_extra["token"] == "track-1"


def test_decode_minimal_envelope() -> None:
    """Test that only the request type is mandatory."""
    decoded = decode_envelope(
        b'{"session":{"application":{"applicationId":"A"}},"request":{"type":"LaunchRequest"}}'
    )

    assert isinstance(decoded.request, LaunchRequest)
    assert decoded.application_id == "A"
    assert decoded.session.attributes == {}


def test_application_id_from_context() -> None:
    """Test that the context application ID is used when the session has none."""
    decoded = decode_envelope(
        b'{"context":{"System":{"application":{"applicationId":"B"}}},'
        b'"request":{"type":"LaunchRequest"}}'
    )
    assert decoded.application_id == "B"


def test_null_attributes_and_slots() -> None:
    payload = envelope(
        {"type": "IntentRequest", "intent": {"name": "X", "slots": None}}, attributes=None
    )
    decoded = decode_envelope(encode(payload))

    assert decoded.session.attributes == {}
    assert decoded.all_slots() == {}


@pytest.mark.parametrize(
    "payload",
    [b"", b"not json", b"[]", b'{"version":"1.0"}', b'{"request":{}}', b'{"request":{"type":5}}'],
)
def test_decode_rejects_malformed_payload(payload: bytes) -> None:
    """Test that malformed payloads raise a 400 decode error."""
    with pytest.raises(RequestDecodeError) as exc_info:
        decode_envelope(payload)
    assert exc_info.value.status_code == 400


def test_session_application_id_takes_precedence() -> None:
    decoded = decode_envelope(
        b'{"session":{"application":{"applicationId":"B"}},'
        b'"context":{"System":{"application":{"applicationId":"A"}}},'
        b'"request":{"type":"LaunchRequest"}}'
    )
    assert decoded.application_id == "B"
