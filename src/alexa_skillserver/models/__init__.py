"""Pydantic models for request/response envelopes."""

from .dialog import ConfirmationStatus, DialogState, DialogType
from .request import (
    AlexaContext,
    AlexaIntent,
    AlexaSession,
    AlexaSlot,
    IntentRequest,
    LaunchRequest,
    OtherRequest,
    RequestEnvelope,
    SessionEndedRequest,
)
from .response import (
    AlexaCard,
    AlexaDirective,
    AlexaOutputSpeech,
    AlexaResponse,
    AlexaResponseBody,
    Response,
)

__all__ = [
    "AlexaCard",
    "AlexaContext",
    "AlexaDirective",
    "AlexaIntent",
    "AlexaOutputSpeech",
    "AlexaResponse",
    "AlexaResponseBody",
    "AlexaSession",
    "AlexaSlot",
    "ConfirmationStatus",
    "DialogState",
    "DialogType",
    "IntentRequest",
    "LaunchRequest",
    "OtherRequest",
    "RequestEnvelope",
    "Response",
    "SessionEndedRequest",
]
