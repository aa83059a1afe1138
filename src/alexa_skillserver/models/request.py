"""Alexa Skill request models.

Field names follow the wire format so envelopes validate straight from the
JSON payload. The ``request`` member is a tagged union keyed on ``type``;
kinds without a dedicated model (``AudioPlayer.*`` and friends) land in
``OtherRequest``.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator


class AlexaSlot(BaseModel):
    """Alexa slot value."""

    name: str = ""
    value: str | None = None
    confirmationStatus: str | None = None
    resolutions: dict[str, Any] | None = None


class AlexaIntent(BaseModel):
    """Alexa intent with slots."""

    name: str = ""
    slots: dict[str, AlexaSlot] = {}
    confirmationStatus: str | None = None

    @field_validator("slots", mode="before")
    @classmethod
    def _null_slots(cls, value: Any) -> Any:
        return {} if value is None else value


class AlexaApplication(BaseModel):
    """Application the request was sent for."""

    applicationId: str = ""


class AlexaUser(BaseModel):
    """User the request was made on behalf of."""

    userId: str = ""
    accessToken: str | None = None


class AlexaSession(BaseModel):
    """Alexa session information."""

    sessionId: str = ""
    new: bool = False
    application: AlexaApplication = Field(default_factory=AlexaApplication)
    attributes: dict[str, Any] = Field(default_factory=dict)
    user: AlexaUser = Field(default_factory=AlexaUser)

    @field_validator("attributes", mode="before")
    @classmethod
    def _null_attributes(cls, value: Any) -> Any:
        return {} if value is None else value


class AlexaDevice(BaseModel):
    """Device the request originated from."""

    deviceId: str | None = None


class AlexaSystem(BaseModel):
    """System block of the request context."""

    application: AlexaApplication = Field(default_factory=AlexaApplication)
    device: AlexaDevice = Field(default_factory=AlexaDevice)


class AlexaContext(BaseModel):
    """Request context."""

    System: AlexaSystem = Field(default_factory=AlexaSystem)


class _RequestBase(BaseModel):
    requestId: str = ""
    timestamp: str = ""
    locale: str = "en-US"


class LaunchRequest(_RequestBase):
    """User opened the skill without asking for anything specific."""

    type: Literal["LaunchRequest"] = "LaunchRequest"


class IntentRequest(_RequestBase):
    """User utterance mapped to an intent."""

    type: Literal["IntentRequest"] = "IntentRequest"
    intent: AlexaIntent = Field(default_factory=AlexaIntent)
    dialogState: str | None = None


class SessionEndedRequest(_RequestBase):
    """Session closed by the user, a timeout or an error."""

    type: Literal["SessionEndedRequest"] = "SessionEndedRequest"
    reason: str | None = None
    error: dict[str, Any] | None = None


class OtherRequest(_RequestBase):
    """Any request kind without a dedicated model."""

    model_config = ConfigDict(extra="allow")

    type: str


_KNOWN_KINDS = {"LaunchRequest", "IntentRequest", "SessionEndedRequest"}


def _request_kind(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    return kind if isinstance(kind, str) and kind in _KNOWN_KINDS else "Other"


SkillRequest = Annotated[
    Union[
        Annotated[LaunchRequest, Tag("LaunchRequest")],
        Annotated[IntentRequest, Tag("IntentRequest")],
        Annotated[SessionEndedRequest, Tag("SessionEndedRequest")],
        Annotated[OtherRequest, Tag("Other")],
    ],
    Discriminator(_request_kind),
]


class RequestEnvelope(BaseModel):
    """Full Alexa request envelope."""

    version: str = "1.0"
    session: AlexaSession = Field(default_factory=AlexaSession)
    context: AlexaContext = Field(default_factory=AlexaContext)
    request: SkillRequest

    @property
    def request_type(self) -> str:
        return self.request.type

    @property
    def intent_name(self) -> str:
        """Intent name for intent requests, otherwise the request type."""
        if isinstance(self.request, IntentRequest):
            return self.request.intent.name
        return self.request.type

    @property
    def session_id(self) -> str:
        return self.session.sessionId

    @property
    def user_id(self) -> str:
        return self.session.user.userId

    @property
    def locale(self) -> str:
        return self.request.locale

    @property
    def application_id(self) -> str:
        """Session application ID, or the context's when the session carries none."""
        return (
            self.session.application.applicationId
            or self.context.System.application.applicationId
        )

    def all_slots(self) -> dict[str, AlexaSlot]:
        if isinstance(self.request, IntentRequest):
            return self.request.intent.slots
        return {}

    def get_slot(self, name: str) -> AlexaSlot:
        """Return a slot by name.

        Raises:
            KeyError: If the request carries no such slot
        """
        slots = self.all_slots()
        if name not in slots:
            raise KeyError(f"Slot name not found: {name}")
        return slots[name]

    def get_slot_value(self, name: str) -> str | None:
        return self.get_slot(name).value
