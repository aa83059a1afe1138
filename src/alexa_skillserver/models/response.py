"""Alexa Skill response models and the fluent response builder."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .dialog import DialogType
from .request import AlexaIntent, AlexaSlot


class AlexaOutputSpeech(BaseModel):
    """Alexa speech output, plain text or SSML."""

    type: str = "PlainText"
    text: str | None = None
    ssml: str | None = None


class AlexaImage(BaseModel):
    """Images shown on a standard card."""

    smallImageUrl: str | None = None
    largeImageUrl: str | None = None


class AlexaCard(BaseModel):
    """Alexa card for visual display."""

    type: str = "Simple"
    title: str | None = None
    content: str | None = None
    text: str | None = None
    image: AlexaImage | None = None


class AlexaReprompt(BaseModel):
    """Speech used when the user does not answer."""

    outputSpeech: AlexaOutputSpeech


class AlexaDirective(BaseModel):
    """Directive embedded in a response.

    Dialog directives use the named fields; other directive types can pass
    their own members as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    type: str
    updatedIntent: AlexaIntent | None = None
    slotToConfirm: str | None = None
    slotToElicit: str | None = None
    intentToConfirm: str | None = None


class AlexaResponseBody(BaseModel):
    """Alexa response body.

    ``shouldEndSession`` is tri-state: ``None`` leaves it out of the JSON,
    which the platform treats differently from an explicit ``false``.
    """

    outputSpeech: AlexaOutputSpeech | None = None
    card: AlexaCard | None = None
    reprompt: AlexaReprompt | None = None
    directives: list[AlexaDirective] | None = None
    shouldEndSession: bool | None = True


class AlexaResponse(BaseModel):
    """Full Alexa response envelope."""

    version: str = "1.0"
    sessionAttributes: dict[str, Any] | None = None
    response: AlexaResponseBody


class Response(BaseModel):
    """Fluent builder for a skill response.

    Every setter replaces the previous value of its field and returns the
    builder, so calls chain::

        Response().speak("Hello").set_reprompt("Still there?").set_end_session(False)
    """

    body: AlexaResponseBody = Field(default_factory=AlexaResponseBody)
    session_attributes: dict[str, Any] = Field(default_factory=dict)

    def speak(self, text: str) -> "Response":
        return self.set_output_speech(text)

    def set_output_speech(self, text: str) -> "Response":
        self.body.outputSpeech = AlexaOutputSpeech(type="PlainText", text=text)
        return self

    def set_output_speech_ssml(self, ssml: str) -> "Response":
        self.body.outputSpeech = AlexaOutputSpeech(type="SSML", ssml=ssml)
        return self

    def set_card(self, title: str, content: str) -> "Response":
        return self.set_simple_card(title, content)

    def set_simple_card(self, title: str, content: str) -> "Response":
        self.body.card = AlexaCard(type="Simple", title=title, content=content)
        return self

    def set_standard_card(
        self,
        title: str,
        text: str,
        small_image_url: str | None = None,
        large_image_url: str | None = None,
    ) -> "Response":
        image = None
        if small_image_url or large_image_url:
            image = AlexaImage(smallImageUrl=small_image_url, largeImageUrl=large_image_url)
        self.body.card = AlexaCard(type="Standard", title=title, text=text, image=image)
        return self

    def set_link_account_card(self) -> "Response":
        self.body.card = AlexaCard(type="LinkAccount")
        return self

    def set_reprompt(self, text: str) -> "Response":
        self.body.reprompt = AlexaReprompt(
            outputSpeech=AlexaOutputSpeech(type="PlainText", text=text)
        )
        return self

    def set_reprompt_ssml(self, ssml: str) -> "Response":
        self.body.reprompt = AlexaReprompt(outputSpeech=AlexaOutputSpeech(type="SSML", ssml=ssml))
        return self

    def set_end_session(self, flag: bool | None) -> "Response":
        """Set ``shouldEndSession``; ``None`` omits it from the response."""
        self.body.shouldEndSession = flag
        return self

    def set_session_attribute(self, key: str, value: Any) -> "Response":
        self.session_attributes[key] = value
        return self

    def set_session_attributes(self, attributes: dict[str, Any]) -> "Response":
        self.session_attributes = dict(attributes)
        return self

    def add_directive(self, directive: AlexaDirective | dict[str, Any]) -> "Response":
        if isinstance(directive, dict):
            directive = AlexaDirective.model_validate(directive)
        if self.body.directives is None:
            self.body.directives = []
        self.body.directives.append(directive)
        return self

    def respond_to_intent(
        self,
        directive_type: DialogType,
        intent: AlexaIntent | None = None,
        slot: AlexaSlot | None = None,
    ) -> "Response":
        """Append a dialog directive (delegate, elicit, or confirm).

        Chained calls accumulate directives.
        """
        directive = AlexaDirective(type=directive_type.value)
        if intent is not None and directive_type == DialogType.CONFIRM_INTENT:
            directive.intentToConfirm = intent.name
        else:
            directive.updatedIntent = intent

        if slot is not None:
            if directive_type == DialogType.ELICIT_SLOT:
                directive.slotToElicit = slot.name
            elif directive_type == DialogType.CONFIRM_SLOT:
                directive.slotToConfirm = slot.name

        return self.add_directive(directive)
