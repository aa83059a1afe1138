"""Skill definitions and request dispatch."""

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from ..errors import DispatchError, DispatchErrorKind, RequestDecodeError
from ..models.request import (
    AlexaSession,
    IntentRequest,
    LaunchRequest,
    OtherRequest,
    RequestEnvelope,
    SessionEndedRequest,
)
from ..models.response import Response
from .serializer import Writer, serialize_response, write_response

logger = logging.getLogger(__name__)

ResponseHandler = Callable[[Any, AlexaSession], Response | Awaitable[Response]]
SessionEndedHandler = Callable[[SessionEndedRequest, AlexaSession], Awaitable[None] | None]


def decode_envelope(payload: bytes | str) -> RequestEnvelope:
    """Decode a JSON payload into a request envelope.

    Raises:
        RequestDecodeError: If the payload is not JSON or not an envelope
    """
    try:
        return RequestEnvelope.model_validate_json(payload)
    except ValidationError as e:
        raise RequestDecodeError(f"failed to bootstrap request from JSON payload: {e}") from e


@dataclass
class Skill:
    """An Alexa custom skill: the application IDs it answers and its handlers.

    Handlers receive the typed request and the session and may be plain
    functions or coroutines. ``on_session_ended`` returns nothing since the
    platform accepts no response to a session end.

    Example:
        skill = Skill(
            application_ids=["amzn1.ask.skill.1234"],
            on_launch=lambda request, session: Response().speak("Hello"),
        )
    """

    application_ids: list[str] | str
    on_launch: ResponseHandler | None = None
    on_intent: ResponseHandler | None = None
    on_session_ended: SessionEndedHandler | None = None
    on_audio_player: ResponseHandler | None = None  # AudioPlayer.* requests
    on_other: ResponseHandler | None = None  # Any other request kind
    name: str = field(default="skill")

    def __post_init__(self) -> None:
        if isinstance(self.application_ids, str):
            self.application_ids = [self.application_ids]

    def application_id_is_valid(self, envelope: RequestEnvelope) -> bool:
        return bool(envelope.application_id) and envelope.application_id in self.application_ids

    async def dispatch(self, envelope: RequestEnvelope) -> Response | None:
        """Route a decoded request to its handler.

        Returns:
            The handler's response, or None for a SessionEndedRequest

        Raises:
            DispatchError: On an application ID mismatch, a missing handler,
                an unsupported request kind, or a failing handler
        """
        if not self.application_id_is_valid(envelope):
            raise DispatchError(
                DispatchErrorKind.APPLICATION_ID_MISMATCH,
                f"application ID {envelope.application_id!r} is not in the list of "
                f"valid application IDs: {self.application_ids}",
            )

        request = envelope.request
        session = envelope.session

        logger.info(f"{self.name}: {envelope.intent_name} ({request.requestId or 'no request id'})")

        if isinstance(request, LaunchRequest):
            return await self._respond("on_launch", request, session)

        if isinstance(request, IntentRequest):
            return await self._respond("on_intent", request, session)

        if isinstance(request, SessionEndedRequest):
            await self._invoke("on_session_ended", request, session)
            return None

        if isinstance(request, OtherRequest):
            if request.type.startswith("AudioPlayer.") and self.on_audio_player is not None:
                return await self._respond("on_audio_player", request, session)
            if self.on_other is not None:
                return await self._respond("on_other", request, session)

        raise DispatchError(
            DispatchErrorKind.UNSUPPORTED_KIND, f"unsupported request type: {request.type}"
        )

    async def handle(self, writer: Writer, payload: bytes) -> int:
        """Decode, dispatch, serialize and write one request.

        Nothing is written for a SessionEndedRequest.

        Returns:
            Number of bytes written
        """
        envelope = decode_envelope(payload)
        response = await self.dispatch(envelope)
        if response is None:
            return 0
        return write_response(writer, serialize_response(response))

    async def _respond(self, handler_name: str, request: Any, session: AlexaSession) -> Response:
        response = await self._invoke(handler_name, request, session)
        if not isinstance(response, Response):
            raise DispatchError(
                DispatchErrorKind.HANDLER_FAILED,
                f"{handler_name} handler returned {type(response).__name__}, expected Response",
            )
        return response

    async def _invoke(self, handler_name: str, request: Any, session: AlexaSession) -> Any:
        handler = getattr(self, handler_name)
        if handler is None:
            raise DispatchError(
                DispatchErrorKind.HANDLER_MISSING, f"no {handler_name} handler defined"
            )

        try:
            result = handler(request, session)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise DispatchError(
                DispatchErrorKind.HANDLER_FAILED, f"{handler_name} handler failed: {e}"
            ) from e

        return result


class SkillRouter:
    """Registry of skills by endpoint path, built once at startup.

    Paths are relative to the configured echo prefix, so a skill added as
    ``"helloworld"`` is served at ``/echo/helloworld`` by default.
    """

    def __init__(self, skills: Mapping[str, Skill] | None = None):
        self._skills: dict[str, Skill] = {}
        for path, skill in (skills or {}).items():
            self.add(path, skill)

    def add(self, path: str, skill: Skill) -> "SkillRouter":
        key = path.strip("/")
        if not key:
            raise ValueError("skill path must not be empty")
        if key in self._skills:
            raise ValueError(f"a skill is already registered at {key}")
        self._skills[key] = skill
        return self

    def get(self, path: str) -> Skill | None:
        return self._skills.get(path.strip("/"))

    def items(self) -> Iterator[tuple[str, Skill]]:
        return iter(self._skills.items())

    def __iter__(self) -> Iterator[str]:
        return iter(self._skills)

    def __len__(self) -> int:
        return len(self._skills)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and path.strip("/") in self._skills
