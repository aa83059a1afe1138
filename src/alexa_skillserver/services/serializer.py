"""Rendering skill responses to the JSON the Alexa service expects."""

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

from pydantic_core import PydanticSerializationError

from ..errors import PartialWriteError, ResponseWriteError, SerializationError
from ..models.response import AlexaResponse, Response

logger = logging.getLogger(__name__)


class Writer(Protocol):
    """Anything with a ``write`` that reports how many bytes it took."""

    def write(self, data: bytes, /) -> int | None: ...


def build_envelope(
    response: Response,
    session_attributes: Mapping[str, Any] | None = None,
) -> AlexaResponse:
    """Wrap a response body and session attributes in a response envelope.

    ``session_attributes`` defaults to the attributes set on the builder.
    An empty attribute bag is left out of the envelope.
    """
    attributes = response.session_attributes if session_attributes is None else session_attributes
    return AlexaResponse(
        sessionAttributes=dict(attributes) or None,
        response=response.body,
    )


def serialize_response(
    response: Response,
    session_attributes: Mapping[str, Any] | None = None,
) -> bytes:
    """Serialize a response to compact JSON bytes.

    Unset optional members are omitted, including ``shouldEndSession`` when
    it was explicitly cleared.

    Raises:
        SerializationError: If the envelope holds values JSON cannot encode
    """
    envelope = build_envelope(response, session_attributes)

    try:
        document: dict[str, Any] = {"version": envelope.version}
        if envelope.sessionAttributes is not None:
            document["sessionAttributes"] = envelope.sessionAttributes
        document["response"] = envelope.response.model_dump(mode="json", exclude_none=True)

        return json.dumps(document, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise SerializationError(f"failed to marshal response: {e}") from e


def write_response(writer: Writer, payload: bytes) -> int:
    """Write a serialized response and insist that all of it was taken.

    Returns:
        Number of bytes written

    Raises:
        ResponseWriteError: If the transport raises
        PartialWriteError: If fewer than ``len(payload)`` bytes were written
    """
    try:
        written = writer.write(payload)
    except OSError as e:
        raise ResponseWriteError(f"failed to write response: {e}") from e

    written = written or 0
    if written != len(payload):
        logger.error(f"Partial response write: {written} of {len(payload)} bytes")
        raise PartialWriteError(written, len(payload))

    return written
