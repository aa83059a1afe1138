"""Alexa Skill webhook endpoints."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from ..config import Settings
from ..errors import DispatchError, DispatchErrorKind, SkillServerError, StaleRequestError
from ..services.authenticator import Rejected, RequestAuthenticator
from ..services.dispatcher import Skill, SkillRouter, decode_envelope
from ..services.freshness import is_fresh
from ..services.serializer import serialize_response

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json;charset=UTF-8"

# Only the coarse category goes back to the caller
ERROR_MESSAGES = {
    400: "Bad Request",
    401: "Not Authorized",
    500: "Internal Server Error",
}


def _error_response(status_code: int) -> Response:
    return PlainTextResponse(ERROR_MESSAGES.get(status_code, "Error"), status_code=status_code)


def _log_dispatch_error(error: DispatchError) -> None:
    if error.kind == DispatchErrorKind.HANDLER_MISSING:
        logger.error(f"Skill misconfigured: {error}")
    elif error.kind == DispatchErrorKind.HANDLER_FAILED:
        logger.error(f"Skill handler error: {error}", exc_info=error.__cause__)
    else:
        logger.warning(f"Request not dispatched: {error}")


async def handle_skill_request(
    request: Request,
    skill: Skill,
    authenticator: RequestAuthenticator,
    settings: Settings,
) -> Response:
    """
    Verify, decode and dispatch one Alexa request.

    Steps, each answering with an error status when it fails:
    1. Signature certificate and request signature (401)
    2. JSON envelope decoding (400)
    3. Timestamp freshness (400)
    4. Application ID and handler dispatch (400 or 500)

    The ``_dev`` query parameter skips steps 1 and 3 when the settings allow it.
    SessionEndedRequests are answered with an empty body.
    """
    raw_body = await request.body()

    dev_flag = request.query_params.get("_dev", "")
    dev = bool(dev_flag) and settings.dev_bypass_enabled
    if dev_flag and not dev:
        logger.warning("Ignoring _dev parameter, dev bypass is disabled")

    outcome = await authenticator.authenticate(request.headers, raw_body, dev=dev)
    if isinstance(outcome, Rejected):
        return _error_response(outcome.status_code)

    try:
        envelope = decode_envelope(raw_body)

        if not dev and not is_fresh(envelope.request.timestamp, tolerance=settings.timestamp_tolerance):
            raise StaleRequestError(
                f"Request too old to continue (>{settings.timestamp_tolerance}s): "
                f"{envelope.request.timestamp!r}"
            )

        response = await skill.dispatch(envelope)
        if response is None:
            return Response(status_code=200)

        payload = serialize_response(response)
    except DispatchError as e:
        _log_dispatch_error(e)
        return _error_response(e.status_code)
    except SkillServerError as e:
        logger.warning(f"{type(e).__name__}: {e}")
        return _error_response(e.status_code)

    return Response(content=payload, media_type=JSON_MEDIA_TYPE)


def build_skill_router(
    skills: SkillRouter,
    authenticator: RequestAuthenticator,
    settings: Settings,
) -> APIRouter:
    """Mount one POST endpoint per registered skill under the echo prefix."""
    router = APIRouter(prefix=settings.echo_prefix.rstrip("/"), tags=["alexa"])

    for path, skill in skills.items():
        router.add_api_route(
            f"/{path}",
            _make_endpoint(skill, authenticator, settings),
            methods=["POST"],
            name=f"skill:{path}",
        )
        logger.debug(f"Mounted skill {skill.name} at {settings.echo_prefix.rstrip('/')}/{path}")

    return router


def _make_endpoint(skill: Skill, authenticator: RequestAuthenticator, settings: Settings):
    async def skill_webhook(request: Request) -> Response:
        return await handle_skill_request(request, skill, authenticator, settings)

    return skill_webhook
