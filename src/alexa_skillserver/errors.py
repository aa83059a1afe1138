"""Exceptions raised while verifying, dispatching and answering skill requests.

Every error carries the HTTP status the webhook should answer with. The
message is meant for logs; only the coarse status phrase goes back over
the wire.
"""

from __future__ import annotations

from enum import Enum


class SkillServerError(Exception):
    """Base class for skill server failures."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class CertificateErrorKind(str, Enum):
    """Stage of certificate loading that failed."""

    INVALID_URL = "invalid_url"
    FETCH_FAILED = "fetch_failed"
    PARSE_FAILED = "parse_failed"
    EXPIRED = "expired"
    IDENTITY_MISMATCH = "identity_mismatch"


class CertificateError(SkillServerError):
    """Raised when the signing certificate cannot be trusted."""

    status_code = 401

    def __init__(self, kind: CertificateErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class SignatureError(SkillServerError):
    """Raised when the request signature does not match the body."""

    status_code = 401


class StaleRequestError(SkillServerError):
    """Raised when a request timestamp falls outside the tolerance window."""

    status_code = 400


class RequestDecodeError(SkillServerError):
    """Raised when the request body is not a valid skill envelope."""

    status_code = 400


class DispatchErrorKind(str, Enum):
    """Reason a request could not be routed to a handler."""

    APPLICATION_ID_MISMATCH = "application_id_mismatch"
    HANDLER_MISSING = "handler_missing"
    UNSUPPORTED_KIND = "unsupported_kind"
    HANDLER_FAILED = "handler_failed"


_DISPATCH_STATUS = {
    DispatchErrorKind.APPLICATION_ID_MISMATCH: 400,
    DispatchErrorKind.HANDLER_MISSING: 500,
    DispatchErrorKind.UNSUPPORTED_KIND: 400,
    DispatchErrorKind.HANDLER_FAILED: 500,
}


class DispatchError(SkillServerError):
    """Raised when a request cannot be dispatched or its handler fails."""

    def __init__(self, kind: DispatchErrorKind, message: str):
        super().__init__(message, _DISPATCH_STATUS[kind])
        self.kind = kind

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class SerializationError(SkillServerError):
    """Raised when a response cannot be rendered to JSON."""

    status_code = 500


class ResponseWriteError(SkillServerError):
    """Raised when the transport fails while the response is written."""

    status_code = 500


class PartialWriteError(ResponseWriteError):
    """Raised when the transport accepted only part of the response."""

    def __init__(self, written: int, total: int):
        super().__init__(
            f"failed to completely write response: {written} of {total} bytes written"
        )
        self.written = written
        self.total = total


__all__ = [
    "SkillServerError",
    "CertificateErrorKind",
    "CertificateError",
    "SignatureError",
    "StaleRequestError",
    "RequestDecodeError",
    "DispatchErrorKind",
    "DispatchError",
    "SerializationError",
    "ResponseWriteError",
    "PartialWriteError",
]
