"""Request verification, dispatch and response rendering."""

from .authenticator import Authenticated, AuthenticationOutcome, Rejected, RequestAuthenticator
from .cert_cache import CachedCertificate, CertificateCache
from .cert_loader import CertificateLoader, LoadedCertificate, verify_cert_url
from .dispatcher import Skill, SkillRouter, decode_envelope
from .freshness import is_fresh
from .serializer import build_envelope, serialize_response, write_response
from .signature import verify_signature
from .ssml import SSMLBuilder

__all__ = [
    "Authenticated",
    "AuthenticationOutcome",
    "CachedCertificate",
    "CertificateCache",
    "CertificateLoader",
    "LoadedCertificate",
    "Rejected",
    "RequestAuthenticator",
    "SSMLBuilder",
    "Skill",
    "SkillRouter",
    "build_envelope",
    "decode_envelope",
    "is_fresh",
    "serialize_response",
    "verify_cert_url",
    "verify_signature",
    "write_response",
]
