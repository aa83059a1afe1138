"""Shared fixtures: throwaway signing keys, certificates and a test client."""

import base64
import json
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID
from fastapi.testclient import TestClient

from alexa_skillserver.config import Settings
from alexa_skillserver.main import create_app
from alexa_skillserver.models.response import Response
from alexa_skillserver.services.authenticator import RequestAuthenticator
from alexa_skillserver.services.cert_cache import CertificateCache
from alexa_skillserver.services.cert_loader import CERT_CHAIN_DOMAIN, CertificateLoader
from alexa_skillserver.services.dispatcher import Skill, SkillRouter
from alexa_skillserver.services.freshness import TIMESTAMP_FORMAT

CERT_URL = "https://s3.amazonaws.com/echo.api/echo-api-cert.pem"
APP_ID = "amzn1.ask.skill.test"


def make_certificate(
    key: rsa.RSAPrivateKey,
    not_before: datetime | None = None,
    not_after: datetime | None = None,
    dns_names: tuple[str, ...] = (CERT_CHAIN_DOMAIN,),
) -> x509.Certificate:
    """Self-signed certificate for ``key`` valid around now by default."""
    now = datetime.now(timezone.utc)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "echo-api.amazon.com")])
    builder = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before or now - timedelta(days=1))
        .not_valid_after(not_after or now + timedelta(days=1))
    )
    if dns_names:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(n) for n in dns_names]),
            critical=False,
        )
    return builder.sign(key, hashes.SHA256())


def to_pem(certificate: x509.Certificate) -> bytes:
    return certificate.public_bytes(serialization.Encoding.PEM)


def sign(body: bytes, key: rsa.RSAPrivateKey) -> str:
    """Base64 RSA/SHA-1 signature, as sent in the Signature header."""
    return base64.b64encode(key.sign(body, padding.PKCS1v15(), hashes.SHA1())).decode("ascii")


def pem_transport(pem: bytes, status_code: int = 200) -> httpx.MockTransport:
    """Transport that serves ``pem`` for every request and counts calls."""

    def handler(request: httpx.Request) -> httpx.Response:
        transport.calls.append(str(request.url))
        return httpx.Response(status_code, content=pem)

    transport = httpx.MockTransport(handler)
    transport.calls = []
    return transport


def timestamp(seconds_ago: float = 0) -> str:
    moment = datetime.now(timezone.utc) - timedelta(seconds=seconds_ago)
    return moment.strftime(TIMESTAMP_FORMAT)


def envelope(request: dict[str, Any], app_id: str = APP_ID, **session: Any) -> dict[str, Any]:
    """Minimal request envelope for ``request``."""
    return {
        "version": "1.0",
        "session": {
            "sessionId": "amzn1.echo-api.session.1",
            "new": True,
            "application": {"applicationId": app_id},
            "user": {"userId": "amzn1.ask.account.1"},
            **session,
        },
        "request": {"requestId": "amzn1.echo-api.request.1", "timestamp": timestamp(), **request},
    }


def encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8")


@pytest.fixture(scope="session")
def signing_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def certificate(signing_key: rsa.RSAPrivateKey) -> x509.Certificate:
    return make_certificate(signing_key)


@pytest.fixture
def transport(certificate: x509.Certificate) -> httpx.MockTransport:
    return pem_transport(to_pem(certificate))


@pytest.fixture
def authenticator(transport: httpx.MockTransport) -> RequestAuthenticator:
    return RequestAuthenticator(
        loader=CertificateLoader(transport=transport),
        cache=CertificateCache(),
    )


def _on_launch(request, session) -> Response:
    return Response().speak("Welcome to the test skill.").set_end_session(False)


def _on_intent(request, session) -> Response:
    if request.intent.name == "AMAZON.StopIntent":
        return Response().speak("Goodbye!")
    if request.intent.name == "BrokenIntent":
        raise RuntimeError("database unavailable")
    name = request.intent.slots.get("name")
    return (
        Response()
        .speak(f"Hello {name.value if name else 'there'}")
        .set_simple_card("Greeting", "Hello")
        .set_session_attribute("greeted", True)
    )


def _on_session_ended(request, session) -> None:
    return None


@pytest.fixture
def skill() -> Skill:
    return Skill(
        application_ids=[APP_ID],
        on_launch=_on_launch,
        on_intent=_on_intent,
        on_session_ended=_on_session_ended,
        name="test",
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(environment="test", service_name="alexa-skillserver")


@pytest.fixture
def client(skill: Skill, authenticator: RequestAuthenticator, test_settings: Settings) -> TestClient:
    app = create_app(SkillRouter({"test": skill}), test_settings, authenticator)
    with TestClient(app) as test_client:
        yield test_client
