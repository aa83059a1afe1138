"""Tests for request signature verification."""

import base64

import pytest
from conftest import sign
from cryptography.hazmat.primitives.asymmetric import ec

from alexa_skillserver.errors import SignatureError
from alexa_skillserver.services.signature import body_digest, verify_signature

BODIES = [
    b"",
    b"{}",
    b'{"version":"1.0","request":{"type":"LaunchRequest"}}',
    "{\"text\": \"café ☃\"}".encode("utf-8"),
    bytes(range(256)),
]


@pytest.mark.parametrize("body", BODIES)
def test_valid_signature_verifies(signing_key, body: bytes) -> None:
    """Test that a body signed with the certificate key verifies."""
    verify_signature(body, sign(body, signing_key), signing_key.public_key())


@pytest.mark.parametrize("body", [b for b in BODIES if b])
def test_flipped_byte_fails(signing_key, body: bytes) -> None:
    """Test that changing any byte of the body breaks the signature."""
    signature = sign(body, signing_key)
    for index in (0, len(body) // 2, len(body) - 1):
        tampered = bytearray(body)
        tampered[index] ^= 0x01
        with pytest.raises(SignatureError):
            verify_signature(bytes(tampered), signature, signing_key.public_key())


def test_reserialized_body_fails(signing_key) -> None:
    """Test that re-encoding equivalent JSON invalidates the signature."""
    body = b'{"version": "1.0"}'
    with pytest.raises(SignatureError):
        verify_signature(b'{"version":"1.0"}', sign(body, signing_key), signing_key.public_key())


def test_wrong_key_fails(signing_key, other_key) -> None:
    """Test that a signature from another key is rejected."""
    body = b"{}"
    with pytest.raises(SignatureError):
        verify_signature(body, sign(body, other_key), signing_key.public_key())


@pytest.mark.parametrize("signature", ["", "not base64!!", "abc"])
def test_malformed_signature_fails_closed(signing_key, signature: str) -> None:
    """Test that missing or malformed base64 is a failure, not a crash."""
    with pytest.raises(SignatureError):
        verify_signature(b"{}", signature, signing_key.public_key())


def test_truncated_signature_fails(signing_key) -> None:
    """Test that a well-formed but truncated signature is rejected."""
    raw = base64.b64decode(sign(b"{}", signing_key))
    with pytest.raises(SignatureError):
        verify_signature(b"{}", base64.b64encode(raw[:-8]).decode(), signing_key.public_key())


def test_non_rsa_key_fails(signing_key) -> None:
    """Test that a certificate with a non-RSA key cannot verify requests."""
    ec_key = ec.generate_private_key(ec.SECP256R1()).public_key()
    with pytest.raises(SignatureError):
        verify_signature(b"{}", sign(b"{}", signing_key), ec_key)


def test_body_digest_is_sha1() -> None:
    """Test the digest of a known input."""
    assert body_digest(b"abc").hex() == "a9993e364706816aba3e25717850c26c9cd0d89d"


def test_verification_leaves_body_readable(signing_key) -> None:
    """Test that the buffer passed in is untouched after verification."""
    body = b'{"request":{"type":"LaunchRequest"}}'
    buffer = bytes(body)
    verify_signature(buffer, sign(body, signing_key), signing_key.public_key())
    assert buffer == body
