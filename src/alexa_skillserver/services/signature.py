"""Request signature verification (RSA PKCS#1 v1.5 over SHA-1)."""

import base64
import binascii
import logging

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from ..errors import SignatureError

logger = logging.getLogger(__name__)


def body_digest(raw_body: bytes) -> bytes:
    """SHA-1 digest of the exact request body bytes."""
    digest = hashes.Hash(hashes.SHA1())
    digest.update(raw_body)
    return digest.finalize()


def verify_signature(raw_body: bytes, signature: str, public_key: object) -> None:
    """Verify the ``Signature`` header against the raw request body.

    ``raw_body`` is only read, so the caller can hand the same buffer to the
    JSON decoder afterwards.

    Raises:
        SignatureError: For a missing or malformed signature, a non-RSA key,
            or a signature that does not match
    """
    if not signature:
        logger.warning("Request carries no Signature header")
        raise SignatureError("Signature match failed.")

    try:
        decoded = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Signature header is not valid base64: {e}")
        raise SignatureError("Signature match failed.") from e

    if not isinstance(public_key, rsa.RSAPublicKey):
        logger.warning(f"Unsupported signing key type: {type(public_key).__name__}")
        raise SignatureError("Signature match failed.")

    try:
        public_key.verify(
            decoded,
            body_digest(raw_body),
            padding.PKCS1v15(),
            Prehashed(hashes.SHA1()),
        )
    except (InvalidSignature, ValueError) as e:
        logger.warning("Signature does not match request body")
        raise SignatureError("Signature match failed.") from e
