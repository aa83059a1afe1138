"""Fetching and validating the Alexa signing certificate chain."""

import logging
import posixpath
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import urlsplit

import httpx
from cryptography import x509

from ..config import CERT_FETCH_TIMEOUT
from ..errors import CertificateError, CertificateErrorKind

logger = logging.getLogger(__name__)

# Pinned origin of the certificate chain
CERT_CHAIN_URL_SCHEME = "https"
CERT_CHAIN_URL_HOSTS = frozenset({"s3.amazonaws.com", "s3.amazonaws.com:443"})
CERT_CHAIN_URL_PATH_PREFIX = "/echo.api/"

# Domain that must appear in the certificate's Subject Alternative Names
CERT_CHAIN_DOMAIN = "echo-api.amazon.com"


@dataclass(frozen=True)
class LoadedCertificate:
    """Signing certificate that passed every check, with its cache expiry."""

    certificate: x509.Certificate
    expires_at: datetime


def verify_cert_url(url: str) -> bool:
    """Check that a SignatureCertChainUrl points at the pinned origin.

    Scheme and host compare case-insensitively; the path is normalised
    first so ``/echo.api/../`` tricks are rejected.
    """
    if not url:
        return False
    try:
        link = urlsplit(url)
    except ValueError:
        return False

    if link.scheme.lower() != CERT_CHAIN_URL_SCHEME:
        return False

    if link.netloc.lower() not in CERT_CHAIN_URL_HOSTS:
        return False

    path = posixpath.normpath(link.path) if link.path else ""
    if not path.startswith(CERT_CHAIN_URL_PATH_PREFIX):
        return False

    return True


def parse_certificate(data: bytes) -> x509.Certificate:
    """Decode the first certificate of a PEM chain."""
    try:
        certificates = x509.load_pem_x509_certificates(data)
        certificate = certificates[0]
        # Touch the extensions so malformed ones fail here
        certificate.extensions
    except (ValueError, IndexError) as e:
        raise CertificateError(
            CertificateErrorKind.PARSE_FAILED, f"Failed to parse certificate PEM: {e}"
        ) from e
    return certificate


def check_validity(certificate: x509.Certificate, now: datetime | None = None) -> None:
    """Require ``now`` to lie in ``[not_before, not_after)``."""
    now = now or datetime.now(timezone.utc)
    not_before = certificate.not_valid_before_utc
    not_after = certificate.not_valid_after_utc
    if not (not_before <= now < not_after):
        raise CertificateError(
            CertificateErrorKind.EXPIRED,
            f"Amazon certificate expired or not yet valid "
            f"(valid {not_before.isoformat()} to {not_after.isoformat()})",
        )


def check_identity(certificate: x509.Certificate, domain: str = CERT_CHAIN_DOMAIN) -> None:
    """Require ``domain`` among the certificate's DNS Subject Alternative Names."""
    try:
        san = certificate.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound as e:
        raise CertificateError(
            CertificateErrorKind.IDENTITY_MISMATCH,
            "Amazon certificate invalid: no Subject Alternative Names",
        ) from e

    names = san.value.get_values_for_type(x509.DNSName)
    if domain not in names:
        raise CertificateError(
            CertificateErrorKind.IDENTITY_MISMATCH,
            f"Amazon certificate invalid: {domain} not in {names}",
        )


class CertificateLoader:
    """Downloads and validates signing certificates."""

    def __init__(
        self,
        timeout: float = CERT_FETCH_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the loader.

        Args:
            timeout: Download timeout in seconds
            transport: Optional httpx transport, mainly for tests
        """
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        """Download the raw PEM chain. Redirects are not followed."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise CertificateError(
                CertificateErrorKind.FETCH_FAILED, f"could not download Amazon cert file: {e}"
            ) from e

        return response.content

    async def load(self, url: str, now: datetime | None = None) -> LoadedCertificate:
        """Fetch, decode and validate the certificate at ``url``.

        Args:
            url: Value of the SignatureCertChainUrl header
            now: Reference time for the validity check (defaults to now)

        Returns:
            LoadedCertificate whose expiry is the certificate's ``not_after``

        Raises:
            CertificateError: At the first check that fails
        """
        if not verify_cert_url(url):
            raise CertificateError(CertificateErrorKind.INVALID_URL, f"Invalid cert URL: {url}")

        data = await self.fetch(url)
        certificate = parse_certificate(data)
        check_validity(certificate, now)
        check_identity(certificate)

        logger.info(f"Loaded Amazon signing certificate from {url}")

        return LoadedCertificate(certificate=certificate, expires_at=certificate.not_valid_after_utc)
