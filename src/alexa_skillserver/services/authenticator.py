"""Decides whether an inbound request really came from the Alexa service."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from ..config import Settings
from ..errors import CertificateError, SignatureError
from .cert_cache import CachedCertificate, CertificateCache
from .cert_loader import CertificateLoader, verify_cert_url
from .signature import verify_signature

logger = logging.getLogger(__name__)

SIGNATURE_CERT_CHAIN_URL_HEADER = "SignatureCertChainUrl"
SIGNATURE_HEADER = "Signature"


@dataclass(frozen=True)
class Authenticated:
    """The request may proceed."""

    bypassed: bool = False  # True when checks were skipped (dev/insecure mode)


@dataclass(frozen=True)
class Rejected:
    """The request failed verification."""

    reason: str
    status_code: int = 401


AuthenticationOutcome = Authenticated | Rejected


class RequestAuthenticator:
    """Runs the certificate and signature checks for one request at a time.

    The checks run in a fixed order and stop at the first failure:

    1. ``dev`` requests are accepted without any check
    2. the SignatureCertChainUrl header must name the pinned origin
    3. the certificate comes from the cache, or is downloaded and validated
    4. the Signature header must match the raw body
    """

    def __init__(
        self,
        loader: CertificateLoader | None = None,
        cache: CertificateCache | None = None,
        insecure_skip_verify: bool = False,
    ):
        self.loader = loader or CertificateLoader()
        self.cache = cache or CertificateCache()
        self.insecure_skip_verify = insecure_skip_verify
        if insecure_skip_verify:
            logger.warning("Insecure skip verify enabled, certificates will not be checked")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RequestAuthenticator":
        return cls(
            loader=CertificateLoader(timeout=settings.cert_fetch_timeout),
            cache=CertificateCache(capacity=settings.cert_cache_size),
            insecure_skip_verify=settings.insecure_skip_verify,
        )

    async def resolve_certificate(self, url: str) -> CachedCertificate:
        """Return a valid certificate for ``url``, downloading it on a cache miss.

        Two requests racing on a cold cache may both download; the later
        ``put`` simply replaces the earlier entry.
        """
        cached = self.cache.get(url)
        if cached is not None:
            return cached

        loaded = await self.loader.load(url)
        return self.cache.put(url, loaded.certificate, loaded.expires_at)

    async def authenticate(
        self,
        headers: Mapping[str, str],
        raw_body: bytes,
        dev: bool = False,
    ) -> AuthenticationOutcome:
        """Verify one request.

        Args:
            headers: Request headers (SignatureCertChainUrl and Signature are read)
            raw_body: Exact bytes of the request body
            dev: Skip every check (local testing only)

        Returns:
            Authenticated, or Rejected with the reason and HTTP status
        """
        if dev:
            logger.debug("Dev bypass requested, skipping request verification")
            return Authenticated(bypassed=True)

        if self.insecure_skip_verify:
            return Authenticated(bypassed=True)

        cert_url = headers.get(SIGNATURE_CERT_CHAIN_URL_HEADER, "")
        if not verify_cert_url(cert_url):
            return self._reject(f"Invalid cert URL: {cert_url!r}")

        try:
            entry = await self.resolve_certificate(cert_url)
        except CertificateError as e:
            return self._reject(str(e), e.status_code)

        try:
            verify_signature(raw_body, headers.get(SIGNATURE_HEADER, ""), entry.public_key)
        except SignatureError as e:
            return self._reject(e.message, e.status_code)

        return Authenticated()

    @staticmethod
    def _reject(reason: str, status_code: int = 401) -> Rejected:
        logger.warning(f"Request verification failed: {reason}")
        return Rejected(reason=reason, status_code=status_code)
