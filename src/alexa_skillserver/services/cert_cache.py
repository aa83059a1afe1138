"""Bounded, expiry-aware cache of validated signing certificates."""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timezone

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.types import CertificatePublicKeyTypes

from ..config import CERT_CACHE_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedCertificate:
    """A validated certificate and the instant it stops being served."""

    url: str
    certificate: x509.Certificate
    expires_at: datetime

    @property
    def public_key(self) -> CertificatePublicKeyTypes:
        return self.certificate.public_key()

    def is_valid_at(self, now: datetime) -> bool:
        """True while ``now`` is before expiry and inside the validity window."""
        if now >= self.expires_at:
            return False
        return self.certificate.not_valid_before_utc <= now < self.certificate.not_valid_after_utc


class CertificateCache:
    """LRU map from certificate URL to :class:`CachedCertificate`.

    Expired entries are dropped when looked up rather than by a background
    sweeper. All access to the map goes through a lock, and nothing slow
    happens while it is held.
    """

    def __init__(self, capacity: int = CERT_CACHE_SIZE):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: OrderedDict[str, CachedCertificate] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, url: str, now: datetime | None = None) -> CachedCertificate | None:
        """Return the cached certificate for ``url``, or None on a miss.

        A stale entry counts as a miss and is evicted.
        """
        now = now or datetime.now(timezone.utc)
        with self._lock:
            entry = self._entries.get(url)
            if entry is None:
                return None
            if entry.is_valid_at(now):
                self._entries.move_to_end(url)
                return entry
            del self._entries[url]

        logger.info(f"Evicted expired certificate for {url}")
        return None

    def put(self, url: str, certificate: x509.Certificate, expires_at: datetime) -> CachedCertificate:
        """Insert or replace the entry for ``url``, evicting the LRU entry when full."""
        entry = CachedCertificate(url=url, certificate=certificate, expires_at=expires_at)
        evicted = None
        with self._lock:
            if url in self._entries:
                del self._entries[url]
            elif len(self._entries) >= self.capacity:
                evicted, _ = self._entries.popitem(last=False)
            self._entries[url] = entry

        if evicted is not None:
            logger.debug(f"Certificate cache full, evicted {evicted}")
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries
