"""Replay protection based on the request timestamp."""

from datetime import datetime, timezone

from ..config import TIMESTAMP_TOLERANCE

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_timestamp(value: str) -> datetime | None:
    """Parse a ``YYYY-MM-DDTHH:MM:SSZ`` timestamp as UTC, or None if malformed."""
    try:
        parsed = datetime.strptime(value, TIMESTAMP_FORMAT)
    except (TypeError, ValueError):
        return None
    return parsed.replace(tzinfo=timezone.utc)


def is_fresh(
    timestamp: str,
    now: datetime | None = None,
    tolerance: float = TIMESTAMP_TOLERANCE,
) -> bool:
    """True if the request is younger than ``tolerance`` seconds.

    Unparsable timestamps are never fresh.
    """
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return False

    now = now or datetime.now(timezone.utc)
    return (now - parsed).total_seconds() < tolerance
