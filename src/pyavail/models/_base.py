"""Shared model helpers.

Network stacks report ``last_seen`` as epoch seconds, epoch
milliseconds, an ISO 8601 string or already as a datetime.
:data:`EpochTimestamp` accepts all of them and always yields a
timezone-aware UTC datetime.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BeforeValidator

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def parse_epoch_timestamp(value: Any) -> datetime | None:
    """Convert an epoch timestamp (seconds **or** milliseconds) to a UTC datetime.

    Numeric strings are read as epoch values, other strings as ISO 8601.
    Returns ``None`` when the value is ``None``, ``0`` or an empty string.
    """
    if value is None:
        return value
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            ts = float(value)
        except ValueError:
            return _as_utc(datetime.fromisoformat(value))
    else:
        ts = float(value)
    if ts <= 0:
        return None
    if ts >= _MS_THRESHOLD:
        ts /= 1000.0
    return datetime.fromtimestamp(ts, tz=UTC)


EpochTimestamp = Annotated[datetime | None, BeforeValidator(parse_epoch_timestamp)]
"""Annotated type that coerces epoch numbers (seconds or ms) and ISO strings to UTC datetimes."""
