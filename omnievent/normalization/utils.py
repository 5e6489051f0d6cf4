"""
Normalization utilities shared by every strategy.

- Timestamp coercion to a fixed ISO-8601 form (UTC, second precision)
- Deterministic uid derivation from a namespace and a provider-local id
"""

from datetime import date, datetime, timezone
from typing import Any, Optional
import logging
import uuid

logger = logging.getLogger(__name__)

ISO8601_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Fallback formats tried after datetime.fromisoformat
_TIME_FORMATS = [
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S %Z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%a, %d %b %Y %H:%M:%S %z",
    "%d/%m/%Y %H:%M",
]


def parse_time(value: Any) -> Optional[datetime]:
    """
    Parse a provider timestamp into a timezone-aware UTC datetime.

    Accepts datetime/date objects, epoch seconds and the common textual
    forms providers return. Naive values are treated as UTC.

    Args:
        value: Raw timestamp value

    Returns:
        UTC datetime, or None if the value is missing or unparseable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _as_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        return _as_utc(datetime.fromisoformat(iso))
    except ValueError:
        pass

    for fmt in _TIME_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    logger.debug(f"Could not parse time: {value!r}")
    return None


def convert_time_to_iso8601(value: Any) -> Optional[str]:
    """
    Convert a timestamp to the canonical "YYYY-MM-DDTHH:MM:SSZ" form.

    Missing or unparseable values yield None rather than an error.
    """
    parsed = parse_time(value)
    if parsed is None:
        return None
    return parsed.strftime(ISO8601_FORMAT)


def generate_uuid(value: str) -> str:
    """
    Derive a deterministic uid from a string such as "example.com:42".

    The same input always yields the same uid, so re-ingesting an event
    keeps its identity.
    """
    return str(uuid.uuid5(uuid.NAMESPACE_DNS, value))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
