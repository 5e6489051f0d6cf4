"""
Normalization helpers used to build canonical events.

- utils.py: timestamp coercion and deterministic uid derivation
- location.py: location key consolidation
"""

from omnievent.normalization.location import DEFAULT_LOCATION_KEY_MAP, LocationMapper
from omnievent.normalization.utils import (
    ISO8601_FORMAT,
    convert_time_to_iso8601,
    generate_uuid,
    parse_time,
)

__all__ = [
    "DEFAULT_LOCATION_KEY_MAP",
    "LocationMapper",
    "ISO8601_FORMAT",
    "convert_time_to_iso8601",
    "generate_uuid",
    "parse_time",
]
