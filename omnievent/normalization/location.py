"""
Location consolidation.

Maps provider-specific location keys onto the canonical location fields.
Several raw keys may feed the same canonical field (address1..address3 all
feed "address"); those are joined with single spaces in encounter order.
"""

from typing import Any, Dict, Mapping, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_LOCATION_KEY_MAP: Dict[str, str] = {
    "countryCode": "country",
    "latitude": "latitude",
    "longitude": "longitude",
    "address1": "address",
    "address2": "address",
    "address3": "address",
    "city": "city",
    "postalCode": "postal_code",
}

# Canonical fields whose values accumulate instead of being overwritten
JOINED_FIELDS = frozenset({"address"})


class LocationMapper:
    """
    Maps raw location payloads to canonical location dicts.

    Strategies with differently named location keys pass their own key map.
    """

    def __init__(self, key_map: Optional[Mapping[str, str]] = None):
        """
        Initialize the location mapper.

        Args:
            key_map: Raw key -> canonical key. Defaults to DEFAULT_LOCATION_KEY_MAP.
        """
        self.key_map = dict(key_map) if key_map is not None else dict(DEFAULT_LOCATION_KEY_MAP)

    def map_location(self, raw_location: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Consolidate a raw location mapping.

        Args:
            raw_location: Provider location payload (may be None)

        Returns:
            Dict keyed by canonical location field
        """
        result: Dict[str, Any] = {}
        if not isinstance(raw_location, Mapping):
            return result

        for raw_key, raw_value in raw_location.items():
            key = self.key_map.get(str(raw_key))
            if key is None:
                continue
            if raw_value is None or raw_value == "":
                continue

            current = result.get(key)
            if current and key in JOINED_FIELDS:
                result[key] = f"{current} {raw_value}"
            else:
                result[key] = raw_value

        return result
