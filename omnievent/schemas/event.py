"""
Canonical Event Schema for OmniEvent.

Every strategy normalizes its provider's payloads into an EventHash with
three parts:

- data: provider-agnostic event fields (name, times, description, url)
- metadata: bookkeeping fields (uid, timestamps, status, provider)
- associated_data: structured extras (location, virtual_location)

Only the attributes listed by each part's permitted_attributes() may be
copied in from a raw payload; anything else is ignored.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from omnievent.normalization.utils import convert_time_to_iso8601, parse_time

EVENT_STATUSES = ("draft", "published", "cancelled")


def _to_time_text(value: Any) -> Any:
    if isinstance(value, date):
        return convert_time_to_iso8601(value)
    return _to_text(value)


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


class _EventPart(BaseModel):
    """Base for the sub-models of an event."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    @classmethod
    def permitted_attributes(cls) -> List[str]:
        """Attributes that may be projected from a raw payload."""
        return list(cls.model_fields)

    @classmethod
    def required_attributes(cls) -> List[str]:
        """Attributes that must be present for the event to be valid."""
        return []

    def missing_attributes(self) -> List[str]:
        """Required attributes that are absent or empty."""
        missing = []
        for name in self.required_attributes():
            value = getattr(self, name, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing


# ============================================================================
# DATA
# ============================================================================


class DataHash(_EventPart):
    """
    Provider-agnostic event fields.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[str] = Field(
        default=None, description="ISO-8601 UTC, e.g. 2024-01-01T09:00:00Z"
    )
    end_time: Optional[str] = None
    url: Optional[str] = None

    @field_validator("name", "description", "url", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _to_text(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_time(cls, v):
        return _to_time_text(v)

    @classmethod
    def required_attributes(cls) -> List[str]:
        return ["name", "start_time"]


# ============================================================================
# METADATA
# ============================================================================


class MetadataHash(_EventPart):
    """
    Bookkeeping fields for an event.
    """

    uid: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    language: Optional[str] = None
    status: Optional[str] = None
    taxonomies: Optional[List[str]] = None
    provider: Optional[str] = Field(
        default=None, description="Name of the strategy that produced the event"
    )

    @field_validator("uid", "language", "status", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _to_text(v)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def coerce_time(cls, v):
        return _to_time_text(v)

    @field_validator("taxonomies", mode="before")
    @classmethod
    def coerce_taxonomies(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            return [v]
        if isinstance(v, (list, tuple)):
            return [str(item) for item in v]
        return None

    @classmethod
    def permitted_attributes(cls) -> List[str]:
        # provider is set by the strategy, never copied from a payload
        return ["uid", "created_at", "updated_at", "language", "status", "taxonomies"]

    @classmethod
    def required_attributes(cls) -> List[str]:
        return ["uid"]


# ============================================================================
# ASSOCIATED DATA
# ============================================================================


class LocationHash(_EventPart):
    """
    Normalized location information.
    """

    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("name", "address", "city", "postal_code", "country", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _to_text(v)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def coerce_coordinate(cls, v):
        if v is None or v == "":
            return None
        try:
            return float(v)
        except (TypeError, ValueError):
            return None


class AssociatedDataHash(_EventPart):
    """
    Structured extras attached to an event.
    """

    location: Optional[LocationHash] = None
    virtual_location: Optional[Any] = Field(
        default=None, description="Opaque provider payload for online events"
    )


# ============================================================================
# EVENT
# ============================================================================


class EventHash(BaseModel):
    """
    Canonical event produced by every strategy.

    An EventHash is not guaranteed valid on construction; valid() decides
    whether it may be returned to callers.
    """

    model_config = ConfigDict(extra="ignore")

    data: DataHash = Field(default_factory=DataHash)
    metadata: MetadataHash = Field(default_factory=MetadataHash)
    associated_data: AssociatedDataHash = Field(default_factory=AssociatedDataHash)

    @property
    def provider(self) -> Optional[str]:
        """Name of the producing strategy."""
        return self.metadata.provider

    @property
    def uid(self) -> Optional[str]:
        return self.metadata.uid

    def validation_errors(self) -> List[str]:
        """
        Describe why the event is invalid.

        Returns:
            Empty list when the event is valid
        """
        errors = [f"data.{name} is required" for name in self.data.missing_attributes()]
        errors.extend(
            f"metadata.{name} is required" for name in self.metadata.missing_attributes()
        )

        if self.data.start_time and parse_time(self.data.start_time) is None:
            errors.append(f"data.start_time is not a valid time: {self.data.start_time!r}")

        if self.data.end_time and parse_time(self.data.end_time) is None:
            errors.append(f"data.end_time is not a valid time: {self.data.end_time!r}")

        if self.metadata.status is not None and self.metadata.status not in EVENT_STATUSES:
            errors.append(f"metadata.status must be one of {', '.join(EVENT_STATUSES)}")

        return errors

    def valid(self) -> bool:
        """True if the event satisfies the schema's required fields."""
        return not self.validation_errors()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize without empty fields."""
        return self.model_dump(exclude_none=True)
