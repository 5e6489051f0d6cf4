"""
Schemas for OmniEvent.

- event.py: canonical EventHash and its data/metadata/associated_data parts
"""

from omnievent.schemas.event import (
    EVENT_STATUSES,
    AssociatedDataHash,
    DataHash,
    EventHash,
    LocationHash,
    MetadataHash,
)

__all__ = [
    "EVENT_STATUSES",
    "AssociatedDataHash",
    "DataHash",
    "EventHash",
    "LocationHash",
    "MetadataHash",
]
