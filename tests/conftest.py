"""
Shared pytest fixtures for the OmniEvent test suite.

Provides a fixture-style strategy and factories for raw payloads and
canonical events.
"""

from typing import Any, Dict, List, Optional

import pytest

from omnievent.configs.settings import get_settings
from omnievent.schemas.event import DataHash, EventHash, MetadataHash
from omnievent.strategy import Strategy


class StaticStrategy(Strategy, register=False):
    """Strategy serving a fixed list of raw payloads."""

    default_config = {"domain": "example.com", "token": "secret"}

    def __init__(self, *args, payloads: Optional[List[Dict[str, Any]]] = None, **options):
        self.payloads = payloads or []
        super().__init__(*args, **options)

    def authorized(self) -> bool:
        return bool(self.options.token)

    def raw_events(self) -> List[Dict[str, Any]]:
        return list(self.payloads)

    def event_hash(self, raw_event: Dict[str, Any]) -> EventHash:
        return self.build_event_hash(raw_event)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make environment changes visible to get_settings()."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def static_strategy():
    """
    Return a function that builds StaticStrategy instances.

    Example:
        strategy = static_strategy([{"id": "1", "name": "Standup", ...}], match_name="stand")
    """

    def _static_strategy(payloads=None, **options) -> StaticStrategy:
        return StaticStrategy(payloads=payloads, **options)

    return _static_strategy


@pytest.fixture
def raw_event():
    """A raw payload shaped like the canonical schema."""
    return {
        "id": "1",
        "name": "Standup",
        "start_time": "2024-01-01T09:00:00Z",
        "location": {"address1": "1 A St", "city": "X"},
    }


@pytest.fixture
def create_event():
    """
    Return a function that creates EventHash objects with sensible defaults.

    All defaults can be overridden via keyword arguments.
    """

    def _create_event(
        name: Optional[str] = "Test Event",
        start_time: Optional[str] = "2024-06-15T20:00:00Z",
        uid: Optional[str] = "test-uid",
        **data,
    ) -> EventHash:
        return EventHash(
            data=DataHash(name=name, start_time=start_time, **data),
            metadata=MetadataHash(uid=uid, provider="test"),
        )

    return _create_event


@pytest.fixture
def timed_events(create_event):
    """Three events one hour apart around 2024-06-15T12:00:00Z."""
    return [
        create_event(name="Before", start_time="2024-06-15T11:00:00Z", uid="a"),
        create_event(name="At", start_time="2024-06-15T12:00:00Z", uid="b"),
        create_event(name="After", start_time="2024-06-15T13:00:00Z", uid="c"),
    ]
