"""
OmniEvent: normalize events from many providers into one schema.

Key Components:
- Strategy: abstract base class every provider strategy implements
- EventHash: canonical event schema with a validity predicate
- Options: deep-mergeable configuration store
- FilterPipeline: validity / time window / name filters
- StrategyFactory: config-driven strategy creation
"""

from omnievent.configs.options import Options
from omnievent.exceptions import (
    FetchError,
    InvalidConfiguration,
    OmniEventError,
    StrategyNotImplementedError,
    UnknownStrategyError,
)
from omnievent.factory import (
    StrategyFactory,
    create_event,
    create_strategy,
    destroy_event,
    list_events,
    update_event,
)
from omnievent.schemas.event import EventHash
from omnievent.strategy import Strategy, StrategyState, get_strategy, registered_strategies
import omnievent.strategies  # noqa: F401  registers built-in strategies

__version__ = "0.1.0"

__all__ = [
    "EventHash",
    "FetchError",
    "InvalidConfiguration",
    "OmniEventError",
    "Options",
    "Strategy",
    "StrategyFactory",
    "StrategyNotImplementedError",
    "StrategyState",
    "UnknownStrategyError",
    "create_event",
    "create_strategy",
    "destroy_event",
    "get_strategy",
    "list_events",
    "registered_strategies",
    "update_event",
]
