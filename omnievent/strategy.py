"""
Strategy Architecture.

A Strategy is the base unit of OmniEvent's support for multiple event
providers. Each provider (a calendar, a ticketing platform, a meeting tool)
gets one Strategy subclass that knows how to authorize against it, fetch its
raw payloads and normalize them into EventHash objects.

Lifecycle:
    unconfigured -> configured -> authorizing -> authorized | unauthorized
    -> executing -> completed | failed

Any new provider must:
1. Inherit from Strategy
2. Declare its default options in `default_config`
3. Implement authorized(), raw_events() and event_hash()
"""

from abc import ABC, abstractmethod
from datetime import date
from enum import Enum
from functools import lru_cache
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type
import logging

from omnievent.configs.options import Options
from omnievent.exceptions import (
    InvalidConfiguration,
    StrategyNotImplementedError,
    UnknownStrategyError,
)
from omnievent.filters import build_filter_pipeline
from omnievent.normalization.location import LocationMapper
from omnievent.normalization.utils import convert_time_to_iso8601, generate_uuid
from omnievent.schemas.event import (
    AssociatedDataHash,
    DataHash,
    EventHash,
    LocationHash,
    MetadataHash,
)

logger = logging.getLogger(__name__)

OPERATIONS = ("list_events", "create_event", "update_event", "destroy_event")

# name -> strategy class, filled in as subclasses are defined
_REGISTRY: Dict[str, Type["Strategy"]] = {}


class StrategyState(str, Enum):
    """Lifecycle state of a strategy instance."""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    AUTHORIZING = "authorizing"
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


@lru_cache(maxsize=None)
def build_default_options(strategy_cls: Type["Strategy"]) -> Options:
    """
    Build the default options for a strategy class.

    Declared defaults are merged root-first along the MRO, so a subclass
    inherits every ancestor's options and wins on overlap. The result is
    memoized per class; callers get copies through Strategy.default_options().
    """
    options = Options()
    for klass in reversed(strategy_cls.__mro__):
        declared = klass.__dict__.get("default_config")
        if declared:
            options.deep_merge(declared)
    return options


def registered_strategies() -> Dict[str, Type["Strategy"]]:
    """Registered strategy classes keyed by name."""
    return dict(_REGISTRY)


def get_strategy(name: str) -> Type["Strategy"]:
    """
    Look up a registered strategy class.

    Raises:
        UnknownStrategyError: If no strategy is registered under name
    """
    try:
        return _REGISTRY[name.lower()]
    except KeyError:
        raise UnknownStrategyError(f"Strategy '{name}' is not registered") from None


class Strategy(ABC):
    """
    Abstract base class for all provider strategies.

    Subclasses must:
    - Implement authorized(), raw_events() and event_hash()
    - Optionally override authorize() and the create/update/destroy operations

    Options are declared per class:

        class MyStrategy(Strategy):
            default_config = {"domain": "example.com", "token": None}
            args = ("token",)

        MyStrategy("abc123", match_name="sync")
    """

    default_config: ClassVar[Mapping[str, Any]] = {
        "uid_delimiter": "-",
        "from_time": None,
        "to_time": None,
        "match_name": None,
    }

    # Option names that positional constructor arguments are stored under
    args: ClassVar[Tuple[str, ...]] = ()

    # Raw location key -> canonical location key (None uses the default map)
    location_key_map: ClassVar[Optional[Mapping[str, str]]] = None

    def __init_subclass__(cls, register: bool = True, **kwargs):
        super().__init_subclass__(**kwargs)
        if register:
            _REGISTRY[cls.__name__.lower()] = cls

    def __init__(self, *args: Any, **options: Any):
        """
        Initialize the strategy.

        Positional arguments are stored under the option names in `args`, in
        order. A trailing mapping is taken as the options hash. The options
        hash and keyword options are then deep-merged over the defaults.

        Raises:
            InvalidConfiguration: If from_time, to_time or match_name are malformed
        """
        self.state = StrategyState.UNCONFIGURED
        self.options: Options = self.default_options()

        positional = list(args)
        config = positional.pop() if positional and isinstance(positional[-1], Mapping) else None

        for arg_name in self.args:
            if not positional:
                break
            self.options[arg_name] = positional.pop(0)

        self.options.deep_merge(config)
        self.options.deep_merge(options)
        if not self.options.get("name"):
            self.options["name"] = type(self).__name__.lower()

        self.validate_options()
        self.state = StrategyState.CONFIGURED

    @classmethod
    def default_options(cls) -> Options:
        """Copy of the class's default options."""
        return build_default_options(cls).dup()

    @property
    def name(self) -> str:
        return self.options.get("name")

    @property
    def logger(self) -> logging.Logger:
        """Logger shared by every instance of the strategy class."""
        return logging.getLogger(f"strategy.{type(self).__name__.lower()}")

    def validate_options(self) -> None:
        """
        Check the options every strategy recognises.

        Raises:
            InvalidConfiguration: On malformed from_time, to_time or match_name
        """
        for key in ("from_time", "to_time"):
            value = self.options.get(key)
            if value is not None and not isinstance(value, date):
                raise InvalidConfiguration(f"{key} must be a date or datetime, got {value!r}")

        match_name = self.options.get("match_name")
        if match_name is not None and not isinstance(match_name, str):
            raise InvalidConfiguration(f"match_name must be a string, got {match_name!r}")

    # ========================================================================
    # REQUEST LIFECYCLE
    # ========================================================================

    def request(self, operation: str, overrides: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Run an operation against the provider.

        Args:
            operation: One of list_events, create_event, update_event, destroy_event
            overrides: Options deep-merged into this strategy's options first

        Returns:
            The operation's result, or None if the strategy is not authorized

        Raises:
            StrategyNotImplementedError: For unknown or unimplemented operations
        """
        self.options.deep_merge(overrides)

        if operation not in OPERATIONS:
            raise StrategyNotImplementedError(
                f"'{operation}' is not a strategy operation (expected one of {', '.join(OPERATIONS)})"
            )

        self.state = StrategyState.AUTHORIZING
        self.authorize()
        if not self.authorized():
            self.state = StrategyState.UNAUTHORIZED
            self.log("info", f"Not authorized, skipping {operation}")
            return None

        self.state = StrategyState.AUTHORIZED
        self.log("debug", f"Executing {operation}")
        self.state = StrategyState.EXECUTING
        try:
            result = getattr(self, operation)()
        except Exception as e:
            self.state = StrategyState.FAILED
            self.log("error", f"{operation} failed: {e}")
            raise

        self.state = StrategyState.COMPLETED
        return result

    def authorize(self) -> None:
        """Acquire credentials before an operation. No-op by default."""

    # ========================================================================
    # ABSTRACT METHODS - Must be implemented by subclasses
    # ========================================================================

    @abstractmethod
    def authorized(self) -> bool:
        """
        Whether the strategy may talk to its provider.

        Returns:
            True if stored credentials allow the request
        """
        pass

    @abstractmethod
    def raw_events(self) -> List[Dict[str, Any]]:
        """
        Fetch raw event payloads from the provider.

        Returns:
            Provider-shaped payloads, in provider order

        Raises:
            FetchError: If the provider cannot be reached or read
        """
        pass

    @abstractmethod
    def event_hash(self, raw_event: Dict[str, Any]) -> Optional[EventHash]:
        """
        Normalize a single raw payload.

        Args:
            raw_event: One payload from raw_events()

        Returns:
            EventHash (not necessarily valid)
        """
        pass

    # ========================================================================
    # OPERATIONS
    # ========================================================================

    def list_events(self) -> List[EventHash]:
        """
        Fetch, normalize and filter events.

        Returns:
            Valid events matching from_time, to_time and match_name, in
            provider order
        """
        raw_events = self.raw_events()
        events = []

        for idx, raw_event in enumerate(raw_events):
            try:
                event = self.event_hash(raw_event)
            except (KeyError, TypeError, ValueError) as e:
                self.log("warning", f"Failed to normalize event {idx}: {e}")
                continue
            if event is not None:
                events.append(event)

        result = build_filter_pipeline(self.options).apply(events)
        self.log("info", f"Listed {len(result)}/{len(events)} events")
        return result

    def create_event(self) -> Any:
        raise StrategyNotImplementedError(f"{type(self).__name__} does not support create_event")

    def update_event(self) -> Any:
        raise StrategyNotImplementedError(f"{type(self).__name__} does not support update_event")

    def destroy_event(self) -> Any:
        raise StrategyNotImplementedError(f"{type(self).__name__} does not support destroy_event")

    # ========================================================================
    # NORMALIZATION HELPERS
    # ========================================================================

    def build_event_hash(self, raw_event: Mapping[str, Any]) -> EventHash:
        """
        Normalize a raw payload shaped like the canonical schema.

        Copies permitted data/metadata attributes, consolidates the location,
        passes virtual_location through, coerces timestamps and derives the
        uid from the configured domain and the payload's id.
        """
        data = {
            key: raw_event[key] for key in DataHash.permitted_attributes() if key in raw_event
        }
        metadata = {
            key: raw_event[key] for key in MetadataHash.permitted_attributes() if key in raw_event
        }

        for time_attr in ("start_time", "end_time"):
            if time_attr in data:
                data[time_attr] = self.format_time(data[time_attr])
        for time_attr in ("created_at", "updated_at"):
            if time_attr in metadata:
                metadata[time_attr] = self.format_time(metadata[time_attr])

        metadata["uid"] = self.generate_uid(raw_event.get("id"))
        metadata["provider"] = self.name

        location = self.location_mapper.map_location(raw_event.get("location"))

        return EventHash(
            data=DataHash(**data),
            metadata=MetadataHash(**metadata),
            associated_data=AssociatedDataHash(
                location=LocationHash(**location) if location else None,
                virtual_location=raw_event.get("virtual_location"),
            ),
        )

    @property
    def location_mapper(self) -> LocationMapper:
        return LocationMapper(self.location_key_map)

    def generate_uid(self, raw_id: Any) -> Optional[str]:
        """
        Deterministic uid for a provider-local id.

        The namespace is the configured domain, falling back to the strategy
        name. Sequence ids are joined with uid_delimiter first.
        """
        if isinstance(raw_id, (list, tuple)):
            raw_id = self.compose_id(*raw_id)
        if raw_id is None or raw_id == "":
            return None
        namespace = self.options.get("domain") or self.name
        return generate_uuid(f"{namespace}:{raw_id}")

    def compose_id(self, *parts: Any) -> str:
        """Join id parts with the uid_delimiter option."""
        delimiter = self.options.get("uid_delimiter") or "-"
        return delimiter.join(str(part) for part in parts if part is not None)

    def format_time(self, value: Any) -> Optional[str]:
        return convert_time_to_iso8601(value)

    # ========================================================================
    # LOGGING
    # ========================================================================

    def log(self, level: str, message: str) -> None:
        """
        Log through the strategy's logger, prefixed with its name.

        Example:
            self.log("warning", "Token expires soon")
        """
        getattr(self.logger, level)(f"({self.name}) {message}", extra={"strategy": self.name})

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, state={self.state.value!r})"
