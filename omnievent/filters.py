"""
Module for filtering normalized events.

Filters run after normalization, in order: validity, lower time bound,
upper time bound, name match. They never mutate events and keep the
relative order of the input.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional
import logging

from omnievent.exceptions import InvalidConfiguration
from omnievent.normalization.utils import parse_time
from omnievent.schemas.event import EventHash

logger = logging.getLogger(__name__)


class EventFilter(ABC):
    """
    Abstract base for event filters
    """

    @abstractmethod
    def accepts(self, event: EventHash) -> bool:
        """
        Decide whether a single event is kept
        """
        pass

    def apply(self, events: Iterable[EventHash]) -> List[EventHash]:
        """
        Keep the events this filter accepts.

        Returns:
            Accepted events in input order
        """
        return [event for event in events if self.accepts(event)]


class ValidityFilter(EventFilter):
    """
    Drop events that fail the schema validity predicate
    """

    def accepts(self, event: EventHash) -> bool:
        if event is None:
            return False
        errors = event.validation_errors()
        if errors:
            logger.debug(f"Dropping invalid event {event.uid}: {errors}")
            return False
        return True


class _TimeBoundFilter(EventFilter):
    """Compare an event's start time against a bound on the UTC time scale."""

    def __init__(self, bound: Any):
        self.bound: Optional[datetime] = parse_time(bound)
        if self.bound is None:
            raise InvalidConfiguration(f"Time bound must be a date or time, got {bound!r}")

    def _start_time(self, event: EventHash) -> Optional[datetime]:
        return parse_time(event.data.start_time)


class FromTimeFilter(_TimeBoundFilter):
    """
    Drop events starting strictly before from_time (inclusive bound)
    """

    def accepts(self, event: EventHash) -> bool:
        start = self._start_time(event)
        return start is not None and start >= self.bound


class ToTimeFilter(_TimeBoundFilter):
    """
    Drop events starting strictly after to_time (inclusive bound)
    """

    def accepts(self, event: EventHash) -> bool:
        start = self._start_time(event)
        return start is not None and start <= self.bound


class NameMatchFilter(EventFilter):
    """
    Keep events whose name contains match_name, ignoring case
    """

    def __init__(self, match_name: str):
        if not isinstance(match_name, str):
            raise InvalidConfiguration(f"match_name must be a string, got {match_name!r}")
        self.match_name = match_name.casefold()

    def accepts(self, event: EventHash) -> bool:
        name = event.data.name or ""
        return self.match_name in name.casefold()


class FilterPipeline(EventFilter):
    """
    Chain filters; an event survives only if every filter accepts it
    """

    def __init__(self, filters: Optional[List[EventFilter]] = None):
        """
        Initialize with an ordered list of filters.

        Args:
            filters: Filters applied in order (short-circuits on first rejection)
        """
        self.filters = list(filters or [])

    def accepts(self, event: EventHash) -> bool:
        return all(f.accepts(event) for f in self.filters)

    def apply(self, events: Iterable[EventHash]) -> List[EventHash]:
        events = list(events)
        result = super().apply(events)
        if len(result) != len(events):
            logger.debug(f"Filtered {len(events)} -> {len(result)} events")
        return result


def build_filter_pipeline(options: Mapping[str, Any]) -> FilterPipeline:
    """
    Build the standard filter chain from strategy options.

    Args:
        options: Strategy options; reads from_time, to_time and match_name

    Returns:
        FilterPipeline (validity is always checked)
    """
    filters: List[EventFilter] = [ValidityFilter()]

    if options.get("from_time") is not None:
        filters.append(FromTimeFilter(options["from_time"]))
    if options.get("to_time") is not None:
        filters.append(ToTimeFilter(options["to_time"]))
    if options.get("match_name") is not None:
        filters.append(NameMatchFilter(options["match_name"]))

    return FilterPipeline(filters)
