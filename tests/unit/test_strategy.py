"""
Unit tests for the strategy module.

Tests for default option inheritance, construction, validation, the
request lifecycle and shared normalization.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

from omnievent.configs.options import Options
from omnievent.exceptions import (
    InvalidConfiguration,
    StrategyNotImplementedError,
    UnknownStrategyError,
)
from omnievent.normalization.utils import generate_uuid
from omnievent.schemas.event import EventHash
from omnievent.strategy import (
    Strategy,
    StrategyState,
    build_default_options,
    get_strategy,
    registered_strategies,
)

# =============================================================================
# TEST STRATEGIES
# =============================================================================


class BaseCalendar(Strategy, register=False):
    """Strategy with its own defaults, used as a parent."""

    default_config = {"domain": "calendar.example.com", "auth": {"scope": "read", "token": None}}
    args = ("client_id", "client_secret")

    def authorized(self) -> bool:
        return True

    def raw_events(self) -> List[Dict[str, Any]]:
        return []

    def event_hash(self, raw_event: Dict[str, Any]) -> EventHash:
        return self.build_event_hash(raw_event)


class TeamCalendar(BaseCalendar, register=False):
    """Child strategy overriding part of its parent's defaults."""

    default_config = {"domain": "team.example.com", "auth": {"token": "t0k3n"}, "team": "core"}


# =============================================================================
# TEST CLASSES
# =============================================================================


class TestStrategyState:
    """Tests for StrategyState enum."""

    def test_enum_values(self):
        """Should cover the full lifecycle."""
        assert [state.value for state in StrategyState] == [
            "unconfigured",
            "configured",
            "authorizing",
            "authorized",
            "unauthorized",
            "executing",
            "completed",
            "failed",
        ]


class TestDefaultOptions:
    """Tests for default option inheritance."""

    def test_base_defaults(self):
        """Every strategy gets the common options."""
        options = BaseCalendar.default_options()
        assert options.uid_delimiter == "-"
        assert "from_time" in options
        assert "to_time" in options
        assert "match_name" in options

    def test_inherits_and_overrides(self):
        """Derived defaults contain every base key, own values winning."""
        parent = BaseCalendar.default_options()
        child = TeamCalendar.default_options()
        assert set(parent) <= set(child)
        assert child.domain == "team.example.com"
        assert child.team == "core"

    def test_nested_defaults_deep_merged(self):
        """Nested defaults merge key by key across the hierarchy."""
        assert TeamCalendar.default_options().auth == {"scope": "read", "token": "t0k3n"}

    def test_memoized_per_class(self):
        """The default options are built once per class."""
        assert build_default_options(TeamCalendar) is build_default_options(TeamCalendar)

    def test_default_options_returns_copy(self):
        """Mutating returned defaults does not change the class defaults."""
        TeamCalendar.default_options().auth.token = "changed"
        assert TeamCalendar.default_options().auth.token == "t0k3n"

    def test_instances_do_not_share_options(self):
        """Instance changes do not leak into other instances."""
        first = TeamCalendar()
        first.options.auth.token = "other"
        assert TeamCalendar().options.auth.token == "t0k3n"


class TestConstruction:
    """Tests for Strategy.__init__."""

    def test_keyword_options_merged(self):
        """Keyword options are deep-merged over the defaults."""
        strategy = TeamCalendar(auth={"scope": "write"})
        assert strategy.options.auth == {"scope": "write", "token": "t0k3n"}

    def test_positional_args_in_declared_order(self):
        """Positional args are stored under the declared names."""
        strategy = BaseCalendar("id-1", "secret-1")
        assert strategy.options.client_id == "id-1"
        assert strategy.options.client_secret == "secret-1"

    def test_extra_positional_args_ignored(self):
        """Positionals beyond the declared names are ignored."""
        strategy = BaseCalendar("id-1", "secret-1", "extra")
        assert strategy.options.client_id == "id-1"
        assert "extra" not in strategy.options.values()

    def test_trailing_mapping_is_options_hash(self):
        """A trailing mapping is merged after positional args."""
        strategy = BaseCalendar("id-1", {"client_id": "id-2", "team": "ops"})
        assert strategy.options.client_id == "id-2"
        assert strategy.options.team == "ops"

    def test_name_defaults_to_class_name(self):
        """name defaults to the lowercase class name."""
        assert TeamCalendar().name == "teamcalendar"

    def test_name_option_wins(self):
        """An explicit name is kept."""
        assert TeamCalendar(name="Team").name == "Team"

    def test_state_configured(self):
        """A constructed strategy is configured."""
        assert TeamCalendar().state == StrategyState.CONFIGURED

    def test_abstract_methods_required(self):
        """Strategies missing required methods cannot be instantiated."""

        class Incomplete(Strategy, register=False):
            def authorized(self) -> bool:
                return True

        with pytest.raises(TypeError):
            Incomplete()


class TestValidateOptions:
    """Tests for option validation at construction."""

    def test_accepts_datetimes(self):
        """datetime and date bounds are accepted."""
        strategy = TeamCalendar(
            from_time=datetime(2024, 1, 1, tzinfo=timezone.utc), to_time=date(2024, 2, 1)
        )
        assert strategy.options.to_time == date(2024, 2, 1)

    @pytest.mark.parametrize("key", ["from_time", "to_time"])
    def test_rejects_string_times(self, key):
        """Time bounds must support strftime."""
        with pytest.raises(InvalidConfiguration):
            TeamCalendar(**{key: "2024-01-01"})

    @pytest.mark.parametrize("key", ["from_time", "to_time"])
    def test_rejects_mapping_times(self, key):
        """Mapping-valued time bounds are rejected at construction."""
        with pytest.raises(InvalidConfiguration):
            TeamCalendar(**{key: {"year": 2024}})

    def test_rejects_non_string_match_name(self):
        """match_name must be text."""
        with pytest.raises(InvalidConfiguration):
            TeamCalendar(match_name=42)

    def test_invalid_configuration_is_value_error(self):
        """InvalidConfiguration can be caught as ValueError."""
        with pytest.raises(ValueError):
            TeamCalendar(match_name=["a"])


class TestRequest:
    """Tests for Strategy.request."""

    def test_dispatches_operation(self, static_strategy, raw_event):
        """request('list_events') returns the filtered events."""
        strategy = static_strategy([raw_event])
        events = strategy.request("list_events")
        assert [event.data.name for event in events] == ["Standup"]
        assert strategy.state == StrategyState.COMPLETED

    def test_overrides_merged_before_dispatch(self, static_strategy, raw_event):
        """Call-time options apply to the operation."""
        strategy = static_strategy([raw_event])
        assert strategy.request("list_events", {"match_name": "retro"}) == []
        assert strategy.options.match_name == "retro"

    def test_overrides_do_not_change_caller_options(self, static_strategy, raw_event):
        """Nested options passed in are copied, not shared."""
        caller = Options({"extra": Options({"k": 1})})
        strategy = static_strategy([raw_event], **caller)
        strategy.request("list_events", {"extra": {"k": 2}})
        assert strategy.options.extra.k == 2
        assert caller.to_dict() == {"extra": {"k": 1}}

    def test_non_string_match_name_override(self, static_strategy, raw_event):
        """A bad match_name override fails as InvalidConfiguration."""
        strategy = static_strategy([raw_event])
        with pytest.raises(InvalidConfiguration):
            strategy.request("list_events", {"match_name": 42})
        assert strategy.state == StrategyState.FAILED

    def test_authorize_called_before_authorized(self, static_strategy):
        """authorize() runs before the authorized() check."""
        strategy = static_strategy()
        calls = MagicMock()
        strategy.authorize = calls.authorize
        strategy.authorized = calls.authorized
        calls.authorized.return_value = True

        strategy.request("list_events")

        assert [c[0] for c in calls.mock_calls] == ["authorize", "authorized"]

    def test_unauthorized_returns_none(self, static_strategy, raw_event):
        """Unauthorized strategies return None without error."""
        strategy = static_strategy([raw_event], token=None)
        assert strategy.request("list_events") is None
        assert strategy.state == StrategyState.UNAUTHORIZED

    def test_unauthorized_skips_fetch(self, static_strategy):
        """raw_events is not called when unauthorized."""
        strategy = static_strategy(token=None)
        strategy.raw_events = MagicMock()
        strategy.request("list_events")
        strategy.raw_events.assert_not_called()

    @pytest.mark.parametrize("operation", ["create_event", "update_event", "destroy_event"])
    def test_unimplemented_operations(self, static_strategy, operation):
        """Operations not overridden raise StrategyNotImplementedError."""
        strategy = static_strategy()
        with pytest.raises(StrategyNotImplementedError):
            strategy.request(operation)
        assert strategy.state == StrategyState.FAILED

    def test_unknown_operation(self, static_strategy):
        """Unknown operation names are contract violations."""
        with pytest.raises(StrategyNotImplementedError):
            static_strategy().request("delete_everything")

    def test_not_implemented_is_builtin(self, static_strategy):
        """StrategyNotImplementedError can be caught as NotImplementedError."""
        with pytest.raises(NotImplementedError):
            static_strategy().create_event()

    def test_fetch_errors_propagate(self, static_strategy):
        """Errors from raw_events reach the caller."""
        strategy = static_strategy()
        strategy.raw_events = MagicMock(side_effect=RuntimeError("boom"))
        with pytest.raises(RuntimeError):
            strategy.request("list_events")
        assert strategy.state == StrategyState.FAILED


class TestListEvents:
    """Tests for the default list_events pipeline."""

    def test_end_to_end_scenario(self, static_strategy, raw_event):
        """A canonical-shaped payload normalizes, passes validity and is listed."""
        strategy = static_strategy([raw_event])
        [event] = strategy.list_events()
        assert event.metadata.uid == generate_uuid("example.com:1")
        assert event.associated_data.location.model_dump(exclude_none=True) == {
            "address": "1 A St",
            "city": "X",
        }
        assert event.valid()

    def test_invalid_events_dropped(self, static_strategy, raw_event):
        """Events missing a name never appear."""
        nameless = {"id": "2", "start_time": "2024-01-01T10:00:00Z"}
        strategy = static_strategy([nameless, raw_event, {"id": "3", "name": "No time"}])
        assert [event.data.name for event in strategy.list_events()] == ["Standup"]

    def test_time_window(self, static_strategy):
        """from_time/to_time bound the start time inclusively."""
        payloads = [
            {"id": str(hour), "name": f"Event {hour}", "start_time": f"2024-06-15T{hour}:00:00Z"}
            for hour in (11, 12, 13)
        ]
        t = datetime(2024, 6, 15, 12, tzinfo=timezone.utc)
        strategy = static_strategy(payloads, from_time=t)
        assert [e.data.name for e in strategy.list_events()] == ["Event 12", "Event 13"]
        strategy = static_strategy(payloads, from_time=t, to_time=t)
        assert [e.data.name for e in strategy.list_events()] == ["Event 12"]

    def test_name_match(self, static_strategy):
        """match_name is a case-insensitive substring filter."""
        payloads = [
            {"id": "1", "name": "Team Sync", "start_time": "2024-01-01T09:00:00Z"},
            {"id": "2", "name": "Standup", "start_time": "2024-01-01T10:00:00Z"},
        ]
        strategy = static_strategy(payloads, match_name="team")
        assert [e.data.name for e in strategy.list_events()] == ["Team Sync"]

    def test_normalization_errors_skipped(self, static_strategy, raw_event):
        """A payload that cannot be normalized is skipped, not raised."""
        strategy = static_strategy([raw_event, raw_event])
        strategy.event_hash = MagicMock(
            side_effect=[ValueError("bad payload"), strategy.build_event_hash(raw_event)]
        )
        assert len(strategy.list_events()) == 1


class TestBuildEventHash:
    """Tests for Strategy.build_event_hash."""

    def test_projection(self, static_strategy):
        """Only permitted keys are copied into data and metadata."""
        event = static_strategy().build_event_hash(
            {
                "id": "1",
                "name": "Standup",
                "start_time": "2024-01-01T09:00:00Z",
                "url": "https://example.com/1",
                "status": "published",
                "ticket_price": "20.00",
            }
        )
        assert event.data.url == "https://example.com/1"
        assert event.metadata.status == "published"
        assert "ticket_price" not in event.to_dict()["data"]

    def test_times_coerced(self, static_strategy):
        """Timestamps are converted to canonical ISO form or None."""
        event = static_strategy().build_event_hash(
            {
                "id": "1",
                "start_time": "2024-01-03T15:00:00+01:00",
                "end_time": "garbage",
                "created_at": datetime(2023, 12, 20, 10, tzinfo=timezone.utc),
                "updated_at": None,
            }
        )
        assert event.data.start_time == "2024-01-03T14:00:00Z"
        assert event.data.end_time is None
        assert event.metadata.created_at == "2023-12-20T10:00:00Z"
        assert event.metadata.updated_at is None

    def test_uid_deterministic(self, static_strategy, raw_event):
        """The same payload always yields the same uid."""
        strategy = static_strategy()
        first = strategy.build_event_hash(raw_event)
        second = strategy.build_event_hash(dict(raw_event))
        assert first.metadata.uid == second.metadata.uid

    def test_uid_ignores_payload_uid(self, static_strategy, raw_event):
        """The uid is derived, never copied."""
        event = static_strategy().build_event_hash({**raw_event, "uid": "spoofed"})
        assert event.metadata.uid == generate_uuid("example.com:1")

    def test_uid_missing_id(self, static_strategy):
        """Payloads without an id get no uid (and are invalid)."""
        event = static_strategy().build_event_hash({"name": "x", "start_time": "2024-01-01"})
        assert event.metadata.uid is None
        assert not event.valid()

    def test_uid_composite_id(self, static_strategy):
        """Sequence ids are joined with uid_delimiter."""
        strategy = static_strategy(uid_delimiter="/")
        event = strategy.build_event_hash({"id": ["series", 3]})
        assert event.metadata.uid == generate_uuid("example.com:series/3")

    def test_uid_falls_back_to_name(self, static_strategy):
        """Without a domain, the strategy name is the namespace."""
        strategy = static_strategy(domain=None)
        event = strategy.build_event_hash({"id": "1"})
        assert event.metadata.uid == generate_uuid("staticstrategy:1")

    def test_provider_set(self, static_strategy, raw_event):
        """metadata.provider is the strategy name."""
        event = static_strategy(name="static").build_event_hash(raw_event)
        assert event.metadata.provider == "static"

    def test_virtual_location_passthrough(self, static_strategy):
        """virtual_location is passed through untouched."""
        virtual = {"platform": "zoom", "url": "https://zoom.us/j/1"}
        event = static_strategy().build_event_hash({"id": "1", "virtual_location": virtual})
        assert event.associated_data.virtual_location == virtual
        assert event.associated_data.location is None

    def test_custom_location_key_map(self):
        """Strategies can map their own location keys."""

        class VenueStrategy(BaseCalendar, register=False):
            location_key_map = {"venue": "name", "street": "address"}

        event = VenueStrategy().build_event_hash(
            {"id": "1", "location": {"venue": "Hall", "street": "1 A St"}}
        )
        assert event.associated_data.location.name == "Hall"
        assert event.associated_data.location.address == "1 A St"


class TestHelpers:
    """Tests for logging and formatting helpers."""

    def test_log_prefixes_name(self, static_strategy, caplog):
        """log() prefixes messages with the strategy name."""
        strategy = static_strategy(name="static")
        with caplog.at_level("WARNING", logger="strategy.staticstrategy"):
            strategy.log("warning", "token expires soon")
        assert "(static) token expires soon" in caplog.text

    def test_logger_follows_class_not_name(self, static_strategy, raw_event, caplog):
        """Renaming through an override keeps the class logger and updates the prefix."""
        strategy = static_strategy([raw_event], name="static")
        strategy.request("list_events", {"name": "renamed"})
        assert strategy.logger.name == "strategy.staticstrategy"
        with caplog.at_level("WARNING", logger="strategy.staticstrategy"):
            strategy.log("warning", "token expires soon")
        assert "(renamed) token expires soon" in caplog.text

    def test_format_time(self, static_strategy):
        """format_time returns canonical ISO text."""
        assert static_strategy().format_time("2024-01-01 09:00") == "2024-01-01T09:00:00Z"

    def test_compose_id(self, static_strategy):
        """compose_id joins parts with uid_delimiter."""
        assert static_strategy().compose_id("a", 1, None, "b") == "a-1-b"


class TestRegistry:
    """Tests for the strategy registry."""

    def test_subclasses_registered(self):
        """Defined strategies are registered by lowercase class name."""

        class RegisteredProbe(BaseCalendar):
            pass

        assert registered_strategies()["registeredprobe"] is RegisteredProbe
        assert get_strategy("RegisteredProbe") is RegisteredProbe

    def test_opt_out(self):
        """register=False keeps helper classes out of the registry."""
        assert "teamcalendar" not in registered_strategies()

    def test_unknown_strategy(self):
        """Unknown names raise UnknownStrategyError."""
        with pytest.raises(UnknownStrategyError):
            get_strategy("nope")
