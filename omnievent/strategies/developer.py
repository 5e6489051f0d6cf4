"""
Developer strategy.

A fixture-backed strategy for trying OmniEvent out and for testing. It reads
events from a bundled JSON file instead of calling a provider:

    from omnievent.strategies import Developer

    Developer().request("list_events", {"match_name": "sync"})
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging

from omnievent.configs.settings import get_settings
from omnievent.exceptions import FetchError
from omnievent.schemas.event import EventHash
from omnievent.strategy import Strategy

logger = logging.getLogger(__name__)


@lru_cache(maxsize=8)
def load_fixture(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load and cache a fixture file of the form {"events": [...]}.

    Raises:
        FetchError: If the file is missing or is not a JSON object with an
            "events" list
    """
    path = Path(path)
    if not path.exists():
        raise FetchError(f"Fixture not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise FetchError(f"Fixture {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("events"), list):
        raise FetchError(f"Fixture {path} must contain an 'events' list")

    logger.debug(f"Loaded {len(data['events'])} fixture events from {path}")
    return data


class Developer(Strategy):
    """
    Strategy backed by a local fixture file.

    Authorized whenever a token is configured.
    """

    default_config = {
        "token": "12345",
        "name": "developer",
        "domain": "omnievent-gem.com",
        "fixture_path": None,
    }

    @property
    def fixture_path(self) -> Path:
        return Path(self.options.get("fixture_path") or get_settings().DEVELOPER_FIXTURE_PATH)

    def authorized(self) -> bool:
        return bool(self.options.get("token"))

    def raw_events(self) -> List[Dict[str, Any]]:
        return list(load_fixture(str(self.fixture_path))["events"])

    def event_hash(self, raw_event: Dict[str, Any]) -> Optional[EventHash]:
        return self.build_event_hash(raw_event)
