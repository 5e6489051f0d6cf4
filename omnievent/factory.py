"""
Strategy Factory for config-driven strategy creation.

Builds strategies by name, layering options from strategies.yaml under the
options given at call time.

Usage:
    from omnievent.factory import create_strategy, list_events

    developer = create_strategy("developer", match_name="sync")
    events = developer.request("list_events")

    # or in one call
    events = list_events("developer", match_name="sync")
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from omnievent.configs.config import Config
from omnievent.configs.options import Options
from omnievent.strategy import Strategy, get_strategy, registered_strategies

logger = logging.getLogger(__name__)


class StrategyFactory:
    """
    Factory for creating strategies from YAML configuration.

    Reads per-strategy settings from strategies.yaml and creates registered
    strategy instances with those options applied.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the factory.

        Args:
            config_path: Path to strategies.yaml. If not provided, uses Config's.
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Dict] = None

    @property
    def config(self) -> Dict:
        """Load and cache configuration."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if self.config_path is None:
            return Config.load_strategies_config()

        if not self.config_path.exists():
            raise FileNotFoundError(f"Config not found: {self.config_path}")

        with open(self.config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def get_strategy_config(self, name: str) -> Dict:
        """
        Get configuration for a specific strategy.

        Args:
            name: Strategy name (e.g., "developer")

        Returns:
            Strategy configuration dict (empty if not configured)
        """
        configured = self.config.get("strategies") or {}
        return configured.get(name.lower()) or {}

    def list_strategies(self) -> Dict[str, Dict[str, Any]]:
        """
        List all registered strategies with their status.

        Returns:
            Dict mapping name -> {enabled: bool, class: str}
        """
        return {
            name: {
                "enabled": self.get_strategy_config(name).get("enabled", True),
                "class": cls.__name__,
            }
            for name, cls in registered_strategies().items()
        }

    def list_enabled_strategies(self) -> List[str]:
        """List names of all enabled strategies."""
        return [name for name, info in self.list_strategies().items() if info["enabled"]]

    def create_strategy(self, provider: str, *args: Any, **options: Any) -> Strategy:
        """
        Create a strategy by name.

        Args:
            provider: Registered strategy name
            *args: Positional arguments for the strategy's declared args
            **options: Call-time options (win over strategies.yaml)

        Returns:
            Configured Strategy instance

        Raises:
            UnknownStrategyError: If no strategy is registered under name
            ValueError: If the strategy is disabled in configuration
        """
        strategy_cls = get_strategy(provider)
        strategy_config = self.get_strategy_config(provider)

        if not strategy_config.get("enabled", True):
            raise ValueError(f"Strategy '{provider}' is not enabled")

        merged = Options(strategy_config.get("options") or {}).deep_merge(options)
        strategy = strategy_cls(*args, merged)
        logger.debug(f"Created strategy: {strategy.name}")
        return strategy

    def reload_config(self) -> None:
        """Reload configuration from disk."""
        self._config = None


# Module-level factory instance
_factory: Optional[StrategyFactory] = None


def get_factory(config_path: Optional[str] = None) -> StrategyFactory:
    """
    Get or create the module-level factory instance.

    Args:
        config_path: Optional config path (only used if creating new factory)

    Returns:
        StrategyFactory instance
    """
    global _factory
    if _factory is None or config_path:
        _factory = StrategyFactory(config_path)
    return _factory


def create_strategy(provider: str, *args: Any, **options: Any) -> Strategy:
    """
    Convenience function to create a strategy by name.

    Example:
        >>> from omnievent.factory import create_strategy
        >>> developer = create_strategy("developer")
        >>> events = developer.request("list_events")
    """
    return get_factory().create_strategy(provider, *args, **options)


def _run(operation: str, provider: str, options: Dict[str, Any]) -> Any:
    strategy = create_strategy(provider, **options)
    return strategy.request(operation)


def list_events(provider: str, **options: Any) -> Optional[List]:
    """
    List events from a provider.

    Returns:
        Filtered EventHash list, or None if the strategy is not authorized
    """
    return _run("list_events", provider, options)


def create_event(provider: str, **options: Any) -> Any:
    """Create an event through a provider's strategy."""
    return _run("create_event", provider, options)


def update_event(provider: str, **options: Any) -> Any:
    """Update an event through a provider's strategy."""
    return _run("update_event", provider, options)


def destroy_event(provider: str, **options: Any) -> Any:
    """Destroy an event through a provider's strategy."""
    return _run("destroy_event", provider, options)
