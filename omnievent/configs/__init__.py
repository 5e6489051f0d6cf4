"""
Configuration for OmniEvent.

- options.py: deep-mergeable Options store used by strategies
- settings.py: environment-driven Settings (pydantic-settings)
- config.py: file-based strategy configuration (strategies.yaml)
"""

from omnievent.configs.options import Options

__all__ = ["Options"]
