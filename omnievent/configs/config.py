# omnievent/configs/config.py
from functools import lru_cache
from pathlib import Path

import yaml

from omnievent.configs.settings import get_settings


class Config:
    """
    File-based configuration for OmniEvent strategies.
    """

    # This points to omnievent/configs/
    CONFIG_DIR = Path(__file__).parent.resolve()
    # This points to the omnievent package
    PACKAGE_ROOT = CONFIG_DIR.parent

    STRATEGIES_CONFIG_PATH = CONFIG_DIR / "strategies.yaml"
    FIXTURES_DIR = PACKAGE_ROOT / "fixtures"

    @classmethod
    def get_strategies_config_path(cls) -> Path:
        """Returns the strategies.yaml path, honouring OMNIEVENT_STRATEGIES_CONFIG_PATH."""
        return Path(get_settings().STRATEGIES_CONFIG_PATH)

    @classmethod
    @lru_cache
    def load_strategies_config(cls) -> dict:
        """Loads the YAML configuration for strategies."""
        path = cls.get_strategies_config_path()
        if not path.exists():
            raise FileNotFoundError(f"Missing config at {path}")

        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def get_fixture_path(cls, name: str) -> Path:
        """Returns the absolute path to a bundled fixture file."""
        return cls.FIXTURES_DIR / name
