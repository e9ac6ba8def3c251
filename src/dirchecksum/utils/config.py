"""User configuration management."""

import logging
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, dict[str, Any]] = {
    "hash": {
        "algorithm": "md5",
        "mode": "both",
    },
    "concurrency": {
        "max_workers": 32,
    },
}

EXAMPLE_CONFIG = """# dirchecksum configuration file
# Location: ~/.config/dirchecksum/config.toml

[hash]
# Any hashlib algorithm name (md5 gives 16-byte digests)
algorithm = "md5"

# Mode used by 'dirchecksum hash tree': sequential, concurrent or both
mode = "both"

[concurrency]
# Threads used for listings and file reads in concurrent mode
max_workers = 32
"""


class Config:
    """User configuration manager."""

    def __init__(self, config_dir: Path | None = None):
        """Initialize config from ``config_dir`` or ~/.config/dirchecksum."""
        self.config_dir = config_dir or Path.home() / ".config" / "dirchecksum"
        self.config_file = self.config_dir / "config.toml"
        self._config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load config from file or return defaults."""
        defaults = {section: dict(values) for section, values in DEFAULTS.items()}

        if not self.config_file.exists():
            return defaults

        try:
            with open(self.config_file, "rb") as f:
                user_config = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring config file %s: %s", self.config_file, e)
            return defaults

        return self._merge_configs(defaults, user_config)

    def _merge_configs(self, defaults: dict, user: dict) -> dict:
        """Recursively merge user config into defaults."""
        result = defaults.copy()
        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a config value."""
        return self._config.get(section, {}).get(key, default)

    def create_example_config(self) -> None:
        """Create an example config file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(EXAMPLE_CONFIG)


# Global config instance
_config = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config
