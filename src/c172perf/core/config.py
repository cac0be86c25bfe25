"""Configuration loading for the performance tools.

Settings live in a YAML file (config/settings.yaml by default) and are layered
over built-in defaults, so a partial file only needs to override what changes.

Typical usage example:
    from c172perf.core.config import load_settings

    settings = load_settings()
    timeout = settings.get("weather.timeout_s", default=10)
"""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from c172perf.core.resource_path import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, Any] = {
    "performance": {
        "table": "data/performance/c172m_takeoff.json",
    },
    "weather": {
        "awc_url": "https://aviationweather.gov/api/data/metar",
        "noaa_url": "https://tgftp.nws.noaa.gov/data/observations/metar/stations/{icao}.TXT",
        "timeout_s": 10,
        "user_agent": "C172M-Perf/1.0",
    },
    "airports": {
        "data_dir": "data/airports",
        "sources": {
            "airports": [
                "https://davidmegginson.github.io/ourairports-data/airports.csv",
                "https://ourairports.com/data/airports.csv",
                "https://raw.githubusercontent.com/davidmegginson/ourairports-data/main/airports.csv",
            ],
            "runways": [
                "https://davidmegginson.github.io/ourairports-data/runways.csv",
                "https://ourairports.com/data/runways.csv",
                "https://raw.githubusercontent.com/davidmegginson/ourairports-data/main/runways.csv",
            ],
        },
    },
    "defaults": {
        "icao": "EGLL",
        "pressure_altitude_ft": 0,
        "oat_c": 15,
        "weight_kg": 950,
        "wind_kt": 0,
        "dry_grass": False,
    },
}


class ConfigError(Exception):
    """Raised when configuration operations fail."""


class ConfigLoader:
    """Configuration loader for YAML files.

    Provides loading, nested access, and default values for configuration.

    Examples:
        >>> config = ConfigLoader.load("config/settings.yaml")
        >>> timeout = config.get("weather.timeout_s", default=10)
    """

    def __init__(self, data: dict[str, Any]) -> None:
        """Initialize with configuration data.

        Args:
            data: Configuration dictionary.
        """
        self._data = data

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            ConfigLoader instance with loaded data.

        Raises:
            ConfigError: If the file is missing, unreadable or not a mapping.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Args:
            key: Configuration key, e.g. "weather.timeout_s".
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        value = self._data

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def merge(self, other: "ConfigLoader") -> None:
        """Merge another configuration into this one.

        Args:
            other: ConfigLoader to merge from.

        Note:
            Other config values override existing ones.
        """
        self._data = self._merge_dicts(self._data, other._data)

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Recursively merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value

        return result


def load_settings(path: str | Path | None = None) -> ConfigLoader:
    """Load settings layered over the built-in defaults.

    Args:
        path: Settings YAML file. When None, config/settings.yaml is used if it
            exists, otherwise the defaults alone are returned.

    Returns:
        ConfigLoader holding the merged settings.

    Raises:
        ConfigError: If an explicitly given file cannot be loaded.
    """
    settings = ConfigLoader(copy.deepcopy(DEFAULT_SETTINGS))

    if path is None:
        default_path = get_config_path("settings.yaml")
        if not default_path.exists():
            logger.debug("No settings file at %s, using defaults", default_path)
            return settings
        path = default_path

    settings.merge(ConfigLoader.load(path))
    return settings
