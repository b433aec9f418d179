"""
Configuration loader for Quote Builder.

Loads settings from quote_config.yaml and provides typed access
to all configuration sections.
"""
import math
import os
from pathlib import Path
from typing import Any, Optional
from functools import lru_cache

import yaml


# Default config path shipped inside the package
DEFAULT_CONFIG_PATH = Path(__file__).parent / "quote_config.yaml"

CONFIG_PATH_ENV = "QUOTE_CONFIG_PATH"

SURCHARGE_MODES = ("stacking", "override")


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


class QuoteConfig:
    """
    Configuration manager for Quote Builder.

    Loads YAML configuration and provides typed access to all sections.
    Use get_config() to obtain the singleton instance.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self._config_path = config_path or DEFAULT_CONFIG_PATH
        self._config: dict = {}
        self._load()

    def _load(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            raise ConfigurationError(f"Config file not found: {self._config_path}")

        try:
            with open(self._config_path, 'r') as f:
                self._config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")

        if not isinstance(self._config, dict):
            raise ConfigurationError("Config file must contain a YAML mapping")

        self._validate()

    def _validate(self) -> None:
        """Check values that are copied onto new jobs or used as limits."""
        self.default_surcharge_mode
        self.default_surcharge_percent
        self.max_category_depth
        self.name_max_length

    def reload(self) -> None:
        """Reload configuration from disk."""
        self._load()
        get_config.cache_clear()

    @property
    def path(self) -> Path:
        return self._config_path

    @property
    def version(self) -> str:
        """Configuration file version."""
        return self._config.get("version", "unknown")

    # =========================================================================
    # Settings (job creation defaults)
    # =========================================================================

    @property
    def settings(self) -> dict:
        """Job creation defaults."""
        return self._config.get("settings") or {}

    @property
    def default_surcharge_mode(self) -> str:
        """Surcharge mode copied onto new jobs."""
        value = str(self.settings.get("default_surcharge_mode", "stacking")).strip().lower()
        if value not in SURCHARGE_MODES:
            raise ConfigurationError(
                f"default_surcharge_mode must be 'stacking' or 'override', got {value!r}"
            )
        return value

    @property
    def default_surcharge_percent(self) -> float:
        """Surcharge percentage copied onto new jobs."""
        value = self.settings.get("default_surcharge_percent", 0)
        try:
            percent = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"default_surcharge_percent must be a number, got {value!r}"
            )
        if not math.isfinite(percent) or percent < 0:
            raise ConfigurationError(
                f"default_surcharge_percent must be a non-negative number, got {value!r}"
            )
        return percent

    # =========================================================================
    # Categories
    # =========================================================================

    @property
    def categories(self) -> dict:
        return self._config.get("categories") or {}

    @property
    def max_category_depth(self) -> int:
        """Maximum nesting depth for categories (1 = top level only)."""
        return self._positive_int(self.categories, "max_depth", 3)

    # =========================================================================
    # Validation
    # =========================================================================

    @property
    def validation(self) -> dict:
        return self._config.get("validation") or {}

    @property
    def name_max_length(self) -> int:
        """Maximum length of job, category and line item names."""
        return self._positive_int(self.validation, "name_max_length", 255)

    # =========================================================================
    # Units
    # =========================================================================

    @property
    def units(self) -> dict:
        """Suggested unit labels keyed by line item type."""
        return self._config.get("units") or {}

    def get_units(self, item_type: str) -> list[str]:
        """
        Get suggested units for a line item type.

        Args:
            item_type: One of 'material', 'labor', 'equipment'

        Returns:
            List of unit labels (empty for unknown types)
        """
        return list(self.units.get(item_type, []))

    @staticmethod
    def _positive_int(section: dict, key: str, default: int) -> int:
        value = section.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigurationError(f"{key} must be a positive integer, got {value!r}")
        return value

    # =========================================================================
    # Raw Access
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """Get a top-level config value by key."""
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        return key in self._config


_config_path_override: Optional[str] = None


@lru_cache(maxsize=1)
def get_config() -> QuoteConfig:
    """
    Get the singleton configuration instance.

    The path is taken from set_config_path(), then from the
    QUOTE_CONFIG_PATH environment variable, then the packaged default.

    Returns:
        QuoteConfig singleton instance
    """
    config_path = _config_path_override or os.environ.get(CONFIG_PATH_ENV)
    path = Path(config_path) if config_path else None
    return QuoteConfig(path)


def set_config_path(config_path: Optional[str]) -> QuoteConfig:
    """
    Point the singleton at another config file (None restores the default).

    Returns:
        The newly loaded QuoteConfig
    """
    global _config_path_override
    if config_path is not None:
        # A file that fails to load leaves the current configuration in place
        QuoteConfig(Path(config_path))
    _config_path_override = config_path
    return reload_config()


def reload_config() -> QuoteConfig:
    """Reload configuration from disk and return new instance."""
    get_config.cache_clear()
    return get_config()
