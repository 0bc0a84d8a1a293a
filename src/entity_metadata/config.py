# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Configuration loading and validation for entity metadata building."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration validation fails critically."""

    pass


class Config:
    """Configuration for metadata builders.

    Loads configuration from .entity_metadata.yml with validation and defaults.
    """

    DEFAULTS = {
        # Joins owner type name and property name in default association names
        "association_name_separator": "_",
        # Publish a draft entity type into the store once it gets a key
        "auto_publish_on_key": True,
        # Raise instead of mapping unknown host types to DataType.UNDEFINED
        "strict_data_types": False,
        # Warn when a second property marks the same type auto-incrementing
        "warn_on_identity_overwrite": True,
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file. If None, uses default location.
        """
        if config_path is None:
            config_path = Path.cwd() / ".entity_metadata.yml"

        self.config_path: Optional[Path] = config_path
        self._config: Dict[str, Any] = {}
        self._load_config(config_path)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "Config":
        """Build a configuration from an in-memory mapping, without a file.

        Raises:
            ConfigurationError: If values is not a dictionary.
        """
        if not isinstance(values, dict):
            raise ConfigurationError(f"Configuration must be a dictionary, got {type(values)}")
        config = cls.__new__(cls)
        config.config_path = None
        config._config = cls.DEFAULTS.copy()
        config._validate_and_merge(values)
        return config

    def _load_config(self, config_path: Path) -> None:
        """Load and validate configuration from file."""
        if not config_path.exists():
            logger.info(f"Configuration file not found at {config_path}, using defaults")
            self._config = self.DEFAULTS.copy()
            return

        try:
            with open(config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f)

            if loaded_config is None:
                logger.warning("Configuration file is empty, using defaults")
                self._config = self.DEFAULTS.copy()
                return

            if not isinstance(loaded_config, dict):
                logger.warning(
                    f"Configuration file must contain a YAML dictionary, "
                    f"got {type(loaded_config)}, using defaults"
                )
                self._config = self.DEFAULTS.copy()
                return

            self._config = self.DEFAULTS.copy()
            self._validate_and_merge(loaded_config)

        except yaml.YAMLError as e:
            logger.warning(
                f"Error parsing configuration file {config_path}: {e}, using defaults"
            )
            self._config = self.DEFAULTS.copy()
        except OSError as e:
            logger.warning(
                f"Unable to read configuration file {config_path}: {e}, using defaults"
            )
            self._config = self.DEFAULTS.copy()

    def _validate_and_merge(self, loaded_config: Dict[str, Any]) -> None:
        """Validate loaded configuration and merge with defaults.

        Invalid parameters are logged as warnings and defaults are used.
        """
        for key, value in loaded_config.items():
            if key not in self.DEFAULTS:
                logger.warning(f"Unknown configuration parameter '{key}', ignoring")
                continue

            if not self._validate_parameter(key, value):
                logger.warning(
                    f"Invalid value for '{key}': {value}, using default {self.DEFAULTS[key]}"
                )
                continue

            self._config[key] = value

    def _validate_parameter(self, key: str, value: Any) -> bool:
        """Validate a configuration parameter.

        Returns:
            True if valid, False if invalid
        """
        expected_type = type(self.DEFAULTS[key])
        if not isinstance(value, expected_type):
            return False

        if key == "association_name_separator":
            # Must not collide with the ":#" namespace marker of structural names
            return bool(value) and ":" not in value and "#" not in value

        return True

    @property
    def association_name_separator(self) -> str:
        """Separator between owner type name and property name."""
        value = self._config["association_name_separator"]
        assert isinstance(value, str)
        return value

    @property
    def auto_publish_on_key(self) -> bool:
        """Whether draft entity types are published once they get a key."""
        value = self._config["auto_publish_on_key"]
        assert isinstance(value, bool)
        return value

    @property
    def strict_data_types(self) -> bool:
        """Whether unmapped host types are an error."""
        value = self._config["strict_data_types"]
        assert isinstance(value, bool)
        return value

    @property
    def warn_on_identity_overwrite(self) -> bool:
        """Whether to warn when auto-incrementing is set on a second property."""
        value = self._config["warn_on_identity_overwrite"]
        assert isinstance(value, bool)
        return value
