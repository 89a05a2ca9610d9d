"""
Configuration loader for guarded_fetch.

This module handles loading configuration from a JSON or YAML file and from
``GUARDED_FETCH_*`` environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .models import GlobalConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Configuration loader with support for files and environment variables."""

    def __init__(self, env_prefix: str = "GUARDED_FETCH_") -> None:
        self.config_paths = [
            Path("guarded_fetch.yaml"),
            Path("guarded_fetch.yml"),
            Path("guarded_fetch.json"),
            Path.home() / ".guarded_fetch" / "config.yaml",
            Path.home() / ".guarded_fetch" / "config.json",
        ]
        self.env_prefix = env_prefix

    def load_config(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> GlobalConfig:
        """
        Load configuration from all available sources.

        Environment variables override values read from the file.

        Args:
            config_file: Specific config file to load; when omitted the
                default locations are searched

        Returns:
            GlobalConfig instance with merged configuration

        Raises:
            ValueError: If the file cannot be parsed
            pydantic.ValidationError: If the merged values are invalid
        """
        config_data: Dict[str, Any] = self._load_from_file(config_file) or {}

        env_config = self._load_from_environment()
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        return GlobalConfig(**config_data)

    def _load_from_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Dict[str, Any]]:
        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ValueError(f"Config file not found: {config_path}")
            return self._parse_config_file(config_path)

        for config_path in self.config_paths:
            if config_path.exists():
                return self._parse_config_file(config_path)
        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse configuration file based on extension."""
        suffix = config_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        logger.debug(f"Loading configuration from {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    return json.load(f) or {}
                return yaml.safe_load(f) or {}
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Failed to parse config file {config_path}: {e}") from e

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        env_mappings = {
            # Logging
            f"{self.env_prefix}LOG_LEVEL": ("logging", "level"),
            f"{self.env_prefix}LOG_FILE": ("logging", "file_path"),
            f"{self.env_prefix}LOG_FORMAT": ("logging", "format"),
            f"{self.env_prefix}LOG_STRUCTURED": ("logging", "enable_structured"),
            # Client
            f"{self.env_prefix}BASE": ("client", "base"),
            f"{self.env_prefix}TIMEOUT": ("client", "timeout"),
            f"{self.env_prefix}CREDENTIALS": ("client", "credentials"),
            f"{self.env_prefix}UNSAFE": ("client", "unsafe"),
            f"{self.env_prefix}LOCALHOST": ("client", "localhost"),
            f"{self.env_prefix}MAX_URL_LENGTH": ("client", "max_url_length"),
        }

        for env_var, config_path in env_mappings.items():
            value = os.getenv(env_var)
            if value is None:
                continue

            current = config
            for key in config_path[:-1]:
                current = current.setdefault(key, {})
            current[config_path[-1]] = self._convert_env_value(value)

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        lower = value.lower()
        if lower in ("true", "yes", "on"):
            return True
        if lower in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            return value

    def _deep_merge(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def save_config(self, config: GlobalConfig, config_file: Union[str, Path]) -> None:
        """Save configuration to a JSON or YAML file."""
        config_path = Path(config_file)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_data = config.model_dump(mode="json")

        with open(config_path, "w", encoding="utf-8") as f:
            suffix = config_path.suffix.lower()
            if suffix in (".yaml", ".yml"):
                yaml.safe_dump(config_data, f, default_flow_style=False, indent=2)
            elif suffix == ".json":
                json.dump(config_data, f, indent=2)
            else:
                raise ValueError(f"Unsupported config file format: {config_path.suffix}")


def load_config(config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
    """Load configuration with the default loader."""
    return ConfigLoader().load_config(config_file)


__all__ = ["ConfigLoader", "load_config"]
