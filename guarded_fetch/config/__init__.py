"""
Configuration management for guarded_fetch.

Pydantic models for logging and client defaults, loaded from a file and
environment variables.
"""

from .loader import ConfigLoader, load_config
from .models import (
    DEFAULT_TIMEOUT,
    ClientSettings,
    GlobalConfig,
    LoggingConfig,
    LogLevel,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "DEFAULT_TIMEOUT",
    "ClientSettings",
    "GlobalConfig",
    "LoggingConfig",
    "LogLevel",
]
