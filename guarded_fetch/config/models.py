"""
Configuration models for guarded_fetch.

This module defines the configuration data models with validation and
defaults.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import MAX_URL_LENGTH
from ..models.base import Credentials

DEFAULT_TIMEOUT = 10.0


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10 * 1024 * 1024, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_file: bool = Field(default=False, description="Enable file logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )
    mask_sensitive: bool = Field(
        default=True, description="Mask credentials and tokens in log records"
    )

    # Component-specific log levels
    component_levels: Dict[str, LogLevel] = Field(
        default_factory=dict, description="Per-component log levels"
    )


class ClientSettings(BaseModel):
    """
    Process-wide defaults for request clients.

    A client falls back to these values for anything neither the call nor
    the client configuration provides.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base: Optional[str] = Field(default=None, description="Default base URL")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, ge=0, description="Default timeout in seconds"
    )
    credentials: Credentials = Field(
        default=Credentials.SAME_ORIGIN, description="Default credential policy"
    )
    unsafe: bool = Field(default=False, description="Disable the private-network guard")
    localhost: bool = Field(default=False, description="Allow loopback destinations")
    max_url_length: int = Field(
        default=MAX_URL_LENGTH, gt=0, description="Maximum composed endpoint length"
    )

    @field_validator("base")
    @classmethod
    def validate_base(cls, v: Optional[str]) -> Optional[str]:
        """Base URLs must be absolute."""
        if v is None:
            return v
        v = v.strip()
        if v and "://" not in v:
            raise ValueError(f"Base URL must be absolute: {v}")
        return v or None


class GlobalConfig(BaseModel):
    """Global configuration container."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    client: ClientSettings = Field(default_factory=ClientSettings)

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


__all__ = [
    "DEFAULT_TIMEOUT",
    "LogLevel",
    "LoggingConfig",
    "ClientSettings",
    "GlobalConfig",
]
