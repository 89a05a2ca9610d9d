"""
Logging manager for guarded_fetch.

This module provides centralized logging configuration for the package
loggers.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

from ..config.models import LoggingConfig, LogLevel
from .filters import SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter

PACKAGE_LOGGER = "guarded_fetch"


class LoggingManager:
    """
    Centralized logging manager.

    Handlers are attached to the package logger (``guarded_fetch`` by
    default) so configuring the library never touches the application's
    root logger.
    """

    def __init__(self, logger_name: str = PACKAGE_LOGGER) -> None:
        self.logger_name = logger_name
        self._configured = False
        self._handlers: Dict[str, logging.Handler] = {}

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(self.logger_name)

    def setup_logging(self, config: LoggingConfig) -> None:
        """
        Setup logging based on configuration.

        Calling it again replaces the handlers installed by the previous
        call.

        Args:
            config: Logging configuration
        """
        if self._configured:
            self.cleanup()

        self.logger.setLevel(getattr(logging, config.level.value))

        if config.enable_console:
            self._setup_console_handler(config)

        if config.enable_file and config.file_path:
            self._setup_file_handler(config)

        for component, level in config.component_levels.items():
            logging.getLogger(component).setLevel(getattr(logging, level.value))

        self._configured = True
        self.logger.debug("Logging system configured")

    def _formatter(self, config: LoggingConfig, console: bool) -> logging.Formatter:
        if config.enable_structured:
            return StructuredFormatter()
        if console:
            return ColoredFormatter(config.format)
        return logging.Formatter(config.format)

    def _install(self, name: str, handler: logging.Handler, config: LoggingConfig) -> None:
        handler.setLevel(getattr(logging, config.level.value))
        if config.mask_sensitive:
            handler.addFilter(SensitiveDataFilter())
        self.add_handler(name, handler)

    def _setup_console_handler(self, config: LoggingConfig) -> None:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(self._formatter(config, console=True))
        self._install("console", handler, config)

    def _setup_file_handler(self, config: LoggingConfig) -> None:
        log_path = Path(str(config.file_path))
        log_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.handlers.RotatingFileHandler(
            filename=str(log_path),
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(self._formatter(config, console=False))
        self._install("file", handler, config)

    def get_logger(self, name: str) -> logging.Logger:
        """Get logger for a specific component."""
        return logging.getLogger(name)

    def set_level(self, level: LogLevel, component: Optional[str] = None) -> None:
        """
        Set logging level.

        Args:
            level: New logging level
            component: Specific component (None for the package logger)
        """
        log_level = getattr(logging, level.value)

        if component:
            logging.getLogger(component).setLevel(log_level)
            return

        self.logger.setLevel(log_level)
        for handler in self._handlers.values():
            handler.setLevel(log_level)

    def add_handler(self, name: str, handler: logging.Handler) -> None:
        """Attach a named handler to the package logger."""
        self.logger.addHandler(handler)
        self._handlers[name] = handler

    def remove_handler(self, name: str) -> None:
        """Detach and close a named handler."""
        handler = self._handlers.pop(name, None)
        if handler is not None:
            self.logger.removeHandler(handler)
            handler.close()

    def cleanup(self) -> None:
        """Remove every handler this manager installed."""
        for name in list(self._handlers):
            self.remove_handler(name)
        self._configured = False

    def is_configured(self) -> bool:
        return self._configured


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """
    Setup package logging.

    Args:
        config: Logging configuration; defaults to ``LoggingConfig()``
    """
    _logging_manager.setup_logging(config or LoggingConfig())


def get_logger(name: str) -> logging.Logger:
    return _logging_manager.get_logger(name)


def cleanup_logging() -> None:
    """Remove the handlers installed by :func:`setup_logging`."""
    _logging_manager.cleanup()


__all__ = [
    "PACKAGE_LOGGER",
    "LoggingManager",
    "setup_logging",
    "get_logger",
    "cleanup_logging",
]
