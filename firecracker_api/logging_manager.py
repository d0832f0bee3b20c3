"""
Logging Manager for the Firecracker API client

Provides logging setup using the Loguru framework. The library logs through
``loguru.logger`` and stays silent until an application calls
``setup_logging``, which installs sinks and enables the package logger.

Features:
- Colored console output with structured context
- JSON logging for machine consumption
- Automatic log rotation, compression, and retention

Dependencies:
- loguru: Logging framework
- omegaconf: Configuration management
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from omegaconf import DictConfig

PACKAGE_NAME = "firecracker_api"


class LoggingManager:
    """Loguru setup for applications embedding the client.

    Attributes:
        config (DictConfig): Configuration last passed to ``setup_logging``
        handler_ids (list): Loguru sink ids added by this manager

    Example:
        log_manager = LoggingManager()
        log_manager.setup_logging(config)
    """

    def __init__(self):
        """Initialize the logging manager."""
        self.config: Optional[DictConfig] = None
        self.handler_ids = []

    def setup_logging(self, cfg: DictConfig):
        """Configure Loguru sinks from the ``logging`` config section.

        Removes existing handlers, adds a stderr handler and, when
        ``logging.file`` is set, a rotated file handler. Enables the
        ``firecracker_api`` logger.

        Args:
            cfg (DictConfig): Configuration object with logging settings

        Logging Configuration Options:
            - level: TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL
            - format: simple, detailed, json
            - file: Optional file path for file logging
            - rotation: Log rotation size (default: 100 MB)
            - retention: Log retention period (default: 30 days)
            - colorize: Enable/disable console colors (default: True)
        """
        self.config = cfg
        log_config = cfg.logging

        logger.remove()
        self.handler_ids = []

        self.handler_ids.append(logger.add(
            sys.stderr,
            format=self._get_console_format(log_config.format),
            level=log_config.level.upper(),
            colorize=log_config.get("colorize", True),
            serialize=log_config.format == "json",
            backtrace=True,
            diagnose=False
        ))

        if log_config.get("file"):
            self._setup_file_logging(log_config)

        logger.enable(PACKAGE_NAME)
        logger.info("Loguru logging configured",
                    level=log_config.level,
                    format=log_config.format,
                    file=log_config.get("file") or "console-only")

    def _get_console_format(self, format_type: str) -> str:
        """Get console logging format string based on configuration.

        Args:
            format_type (str): Format type - simple, detailed, or json

        Returns:
            str: Loguru format string for console output
        """
        if format_type == "simple":
            return "<level>{level}</level> - {message}"
        elif format_type == "json":
            return "{message}"
        else:  # detailed
            return ("{time:HH:mm:ss} | <level>{level: <8}</level> | "
                    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                    "<level>{message}</level> | {extra}")

    def _setup_file_logging(self, log_config: DictConfig):
        """Setup file logging with rotation and compression.

        Args:
            log_config (DictConfig): Logging configuration object
        """
        file_path = Path(log_config.file)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        if log_config.format == "json":
            self.handler_ids.append(logger.add(
                file_path,
                level=log_config.level.upper(),
                rotation=log_config.get("rotation", "100 MB"),
                retention=log_config.get("retention", "30 days"),
                compression="gz",
                serialize=True
            ))
        else:
            self.handler_ids.append(logger.add(
                file_path,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}",
                level=log_config.level.upper(),
                rotation=log_config.get("rotation", "100 MB"),
                retention=log_config.get("retention", "30 days"),
                compression="gz"
            ))

    def teardown(self):
        """Remove the sinks added by this manager and silence the package again."""
        for handler_id in self.handler_ids:
            logger.remove(handler_id)
        self.handler_ids = []
        logger.disable(PACKAGE_NAME)


_logging_manager = LoggingManager()


def setup_logging(cfg: DictConfig):
    """Setup global logging configuration.

    Args:
        cfg (DictConfig): Configuration object with logging settings
    """
    _logging_manager.setup_logging(cfg)


def teardown_logging():
    """Undo ``setup_logging``."""
    _logging_manager.teardown()
