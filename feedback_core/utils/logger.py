"""
Logging utility for the feedback collection library.

Provides:
- Colorized console output
- Optional daily rotating file logs (YYYYMMDD_<name>.log)
- Module-specific logger instances with caching
- Specialized loggers for the pipeline and built-in handlers
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

import colorlog

from feedback_core.config import LoggingConfig


# Global logger cache to prevent duplicate logger creation
_LOGGER_CACHE: Dict[str, logging.Logger] = {}


class LoggerConfig:
    """
    Centralized logger configuration manager.

    Manages log directories, file naming conventions, and formatting rules.
    """

    def __init__(self):
        """Initialize logger configuration from application settings."""
        self.log_dir = LoggingConfig.LOG_DIR
        self.log_level = getattr(logging, LoggingConfig.LOG_LEVEL.upper(), logging.INFO)
        self.log_to_file = LoggingConfig.LOG_TO_FILE
        self.max_bytes = LoggingConfig.MAX_LOG_SIZE
        self.backup_count = LoggingConfig.BACKUP_COUNT

        # File format (detailed)
        self.file_format = LoggingConfig.LOG_FORMAT
        self.date_format = LoggingConfig.DATE_FORMAT

        # Console format (colorized and simplified)
        self.console_format = (
            "%(log_color)s%(levelname)-8s%(reset)s "
            "%(cyan)s%(name)s%(reset)s - %(message)s"
        )

    def get_daily_log_filename(self, logger_name: str) -> str:
        """
        Generate daily log filename with YYYYMMDD prefix.

        Args:
            logger_name: Name of the logger

        Returns:
            Formatted log filename (e.g., '20260107_feedback_pipeline.log')
        """
        date_prefix = datetime.now().strftime("%Y%m%d")
        base_name = logger_name.replace(".", "_").lower()
        return f"{date_prefix}_{base_name}.log"

    def get_log_file_path(self, logger_name: str) -> Path:
        """Get full path to log file for given logger."""
        filename = self.get_daily_log_filename(logger_name)
        return self.log_dir / filename


def setup_logger(
    name: str,
    level: Optional[int] = None,
    log_to_file: Optional[bool] = None,
) -> logging.Logger:
    """
    Create and configure a logger instance with console and optional file handlers.

    Args:
        name: Logger name (typically __name__ of calling module)
        level: Optional custom log level (defaults to config setting)
        log_to_file: Override LOG_TO_FILE for this logger

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Collector ready")
    """
    if name in _LOGGER_CACHE:
        return _LOGGER_CACHE[name]

    config = LoggerConfig()
    logger = logging.getLogger(name)
    logger.setLevel(level or config.log_level)

    # Prevent duplicate handlers on repeated calls
    if logger.handlers:
        _LOGGER_CACHE[name] = logger
        return logger

    if config.log_to_file if log_to_file is None else log_to_file:
        LoggingConfig.ensure_log_directory()
        file_handler = RotatingFileHandler(
            filename=config.get_log_file_path(name),
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)  # Capture all levels in file
        file_handler.setFormatter(
            logging.Formatter(fmt=config.file_format, datefmt=config.date_format)
        )
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level or config.log_level)
    console_handler.setFormatter(
        colorlog.ColoredFormatter(
            fmt=config.console_format,
            datefmt=config.date_format,
            log_colors={
                "DEBUG": "white",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
    )
    logger.addHandler(console_handler)

    _LOGGER_CACHE[name] = logger
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve cached logger instance or create new one.

    Example:
        >>> from feedback_core.utils.logger import get_logger
        >>> logger = get_logger(__name__)
    """
    if name in _LOGGER_CACHE:
        return _LOGGER_CACHE[name]
    return setup_logger(name)


def get_pipeline_logger() -> logging.Logger:
    """Logger for collection lifecycle events."""
    return get_logger("feedback.pipeline")


def get_handler_logger() -> logging.Logger:
    """Logger used by built-in handlers that write items to the log."""
    return get_logger("feedback.handler")
