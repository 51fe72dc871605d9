"""
Configuration management for the feedback collection library.

Environment-based defaults using python-dotenv. Per-collector settings
live in ``feedback_core.models.config`` and fall back to these values.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class RetryDefaults:
    """Default retry policy for handler dispatch."""

    # Total tries including the first one
    ATTEMPTS: int = int(os.getenv("FEEDBACK_RETRY_ATTEMPTS", "3"))

    # Base delay in milliseconds
    BASE_DELAY_MS: int = int(os.getenv("FEEDBACK_RETRY_BASE_DELAY_MS", "1000"))

    # Upper bound for any computed delay in milliseconds
    MAX_DELAY_MS: int = int(os.getenv("FEEDBACK_RETRY_MAX_DELAY_MS", "30000"))

    # Backoff strategy (fixed, linear, exponential)
    BACKOFF: str = os.getenv("FEEDBACK_RETRY_BACKOFF", "exponential")

    # Symmetric jitter applied to every delay
    JITTER_RATIO: float = 0.1


class DebounceDefaults:
    """Default coalescing window."""

    # Quiet period in milliseconds
    WAIT_MS: int = int(os.getenv("FEEDBACK_DEBOUNCE_WAIT_MS", "300"))


class LoggingConfig:
    """Logging configuration."""

    # Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Log directory
    LOG_DIR: Path = Path(os.getenv("LOG_DIR", "logs"))

    # Write rotating log files in addition to the console
    LOG_TO_FILE: bool = os.getenv("LOG_TO_FILE", "false").lower() == "true"

    # Log format
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Date format
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    # Maximum log file size in bytes (10MB default)
    MAX_LOG_SIZE: int = int(os.getenv("MAX_LOG_SIZE", str(10 * 1024 * 1024)))

    # Number of backup log files to keep
    BACKUP_COUNT: int = int(os.getenv("BACKUP_COUNT", "5"))

    @classmethod
    def ensure_log_directory(cls) -> None:
        """Create log directory if it doesn't exist."""
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

