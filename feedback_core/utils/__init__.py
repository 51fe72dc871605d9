"""
Utils Module

Shared utilities, helpers, and common functionality.

Components:
    - logger: Colorized console logging with optional file rotation
    - exceptions: Feedback error family
    - ids: Item and session ID generation
"""

from feedback_core.utils.exceptions import (
    CollectionCancelledError,
    FeedbackError,
    PluginError,
    RetryExhaustedError,
    ValidationError,
)
from feedback_core.utils.ids import generate_id, generate_short_id
from feedback_core.utils.logger import (
    LoggerConfig,
    get_handler_logger,
    get_logger,
    get_pipeline_logger,
    setup_logger,
)

__all__ = [
    # Exceptions
    "FeedbackError",
    "ValidationError",
    "PluginError",
    "CollectionCancelledError",
    "RetryExhaustedError",
    # IDs
    "generate_id",
    "generate_short_id",
    # Logger utilities
    "LoggerConfig",
    "setup_logger",
    "get_logger",
    "get_pipeline_logger",
    "get_handler_logger",
]
