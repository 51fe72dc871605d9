"""Built-in handler plugins."""

from feedback_core.plugins.handlers.callback import (
    CallbackHandler,
    FeedbackCallback,
    create_callback_handler,
)
from feedback_core.plugins.handlers.console import ConsoleHandler
from feedback_core.plugins.handlers.memory import MemoryHandler

__all__ = [
    "CallbackHandler",
    "FeedbackCallback",
    "create_callback_handler",
    "ConsoleHandler",
    "MemoryHandler",
]
