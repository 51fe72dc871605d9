"""
Plugins Module

Built-in plugins for the feedback collector.

Components:
    - handlers: ConsoleHandler, MemoryHandler, CallbackHandler
    - validators: Schema-backed validator plugin
"""

from feedback_core.plugins.handlers import (
    CallbackHandler,
    ConsoleHandler,
    MemoryHandler,
    create_callback_handler,
)
from feedback_core.plugins.validators import SchemaValidator, create_schema_validator

__all__ = [
    "CallbackHandler",
    "ConsoleHandler",
    "MemoryHandler",
    "create_callback_handler",
    "SchemaValidator",
    "create_schema_validator",
]
