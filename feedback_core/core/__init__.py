"""
Core Module

Collection lifecycle, plugin pipeline and timing components.

Components:
    - FeedbackCollector: Public entry point wiring the whole lifecycle
    - Debouncer: Call coalescing with leading edge and hard deadline
    - with_retry: Retry executor with fixed/linear/exponential backoff
    - PluginRegistry: Ordered validator/transformer/handler lists
    - LoopClock / ManualClock: Real and simulated timer sources
"""

from feedback_core.core.clock import Clock, LoopClock, ManualClock
from feedback_core.core.collector import FeedbackCollector
from feedback_core.core.debouncer import Debouncer, debounce
from feedback_core.core.pipeline import (
    PluginRegistry,
    create_plugin_registry,
    register_plugin,
    run_handlers,
    run_transformers,
    run_validators,
)
from feedback_core.core.retry import calculate_delay, create_retry_wrapper, with_retry
from feedback_core.core.schema import (
    create_schema_validator,
    format_schema_errors,
    validate_with_schema,
)

__all__ = [
    "FeedbackCollector",
    "Debouncer",
    "debounce",
    "with_retry",
    "create_retry_wrapper",
    "calculate_delay",
    "PluginRegistry",
    "create_plugin_registry",
    "register_plugin",
    "run_validators",
    "run_transformers",
    "run_handlers",
    "validate_with_schema",
    "create_schema_validator",
    "format_schema_errors",
    "Clock",
    "LoopClock",
    "ManualClock",
]
