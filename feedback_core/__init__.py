"""
feedback-core - Main Package

A headless library for collecting feedback payloads through a uniform
pipeline: validate, build an item, transform, dispatch to handlers and
notify lifecycle hooks, with optional debouncing and handler retry.

Modules:
    core: Collector, debouncer, retry executor and plugin pipeline
    models: Pydantic data models, configuration and plugin interfaces
    plugins: Built-in handlers and schema validator
    utils: Exceptions, logging and ID generation
"""

from feedback_core.core import (
    Debouncer,
    FeedbackCollector,
    LoopClock,
    ManualClock,
    calculate_delay,
    create_plugin_registry,
    create_retry_wrapper,
    create_schema_validator,
    debounce,
    register_plugin,
    run_handlers,
    run_transformers,
    run_validators,
    validate_with_schema,
    with_retry,
)
from feedback_core.models import (
    DEFAULT_RETRY_CONFIG,
    BackoffStrategy,
    CollectionContext,
    CollectorConfig,
    DebounceConfig,
    FeedbackItem,
    FeedbackPlugin,
    HandlerPlugin,
    PluginKind,
    RetryConfig,
    TransformerPlugin,
    ValidationResult,
    ValidatorPlugin,
    define_config,
    is_handler_plugin,
    is_transformer_plugin,
    is_validator_plugin,
)
from feedback_core.plugins import (
    CallbackHandler,
    ConsoleHandler,
    MemoryHandler,
    create_callback_handler,
)
from feedback_core.utils import (
    CollectionCancelledError,
    FeedbackError,
    PluginError,
    RetryExhaustedError,
    ValidationError,
    generate_id,
    generate_short_id,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "FeedbackCollector",
    "Debouncer",
    "debounce",
    "with_retry",
    "create_retry_wrapper",
    "calculate_delay",
    "validate_with_schema",
    "create_schema_validator",
    "create_plugin_registry",
    "register_plugin",
    "run_validators",
    "run_transformers",
    "run_handlers",
    "LoopClock",
    "ManualClock",
    # Models
    "FeedbackItem",
    "CollectionContext",
    "ValidationResult",
    "CollectorConfig",
    "DebounceConfig",
    "RetryConfig",
    "BackoffStrategy",
    "DEFAULT_RETRY_CONFIG",
    "define_config",
    "PluginKind",
    "FeedbackPlugin",
    "ValidatorPlugin",
    "TransformerPlugin",
    "HandlerPlugin",
    "is_validator_plugin",
    "is_transformer_plugin",
    "is_handler_plugin",
    # Built-in plugins
    "ConsoleHandler",
    "MemoryHandler",
    "CallbackHandler",
    "create_callback_handler",
    # Utilities
    "generate_id",
    "generate_short_id",
    "FeedbackError",
    "ValidationError",
    "PluginError",
    "CollectionCancelledError",
    "RetryExhaustedError",
]
