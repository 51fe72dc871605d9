"""
Models Module

Data models and plugin interfaces shared across the collection pipeline.

Components:
    - feedback: FeedbackItem, CollectionContext, ValidationResult
    - config: CollectorConfig, DebounceConfig, RetryConfig, BackoffStrategy
    - plugins: PluginKind and the validator/transformer/handler bases
    - hooks: Hook callable types and the HookRegistry
"""

from feedback_core.models.config import (
    DEFAULT_RETRY_CONFIG,
    BackoffStrategy,
    CollectorConfig,
    DebounceConfig,
    RetryConfig,
    define_config,
)
from feedback_core.models.feedback import (
    CollectionContext,
    FeedbackItem,
    FeedbackMetadata,
    ValidationResult,
)
from feedback_core.models.hooks import (
    AfterCollectHook,
    BeforeCollectHook,
    ErrorContext,
    ErrorHook,
    ErrorPhase,
    HookRegistry,
    RetryHook,
)
from feedback_core.models.plugins import (
    FeedbackPlugin,
    HandlerPlugin,
    PluginKind,
    TransformerPlugin,
    ValidatorPlugin,
    is_handler_plugin,
    is_transformer_plugin,
    is_validator_plugin,
    plugin_kind,
)

__all__ = [
    "FeedbackItem",
    "FeedbackMetadata",
    "CollectionContext",
    "ValidationResult",
    "CollectorConfig",
    "DebounceConfig",
    "RetryConfig",
    "BackoffStrategy",
    "DEFAULT_RETRY_CONFIG",
    "define_config",
    "BeforeCollectHook",
    "AfterCollectHook",
    "ErrorHook",
    "RetryHook",
    "ErrorContext",
    "ErrorPhase",
    "HookRegistry",
    "PluginKind",
    "FeedbackPlugin",
    "ValidatorPlugin",
    "TransformerPlugin",
    "HandlerPlugin",
    "plugin_kind",
    "is_validator_plugin",
    "is_transformer_plugin",
    "is_handler_plugin",
]
