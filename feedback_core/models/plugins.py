"""
Plugin interfaces for extending the feedback collector.

Every plugin declares a ``kind`` discriminant. The registry reads it once
at registration time and files the plugin under validators, transformers
or handlers; plugin capabilities are never inspected afterwards.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Union

from feedback_core.models.feedback import FeedbackItem, ValidationResult

if TYPE_CHECKING:
    from feedback_core.core.collector import FeedbackCollector


class PluginKind(str, Enum):
    """Closed set of plugin kinds."""

    VALIDATOR = "validator"
    TRANSFORMER = "transformer"
    HANDLER = "handler"


class FeedbackPlugin(ABC):
    """
    Base class for all plugins.

    Subclasses set ``name`` and ``kind``. ``install`` is called once when
    the plugin is registered with a collector.
    """

    name: str = "plugin"
    kind: PluginKind

    def install(self, collector: "FeedbackCollector") -> None:
        """Called when the plugin is registered with a collector."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name}, kind={self.kind.value})"


class ValidatorPlugin(FeedbackPlugin):
    """Plugin that validates feedback data before an item is built."""

    kind = PluginKind.VALIDATOR

    @abstractmethod
    def validate(self, data: Any) -> Union[ValidationResult, Awaitable[ValidationResult]]:
        """Validate the feedback payload."""


class TransformerPlugin(FeedbackPlugin):
    """Plugin that replaces the item with a transformed one."""

    kind = PluginKind.TRANSFORMER

    @abstractmethod
    def transform(self, item: FeedbackItem) -> Union[FeedbackItem, Awaitable[FeedbackItem]]:
        """Return the item to pass on to the next stage."""


class HandlerPlugin(FeedbackPlugin):
    """Plugin that consumes collected items (storage, delivery, logging)."""

    kind = PluginKind.HANDLER

    @abstractmethod
    def handle(self, item: FeedbackItem) -> Union[None, Awaitable[None]]:
        """Handle a collected item."""


def plugin_kind(plugin: Any) -> PluginKind:
    """
    Resolve a plugin's declared kind.

    Accepts duck-typed plugins whose ``kind`` is a plain string.

    Raises:
        ValueError: If the plugin declares no kind or an unknown one
    """
    kind = getattr(plugin, "kind", None)
    if kind is None:
        raise ValueError(f"Plugin {getattr(plugin, 'name', plugin)!r} does not declare a kind")
    try:
        return PluginKind(kind)
    except ValueError:
        raise ValueError(
            f"Plugin {getattr(plugin, 'name', plugin)!r} has unknown kind {kind!r}"
        ) from None


def is_validator_plugin(plugin: Any) -> bool:
    """Check whether a plugin is a validator."""
    return getattr(plugin, "kind", None) == PluginKind.VALIDATOR


def is_transformer_plugin(plugin: Any) -> bool:
    """Check whether a plugin is a transformer."""
    return getattr(plugin, "kind", None) == PluginKind.TRANSFORMER


def is_handler_plugin(plugin: Any) -> bool:
    """Check whether a plugin is a handler."""
    return getattr(plugin, "kind", None) == PluginKind.HANDLER
