"""
Plugin pipeline orchestration.

Runs validators, transformers and handlers in registration order and
wraps any plugin failure into a PluginError tagged with its phase.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from feedback_core.models.feedback import FeedbackItem, ValidationResult
from feedback_core.models.plugins import (
    FeedbackPlugin,
    HandlerPlugin,
    PluginKind,
    TransformerPlugin,
    ValidatorPlugin,
    plugin_kind,
)
from feedback_core.utils.exceptions import PluginError

logger = logging.getLogger(__name__)


@dataclass
class PluginRegistry:
    """
    Plugins grouped by kind.

    Lists are append-only and keep registration order. The same plugin
    registered twice runs twice.
    """

    validators: list[ValidatorPlugin] = field(default_factory=list)
    transformers: list[TransformerPlugin] = field(default_factory=list)
    handlers: list[HandlerPlugin] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.validators) + len(self.transformers) + len(self.handlers)


def create_plugin_registry() -> PluginRegistry:
    """Create an empty plugin registry."""
    return PluginRegistry()


def register_plugin(registry: PluginRegistry, plugin: FeedbackPlugin) -> PluginKind:
    """
    Register a plugin under its declared kind.

    Returns:
        The kind the plugin was filed under

    Raises:
        ValueError: If the plugin declares no kind or an unknown one
    """
    kind = plugin_kind(plugin)

    if kind == PluginKind.VALIDATOR:
        registry.validators.append(plugin)
    elif kind == PluginKind.TRANSFORMER:
        registry.transformers.append(plugin)
    else:
        registry.handlers.append(plugin)

    logger.debug(f"Registered {kind.value} plugin: {plugin.name}")
    return kind


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def run_validators(validators: Sequence[ValidatorPlugin], data: Any) -> ValidationResult:
    """
    Run all validators on the data.

    Every validator runs even after one reports errors; errors are
    concatenated in registration order. A validator that raises stops
    the stage.

    Raises:
        PluginError: With phase ``validate`` if a validator raises
    """
    all_errors: list[str] = []

    for validator in validators:
        try:
            result = await _resolve(validator.validate(data))
            if not isinstance(result, ValidationResult):
                result = ValidationResult.model_validate(result)
        except Exception as e:
            raise PluginError(validator.name, "validate", e) from e

        if not result.valid:
            all_errors.extend(result.errors)

    return ValidationResult.from_errors(all_errors)


async def run_transformers(
    transformers: Sequence[TransformerPlugin], item: FeedbackItem
) -> FeedbackItem:
    """
    Run transformers sequentially.

    Each transformer receives the previous output and whatever it returns
    becomes the current item.

    Raises:
        PluginError: With phase ``transform`` if a transformer raises
    """
    current = item

    for transformer in transformers:
        try:
            current = await _resolve(transformer.transform(current))
        except Exception as e:
            raise PluginError(transformer.name, "transform", e) from e

    return current


async def run_handlers(
    handlers: Sequence[HandlerPlugin],
    item: FeedbackItem,
    parallel: bool = True,
) -> None:
    """
    Dispatch the item to every handler.

    In parallel mode handlers start in registration order and run
    concurrently; the first failure is raised as soon as it is observed
    while the remaining handlers keep running. Sequential mode awaits
    each handler before starting the next.

    Raises:
        PluginError: With phase ``handle`` for the failing handler
    """

    async def run_handler(handler: HandlerPlugin) -> None:
        try:
            await _resolve(handler.handle(item))
        except Exception as e:
            raise PluginError(handler.name, "handle", e) from e

    if parallel:
        await asyncio.gather(*(run_handler(handler) for handler in handlers))
    else:
        for handler in handlers:
            await run_handler(handler)
