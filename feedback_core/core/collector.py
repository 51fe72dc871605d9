"""
Main FeedbackCollector class.

The primary entry point for the feedback collection library. Wires the
debouncer, the plugin pipeline, the retry executor and lifecycle hooks
into one collection lifecycle.
"""

import inspect
import logging
import time
from typing import Any, Callable, Optional

from feedback_core.core.clock import Clock, LoopClock
from feedback_core.core.debouncer import Debouncer
from feedback_core.core.pipeline import (
    PluginRegistry,
    create_plugin_registry,
    register_plugin,
    run_handlers,
    run_transformers,
    run_validators,
)
from feedback_core.core.retry import with_retry
from feedback_core.core.schema import create_schema_validator, validate_with_schema
from feedback_core.models.config import CollectorConfig
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
from feedback_core.models.plugins import FeedbackPlugin
from feedback_core.utils.exceptions import (
    CollectionCancelledError,
    PluginError,
    RetryExhaustedError,
    ValidationError,
)
from feedback_core.utils.ids import generate_id

logger = logging.getLogger(__name__)

_PHASE_BY_PLUGIN_PHASE: dict[str, ErrorPhase] = {
    "validate": "validation",
    "transform": "transform",
    "handle": "handler",
}


def _now_ms() -> int:
    return int(time.time() * 1000)


async def _call_hook(hook: Callable[..., Any], *args: Any) -> Any:
    result = hook(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class FeedbackCollector:
    """
    Framework-agnostic, headless feedback collector.

    Lifecycle of one collection:
        before hooks -> validate (schema, then validator plugins) -> build
        item -> transformers -> handlers (with retry when configured) ->
        after hooks. Any failure is reported to error hooks, tagged with
        the phase it happened in, and then re-raised to the caller.

    With debounce configured, rapid ``collect`` calls are coalesced and
    every caller of a burst receives the item (or error) of the single
    execution that ran with the latest arguments.

    Example:
        >>> class NpsScore(BaseModel):
        ...     score: int = Field(ge=0, le=10)
        >>> memory = MemoryHandler()
        >>> collector = FeedbackCollector(type="nps", schema=NpsScore).use(memory)
        >>> item = await collector.collect({"score": 9}, {"user_id": "u-1"})
        >>> memory.count
        1
    """

    def __init__(
        self,
        config: Optional[CollectorConfig] = None,
        *,
        clock: Optional[Clock] = None,
        id_generator: Callable[[], str] = generate_id,
        timestamp_factory: Callable[[], int] = _now_ms,
        **options: Any,
    ):
        """
        Initialize collector.

        Args:
            config: Collector configuration; alternatively pass its fields
                as keyword arguments (``type="nps", schema=NpsScore``)
            clock: Timer source for debounce and retry waits
            id_generator: Produces unique item IDs
            timestamp_factory: Produces the epoch-millisecond timestamp of a collection
        """
        if config is None:
            config = CollectorConfig(**options)
        elif options:
            raise TypeError("Pass either a CollectorConfig or keyword options, not both")

        self.config = config
        self.plugins: PluginRegistry = create_plugin_registry()
        self.hooks = HookRegistry()
        self._clock = clock or LoopClock()
        self._id_generator = id_generator
        self._timestamp_factory = timestamp_factory

        self._debouncer: Optional[Debouncer] = None
        if config.debounce is not None:
            self._debouncer = Debouncer(
                self._execute_collection,
                wait=config.debounce.wait,
                max_wait=config.debounce.max_wait,
                leading=config.debounce.leading,
                clock=self._clock,
                name=f"collector:{config.type}",
            )

        logger.info(
            f"FeedbackCollector initialized: {config.type}",
            extra={
                "schema": config.schema_ is not None,
                "debounce": config.debounce is not None,
                "retry": config.retry is not None,
            },
        )

    @property
    def type(self) -> str:
        """The feedback type this collector handles."""
        return self.config.type

    @property
    def pending(self) -> bool:
        """True while debounced collections are buffered."""
        return self._debouncer is not None and self._debouncer.pending

    # ========== Registration ==========

    def use(self, plugin: FeedbackPlugin) -> "FeedbackCollector":
        """
        Register a plugin with this collector.

        Args:
            plugin: Validator, transformer or handler plugin

        Returns:
            self for chaining

        Raises:
            ValueError: If the plugin declares an unknown kind
            PluginError: With phase ``install`` if the plugin's install hook fails
        """
        register_plugin(self.plugins, plugin)

        install = getattr(plugin, "install", None)
        if install is not None:
            try:
                install(self)
            except Exception as e:
                raise PluginError(plugin.name, "install", e) from e

        return self

    def with_schema(self, schema: Any, name: str = "schema-validator") -> "FeedbackCollector":
        """Register an additional schema as a validator plugin."""
        return self.use(create_schema_validator(schema, name=name))

    def on_before_collect(self, hook: BeforeCollectHook) -> "FeedbackCollector":
        """Register a hook called before collection; returning False cancels it."""
        self.hooks.before_collect.append(hook)
        return self

    def on_after_collect(self, hook: AfterCollectHook) -> "FeedbackCollector":
        """Register a hook called after a successful collection."""
        self.hooks.after_collect.append(hook)
        return self

    def on_error(self, hook: ErrorHook) -> "FeedbackCollector":
        """Register a hook called with (error, {"phase": ...} or None) on failure."""
        self.hooks.error.append(hook)
        return self

    def on_retry(self, hook: RetryHook) -> "FeedbackCollector":
        """Register a hook called with (attempt, error, next_delay_ms) before each retry."""
        self.hooks.retry.append(hook)
        return self

    # ========== Public API ==========

    async def validate(self, data: Any) -> ValidationResult:
        """
        Validate data without collecting.

        The configured schema runs first; validator plugins only run on
        structurally valid data.
        """
        if self.config.schema_ is not None:
            schema_result = validate_with_schema(self.config.schema_, data)
            if not schema_result.valid:
                return schema_result

        return await run_validators(self.plugins.validators, data)

    async def collect(
        self, data: Any, metadata: Optional[FeedbackMetadata] = None
    ) -> FeedbackItem:
        """
        Collect feedback data.

        Args:
            data: The feedback payload
            metadata: Per-call metadata, merged over the default metadata

        Returns:
            The collected feedback item

        Raises:
            ValidationError: If validation fails
            CollectionCancelledError: If a hook or ``cancel()`` cancelled it
            PluginError: If a plugin fails
            RetryExhaustedError: If handler dispatch failed on every attempt
        """
        if self._debouncer is not None:
            return await self._debouncer.call(data, metadata)

        return await self._execute_collection(data, metadata)

    async def flush(self) -> None:
        """Run any pending debounced collection now."""
        if self._debouncer is not None:
            await self._debouncer.flush()

    def cancel(self) -> None:
        """Discard pending debounced collections, rejecting their callers."""
        if self._debouncer is not None:
            self._debouncer.cancel()

    def get_statistics(self) -> dict:
        """Get registration counts and debounce counters."""
        return {
            "type": self.type,
            "plugins": {
                "validators": len(self.plugins.validators),
                "transformers": len(self.plugins.transformers),
                "handlers": len(self.plugins.handlers),
            },
            "hooks": self.hooks.counts(),
            "debounce": self._debouncer.get_statistics() if self._debouncer else None,
        }

    # ========== Execution ==========

    async def _execute_collection(
        self, data: Any, metadata: Optional[FeedbackMetadata] = None
    ) -> FeedbackItem:
        """Run one collection through the full pipeline."""
        timestamp = self._timestamp_factory()
        merged_metadata: FeedbackMetadata = {**self.config.default_metadata, **(metadata or {})}

        context = CollectionContext(
            type=self.config.type,
            data=data,
            metadata=merged_metadata,
            timestamp=timestamp,
        )

        try:
            for hook in self.hooks.before_collect:
                if await _call_hook(hook, context) is False:
                    raise CollectionCancelledError("Cancelled by before_collect hook")

            validation = await self.validate(data)
            if not validation.valid:
                raise ValidationError(validation.errors)

            item = FeedbackItem(
                id=self._id_generator(),
                type=self.config.type,
                data=data,
                metadata=merged_metadata,
                timestamp=timestamp,
            )

            if self.plugins.transformers:
                item = await run_transformers(self.plugins.transformers, item)

            if self.plugins.handlers:
                await self._run_handlers_with_retry(item)

            for hook in self.hooks.after_collect:
                await _call_hook(hook, item)

        except Exception as e:
            phase = self._get_error_phase(e)
            logger.warning(
                f"Collection failed: {e}",
                extra={"feedback_type": self.config.type, "phase": phase},
            )
            context_arg: Optional[ErrorContext] = {"phase": phase} if phase else None
            for hook in self.hooks.error:
                await _call_hook(hook, e, context_arg)
            raise

        logger.debug(f"Collected {item.type} item {item.id}")
        return item

    async def _run_handlers_with_retry(self, item: FeedbackItem) -> None:
        """Dispatch to handlers, under the retry policy when one is configured."""

        async def handlers_to_run() -> None:
            await run_handlers(
                self.plugins.handlers, item, parallel=self.config.parallel_handlers
            )

        if self.config.retry is None:
            await handlers_to_run()
            return

        async def notify_retry(attempt: int, error: BaseException, next_delay: int) -> None:
            for hook in self.hooks.retry:
                await _call_hook(hook, attempt, error, next_delay)

        await with_retry(
            handlers_to_run,
            self.config.retry,
            on_retry=notify_retry,
            clock=self._clock,
        )

    @staticmethod
    def _get_error_phase(error: BaseException) -> Optional[ErrorPhase]:
        """Determine the phase where an error occurred."""
        if isinstance(error, ValidationError):
            return "validation"
        if isinstance(error, RetryExhaustedError):
            error = error.last_error
        if isinstance(error, PluginError):
            return _PHASE_BY_PLUGIN_PHASE.get(error.phase)
        return None

    def __repr__(self) -> str:
        return f"FeedbackCollector(type={self.type}, plugins={len(self.plugins)})"

