"""
Collector configuration models.

Pydantic models describing how a FeedbackCollector coalesces input
and retries handler dispatch. All durations are in milliseconds.
"""

from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from feedback_core.config import DebounceDefaults, RetryDefaults


class BackoffStrategy(str, Enum):
    """Delay growth between retry attempts."""

    FIXED = "fixed"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class DebounceConfig(BaseModel):
    """Debounce configuration options."""

    model_config = ConfigDict(frozen=True)

    wait: float = Field(DebounceDefaults.WAIT_MS, description="Quiet period in ms", ge=0)
    max_wait: Optional[float] = Field(
        None, description="Hard deadline from the first call of a burst, in ms", ge=0
    )
    leading: bool = Field(False, description="Fire on the leading edge of a burst")


class RetryConfig(BaseModel):
    """Retry configuration options."""

    model_config = ConfigDict(frozen=True)

    attempts: int = Field(RetryDefaults.ATTEMPTS, description="Total tries, including the first", ge=1)
    base_delay: float = Field(RetryDefaults.BASE_DELAY_MS, description="Base delay in ms", ge=0)
    max_delay: float = Field(RetryDefaults.MAX_DELAY_MS, description="Delay cap in ms", ge=0)
    backoff: BackoffStrategy = Field(
        BackoffStrategy(RetryDefaults.BACKOFF), description="Backoff strategy"
    )
    retry_on: Optional[Callable[[BaseException], bool]] = Field(
        None, description="Return False to mark an error as non-retryable"
    )


class CollectorConfig(BaseModel):
    """Main configuration for a FeedbackCollector."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, populate_by_name=True)

    type: str = Field(..., description="Feedback category this collector handles", min_length=1)
    schema_: Optional[Any] = Field(
        None,
        alias="schema",
        description="Pydantic model (or any TypeAdapter-compatible type) checked before validators",
    )
    debounce: Optional[DebounceConfig] = Field(None, description="Coalescing (disabled by default)")
    retry: Optional[RetryConfig] = Field(None, description="Handler retry (disabled by default)")
    default_metadata: dict[str, Any] = Field(
        default_factory=dict, description="Metadata merged into every item"
    )
    parallel_handlers: bool = Field(True, description="Dispatch handlers concurrently")


def define_config(**kwargs: Any) -> CollectorConfig:
    """
    Build a validated CollectorConfig.

    Example:
        >>> config = define_config(type="nps", retry={"attempts": 5, "base_delay": 200})
    """
    return CollectorConfig(**kwargs)


DEFAULT_RETRY_CONFIG = RetryConfig(
    attempts=3,
    base_delay=1000,
    max_delay=30000,
    backoff=BackoffStrategy.EXPONENTIAL,
)
