"""
Retry executor with configurable backoff strategies.

Re-runs a fallible operation until it succeeds, a non-retryable error is
seen, or the attempt budget is spent. Delays are in milliseconds.
"""

import functools
import inspect
import logging
import random
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from feedback_core.config import RetryDefaults
from feedback_core.core.clock import Clock, LoopClock
from feedback_core.models.config import BackoffStrategy, RetryConfig
from feedback_core.utils.exceptions import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

OnRetry = Callable[[int, BaseException, int], Union[None, Awaitable[None]]]


def calculate_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    backoff: Union[BackoffStrategy, str],
    rng: Optional[random.Random] = None,
) -> int:
    """
    Calculate the delay after a failed attempt.

    The strategy delay is shifted by up to +/-10% of itself, then clamped
    to [0, max_delay] and rounded.

    Args:
        attempt: 1-based number of the attempt that just failed
        base_delay: Base delay in ms
        max_delay: Delay cap in ms
        backoff: fixed, linear or exponential
        rng: Random source for jitter (defaults to the ``random`` module)

    Returns:
        Delay in whole milliseconds

    Example:
        >>> calculate_delay(2, 100, 10_000, "exponential")  # ~200
    """
    strategy = BackoffStrategy(backoff)

    if strategy == BackoffStrategy.EXPONENTIAL:
        delay = base_delay * (2 ** (attempt - 1))
    elif strategy == BackoffStrategy.LINEAR:
        delay = base_delay * attempt
    else:
        delay = base_delay

    # Jitter to prevent thundering herd
    source = rng or random
    jitter = delay * RetryDefaults.JITTER_RATIO * source.uniform(-1.0, 1.0)
    delay = min(max(delay + jitter, 0), max_delay)

    return int(round(delay))


async def with_retry(
    fn: Callable[[], Union[T, Awaitable[T]]],
    config: Optional[RetryConfig] = None,
    *,
    on_retry: Optional[OnRetry] = None,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
    **overrides: Any,
) -> T:
    """
    Execute a function with retry logic.

    Args:
        fn: Zero-argument operation (plain or coroutine function)
        config: Retry policy; keyword overrides are applied on top
        on_retry: Awaited with (attempt, error, next_delay_ms) before each wait
        clock: Timer source used for the waits
        rng: Random source for jitter
        **overrides: RetryConfig fields, e.g. ``attempts=5``

    Returns:
        Result of the first successful attempt

    Raises:
        pydantic.ValidationError: If the overrides produce an invalid policy
        RetryExhaustedError: If every attempt failed
        Exception: The original error when ``retry_on`` rejects it
    """
    if config is None:
        config = RetryConfig(**overrides)
    elif overrides:
        config = RetryConfig.model_validate({**config.model_dump(), **overrides})

    clock = clock or LoopClock()
    last_error: Optional[BaseException] = None

    for attempt in range(1, config.attempts + 1):
        try:
            result = fn()
            if inspect.isawaitable(result):
                result = await result
            if attempt > 1:
                logger.info(f"Operation succeeded on attempt {attempt}/{config.attempts}")
            return result

        except Exception as e:
            last_error = e

            # Non-retryable errors propagate untouched
            if config.retry_on is not None and not config.retry_on(e):
                logger.debug(
                    "Error rejected by retry_on, not retrying",
                    extra={"attempt": attempt, "error_type": type(e).__name__},
                )
                raise

            if attempt >= config.attempts:
                break

            delay = calculate_delay(
                attempt, config.base_delay, config.max_delay, config.backoff, rng=rng
            )

            logger.warning(
                "Retrying operation",
                extra={
                    "attempt": attempt,
                    "max_attempts": config.attempts,
                    "delay_ms": delay,
                    "error": str(e),
                },
            )

            if on_retry is not None:
                hook_result = on_retry(attempt, e, delay)
                if inspect.isawaitable(hook_result):
                    await hook_result

            await clock.sleep(delay)

    logger.error(
        "Max retries exceeded",
        extra={"attempts": config.attempts, "error": str(last_error)},
    )
    raise RetryExhaustedError(config.attempts, last_error) from last_error


def create_retry_wrapper(
    fn: Callable[..., Awaitable[T]],
    config: Optional[RetryConfig] = None,
    **options: Any,
) -> Callable[..., Awaitable[T]]:
    """
    Wrap a coroutine function so every call goes through ``with_retry``.

    Example:
        >>> send = create_retry_wrapper(post_item, RetryConfig(attempts=5))
        >>> await send(item)
    """

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        return await with_retry(lambda: fn(*args, **kwargs), config, **options)

    return wrapper
