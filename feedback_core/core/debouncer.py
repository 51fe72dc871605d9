"""
Call-coalescing scheduler.

Collapses bursts of calls into a single execution of the wrapped
operation. Every caller gets a future for its own call, and all callers
attached to the same batch observe the same result or error.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from feedback_core.core.clock import Clock, LoopClock, TimerHandle
from feedback_core.utils.exceptions import CollectionCancelledError

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Debouncer(Generic[R]):
    """
    Debounce an operation with optional leading edge and hard deadline.

    Trailing mode (default):
        Each call replaces the pending arguments and re-arms a quiet-period
        timer of ``wait`` ms. The operation runs once, with the most recent
        arguments, after the caller has been quiet for ``wait``.

    Deadline:
        With ``max_wait`` set, a second timer is armed on the first buffered
        call of a burst and never re-armed. Whichever timer fires first runs
        the batch and cancels the other.

    Leading mode:
        The first call of a burst runs immediately with its own arguments.
        Calls that follow within the quiet period do not run immediately;
        they form a trailing batch that runs once when the burst goes quiet
        (or hits ``max_wait``). The burst ends, and the leading edge re-arms,
        after ``wait`` ms without calls.

    Example:
        >>> debouncer = Debouncer(save, wait=300, max_wait=1000)
        >>> results = await asyncio.gather(debouncer.call(1), debouncer.call(2))
        >>> # save(2) ran once and both callers received its result
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        wait: float,
        max_wait: Optional[float] = None,
        leading: bool = False,
        clock: Optional[Clock] = None,
        name: Optional[str] = None,
    ):
        """
        Initialize debouncer.

        Args:
            fn: Operation to run; may be a plain function or a coroutine function
            wait: Quiet period in milliseconds (0 coalesces same-tick calls)
            max_wait: Optional hard deadline in milliseconds
            leading: Fire on the leading edge of a burst
            clock: Timer source (defaults to the asyncio loop)
            name: Identifier used in log messages
        """
        if wait < 0:
            raise ValueError("wait must not be negative")
        if max_wait is not None and max_wait < 0:
            raise ValueError("max_wait must not be negative")

        self.fn = fn
        self.wait = wait
        self.max_wait = max_wait
        self.leading = leading
        self.name = name or getattr(fn, "__name__", "debounced")
        self._clock: Clock = clock or LoopClock()

        # Pending batch
        self._pending_args: Optional[tuple[tuple, dict]] = None
        self._waiters: list[asyncio.Future] = []
        self._leading_fired = False
        self._trailing_timer: Optional[TimerHandle] = None
        self._deadline_timer: Optional[TimerHandle] = None

        self._in_flight: set[asyncio.Task] = set()

        # Statistics
        self._stats = {
            "calls": 0,
            "executions": 0,
            "cancelled_calls": 0,
        }

    def call(self, *args: Any, **kwargs: Any) -> "asyncio.Future[R]":
        """
        Schedule a call and return a future for its outcome.

        Must be called from a running event loop.
        """
        waiter: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending_args = (args, kwargs)
        self._waiters.append(waiter)
        self._stats["calls"] += 1

        if self.leading and not self._leading_fired:
            self._leading_fired = True
            logger.debug(f"Debouncer {self.name}: leading edge")
            self._execute()
            # Burst window; the leading arguments are already consumed
            self._trailing_timer = self._clock.call_later(self.wait, self._on_timer)
            return waiter

        if self._trailing_timer is not None:
            self._trailing_timer.cancel()
        self._trailing_timer = self._clock.call_later(self.wait, self._on_timer)

        if self.max_wait is not None and self._deadline_timer is None:
            self._deadline_timer = self._clock.call_later(self.max_wait, self._on_timer)

        logger.debug(
            f"Debouncer {self.name}: buffered call",
            extra={"batch_size": len(self._waiters)},
        )
        return waiter

    __call__ = call

    async def flush(self) -> None:
        """
        Run the pending batch now, bypassing any remaining delay.

        Waits for the flushed execution to finish. Its outcome goes to the
        batch's callers, not to the flusher. No-op when nothing is pending.
        """
        if self._pending_args is None:
            return

        logger.debug(f"Debouncer {self.name}: flush", extra={"batch_size": len(self._waiters)})
        self._leading_fired = False
        task = self._execute()
        if task is not None:
            await task

    def cancel(self) -> None:
        """
        Discard the pending batch without running it.

        Every queued caller is rejected with CollectionCancelledError.
        Executions already in flight are not affected.
        """
        self._clear_timers()
        waiters = self._waiters
        self._pending_args = None
        self._waiters = []
        self._leading_fired = False

        if waiters:
            logger.debug(f"Debouncer {self.name}: cancelled", extra={"batch_size": len(waiters)})
        self._stats["cancelled_calls"] += len(waiters)

        error = CollectionCancelledError("Debounced call cancelled")
        for waiter in waiters:
            if not waiter.done():
                waiter.set_exception(error)

    @property
    def pending(self) -> bool:
        """True while a batch is buffered."""
        return self._pending_args is not None

    @property
    def in_flight(self) -> int:
        """Number of executions still running."""
        return len(self._in_flight)

    def get_statistics(self) -> dict:
        """Get call and execution counters."""
        return {
            "name": self.name,
            "pending": self.pending,
            "queued_callers": len(self._waiters),
            "in_flight": self.in_flight,
            **self._stats,
        }

    def _on_timer(self) -> None:
        """Quiet-period or deadline timer fired."""
        if self._pending_args is None:
            # Leading burst ended without follow-up calls
            self._clear_timers()
            self._leading_fired = False
            return

        self._leading_fired = False
        self._execute()

    def _execute(self) -> Optional[asyncio.Task]:
        """
        Run the pending batch.

        Pending state is snapshotted and cleared before the operation is
        invoked so calls arriving during execution start a new batch.
        """
        self._clear_timers()

        snapshot = self._pending_args
        waiters = self._waiters
        self._pending_args = None
        self._waiters = []

        if snapshot is None:
            return None

        args, kwargs = snapshot
        self._stats["executions"] += 1
        logger.debug(
            f"Debouncer {self.name}: executing",
            extra={"batch_size": len(waiters)},
        )

        try:
            result = self.fn(*args, **kwargs)
        except Exception as exc:
            self._settle(waiters, error=exc)
            return None

        if not inspect.isawaitable(result):
            self._settle(waiters, result=result)
            return None

        task = asyncio.ensure_future(self._await_result(result, waiters))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _await_result(self, awaitable: Any, waiters: list[asyncio.Future]) -> None:
        try:
            result = await awaitable
        except Exception as exc:
            self._settle(waiters, error=exc)
        else:
            self._settle(waiters, result=result)

    @staticmethod
    def _settle(
        waiters: list[asyncio.Future],
        result: Any = None,
        error: Optional[BaseException] = None,
    ) -> None:
        """Resolve or reject every waiter of one batch in a single step."""
        for waiter in waiters:
            if waiter.done():
                continue
            if error is not None:
                waiter.set_exception(error)
            else:
                waiter.set_result(result)

    def _clear_timers(self) -> None:
        if self._trailing_timer is not None:
            self._trailing_timer.cancel()
            self._trailing_timer = None
        if self._deadline_timer is not None:
            self._deadline_timer.cancel()
            self._deadline_timer = None

    def __repr__(self) -> str:
        return (
            f"Debouncer(name={self.name}, wait={self.wait}, max_wait={self.max_wait}, "
            f"leading={self.leading}, pending={self.pending})"
        )


def debounce(
    fn: Callable[..., Any],
    wait: float,
    max_wait: Optional[float] = None,
    leading: bool = False,
    clock: Optional[Clock] = None,
) -> Debouncer:
    """Create a debounced version of a function."""
    return Debouncer(fn, wait=wait, max_wait=max_wait, leading=leading, clock=clock)
