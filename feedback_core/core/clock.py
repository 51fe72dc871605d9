"""
Clock abstraction for timer-driven components.

The debouncer and the retry executor never touch the event loop's timers
directly; they go through a Clock so the same state machines run against
real time (LoopClock) or simulated time (ManualClock) in tests.
All durations are milliseconds.
"""

import asyncio
import heapq
import itertools
import time
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    """Cancellable delayed callback."""

    def cancel(self) -> None:
        ...


class Clock(Protocol):
    """Monotonic time source with cancellable delayed callbacks."""

    def now(self) -> float:
        """Current monotonic time in milliseconds."""
        ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule ``callback`` to run after ``delay_ms``."""
        ...

    async def sleep(self, delay_ms: float) -> None:
        """Suspend the current coroutine for ``delay_ms``."""
        ...


class LoopClock:
    """Clock backed by the running asyncio event loop."""

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(max(delay_ms, 0) / 1000.0, callback)

    async def sleep(self, delay_ms: float) -> None:
        await asyncio.sleep(max(delay_ms, 0) / 1000.0)

    def __repr__(self) -> str:
        return "LoopClock()"


class ManualTimer:
    """Timer registered on a ManualClock."""

    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "fired" if self.fired else "armed"
        return f"ManualTimer(deadline={self.deadline}, {state})"


class ManualClock:
    """
    Simulated clock for deterministic timing tests.

    Time only moves when ``advance`` is awaited. Due timers fire in
    deadline order (ties in scheduling order) and the event loop is given
    a chance to run between firings, so coroutines woken by one timer
    finish their work before the next timer fires.

    Example:
        >>> clock = ManualClock()
        >>> debouncer = Debouncer(fn, wait=100, clock=clock)
        >>> future = debouncer.call("a")
        >>> await clock.advance(100)
        >>> assert future.done()
    """

    def __init__(self, start: float = 0.0, settle_rounds: int = 50):
        self._now = float(start)
        self._settle_rounds = settle_rounds
        self._queue: list[tuple[float, int, ManualTimer]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self._now + max(delay_ms, 0), callback)
        heapq.heappush(self._queue, (timer.deadline, next(self._sequence), timer))
        return timer

    async def sleep(self, delay_ms: float) -> None:
        future = asyncio.get_running_loop().create_future()

        def _wake() -> None:
            if not future.done():
                future.set_result(None)

        timer = self.call_later(delay_ms, _wake)
        try:
            await future
        finally:
            timer.cancel()

    @property
    def pending_timers(self) -> int:
        """Number of armed timers that have not fired or been cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def next_deadline(self) -> Optional[float]:
        """Deadline of the earliest armed timer, if any."""
        self._discard_cancelled()
        return self._queue[0][0] if self._queue else None

    async def settle(self) -> None:
        """Let ready callbacks and woken coroutines run without moving time."""
        for _ in range(self._settle_rounds):
            await asyncio.sleep(0)

    async def advance(self, delay_ms: float) -> None:
        """Move time forward by ``delay_ms``, firing every timer that comes due."""
        if delay_ms < 0:
            raise ValueError("Cannot move a clock backwards")

        target = self._now + delay_ms
        await self.settle()

        while True:
            self._discard_cancelled()
            if not self._queue or self._queue[0][0] > target:
                break
            deadline, _, timer = heapq.heappop(self._queue)
            self._now = max(self._now, deadline)
            timer.fired = True
            timer.callback()
            await self.settle()

        self._now = target
        await self.settle()

    async def advance_to(self, timestamp_ms: float) -> None:
        """Move time forward to an absolute timestamp."""
        await self.advance(max(timestamp_ms - self._now, 0))

    def _discard_cancelled(self) -> None:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)

    def __repr__(self) -> str:
        return f"ManualClock(now={self._now}, pending_timers={self.pending_timers})"
