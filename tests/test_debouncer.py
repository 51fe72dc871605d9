"""
Tests for the Debouncer.

Tests cover:
    - Trailing-edge coalescing with latest arguments
    - max_wait deadline
    - Leading-edge execution
    - flush() and cancel()
    - Shared outcome for every caller of a batch
"""

import asyncio

import pytest

from feedback_core.core.debouncer import Debouncer, debounce
from feedback_core.utils.exceptions import CollectionCancelledError


def make_operation(clock, calls: list):
    """Coroutine operation that records (args, time) of every execution."""

    async def operation(value):
        calls.append((value, clock.now()))
        return f"result-{value}"

    return operation


class TestTrailingEdge:
    """Test default trailing-edge coalescing."""

    @pytest.mark.asyncio
    async def test_burst_executes_once_with_latest_args(self, manual_clock):
        """Test calls at t=0,30,60 run once at t=160 with the t=60 arguments."""
        calls = []
        debouncer = Debouncer(make_operation(manual_clock, calls), wait=100, clock=manual_clock)

        first = debouncer.call("a")
        await manual_clock.advance(30)
        second = debouncer.call("b")
        await manual_clock.advance(30)
        third = debouncer.call("c")

        await manual_clock.advance(99)
        assert calls == []
        assert debouncer.pending is True

        await manual_clock.advance(1)
        assert calls == [("c", 160)]
        assert debouncer.pending is False

        assert await first == "result-c"
        assert await second == "result-c"
        assert await third == "result-c"

    @pytest.mark.asyncio
    async def test_separate_bursts_execute_separately(self, manual_clock):
        """Test calls separated by more than wait are not coalesced."""
        calls = []
        debouncer = Debouncer(make_operation(manual_clock, calls), wait=100, clock=manual_clock)

        first = debouncer.call(1)
        await manual_clock.advance(150)
        second = debouncer.call(2)
        await manual_clock.advance(150)

        assert calls == [(1, 100), (2, 250)]
        assert await first == "result-1"
        assert await second == "result-2"

    @pytest.mark.asyncio
    async def test_zero_wait_coalesces_same_tick_calls(self, manual_clock):
        """Test wait=0 still coalesces calls made in the same tick."""
        calls = []
        debouncer = Debouncer(make_operation(manual_clock, calls), wait=0, clock=manual_clock)

        futures = [debouncer.call(i) for i in range(3)]
        await manual_clock.advance(0)

        assert calls == [(2, 0)]
        assert [await f for f in futures] == ["result-2"] * 3

    @pytest.mark.realtime
    @pytest.mark.asyncio
    async def test_zero_wait_with_event_loop_timers(self):
        """Test next-tick coalescing against the real event loop."""
        calls = []

        async def operation(value):
            calls.append(value)
            return value * 10

        debouncer = debounce(operation, wait=0)
        results = await asyncio.gather(debouncer.call(1), debouncer.call(2), debouncer.call(3))

        assert calls == [3]
        assert results == [30, 30, 30]

    @pytest.mark.asyncio
    async def test_sync_operation_supported(self, manual_clock):
        """Test a plain function can be debounced."""
        debouncer = Debouncer(lambda x, y=0: x + y, wait=50, clock=manual_clock)

        future = debouncer.call(1, y=2)
        await manual_clock.advance(50)

        assert await future == 3

    @pytest.mark.asyncio
    async def test_calls_during_execution_start_new_batch(self, manual_clock):
        """Test a call made while the operation runs is not swallowed."""
        release = asyncio.Event()
        calls = []

        async def operation(value):
            calls.append(value)
            await release.wait()
            return value

        debouncer = Debouncer(operation, wait=100, clock=manual_clock)

        first = debouncer.call("a")
        await manual_clock.advance(100)
        assert calls == ["a"]
        assert debouncer.in_flight == 1

        second = debouncer.call("b")
        assert debouncer.pending is True

        release.set()
        assert await first == "a"
        assert not second.done()

        await manual_clock.advance(100)
        assert calls == ["a", "b"]
        assert await second == "b"


class TestMaxWait:
    """Test the max_wait deadline."""

    @pytest.mark.asyncio
    async def test_deadline_forces_execution(self, manual_clock):
        """Test continuous calls every 50ms still execute at t=200."""
        calls = []
        debouncer = Debouncer(
            make_operation(manual_clock, calls), wait=100, max_wait=200, clock=manual_clock
        )

        futures = []
        for i in range(4):
            futures.append(debouncer.call(i))
            await manual_clock.advance(50)

        assert calls == [(3, 200)]
        assert [await f for f in futures] == ["result-3"] * 4

    @pytest.mark.asyncio
    async def test_deadline_measured_from_first_call_of_each_burst(self, manual_clock):
        """Test the deadline is not re-armed by later calls in the same burst."""
        calls = []
        debouncer = Debouncer(
            make_operation(manual_clock, calls), wait=100, max_wait=200, clock=manual_clock
        )

        for i in range(8):
            debouncer.call(i)
            await manual_clock.advance(50)

        assert calls == [(3, 200), (7, 400)]

    @pytest.mark.asyncio
    async def test_quiet_period_wins_when_first(self, manual_clock):
        """Test the quiet-period timer fires before the deadline when calls stop."""
        calls = []
        debouncer = Debouncer(
            make_operation(manual_clock, calls), wait=100, max_wait=500, clock=manual_clock
        )

        debouncer.call("x")
        await manual_clock.advance(1000)

        assert calls == [("x", 100)]
        assert manual_clock.pending_timers == 0


class TestLeadingEdge:
    """Test leading-edge execution."""

    @pytest.mark.asyncio
    async def test_first_call_executes_immediately(self, manual_clock):
        """Test the leading call runs without waiting for a timer."""
        calls = []
        debouncer = Debouncer(
            make_operation(manual_clock, calls), wait=100, leading=True, clock=manual_clock
        )

        future = debouncer.call("a")
        await manual_clock.settle()

        assert calls == [("a", 0)]
        assert await future == "result-a"

    @pytest.mark.asyncio
    async def test_follow_up_calls_do_not_execute_immediately(self, manual_clock):
        """Test calls within the leading burst are coalesced into one trailing run."""
        calls = []
        debouncer = Debouncer(
            make_operation(manual_clock, calls), wait=100, leading=True, clock=manual_clock
        )

        leading = debouncer.call("a")
        await manual_clock.advance(10)
        second = debouncer.call("b")
        await manual_clock.advance(10)
        third = debouncer.call("c")
        await manual_clock.settle()

        assert calls == [("a", 0)]
        assert await leading == "result-a"

        await manual_clock.advance(100)

        assert calls == [("a", 0), ("c", 120)]
        assert await second == "result-c"
        assert await third == "result-c"

    @pytest.mark.asyncio
    async def test_lone_leading_call_runs_once(self, manual_clock):
        """Test a single leading call is not executed again on the trailing edge."""
        calls = []
        debouncer = Debouncer(
            make_operation(manual_clock, calls), wait=100, leading=True, clock=manual_clock
        )

        debouncer.call("a")
        await manual_clock.advance(500)

        assert calls == [("a", 0)]
        assert debouncer.pending is False

    @pytest.mark.asyncio
    async def test_leading_edge_rearms_after_quiet_period(self, manual_clock):
        """Test a new burst after the quiet period fires on its leading edge again."""
        calls = []
        debouncer = Debouncer(
            make_operation(manual_clock, calls), wait=100, leading=True, clock=manual_clock
        )

        debouncer.call("a")
        await manual_clock.advance(150)
        debouncer.call("b")
        await manual_clock.settle()

        assert calls == [("a", 0), ("b", 150)]


class TestFlushAndCancel:
    """Test flush() and cancel()."""

    @pytest.mark.asyncio
    async def test_flush_executes_pending_batch(self, manual_clock):
        """Test flush runs the batch without waiting for the timer."""
        calls = []
        debouncer = Debouncer(make_operation(manual_clock, calls), wait=100, clock=manual_clock)

        first = debouncer.call(1)
        second = debouncer.call(2)
        await debouncer.flush()

        assert calls == [(2, 0)]
        assert first.done() and second.done()
        assert await first == "result-2"

        # Timers were cleared with the batch
        await manual_clock.advance(200)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_flush_without_pending_is_noop(self, manual_clock):
        """Test flush does nothing when no batch is buffered."""
        calls = []
        debouncer = Debouncer(make_operation(manual_clock, calls), wait=100, clock=manual_clock)

        await debouncer.flush()

        assert calls == []

    @pytest.mark.asyncio
    async def test_flush_does_not_raise_batch_error(self, manual_clock):
        """Test a failing flushed batch rejects its callers, not the flusher."""

        async def operation(value):
            raise ValueError("boom")

        debouncer = Debouncer(operation, wait=100, clock=manual_clock)
        future = debouncer.call(1)

        await debouncer.flush()

        with pytest.raises(ValueError, match="boom"):
            await future

    @pytest.mark.asyncio
    async def test_cancel_rejects_queued_callers(self, manual_clock):
        """Test cancel rejects every queued caller and clears pending state."""
        calls = []
        debouncer = Debouncer(make_operation(manual_clock, calls), wait=100, clock=manual_clock)

        first = debouncer.call(1)
        second = debouncer.call(2)
        debouncer.cancel()

        assert debouncer.pending is False
        for future in (first, second):
            with pytest.raises(CollectionCancelledError, match="cancelled"):
                await future

        await manual_clock.advance(500)
        assert calls == []
        assert debouncer.get_statistics()["cancelled_calls"] == 2

    @pytest.mark.asyncio
    async def test_cancel_does_not_affect_in_flight_execution(self, manual_clock):
        """Test an execution already running still resolves its callers."""
        release = asyncio.Event()

        async def operation(value):
            await release.wait()
            return value

        debouncer = Debouncer(operation, wait=10, clock=manual_clock)
        future = debouncer.call("kept")
        await manual_clock.advance(10)

        debouncer.cancel()
        release.set()

        assert await future == "kept"


class TestSharedOutcome:
    """Test every caller of a batch sees the same outcome."""

    @pytest.mark.asyncio
    async def test_failure_rejects_all_callers_with_same_error(self, manual_clock):
        """Test a failing execution rejects every waiter with one error object."""

        async def operation(value):
            raise RuntimeError(f"failed on {value}")

        debouncer = Debouncer(operation, wait=100, clock=manual_clock)
        futures = [debouncer.call(i) for i in range(3)]
        await manual_clock.advance(100)

        errors = []
        for future in futures:
            with pytest.raises(RuntimeError, match="failed on 2") as exc_info:
                await future
            errors.append(exc_info.value)

        assert errors[0] is errors[1] is errors[2]

    @pytest.mark.asyncio
    async def test_statistics(self, manual_clock):
        """Test call and execution counters."""
        debouncer = Debouncer(lambda x: x, wait=100, clock=manual_clock, name="stats")

        for i in range(5):
            debouncer.call(i)
        await manual_clock.advance(100)

        stats = debouncer.get_statistics()
        assert stats["name"] == "stats"
        assert stats["calls"] == 5
        assert stats["executions"] == 1
        assert stats["pending"] is False

    def test_negative_wait_rejected(self):
        """Test invalid timing configuration."""
        with pytest.raises(ValueError):
            Debouncer(lambda: None, wait=-1)
        with pytest.raises(ValueError):
            Debouncer(lambda: None, wait=10, max_wait=-5)
