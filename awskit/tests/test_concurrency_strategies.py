"""Unit tests for concurrency strategies."""

import asyncio

import pytest

from awskit.core.batch import WindowConcurrencyStrategy, WorkerPoolConcurrencyStrategy
from awskit.core.errors import BatchConfigurationError

STRATEGIES = [WindowConcurrencyStrategy, WorkerPoolConcurrencyStrategy]


class InFlightTracker:
    """Records the maximum number of concurrently running tasks."""

    def __init__(self):
        self.current = 0
        self.peak = 0
        self.started = []

    def task(self, value, delay=0.001, fail=False):
        async def run():
            self.started.append(value)
            self.current += 1
            self.peak = max(self.peak, self.current)
            try:
                await asyncio.sleep(delay)
                if fail:
                    raise RuntimeError(f"task {value} failed")
                return value
            finally:
                self.current -= 1

        return run


@pytest.mark.parametrize("strategy_cls", STRATEGIES)
class TestConcurrencyStrategies:
    """Test behavior shared by all strategies."""

    @pytest.mark.asyncio
    async def test_results_in_submission_order(self, strategy_cls):
        """Test results come back in task order regardless of finish order."""
        tracker = InFlightTracker()
        tasks = [tracker.task(i, delay=0.001 * (10 - i)) for i in range(10)]

        results = await strategy_cls().run(tasks, 3)

        assert results == list(range(10))

    @pytest.mark.asyncio
    async def test_never_exceeds_max_concurrency(self, strategy_cls):
        """Test in-flight count stays within the limit."""
        tracker = InFlightTracker()
        tasks = [tracker.task(i) for i in range(12)]

        await strategy_cls().run(tasks, 4)

        assert tracker.peak == 4

    @pytest.mark.asyncio
    async def test_single_slot_is_sequential(self, strategy_cls):
        """Test max_concurrency=1 runs one task at a time."""
        tracker = InFlightTracker()

        await strategy_cls().run([tracker.task(i) for i in range(5)], 1)

        assert tracker.peak == 1
        assert tracker.started == list(range(5))

    @pytest.mark.asyncio
    async def test_each_task_started_once(self, strategy_cls):
        """Test no task runs twice."""
        tracker = InFlightTracker()

        await strategy_cls().run([tracker.task(i) for i in range(7)], 3)

        assert sorted(tracker.started) == list(range(7))

    @pytest.mark.asyncio
    async def test_empty_tasks(self, strategy_cls):
        """Test no tasks returns empty list."""
        assert await strategy_cls().run([], 5) == []

    @pytest.mark.asyncio
    async def test_error_propagates(self, strategy_cls):
        """Test the first task error is re-raised."""
        tracker = InFlightTracker()
        tasks = [tracker.task(0), tracker.task(1, fail=True), tracker.task(2)]

        with pytest.raises(RuntimeError, match="task 1 failed"):
            await strategy_cls().run(tasks, 2)

    @pytest.mark.asyncio
    async def test_error_stops_new_tasks(self, strategy_cls):
        """Test tasks after a failed window or slot are not started."""
        tracker = InFlightTracker()
        tasks = [tracker.task(0, fail=True)] + [tracker.task(i) for i in range(1, 10)]

        with pytest.raises(RuntimeError):
            await strategy_cls().run(tasks, 1)

        assert tracker.started == [0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_concurrency", [0, -2, True])
    async def test_invalid_max_concurrency_raises(self, strategy_cls, max_concurrency):
        """Test invalid limits raise before any task runs."""
        tracker = InFlightTracker()

        with pytest.raises(BatchConfigurationError):
            await strategy_cls().run([tracker.task(0)], max_concurrency)

        assert tracker.started == []


class TestWorkerPoolStrategy:
    """Test worker-pool specific behavior."""

    @pytest.mark.asyncio
    async def test_idle_worker_picks_next_task(self):
        """Test a slow task does not block the other slot."""
        order = []

        def task(value, delay):
            async def run():
                order.append(("start", value))
                await asyncio.sleep(delay)
                order.append(("end", value))
                return value

            return run

        tasks = [task(0, 0.05)] + [task(i, 0.001) for i in range(1, 5)]
        await WorkerPoolConcurrencyStrategy().run(tasks, 2)

        assert order.index(("start", 4)) < order.index(("end", 0))


class TestWindowStrategy:
    """Test window specific behavior."""

    @pytest.mark.asyncio
    async def test_waits_for_whole_window(self):
        """Test next window starts only after the slowest task of the previous one."""
        order = []

        def task(value, delay):
            async def run():
                order.append(("start", value))
                await asyncio.sleep(delay)
                order.append(("end", value))
                return value

            return run

        tasks = [task(0, 0.02), task(1, 0.001), task(2, 0.001)]
        await WindowConcurrencyStrategy().run(tasks, 2)

        assert order.index(("start", 2)) > order.index(("end", 0))
