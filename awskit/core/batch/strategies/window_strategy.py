"""Fixed-window concurrency strategy.

Starts up to max_concurrency tasks with asyncio.gather() and waits for the
whole window before starting the next one.
"""

import asyncio
from typing import List, Sequence

from awskit.core.batch.strategies.base import ConcurrencyStrategy, R, TaskFactory
from awskit.core.logging import logger


class WindowConcurrencyStrategy(ConcurrencyStrategy):
    """Process tasks in windows of max_concurrency.

    Simple, at the cost of idle slots when task durations vary within a window.
    """

    name = "window"

    async def run(self, tasks: Sequence[TaskFactory], max_concurrency: int) -> List[R]:
        self._validate(max_concurrency)
        results: List[R] = []

        for start in range(0, len(tasks), max_concurrency):
            window = tasks[start : start + max_concurrency]
            logger.debug(
                "concurrency_window_started",
                window_start=start,
                window_size=len(window),
                total_tasks=len(tasks),
            )

            outcomes = await asyncio.gather(
                *[factory() for factory in window], return_exceptions=True
            )

            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome
            results.extend(outcomes)

        return results
