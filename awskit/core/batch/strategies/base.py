"""Base concurrency strategy for batch dispatch.

Defines the strategy interface used by BatchProcessor to bound in-flight batches.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Sequence, TypeVar

from awskit.core.errors import BatchConfigurationError

R = TypeVar("R")

TaskFactory = Callable[[], Awaitable[R]]


class ConcurrencyStrategy(ABC):
    """Abstract base class for concurrency-limited task execution.

    Implementations:
    - WindowConcurrencyStrategy: Fixed windows awaited one after another
    - WorkerPoolConcurrencyStrategy: Workers pulling from a shared queue

    Contract: every task starts at most once, no more than max_concurrency run
    at a time, and results come back in submission order. If a task raises,
    no new tasks are started and the first error is re-raised once the tasks
    already running have settled.
    """

    name = "base"

    @abstractmethod
    async def run(self, tasks: Sequence[TaskFactory], max_concurrency: int) -> List[R]:
        """Run task factories with bounded concurrency.

        Args:
            tasks: Zero-argument callables returning awaitables
            max_concurrency: Maximum number of tasks in flight

        Returns:
            Task results in submission order
        """
        pass

    @staticmethod
    def _validate(max_concurrency: int) -> None:
        if isinstance(max_concurrency, bool) or not isinstance(max_concurrency, int) or max_concurrency <= 0:
            raise BatchConfigurationError(
                f"max_concurrency must be a positive integer, got {max_concurrency!r}",
                config_key="max_concurrency",
                expected="> 0",
                actual=max_concurrency,
            )
