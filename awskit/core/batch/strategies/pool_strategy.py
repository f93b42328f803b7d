"""Worker-pool concurrency strategy.

max_concurrency workers pull the next pending task from a shared asyncio.Queue
until it is exhausted, so a slow task never holds back an idle slot.
"""

import asyncio
from typing import Dict, List, Optional, Sequence, Tuple

from awskit.core.batch.strategies.base import ConcurrencyStrategy, R, TaskFactory
from awskit.core.logging import logger


class WorkerPoolConcurrencyStrategy(ConcurrencyStrategy):
    """Bounded worker pool over a shared queue."""

    name = "worker_pool"

    async def run(self, tasks: Sequence[TaskFactory], max_concurrency: int) -> List[R]:
        self._validate(max_concurrency)
        if not tasks:
            return []

        queue: "asyncio.Queue[Tuple[int, TaskFactory]]" = asyncio.Queue()
        for index, factory in enumerate(tasks):
            queue.put_nowait((index, factory))

        results: Dict[int, R] = {}
        errors: List[BaseException] = []
        worker_count = min(max_concurrency, len(tasks))

        async def worker(worker_id: int) -> None:
            while not errors:
                try:
                    index, factory = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                try:
                    results[index] = await factory()
                except Exception as e:
                    logger.warning(
                        "concurrency_task_failed",
                        worker_id=worker_id,
                        task_index=index,
                        error=str(e),
                    )
                    errors.append(e)
                finally:
                    queue.task_done()

        logger.debug("worker_pool_started", workers=worker_count, total_tasks=len(tasks))
        await asyncio.gather(*[worker(i) for i in range(worker_count)])

        first_error: Optional[BaseException] = errors[0] if errors else None
        if first_error is not None:
            raise first_error

        return [results[i] for i in range(len(tasks))]
