"""Batch processor for awskit.

Main orchestrator for bulk AWS operations: chunks items, dispatches batches
through a concurrency strategy, retries partial failures with backoff and folds
the outcome into processed/failed lists.
"""

import asyncio
import random
from typing import Awaitable, Callable, Generic, List, Mapping, Optional, Sequence, TypeVar, Union

from awskit.core.batch.backoff import compute_backoff_delay
from awskit.core.batch.chunker import chunk_items
from awskit.core.batch.models import (
    BatchOutcome,
    BatchProcessorOptions,
    BatchProcessResult,
    BatchSettlement,
)
from awskit.core.batch.strategies import ConcurrencyStrategy, WorkerPoolConcurrencyStrategy
from awskit.core.errors import BatchAbortError
from awskit.core.logging import logger

T = TypeVar("T")

BatchOperation = Callable[[List[T]], Awaitable[Union[BatchOutcome[T], Mapping]]]
ProgressCallback = Callable[[str], None]


class BatchProcessor(Generic[T]):
    """Orchestrates chunked, concurrency-limited batch operations with retry.

    The batch operation is supplied by the caller and wraps the actual remote
    call plus the extraction of unprocessed items from the provider response,
    so the same machinery serves any bulk API that reports partial failures.
    """

    def __init__(
        self,
        options: Optional[BatchProcessorOptions] = None,
        progress: Optional[ProgressCallback] = None,
        strategy: Optional[ConcurrencyStrategy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        """Initialize batch processor.

        Args:
            options: Chunking, concurrency and retry options
            progress: Callback receiving progress strings when verbose is set
            strategy: Concurrency strategy (worker pool by default)
            sleep: Awaitable sleep taking seconds, injectable for tests
            rng: Random source for backoff jitter
        """
        self.options = options or BatchProcessorOptions()
        self.progress = progress
        self.strategy = strategy or WorkerPoolConcurrencyStrategy()
        self._sleep = sleep
        self._rng = rng

    async def process(self, items: Sequence[T], batch_operation: BatchOperation) -> BatchProcessResult[T]:
        """Process items in batches with retry logic.

        Args:
            items: Items to process
            batch_operation: Coroutine function executing one batch

        Returns:
            BatchProcessResult with processed and permanently failed items

        Raises:
            BatchConfigurationError: If options are invalid
            BatchAbortError: If the batch operation signals a fatal failure
        """
        batches = chunk_items(items, self.options.batch_size)
        if not batches:
            return BatchProcessResult()

        total = len(batches)
        logger.info(
            "batch_processing_started",
            total_items=len(items),
            total_batches=total,
            batch_size=self.options.batch_size,
            max_concurrency=self.options.max_concurrency,
            max_retries=self.options.effective_max_retries,
            strategy=self.strategy.name,
        )
        self._log_verbose(f"Processing {total} batches of up to {self.options.batch_size} items each...")

        tasks = [
            self._task_for(batch, number, total, batch_operation)
            for number, batch in enumerate(batches, start=1)
        ]
        settlements = await self.strategy.run(tasks, self.options.max_concurrency)

        result = BatchProcessResult.create(settlements)
        logger.info(
            "batch_processing_completed",
            total_batches=total,
            processed=len(result.processed),
            failed=len(result.failed),
            retries=result.retries,
        )
        return result

    def _task_for(self, batch: List[T], number: int, total: int, batch_operation: BatchOperation):
        async def run() -> BatchSettlement[T]:
            return await self._process_single_batch(batch, number, total, batch_operation)

        return run

    async def _process_single_batch(
        self,
        batch: List[T],
        batch_number: int,
        total_batches: int,
        batch_operation: BatchOperation,
    ) -> BatchSettlement[T]:
        """Run one batch through the retry state machine.

        Args:
            batch: Items in this batch
            batch_number: 1-indexed batch number for logging
            total_batches: Total number of batches
            batch_operation: Coroutine function executing one batch

        Returns:
            BatchSettlement with processed and failed items for this batch
        """
        max_retries = self.options.effective_max_retries
        pending = list(batch)
        processed: List[T] = []
        attempt = 0

        while True:
            attempt += 1
            outcome = await self._execute_attempt(pending, batch_number, total_batches, batch_operation)
            if outcome is not None:
                processed.extend(outcome.processed)
                pending = list(outcome.unprocessed)
                self._log_verbose(
                    f"Batch {batch_number}/{total_batches}: Processed {len(processed)}/{len(batch)} items"
                )

            retries_done = attempt - 1
            if not pending or retries_done >= max_retries:
                break

            delay_ms = compute_backoff_delay(
                attempt, self.options.base_delay_ms, self.options.max_delay_ms, self._rng
            )
            logger.debug(
                "batch_retry_scheduled",
                batch_number=batch_number,
                retry=attempt,
                pending=len(pending),
                delay_ms=round(delay_ms, 1),
            )
            self._log_verbose(
                f"Batch {batch_number}/{total_batches}: retry attempt {attempt}/{max_retries} "
                f"for {len(pending)} items"
            )
            await self._sleep(delay_ms / 1000.0)

        if pending:
            logger.warning(
                "batch_items_failed",
                batch_number=batch_number,
                failed=len(pending),
                retries=attempt - 1,
            )
            self._log_verbose(
                f"Batch {batch_number}/{total_batches}: {len(pending)} items failed after {attempt - 1} retries"
            )

        return BatchSettlement(
            batch_number=batch_number,
            processed=processed,
            failed=pending,
            attempts=attempt,
        )

    async def _execute_attempt(
        self,
        items: List[T],
        batch_number: int,
        total_batches: int,
        batch_operation: BatchOperation,
    ) -> Optional[BatchOutcome[T]]:
        """Execute a single attempt.

        Returns None when the operation raised, leaving every item pending.
        """
        try:
            return BatchOutcome.coerce(await batch_operation(list(items)), submitted=items)
        except BatchAbortError:
            logger.error("batch_aborted", batch_number=batch_number)
            raise
        except Exception as e:
            logger.warning(
                "batch_attempt_failed",
                batch_number=batch_number,
                items=len(items),
                error=str(e),
                error_type=type(e).__name__,
            )
            self._log_verbose(f"Batch {batch_number}/{total_batches} failed: {e}")
            return None

    def _log_verbose(self, message: str) -> None:
        if self.options.verbose and self.progress is not None:
            self.progress(message)
