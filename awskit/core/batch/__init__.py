"""Batch processing module for awskit.

Provides chunking, bounded concurrency and retry for bulk AWS operations.

Components:
- BatchProcessor: Main orchestrator
- BatchProcessorOptions / BatchOutcome / BatchProcessResult: Type-safe models
- chunk_items: Order-preserving chunker
- compute_backoff_delay: Full-jitter exponential backoff
- ConcurrencyStrategy: Strategy interface (window or worker pool)
"""

from awskit.core.batch.backoff import compute_backoff_delay, max_backoff_delay
from awskit.core.batch.chunker import chunk_items
from awskit.core.batch.models import (
    BatchOutcome,
    BatchProcessorOptions,
    BatchProcessResult,
    BatchSettlement,
)
from awskit.core.batch.processor import BatchProcessor
from awskit.core.batch.strategies import (
    ConcurrencyStrategy,
    WindowConcurrencyStrategy,
    WorkerPoolConcurrencyStrategy,
)

__all__ = [
    "BatchProcessor",
    "BatchProcessorOptions",
    "BatchOutcome",
    "BatchProcessResult",
    "BatchSettlement",
    "chunk_items",
    "compute_backoff_delay",
    "max_backoff_delay",
    "ConcurrencyStrategy",
    "WindowConcurrencyStrategy",
    "WorkerPoolConcurrencyStrategy",
]
