"""Concurrency strategies for batch dispatch.

Strategy pattern implementation for bounding in-flight batch operations.
"""

from awskit.core.batch.strategies.base import ConcurrencyStrategy
from awskit.core.batch.strategies.pool_strategy import WorkerPoolConcurrencyStrategy
from awskit.core.batch.strategies.window_strategy import WindowConcurrencyStrategy

__all__ = [
    "ConcurrencyStrategy",
    "WindowConcurrencyStrategy",
    "WorkerPoolConcurrencyStrategy",
]
