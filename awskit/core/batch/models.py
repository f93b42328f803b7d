"""Batch processing models for awskit.

Type-safe models for batch execution options and results.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar, Union

from awskit.core.errors import BatchConfigurationError

T = TypeVar("T")


@dataclass
class BatchProcessorOptions:
    """Options controlling chunking, concurrency and retry."""

    batch_size: int = 25
    max_concurrency: int = 10
    max_retries: int = 3
    enable_retry: bool = True
    verbose: bool = False
    base_delay_ms: float = 1000.0
    max_delay_ms: float = 30_000.0

    def __post_init__(self):
        for name in ("batch_size", "max_concurrency"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise BatchConfigurationError(
                    f"{name} must be a positive integer, got {value!r}",
                    config_key=name,
                    expected="> 0",
                    actual=value,
                )
        if self.max_retries < 0:
            raise BatchConfigurationError(
                f"max_retries must be non-negative, got {self.max_retries!r}",
                config_key="max_retries",
                expected=">= 0",
                actual=self.max_retries,
            )
        if self.base_delay_ms < 0 or self.max_delay_ms < 0:
            raise BatchConfigurationError(
                "backoff delays must be non-negative",
                config_key="base_delay_ms/max_delay_ms",
            )

    @property
    def effective_max_retries(self) -> int:
        """Retry budget per batch; zero when retry is disabled."""
        return self.max_retries if self.enable_retry else 0


@dataclass
class BatchOutcome(Generic[T]):
    """Result of a single batch operation attempt."""

    processed: List[T] = field(default_factory=list)
    unprocessed: List[T] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def coerce(
        cls,
        value: Union["BatchOutcome[T]", Mapping[str, Any]],
        submitted: Optional[List[T]] = None,
    ) -> "BatchOutcome[T]":
        """Accept either a BatchOutcome or a mapping with processed/unprocessed keys.

        A mapping without a ``processed`` key counts every submitted item not
        listed under ``unprocessed`` as processed. Without ``submitted`` such a
        mapping is rejected.
        """
        if isinstance(value, BatchOutcome):
            return value
        if isinstance(value, Mapping):
            unprocessed = list(value.get("unprocessed") or [])
            if "processed" in value:
                processed = list(value["processed"] or [])
            elif submitted is not None:
                processed = list(submitted)
                for item in unprocessed:
                    if item in processed:
                        processed.remove(item)
                    elif processed:
                        processed.pop()
            else:
                raise TypeError("batch operation mapping is missing the 'processed' key")
            return cls(
                processed=processed,
                unprocessed=unprocessed,
                metadata=dict(value.get("metadata") or {}),
            )
        raise TypeError(
            f"batch operation must return BatchOutcome or mapping, got {type(value).__name__}"
        )


@dataclass
class BatchSettlement(Generic[T]):
    """Final state of one batch after all attempts."""

    batch_number: int
    processed: List[T]
    failed: List[T]
    attempts: int

    @property
    def retries(self) -> int:
        return max(self.attempts - 1, 0)


@dataclass
class BatchProcessResult(Generic[T]):
    """Aggregate result of BatchProcessor.process()."""

    processed: List[T] = field(default_factory=list)
    failed: List[T] = field(default_factory=list)
    total_batches: int = 0
    retries: int = 0

    @classmethod
    def create(cls, settlements: List[BatchSettlement[T]]) -> "BatchProcessResult[T]":
        """Fold per-batch settlements into an aggregate result."""
        result: BatchProcessResult[T] = cls(total_batches=len(settlements))
        for settlement in settlements:
            result.processed.extend(settlement.processed)
            result.failed.extend(settlement.failed)
            result.retries += settlement.retries
        return result

    @property
    def status(self) -> str:
        return "completed" if not self.failed else "completed_with_errors"
