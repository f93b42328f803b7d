"""Split items into fixed-size batches preserving order."""

from typing import List, Sequence, TypeVar

from awskit.core.errors import BatchConfigurationError

T = TypeVar("T")


def chunk_items(items: Sequence[T], batch_size: int) -> List[List[T]]:
    """Split items into ordered batches of at most batch_size.

    Args:
        items: Items to split
        batch_size: Maximum items per batch (must be a positive integer)

    Returns:
        List of batches; the last one holds the remainder

    Raises:
        BatchConfigurationError: If batch_size is not a positive integer
    """
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
        raise BatchConfigurationError(
            f"batch_size must be a positive integer, got {batch_size!r}",
            config_key="batch_size",
            expected="> 0",
            actual=batch_size,
        )
    items = list(items)
    return [items[i : i + batch_size] for i in range(0, len(items), batch_size)]
