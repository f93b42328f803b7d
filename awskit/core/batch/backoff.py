"""Exponential backoff with full jitter.

delay = uniform(0, min(max_delay_ms, base_delay_ms * 2 ** attempt))
"""

import random
from typing import Optional

from awskit.core.errors import BatchConfigurationError


def max_backoff_delay(attempt: int, base_delay_ms: float, max_delay_ms: float) -> float:
    """Return the capped exponential delay for an attempt (the jitter upper bound).

    Args:
        attempt: Attempt number (1-indexed for batch retries, 0 allowed)
        base_delay_ms: Base delay in milliseconds
        max_delay_ms: Maximum delay in milliseconds

    Returns:
        Upper bound of the jittered delay in milliseconds

    Raises:
        BatchConfigurationError: If attempt or delays are negative
    """
    if attempt < 0:
        raise BatchConfigurationError(
            "attempt must be non-negative", config_key="attempt", expected=">= 0", actual=attempt
        )
    if base_delay_ms < 0 or max_delay_ms < 0:
        raise BatchConfigurationError(
            "backoff delays must be non-negative",
            config_key="base_delay_ms/max_delay_ms",
            expected=">= 0",
            actual=(base_delay_ms, max_delay_ms),
        )
    # Avoid float overflow for huge attempt counts
    if base_delay_ms == 0:
        return 0.0
    if attempt >= 64:
        return float(max_delay_ms)
    return float(min(max_delay_ms, base_delay_ms * (2**attempt)))


def compute_backoff_delay(
    attempt: int,
    base_delay_ms: float,
    max_delay_ms: float,
    rng: Optional[random.Random] = None,
) -> float:
    """Compute a full-jitter backoff delay in milliseconds.

    Args:
        attempt: Attempt number
        base_delay_ms: Base delay in milliseconds
        max_delay_ms: Maximum delay in milliseconds
        rng: Random source (defaults to the module-level generator)

    Returns:
        Delay between 0 and the capped exponential bound
    """
    cap = max_backoff_delay(attempt, base_delay_ms, max_delay_ms)
    return (rng or random).uniform(0, cap)
