"""Retry configuration for awskit.

Immutable configuration for AWS call retry behavior.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ErrorCategory(str, Enum):
    """Error categories for classification and retry decisions.

    - TRANSIENT: Temporary errors (network timeouts, service unavailable)
    - RATE_LIMIT: Throttling errors (need exponential backoff)
    - PERMANENT: Permanent errors (validation, missing resources, access denied)
    - UNKNOWN: Unknown errors (default to no retry)
    """

    TRANSIENT = "transient"
    RATE_LIMIT = "rate_limit"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior of single AWS calls.

    max_attempts counts the first call, so max_attempts=3 means up to two retries.
    """

    max_attempts: int = 3
    base_delay_ms: float = 100.0
    max_delay_ms: float = 20_000.0  # cap at 20 seconds
    retry_on: List[ErrorCategory] = field(
        default_factory=lambda: [ErrorCategory.TRANSIENT, ErrorCategory.RATE_LIMIT]
    )
