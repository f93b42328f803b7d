"""Error handler for awskit.

Retries single AWS calls on throttling and transient failures.
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar

from awskit.core.batch.backoff import compute_backoff_delay
from awskit.core.execution.error_classifier import ErrorClassifier
from awskit.core.logging import logger
from awskit.core.retry_config import RetryConfig

T = TypeVar("T")

ShouldRetry = Callable[[BaseException, int], bool]
OnRetry = Callable[[BaseException, int, float], None]


class ErrorHandler:
    """Retry wrapper for awaitable AWS calls.

    Uses full-jitter backoff: delay = uniform(0, min(max_delay, base_delay * 2 ** attempt)),
    where attempt is 0 for the first retry.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        should_retry: Optional[ShouldRetry] = None,
        on_retry: Optional[OnRetry] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        """Initialize ErrorHandler.

        Args:
            config: RetryConfig with retry behavior settings
            should_retry: Predicate (error, attempt) deciding whether to retry;
                defaults to ErrorClassifier.is_retryable with this config
            on_retry: Callback (error, attempt, delay_ms) invoked before each wait
            sleep: Awaitable sleep taking seconds
            rng: Random source for jitter
        """
        self.config = config or RetryConfig()
        self.should_retry = should_retry or (
            lambda error, attempt: ErrorClassifier.is_retryable(error, attempt, self.config)
        )
        self.on_retry = on_retry
        self._sleep = sleep
        self._rng = rng

    async def execute_with_retry(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Execute fn, retrying on retryable failures.

        Args:
            fn: Zero-argument coroutine function performing the call

        Returns:
            Whatever fn returns on its first successful attempt

        Raises:
            The last error once it is not retryable or attempts are exhausted
        """
        for attempt in range(self.config.max_attempts):
            try:
                return await fn()
            except Exception as e:
                if attempt + 1 >= self.config.max_attempts or not self.should_retry(e, attempt + 1):
                    raise

                delay_ms = compute_backoff_delay(
                    attempt, self.config.base_delay_ms, self.config.max_delay_ms, self._rng
                )
                logger.info(
                    "aws_call_retry",
                    attempt=attempt + 1,
                    max_attempts=self.config.max_attempts,
                    error_code=ErrorClassifier.error_code(e),
                    delay_ms=round(delay_ms, 1),
                )
                if self.on_retry is not None:
                    self.on_retry(e, attempt + 1, delay_ms)

                await self._sleep(delay_ms / 1000.0)

        raise RuntimeError("max_attempts must be at least 1")


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
    should_retry: Optional[ShouldRetry] = None,
    on_retry: Optional[OnRetry] = None,
) -> T:
    """Execute fn with automatic retry on throttling and transient errors.

    Example:
        >>> response = await retry_with_backoff(
        ...     lambda: asyncio.to_thread(client.describe_table, TableName="users"),
        ...     RetryConfig(max_attempts=5, base_delay_ms=200),
        ... )
    """
    handler = ErrorHandler(config, should_retry=should_retry, on_retry=on_retry)
    return await handler.execute_with_retry(fn)


def create_retry_wrapper(
    config: RetryConfig,
    should_retry: Optional[ShouldRetry] = None,
    on_retry: Optional[OnRetry] = None,
) -> Callable[[Callable[[], Awaitable[T]]], Awaitable[T]]:
    """Return a retry function bound to service-specific settings."""
    handler = ErrorHandler(config, should_retry=should_retry, on_retry=on_retry)
    return handler.execute_with_retry
