"""Error classifier for awskit.

Classifies AWS errors into categories for retry decisions.
"""

import asyncio

from botocore.exceptions import (
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from awskit.core.retry_config import ErrorCategory, RetryConfig

RATE_LIMIT_CODES = frozenset(
    {
        "ThrottlingException",
        "Throttling",
        "TooManyRequestsException",
        "ProvisionedThroughputExceededException",
        "RequestLimitExceeded",
    }
)

TRANSIENT_CODES = frozenset(
    {
        "RequestTimeout",
        "RequestTimeoutException",
        "ServiceUnavailable",
        "ServiceUnavailableException",
        "InternalServerError",
        "InternalFailure",
        "NetworkingError",
    }
)

PERMANENT_CODES = frozenset(
    {
        "ValidationException",
        "ResourceNotFoundException",
        "AccessDeniedException",
        "UnrecognizedClientException",
        "InvalidParameterException",
        "ConditionalCheckFailedException",
    }
)


class ErrorClassifier:
    """Classifies errors into categories for retry decisions.

    Static methods for stateless classification.
    """

    @staticmethod
    def error_code(error: BaseException) -> str:
        """Extract the AWS error code, falling back to the exception class name.

        Args:
            error: Exception to inspect

        Returns:
            Error code string (e.g. "ThrottlingException")
        """
        if isinstance(error, ClientError):
            code = error.response.get("Error", {}).get("Code")
            if code:
                return str(code)
        return type(error).__name__

    @staticmethod
    def categorize(error: BaseException) -> ErrorCategory:
        """Categorize an error into TRANSIENT, RATE_LIMIT, PERMANENT, or UNKNOWN.

        Args:
            error: Exception to categorize

        Returns:
            ErrorCategory enum value
        """
        # Network-level failures never reached the service
        if isinstance(
            error,
            (
                asyncio.TimeoutError,
                ConnectTimeoutError,
                ReadTimeoutError,
                EndpointConnectionError,
                ConnectionClosedError,
            ),
        ):
            return ErrorCategory.TRANSIENT

        code = ErrorClassifier.error_code(error)

        if code in RATE_LIMIT_CODES:
            return ErrorCategory.RATE_LIMIT

        if code in TRANSIENT_CODES:
            return ErrorCategory.TRANSIENT

        if isinstance(error, ClientError):
            status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if code in PERMANENT_CODES:
                return ErrorCategory.PERMANENT
            if status in (500, 502, 503, 504):
                return ErrorCategory.TRANSIENT
            if status == 429:
                return ErrorCategory.RATE_LIMIT
            if status is not None and 400 <= status < 500:
                return ErrorCategory.PERMANENT

        # Permanent validation errors
        if isinstance(error, ValueError):
            return ErrorCategory.PERMANENT

        # Default to unknown (no retry)
        return ErrorCategory.UNKNOWN

    @staticmethod
    def is_retryable(error: BaseException, attempt: int, config: RetryConfig = RetryConfig()) -> bool:
        """Decide whether a failed call should be attempted again.

        Args:
            error: Exception raised by the call
            attempt: Attempt number that just failed (1-indexed)
            config: Retry configuration

        Returns:
            True if attempts remain and the error category is retryable
        """
        if attempt >= config.max_attempts:
            return False
        return ErrorClassifier.categorize(error) in config.retry_on
