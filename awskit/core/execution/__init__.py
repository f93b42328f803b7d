"""Execution module for awskit.

Provides error classification and retry for single AWS calls.
"""

from awskit.core.execution.error_classifier import ErrorClassifier
from awskit.core.execution.error_handler import (
    ErrorHandler,
    create_retry_wrapper,
    retry_with_backoff,
)

__all__ = ["ErrorClassifier", "ErrorHandler", "create_retry_wrapper", "retry_with_backoff"]
