"""Error hierarchy for awskit.

Every error carries a stable code and a metadata dict so the CLI can render
it consistently in text or JSON output.

- AwsKitError: Base class
- ValidationError: Bad user input or input files
- ConfigurationError: Invalid configuration (batch sizes, concurrency, ...)
- ServiceError: AWS service call failures
- BatchAbortError: Raised by a batch operation to stop the whole run
"""

from typing import Any, Dict, Optional


class AwsKitError(Exception):
    """Base error with code and metadata."""

    code = "AWSKIT_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, **metadata: Any):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.metadata: Dict[str, Any] = {k: v for k, v in metadata.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error for JSON output."""
        return {
            "error": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "metadata": {k: str(v) if isinstance(v, BaseException) else v for k, v in self.metadata.items()},
        }


class ValidationError(AwsKitError):
    """User input or input data failed validation."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **metadata: Any):
        super().__init__(message, field=field, value=value, **metadata)
        self.field = field


class ConfigurationError(AwsKitError):
    """Configuration is invalid, missing or incompatible."""

    code = "CONFIGURATION_ERROR"

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected: Any = None,
        actual: Any = None,
        **metadata: Any,
    ):
        super().__init__(
            message, config_key=config_key, expected=expected, actual=actual, **metadata
        )
        self.config_key = config_key


class BatchConfigurationError(ConfigurationError, ValueError):
    """Batch processing options are invalid (raised before any batch runs)."""


class ServiceError(AwsKitError):
    """AWS service operation failed."""

    code = "SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **metadata: Any,
    ):
        super().__init__(message, service=service, operation=operation, cause=cause, **metadata)
        self.service = service
        self.operation = operation
        self.cause = cause


class DynamoDBError(ServiceError):
    """DynamoDB operation failed."""

    code = "DYNAMODB_ERROR"

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **metadata: Any,
    ):
        super().__init__(
            message,
            service="dynamodb",
            operation=operation,
            cause=cause,
            table_name=table_name,
            **metadata,
        )
        self.table_name = table_name


class CloudWatchLogsError(ServiceError):
    """CloudWatch Logs operation failed."""

    code = "CLOUDWATCH_LOGS_ERROR"

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        log_group_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **metadata: Any,
    ):
        super().__init__(
            message,
            service="logs",
            operation=operation,
            cause=cause,
            log_group_name=log_group_name,
            **metadata,
        )
        self.log_group_name = log_group_name


class BatchAbortError(AwsKitError):
    """Fatal batch failure; propagates out of BatchProcessor.process()."""

    code = "BATCH_ABORTED"

    def __init__(self, message: str, cause: Optional[BaseException] = None, **metadata: Any):
        super().__init__(message, cause=cause, **metadata)
        self.cause = cause
