"""DynamoDB-related Pydantic models for awskit."""

from pydantic import Field

from awskit.core.batch.models import BatchProcessorOptions
from awskit.models.base import BaseAwsRequest

TABLE_NAME_PATTERN = r"^[a-zA-Z0-9_.-]+$"


class BatchWriteItemRequest(BaseAwsRequest):
    """Request for `dynamodb batch-write-item`."""

    table_name: str = Field(
        ...,
        min_length=3,
        max_length=255,
        pattern=TABLE_NAME_PATTERN,
        description="Name of the DynamoDB table",
    )
    input_file: str = Field(..., min_length=1, description="Input file path (CSV, JSON, or JSONL)")
    batch_size: int = Field(25, ge=1, le=25, description="Items per BatchWriteItem request")
    max_concurrency: int = Field(10, ge=1, le=20, description="Maximum concurrent batch requests")
    enable_retry: bool = Field(True, description="Retry unprocessed items")
    max_retries: int = Field(3, ge=0, le=10, description="Maximum retry attempts per batch")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "table_name": "users",
                    "input_file": "users.csv",
                    "batch_size": 25,
                    "max_concurrency": 5,
                }
            ]
        }
    }

    def processor_options(self) -> BatchProcessorOptions:
        """Build batch processor options from this request."""
        return BatchProcessorOptions(
            batch_size=self.batch_size,
            max_concurrency=self.max_concurrency,
            max_retries=self.max_retries,
            enable_retry=self.enable_retry,
            verbose=self.verbose,
        )
