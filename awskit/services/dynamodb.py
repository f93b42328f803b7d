"""DynamoDB batch write service for awskit.

Adapts BatchWriteItem to the BatchProcessor contract: each call reports which
records DynamoDB applied and which it returned in UnprocessedItems.
"""

import asyncio
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from awskit.core.batch import BatchOutcome, BatchProcessor
from awskit.core.errors import BatchAbortError, DynamoDBError
from awskit.core.execution import ErrorClassifier
from awskit.core.logging import logger
from awskit.core.retry_config import ErrorCategory
from awskit.infrastructure.aws import get_client
from awskit.models.dynamodb import BatchWriteItemRequest
from awskit.utils.file_processor import load_records
from awskit.utils.types import BatchWriteSummary, Record, WriteRequest

MAX_BATCH_WRITE_ITEMS = 25

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _to_dynamo_value(value: Any) -> Any:
    """Convert floats to Decimal recursively (TypeSerializer rejects float)."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_dynamo_value(v) for v in value]
    return value


def marshal_item(record: Record) -> Dict[str, Any]:
    """Marshal a plain record into DynamoDB attribute-value form."""
    return {key: _serializer.serialize(_to_dynamo_value(value)) for key, value in record.items()}


def unmarshal_item(item: Dict[str, Any]) -> Record:
    """Convert a DynamoDB attribute-value item back into a plain record."""
    return {key: _deserializer.deserialize(value) for key, value in item.items()}


def extract_unprocessed_items(response: Dict[str, Any], table_name: str) -> List[Dict[str, Any]]:
    """Pull marshalled PutRequest items for a table out of a BatchWriteItem response.

    Entries that are not well-formed PutRequests are ignored.
    """
    requests: List[WriteRequest] = (response.get("UnprocessedItems") or {}).get(table_name) or []
    items = []
    for request in requests:
        put_request = request.get("PutRequest") if isinstance(request, dict) else None
        item = put_request.get("Item") if isinstance(put_request, dict) else None
        if isinstance(item, dict):
            items.append(item)
    return items


class DynamoDBBatchWriter:
    """BatchWriteItem executor for a single table.

    The boto3 client is shared read-only across concurrent batches; each call
    runs in a worker thread so the event loop stays free.
    """

    def __init__(self, table_name: str, client: Any):
        """Initialize writer.

        Args:
            table_name: Target table
            client: boto3 DynamoDB client
        """
        self.table_name = table_name
        self.client = client

    async def write_batch(self, records: List[Record]) -> BatchOutcome[Record]:
        """Put up to 25 records in one BatchWriteItem call.

        Args:
            records: Records to write

        Returns:
            BatchOutcome splitting records into processed and unprocessed

        Raises:
            BatchAbortError: If DynamoDB rejects the request permanently
                (missing table, validation failure, access denied)
            ClientError: For throttling and other retryable failures
        """
        if len(records) > MAX_BATCH_WRITE_ITEMS:
            raise BatchAbortError(
                f"BatchWriteItem accepts at most {MAX_BATCH_WRITE_ITEMS} items, got {len(records)}",
                table_name=self.table_name,
            )

        marshalled = [marshal_item(record) for record in records]
        request_items = {self.table_name: [{"PutRequest": {"Item": item}} for item in marshalled]}

        try:
            response = await asyncio.to_thread(self.client.batch_write_item, RequestItems=request_items)
        except ClientError as e:
            if ErrorClassifier.categorize(e) == ErrorCategory.PERMANENT:
                raise BatchAbortError(
                    f"Batch write to '{self.table_name}' failed: {e}",
                    cause=DynamoDBError(
                        str(e), operation="batch-write-item", table_name=self.table_name, cause=e
                    ),
                    error_code=ErrorClassifier.error_code(e),
                ) from e
            raise

        # Compare plain values so number formatting and set ordering don't matter
        remaining = [unmarshal_item(item) for item in extract_unprocessed_items(response, self.table_name)]
        returned = [False] * len(records)

        for index, item in enumerate(marshalled):
            plain = unmarshal_item(item)
            if plain in remaining:
                remaining.remove(plain)
                returned[index] = True

        # Each unmatched entry still stands for one submitted record
        for index in reversed(range(len(records))):
            if not remaining:
                break
            if not returned[index]:
                returned[index] = True
                remaining.pop()

        if remaining:
            logger.warning(
                "dynamodb_unprocessed_surplus",
                table_name=self.table_name,
                submitted=len(records),
                surplus=len(remaining),
            )

        processed = [record for record, flag in zip(records, returned) if not flag]
        unprocessed = [record for record, flag in zip(records, returned) if flag]

        logger.debug(
            "dynamodb_batch_written",
            table_name=self.table_name,
            submitted=len(records),
            unprocessed=len(unprocessed),
        )
        return BatchOutcome(processed=processed, unprocessed=unprocessed)


async def batch_write_items(
    request: BatchWriteItemRequest,
    client: Optional[Any] = None,
    records: Optional[List[Record]] = None,
    progress: Optional[Callable[[str], None]] = None,
    processor: Optional[BatchProcessor] = None,
) -> BatchWriteSummary:
    """Load records and write them to DynamoDB through the batch processor.

    Args:
        request: Validated batch-write request
        client: boto3 DynamoDB client (built from region/profile if omitted)
        records: Pre-loaded records (loaded from request.input_file if omitted)
        progress: Progress callback for verbose output
        processor: Batch processor override

    Returns:
        BatchWriteSummary with processed/failed counts and failed records
    """
    if records is None:
        records = load_records(request.input_file)

    if client is None:
        client = get_client("dynamodb", region=request.region, profile=request.profile)

    writer = DynamoDBBatchWriter(request.table_name, client)
    processor = processor or BatchProcessor(request.processor_options(), progress=progress)

    try:
        result = await processor.process(records, writer.write_batch)
    except BatchAbortError as e:
        raise DynamoDBError(
            e.message,
            operation="batch-write-item",
            table_name=request.table_name,
            cause=e.cause,
        ) from e

    return {
        "table_name": request.table_name,
        "processed_items": len(result.processed),
        "failed_items": len(result.failed),
        "total_batches": result.total_batches,
        "retries": result.retries,
        "unprocessed_items": result.failed,
    }
