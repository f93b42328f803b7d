"""Type definitions for awskit.

TypedDict classes for AWS request/response shapes and command summaries.
"""

from typing import Any, Dict, List, Optional, TypedDict

Record = Dict[str, Any]


# DynamoDB shapes


class PutRequest(TypedDict):
    """DynamoDB PutRequest (attribute-value marshalled Item)."""

    Item: Dict[str, Any]


class WriteRequest(TypedDict, total=False):
    """DynamoDB WriteRequest entry."""

    PutRequest: PutRequest
    DeleteRequest: Dict[str, Any]


class BatchWriteSummary(TypedDict):
    """Summary returned by the batch-write-item command."""

    table_name: str
    processed_items: int
    failed_items: int
    total_batches: int
    retries: int
    unprocessed_items: List[Record]


# CloudWatch Logs shapes


class LogEvent(TypedDict, total=False):
    """Filtered log event."""

    timestamp: int
    message: str
    logStreamName: str
    eventId: str


class LogPattern(TypedDict):
    """Normalized log pattern with frequency statistics."""

    pattern: str
    count: int
    percentage: float
    examples: List[str]
    first_seen: Optional[str]
    last_seen: Optional[str]


class PatternAnomaly(TypedDict):
    """Pattern occurring unusually often."""

    pattern: str
    count: int
    percentage: float
    anomaly_type: str
    severity: str
    description: str


# CloudWatch Logs Insights metrics

# Flat row of an Insights aggregation: "timestamp" plus one key per result field
MetricDataPoint = Dict[str, Any]


class MetricSummary(TypedDict):
    """Summary statistics over a metric series."""

    total_data_points: int
    time_span: str
    average_value: float
    min_value: float
    max_value: float
    trend: str


class MetricTrend(TypedDict):
    """Direction and size of change in a metric series."""

    metric: str
    direction: str
    magnitude: float
    confidence: str
    description: str
