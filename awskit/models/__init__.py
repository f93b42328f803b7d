"""Pydantic request models for awskit commands.

- base: Shared AWS client fields (region, profile, format, verbose)
- dynamodb: Batch write requests
- cloudwatch_logs: Pattern analysis and metrics requests
"""

from awskit.models.base import BaseAwsRequest
from awskit.models.cloudwatch_logs import AnalyzePatternsRequest, ExtractMetricsRequest
from awskit.models.dynamodb import BatchWriteItemRequest

__all__ = [
    "BaseAwsRequest",
    "BatchWriteItemRequest",
    "AnalyzePatternsRequest",
    "ExtractMetricsRequest",
]
