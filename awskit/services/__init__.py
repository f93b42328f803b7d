"""AWS service adapters.

- dynamodb: BatchWriteItem through the batch processor
- cloudwatch_logs: Log pattern extraction and anomaly detection
- cloudwatch_metrics: Logs Insights metric queries with summary and trends
"""

from awskit.services.cloudwatch_logs import (
    LogPatternAnalyzer,
    PatternAnalysisResult,
    detect_anomalies,
    extract_patterns,
    normalize_message,
)
from awskit.services.cloudwatch_metrics import (
    LogMetricsExtractor,
    LogMetricsResult,
    analyze_trends,
    calculate_metric_summary,
)
from awskit.services.dynamodb import DynamoDBBatchWriter, batch_write_items

__all__ = [
    "DynamoDBBatchWriter",
    "batch_write_items",
    "LogPatternAnalyzer",
    "PatternAnalysisResult",
    "normalize_message",
    "extract_patterns",
    "detect_anomalies",
    "LogMetricsExtractor",
    "LogMetricsResult",
    "calculate_metric_summary",
    "analyze_trends",
]
