"""CloudWatch Logs metrics extraction for awskit.

Runs a Logs Insights aggregation (error rate, performance, volume or a custom
query) over a log group and summarises the resulting time series.
"""

import asyncio
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from awskit.core.errors import AwsKitError, CloudWatchLogsError
from awskit.core.execution import retry_with_backoff
from awskit.core.logging import logger
from awskit.core.retry_config import RetryConfig
from awskit.services.cloudwatch_logs import DEFAULT_LOOKBACK
from awskit.utils.types import MetricDataPoint, MetricSummary, MetricTrend

METRIC_TYPES = ("error-rate", "performance", "volume", "custom")
GROUP_BY_OPTIONS = ("minute", "hour", "day")

DEFAULT_ERROR_PATTERNS = ["ERROR", "error", "exception"]
DEFAULT_PERFORMANCE_FIELDS = ["duration", "response_time", "latency"]

QUERY_RESULT_LIMIT = 1000
POLL_INTERVAL_SECONDS = 5.0
MAX_POLLS = 120

# Insights bin() width and the bucket length it represents
_BINS = {"minute": ("5m", 5, "m"), "hour": ("1h", 1, "h"), "day": ("1d", 1, "d")}

_VALUE_FIELDS = {
    "error-rate": "errors",
    "performance": "avg_performance",
    "volume": "log_volume",
    "custom": "value",
}

_TIMESTAMP_FIELDS = ("time_bucket", "timestamp", "@timestamp")


def _bin(group_by: str) -> str:
    if group_by not in _BINS:
        raise ValueError(f"group_by must be one of {', '.join(GROUP_BY_OPTIONS)}, got {group_by!r}")
    return _BINS[group_by][0]


def build_error_rate_query(error_patterns: Sequence[str], group_by: str = "hour") -> str:
    """Count messages matching any error pattern per time bucket."""
    if not error_patterns:
        raise ValueError("at least one error pattern is required")
    patterns = " or ".join(f"@message like /{re.escape(p)}/" for p in error_patterns)
    return (
        "fields @timestamp, @message\n"
        f"| filter {patterns}\n"
        f"| stats count() as errors by bin({_bin(group_by)}) as time_bucket\n"
        "| sort time_bucket"
    )


def build_performance_query(performance_fields: Sequence[str], group_by: str = "hour") -> str:
    """Parse numeric timing fields from messages and aggregate them per time bucket."""
    if not performance_fields:
        raise ValueError("at least one performance field is required")
    names = "|".join(re.escape(f) for f in performance_fields)
    return (
        "fields @timestamp, @message\n"
        f"| filter @message like /{names}/\n"
        f"| parse @message /(?<metric_name>{names})[:\\s=]+(?<metric_value>\\d+\\.?\\d*)/\n"
        "| stats avg(metric_value) as avg_performance, max(metric_value) as max_performance, "
        f"min(metric_value) as min_performance by bin({_bin(group_by)}) as time_bucket\n"
        "| sort time_bucket"
    )


def build_volume_query(group_by: str = "hour") -> str:
    """Count events per time bucket."""
    return (
        "fields @timestamp\n"
        f"| stats count() as log_volume by bin({_bin(group_by)}) as time_bucket\n"
        "| sort time_bucket"
    )


def parse_metric_value(value: str) -> Union[float, str]:
    """Return value as a float when it parses as one, else unchanged."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return value


def to_data_points(rows: Sequence[Sequence[Dict[str, str]]]) -> List[MetricDataPoint]:
    """Convert GetQueryResults rows into flat data points.

    The first of time_bucket/timestamp/@timestamp becomes ``timestamp``;
    Insights-internal fields such as @ptr are dropped.
    """
    points: List[MetricDataPoint] = []
    for row in rows:
        point: MetricDataPoint = {"timestamp": None}
        for cell in row:
            name = cell.get("field")
            if not name or "value" not in cell or name == "@ptr":
                continue
            if name in _TIMESTAMP_FIELDS:
                point["timestamp"] = point["timestamp"] or cell["value"]
            else:
                point[name] = parse_metric_value(cell["value"])
        points.append(point)
    return points


def _numeric(point: MetricDataPoint, value_field: str) -> float:
    value = point.get(value_field)
    return float(value) if isinstance(value, (int, float)) else 0.0


def calculate_metric_summary(
    data: Sequence[MetricDataPoint], metric_type: str, group_by: str = "hour"
) -> MetricSummary:
    """Summarise the metric's value series.

    Trend compares the mean of the second half against the first half:
    more than 10% higher is "increasing", more than 10% lower is "decreasing".
    """
    if not data:
        return {
            "total_data_points": 0,
            "time_span": f"0{_BINS[group_by][2]}",
            "average_value": 0.0,
            "min_value": 0.0,
            "max_value": 0.0,
            "trend": "stable",
        }

    values = [_numeric(point, _VALUE_FIELDS.get(metric_type, "value")) for point in data]
    trend = "stable"
    midpoint = len(values) // 2
    if midpoint:
        first_half = sum(values[:midpoint]) / midpoint
        second_half = sum(values[midpoint:]) / (len(values) - midpoint)
        if second_half > first_half * 1.1:
            trend = "increasing"
        elif second_half < first_half * 0.9:
            trend = "decreasing"

    _, width, unit = _BINS[group_by]
    return {
        "total_data_points": len(values),
        "time_span": f"{len(values) * width}{unit}",
        "average_value": sum(values) / len(values),
        "min_value": min(values),
        "max_value": max(values),
        "trend": trend,
    }


def analyze_trends(data: Sequence[MetricDataPoint]) -> List[MetricTrend]:
    """Compare first and last log volume when every point carries one."""
    if len(data) < 2 or not all(isinstance(p.get("log_volume"), (int, float)) for p in data):
        return []

    first = float(data[0]["log_volume"])
    last = float(data[-1]["log_volume"])
    change = last - first
    if first:
        magnitude = abs(change / first) * 100
    else:
        magnitude = 100.0 if change else 0.0

    if change > 0:
        direction, verb = "increasing", "increased"
    elif change < 0:
        direction, verb = "decreasing", "decreased"
    else:
        direction, verb = "stable", "remained stable"

    return [
        {
            "metric": "log_volume",
            "direction": direction,
            "magnitude": magnitude,
            "confidence": "high" if len(data) > 5 else "medium",
            "description": f"Log volume {verb} by {magnitude:.1f}%",
        }
    ]


@dataclass
class LogMetricsResult:
    """Outcome of a metrics extraction."""

    log_group_name: str
    metric_type: str
    group_by: str
    start_time: str
    end_time: str
    query: str
    data_points: List[MetricDataPoint] = field(default_factory=list)
    summary: Optional[MetricSummary] = None
    trends: List[MetricTrend] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)
    generated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class LogMetricsExtractor:
    """Runs Logs Insights metric queries and polls for their results."""

    def __init__(
        self,
        client: Any,
        retry_config: Optional[RetryConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        max_polls: int = MAX_POLLS,
    ):
        """Initialize extractor.

        Args:
            client: boto3 CloudWatch Logs client
            retry_config: Retry settings for StartQuery/GetQueryResults calls
            sleep: Awaitable sleep used between polls
            poll_interval: Seconds between GetQueryResults polls
            max_polls: Polls before the query is stopped as timed out
        """
        self.client = client
        self.retry_config = retry_config or RetryConfig(max_attempts=3)
        self._sleep = sleep
        self.poll_interval = poll_interval
        self.max_polls = max_polls

    async def _call(self, method: Callable[..., Any], **params: Any) -> Dict[str, Any]:
        return await retry_with_backoff(
            lambda: asyncio.to_thread(method, **params),
            self.retry_config,
        )

    async def run_query(
        self,
        log_group_name: str,
        query: str,
        start_time: datetime,
        end_time: datetime,
        limit: int = QUERY_RESULT_LIMIT,
    ) -> Dict[str, Any]:
        """Start an Insights query and wait for it to finish.

        Returns:
            The final GetQueryResults response

        Raises:
            CloudWatchLogsError: If the query fails, is cancelled or times out
        """
        started = await self._call(
            self.client.start_query,
            logGroupName=log_group_name,
            startTime=int(start_time.timestamp()),
            endTime=int(end_time.timestamp()),
            queryString=query,
            limit=limit,
        )
        query_id = started["queryId"]
        logger.debug("insights_query_started", log_group_name=log_group_name, query_id=query_id)

        for poll in range(1, self.max_polls + 1):
            await self._sleep(self.poll_interval)
            response = await self._call(self.client.get_query_results, queryId=query_id)
            status = response.get("status")

            if status == "Complete":
                logger.debug("insights_query_completed", query_id=query_id, polls=poll)
                return response
            if status in ("Failed", "Cancelled", "Timeout"):
                raise CloudWatchLogsError(
                    f"Query failed with status: {status}",
                    operation="extract-metrics",
                    log_group_name=log_group_name,
                    query_id=query_id,
                    status=status,
                )

        await self._call(self.client.stop_query, queryId=query_id)
        raise CloudWatchLogsError(
            f"Query did not complete after {self.max_polls} polls",
            operation="extract-metrics",
            log_group_name=log_group_name,
            query_id=query_id,
            status="Timeout",
        )

    def build_query(
        self,
        metric_type: str,
        group_by: str,
        custom_query: Optional[str] = None,
        error_patterns: Optional[Sequence[str]] = None,
        performance_fields: Optional[Sequence[str]] = None,
    ) -> str:
        """Build the Insights query for a metric type."""
        _bin(group_by)
        if metric_type == "error-rate":
            return build_error_rate_query(error_patterns or DEFAULT_ERROR_PATTERNS, group_by)
        if metric_type == "performance":
            return build_performance_query(performance_fields or DEFAULT_PERFORMANCE_FIELDS, group_by)
        if metric_type == "volume":
            return build_volume_query(group_by)
        if metric_type == "custom":
            if not custom_query:
                raise ValueError("Custom query is required when metric_type is 'custom'")
            return custom_query
        raise ValueError(f"metric_type must be one of {', '.join(METRIC_TYPES)}, got {metric_type!r}")

    async def extract(
        self,
        log_group_name: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        metric_type: str = "volume",
        group_by: str = "hour",
        custom_query: Optional[str] = None,
        error_patterns: Optional[Sequence[str]] = None,
        performance_fields: Optional[Sequence[str]] = None,
    ) -> LogMetricsResult:
        """Extract a metric time series from a log group.

        Args:
            log_group_name: Log group to query
            start_time: Window start (defaults to 24 hours before end_time)
            end_time: Window end (defaults to now)
            metric_type: error-rate, performance, volume or custom
            group_by: Bucket size, minute (5m bins), hour or day
            custom_query: Insights query used when metric_type is custom
            error_patterns: Patterns counted by error-rate queries
            performance_fields: Field names parsed by performance queries

        Returns:
            LogMetricsResult

        Raises:
            CloudWatchLogsError: If the query is invalid or fails
        """
        end_time = end_time or datetime.now(timezone.utc)
        start_time = start_time or end_time - DEFAULT_LOOKBACK

        try:
            query = self.build_query(
                metric_type, group_by, custom_query, error_patterns, performance_fields
            )
        except ValueError as e:
            raise CloudWatchLogsError(
                str(e), operation="extract-metrics", log_group_name=log_group_name
            ) from e

        logger.info(
            "log_metrics_extraction_started",
            log_group_name=log_group_name,
            metric_type=metric_type,
            group_by=group_by,
        )

        try:
            response = await self.run_query(log_group_name, query, start_time, end_time)
        except AwsKitError:
            raise
        except Exception as e:
            logger.error("log_metrics_extraction_failed", log_group_name=log_group_name, error=str(e))
            raise CloudWatchLogsError(
                f"Metrics extraction failed: {e}",
                operation="extract-metrics",
                log_group_name=log_group_name,
                cause=e,
            ) from e

        data_points = to_data_points(response.get("results") or [])
        result = LogMetricsResult(
            log_group_name=log_group_name,
            metric_type=metric_type,
            group_by=group_by,
            start_time=start_time.isoformat(),
            end_time=end_time.isoformat(),
            query=query,
            data_points=data_points,
            summary=calculate_metric_summary(data_points, metric_type, group_by),
            trends=analyze_trends(data_points),
            statistics=dict(response.get("statistics") or {}),
        )
        logger.info(
            "log_metrics_extraction_completed",
            log_group_name=log_group_name,
            metric_type=metric_type,
            data_points=len(data_points),
        )
        return result
