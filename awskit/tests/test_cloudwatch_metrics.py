"""Unit tests for CloudWatch Logs Insights metrics extraction."""

from datetime import datetime, timedelta, timezone

import pytest
from botocore.stub import ANY, Stubber

from awskit.core.errors import CloudWatchLogsError
from awskit.core.retry_config import RetryConfig
from awskit.services.cloudwatch_metrics import (
    LogMetricsExtractor,
    analyze_trends,
    build_error_rate_query,
    build_performance_query,
    build_volume_query,
    calculate_metric_summary,
    parse_metric_value,
    to_data_points,
)

END = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
START = END - timedelta(hours=6)


class FakeSleep:
    """Records poll intervals without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def volume_rows(*volumes):
    return [
        [
            {"field": "time_bucket", "value": f"2024-05-01 0{i}:00:00.000"},
            {"field": "log_volume", "value": str(v)},
        ]
        for i, v in enumerate(volumes)
    ]


def make_extractor(client, **overrides):
    sleep = FakeSleep()
    extractor = LogMetricsExtractor(client, RetryConfig(max_attempts=1), sleep=sleep, **overrides)
    return extractor, sleep


class TestQueryBuilders:
    """Test Logs Insights query construction."""

    def test_volume_query_bins_by_hour(self):
        """Test volume counts events per hourly bin."""
        query = build_volume_query("hour")

        assert "stats count() as log_volume by bin(1h) as time_bucket" in query
        assert query.endswith("| sort time_bucket")

    def test_minute_grouping_uses_five_minute_bins(self):
        """Test minute grouping aggregates into 5 minute bins."""
        assert "bin(5m)" in build_volume_query("minute")

    def test_error_rate_query_joins_patterns(self):
        """Test every error pattern becomes a like clause."""
        query = build_error_rate_query(["ERROR", "timeout"], "day")

        assert "| filter @message like /ERROR/ or @message like /timeout/" in query
        assert "count() as errors by bin(1d)" in query

    def test_performance_query_parses_requested_fields(self):
        """Test performance queries parse the named timing fields."""
        query = build_performance_query(["duration", "latency"], "hour")

        assert "(?<metric_name>duration|latency)" in query
        assert "avg(metric_value) as avg_performance" in query
        assert "max(metric_value) as max_performance" in query

    def test_unknown_group_by_rejected(self):
        """Test an unsupported bucket size raises."""
        with pytest.raises(ValueError, match="group_by"):
            build_volume_query("week")

    def test_empty_pattern_list_rejected(self):
        """Test at least one error pattern is required."""
        with pytest.raises(ValueError):
            build_error_rate_query([], "hour")


class TestDataPoints:
    """Test conversion of query result rows."""

    def test_parse_metric_value(self):
        """Test numeric strings become floats, others are kept."""
        assert parse_metric_value("42") == 42.0
        assert parse_metric_value("3.5") == 3.5
        assert parse_metric_value("GET") == "GET"

    def test_rows_become_flat_points(self):
        """Test time bucket maps to timestamp and @ptr is dropped."""
        rows = [
            [
                {"field": "time_bucket", "value": "2024-05-01 10:00:00.000"},
                {"field": "errors", "value": "7"},
                {"field": "@ptr", "value": "abc"},
            ]
        ]

        assert to_data_points(rows) == [{"timestamp": "2024-05-01 10:00:00.000", "errors": 7.0}]


class TestMetricSummary:
    """Test summary statistics."""

    def test_empty_series(self):
        """Test no data yields zeroed stable summary."""
        summary = calculate_metric_summary([], "volume")

        assert summary["total_data_points"] == 0
        assert summary["trend"] == "stable"

    def test_increasing_volume(self):
        """Test second-half mean over 110% of first-half mean is increasing."""
        data = to_data_points(volume_rows(10, 10, 20, 30))

        summary = calculate_metric_summary(data, "volume", "hour")

        assert summary["total_data_points"] == 4
        assert summary["time_span"] == "4h"
        assert summary["average_value"] == 17.5
        assert summary["min_value"] == 10.0
        assert summary["max_value"] == 30.0
        assert summary["trend"] == "increasing"

    def test_decreasing_error_rate(self):
        """Test error-rate summaries read the errors field."""
        data = [{"timestamp": None, "errors": 10.0}, {"timestamp": None, "errors": 5.0}]

        summary = calculate_metric_summary(data, "error-rate", "minute")

        assert summary["trend"] == "decreasing"
        assert summary["time_span"] == "10m"

    def test_single_point_is_stable(self):
        """Test one data point has no trend."""
        summary = calculate_metric_summary([{"timestamp": None, "log_volume": 3.0}], "volume")

        assert summary["trend"] == "stable"
        assert summary["average_value"] == 3.0


class TestAnalyzeTrends:
    """Test first-to-last volume trend."""

    def test_volume_increase(self):
        """Test percentage change from first to last bucket."""
        trends = analyze_trends(to_data_points(volume_rows(100, 120, 150)))

        assert trends == [
            {
                "metric": "log_volume",
                "direction": "increasing",
                "magnitude": 50.0,
                "confidence": "medium",
                "description": "Log volume increased by 50.0%",
            }
        ]

    def test_high_confidence_with_many_points(self):
        """Test more than five points gives high confidence."""
        trends = analyze_trends(to_data_points(volume_rows(10, 9, 8, 7, 6, 5)))

        assert trends[0]["direction"] == "decreasing"
        assert trends[0]["confidence"] == "high"

    def test_no_trend_without_volume(self):
        """Test series without log_volume or with one point have no trends."""
        assert analyze_trends([{"timestamp": None, "errors": 1.0}, {"timestamp": None, "errors": 2.0}]) == []
        assert analyze_trends(to_data_points(volume_rows(5))) == []

    def test_zero_starting_volume(self):
        """Test growth from zero is reported without dividing by zero."""
        trends = analyze_trends(to_data_points(volume_rows(0, 4)))

        assert trends[0]["magnitude"] == 100.0


class TestLogMetricsExtractor:
    """Test query execution against a stubbed client."""

    @pytest.mark.asyncio
    async def test_extracts_volume_metrics(self, logs_client):
        """Test the query is started, polled until complete and summarised."""
        extractor, sleep = make_extractor(logs_client)

        with Stubber(logs_client) as stubber:
            stubber.add_response(
                "start_query",
                {"queryId": "q-1"},
                {
                    "logGroupName": "app",
                    "startTime": int(START.timestamp()),
                    "endTime": int(END.timestamp()),
                    "queryString": build_volume_query("hour"),
                    "limit": 1000,
                },
            )
            stubber.add_response("get_query_results", {"status": "Running"}, {"queryId": "q-1"})
            stubber.add_response(
                "get_query_results",
                {
                    "status": "Complete",
                    "results": volume_rows(100, 150),
                    "statistics": {"recordsMatched": 250.0, "recordsScanned": 250.0, "bytesScanned": 1024.0},
                },
                {"queryId": "q-1"},
            )
            result = await extractor.extract("app", start_time=START, end_time=END)
            stubber.assert_no_pending_responses()

        assert sleep.delays == [5.0, 5.0]
        assert result.metric_type == "volume"
        assert [p["log_volume"] for p in result.data_points] == [100.0, 150.0]
        assert result.summary["average_value"] == 125.0
        assert result.trends[0]["direction"] == "increasing"
        assert result.statistics["recordsMatched"] == 250.0
        assert result.to_dict()["query"] == build_volume_query("hour")

    @pytest.mark.asyncio
    async def test_custom_query_is_sent_verbatim(self, logs_client):
        """Test custom metric type runs the given query."""
        extractor, _ = make_extractor(logs_client)
        query = "stats count() as value by bin(1h)"

        with Stubber(logs_client) as stubber:
            stubber.add_response(
                "start_query",
                {"queryId": "q-2"},
                {
                    "logGroupName": "app",
                    "startTime": ANY,
                    "endTime": ANY,
                    "queryString": query,
                    "limit": 1000,
                },
            )
            stubber.add_response(
                "get_query_results",
                {"status": "Complete", "results": [[{"field": "value", "value": "4"}]]},
                {"queryId": "q-2"},
            )
            result = await extractor.extract("app", metric_type="custom", custom_query=query)

        assert result.summary["average_value"] == 4.0

    @pytest.mark.asyncio
    async def test_custom_without_query_rejected(self, logs_client):
        """Test custom metric type needs a query before any AWS call."""
        extractor, _ = make_extractor(logs_client)

        with Stubber(logs_client):
            with pytest.raises(CloudWatchLogsError, match="Custom query is required"):
                await extractor.extract("app", metric_type="custom")

    @pytest.mark.asyncio
    async def test_failed_query_raises(self, logs_client):
        """Test a Failed status surfaces as CloudWatchLogsError."""
        extractor, _ = make_extractor(logs_client)

        with Stubber(logs_client) as stubber:
            stubber.add_response("start_query", {"queryId": "q-3"})
            stubber.add_response("get_query_results", {"status": "Failed"}, {"queryId": "q-3"})
            with pytest.raises(CloudWatchLogsError, match="status: Failed") as exc_info:
                await extractor.extract("app", metric_type="error-rate", start_time=START, end_time=END)

        assert exc_info.value.metadata["query_id"] == "q-3"

    @pytest.mark.asyncio
    async def test_query_stopped_after_max_polls(self, logs_client):
        """Test a query still running after the poll budget is stopped."""
        extractor, sleep = make_extractor(logs_client, max_polls=2)

        with Stubber(logs_client) as stubber:
            stubber.add_response("start_query", {"queryId": "q-4"})
            stubber.add_response("get_query_results", {"status": "Running"}, {"queryId": "q-4"})
            stubber.add_response("get_query_results", {"status": "Scheduled"}, {"queryId": "q-4"})
            stubber.add_response("stop_query", {"success": True}, {"queryId": "q-4"})
            with pytest.raises(CloudWatchLogsError, match="did not complete after 2 polls"):
                await extractor.extract("app", start_time=START, end_time=END)
            stubber.assert_no_pending_responses()

        assert len(sleep.delays) == 2

    @pytest.mark.asyncio
    async def test_service_error_wrapped(self, logs_client):
        """Test AWS failures are wrapped with the extract-metrics operation."""
        extractor, _ = make_extractor(logs_client)

        with Stubber(logs_client) as stubber:
            stubber.add_client_error(
                "start_query",
                service_error_code="ResourceNotFoundException",
                service_message="The specified log group does not exist.",
                http_status_code=400,
            )
            with pytest.raises(CloudWatchLogsError, match="Metrics extraction failed") as exc_info:
                await extractor.extract("missing", start_time=START, end_time=END)

        assert exc_info.value.metadata["operation"] == "extract-metrics"
        assert exc_info.value.log_group_name == "missing"
