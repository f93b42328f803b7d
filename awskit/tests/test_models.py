"""Unit tests for request models and configuration."""

import pytest
from pydantic import ValidationError

from awskit.config import Config
from awskit.models import AnalyzePatternsRequest, BatchWriteItemRequest, ExtractMetricsRequest


class TestBatchWriteItemRequest:
    """Test batch write request validation."""

    def test_defaults(self):
        """Test default batch options."""
        request = BatchWriteItemRequest(table_name="users", input_file="users.csv")

        assert request.batch_size == 25
        assert request.max_concurrency == 10
        assert request.max_retries == 3
        assert request.enable_retry is True
        assert request.format == "table"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("table_name", "ab"),
            ("table_name", "bad name!"),
            ("batch_size", 26),
            ("batch_size", 0),
            ("max_concurrency", 21),
            ("max_retries", 11),
            ("region", "moon-base-1a"),
            ("profile", "bad profile"),
            ("format", "yaml"),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        """Test out-of-range or malformed values raise."""
        fields = {"table_name": "users", "input_file": "users.csv", field: value}

        with pytest.raises(ValidationError):
            BatchWriteItemRequest(**fields)

    def test_accepts_regions_and_profiles(self):
        """Test common region and profile formats are accepted."""
        request = BatchWriteItemRequest(
            table_name="my.table_v2-prod",
            input_file="x.json",
            region="us-gov-west-1",
            profile="dev.admin_01",
        )

        assert request.region == "us-gov-west-1"

    def test_processor_options(self):
        """Test request converts to batch processor options."""
        request = BatchWriteItemRequest(
            table_name="users",
            input_file="users.csv",
            batch_size=10,
            max_concurrency=4,
            max_retries=0,
            enable_retry=False,
            verbose=True,
        )

        options = request.processor_options()

        assert options.batch_size == 10
        assert options.max_concurrency == 4
        assert options.effective_max_retries == 0
        assert options.verbose is True


class TestAnalyzePatternsRequest:
    """Test pattern analysis request validation."""

    def test_defaults(self):
        """Test default analysis parameters."""
        request = AnalyzePatternsRequest(log_group_name="/aws/lambda/app")

        assert request.hours == 24
        assert request.max_patterns == 20
        assert request.min_occurrences == 5
        assert request.sample_size == 1000

    @pytest.mark.parametrize(
        "field,value",
        [("log_group_name", "bad group!"), ("hours", 0), ("max_patterns", 0), ("sample_size", 20_000)],
    )
    def test_invalid_values_rejected(self, field, value):
        """Test invalid values raise."""
        fields = {"log_group_name": "app", field: value}

        with pytest.raises(ValidationError):
            AnalyzePatternsRequest(**fields)


class TestExtractMetricsRequest:
    """Test metrics request validation."""

    def test_defaults(self):
        """Test default metric parameters."""
        request = ExtractMetricsRequest(log_group_name="/aws/lambda/app")

        assert request.metric_type == "volume"
        assert request.group_by == "hour"
        assert request.error_patterns == ["ERROR", "error", "exception"]
        assert request.performance_fields == ["duration", "response_time", "latency"]

    def test_custom_requires_query(self):
        """Test custom metrics without a query are rejected."""
        with pytest.raises(ValidationError, match="Custom query is required"):
            ExtractMetricsRequest(log_group_name="app", metric_type="custom")

    @pytest.mark.parametrize(
        "field,value",
        [("metric_type", "latency"), ("group_by", "week"), ("error_patterns", []), ("hours", -1)],
    )
    def test_invalid_values_rejected(self, field, value):
        """Test invalid values raise."""
        fields = {"log_group_name": "app", field: value}

        with pytest.raises(ValidationError):
            ExtractMetricsRequest(**fields)


class TestConfig:
    """Test environment configuration."""

    def test_region_prefers_aws_region(self, monkeypatch):
        """Test AWS_REGION wins over AWS_DEFAULT_REGION."""
        monkeypatch.setenv("AWS_REGION", "eu-west-1")
        monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")

        assert Config.aws_region() == "eu-west-1"

    def test_int_settings(self, monkeypatch):
        """Test integer settings parse and fall back on bad values."""
        monkeypatch.setenv("AWSKIT_MAX_CONCURRENCY", "4")
        monkeypatch.setenv("AWSKIT_MAX_RETRIES", "lots")

        assert Config.max_concurrency() == 4
        assert Config.max_retries() == 3

    def test_log_defaults(self, monkeypatch):
        """Test logging defaults."""
        monkeypatch.delenv("AWSKIT_LOG_LEVEL", raising=False)
        monkeypatch.delenv("AWSKIT_LOG_FORMAT", raising=False)

        assert Config.log_level() == "WARNING"
        assert Config.log_format() == "json"
