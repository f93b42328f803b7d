"""CloudWatch Logs Pydantic models for awskit."""

from typing import List, Literal, Optional

from pydantic import Field, ValidationInfo, field_validator

from awskit.models.base import BaseAwsRequest


class AnalyzePatternsRequest(BaseAwsRequest):
    """Request for `logs analyze-patterns`."""

    log_group_name: str = Field(
        ...,
        min_length=1,
        max_length=512,
        pattern=r"^[\.\-_/#A-Za-z0-9]+$",
        description="Log group to analyze",
    )
    hours: float = Field(24, gt=0, le=24 * 30, description="Look-back window in hours")
    max_patterns: int = Field(20, ge=1, le=100, description="Maximum patterns to return")
    min_occurrences: int = Field(5, ge=1, description="Minimum occurrences for a pattern")
    sample_size: int = Field(1000, ge=1, le=10_000, description="Maximum events to sample")


class ExtractMetricsRequest(BaseAwsRequest):
    """Request for `logs metrics`."""

    log_group_name: str = Field(
        ...,
        min_length=1,
        max_length=512,
        pattern=r"^[\.\-_/#A-Za-z0-9]+$",
        description="Log group to query",
    )
    hours: float = Field(24, gt=0, le=24 * 30, description="Look-back window in hours")
    metric_type: Literal["error-rate", "performance", "volume", "custom"] = Field(
        "volume", description="Metric to extract"
    )
    group_by: Literal["minute", "hour", "day"] = Field("hour", description="Time bucket size")
    custom_query: Optional[str] = Field(
        None,
        min_length=1,
        max_length=10_000,
        validate_default=True,
        description="Logs Insights query for custom metrics",
    )
    error_patterns: List[str] = Field(
        default_factory=lambda: ["ERROR", "error", "exception"],
        min_length=1,
        description="Patterns counted as errors",
    )
    performance_fields: List[str] = Field(
        default_factory=lambda: ["duration", "response_time", "latency"],
        min_length=1,
        description="Timing fields parsed from messages",
    )

    @field_validator("custom_query")
    @classmethod
    def require_custom_query(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if info.data.get("metric_type") == "custom" and not value:
            raise ValueError("Custom query is required when metric_type is 'custom'")
        return value
