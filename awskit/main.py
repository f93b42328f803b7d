"""Command-line entry point for awskit.

Usage:
    awskit dynamodb batch-write-item users users.csv --batch-size 25
    awskit logs analyze-patterns /aws/lambda/my-function --hours 6
    awskit logs metrics /aws/lambda/my-function --metric-type error-rate
"""

import asyncio
import json
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import click
import pydantic

from awskit.config import config
from awskit.core.errors import AwsKitError, ValidationError
from awskit.core.logging import configure_logging
from awskit.infrastructure.aws import get_client
from awskit.models import AnalyzePatternsRequest, BatchWriteItemRequest, ExtractMetricsRequest
from awskit.services.cloudwatch_logs import LogPatternAnalyzer
from awskit.services.cloudwatch_metrics import LogMetricsExtractor
from awskit.services.dynamodb import batch_write_items
from awskit.utils.file_processor import load_records
from awskit.utils.types import BatchWriteSummary

FAILED_ITEM_SAMPLE = 5


def _build_request(model: Any, **fields: Any) -> Any:
    """Validate CLI input with a pydantic model, raising awskit ValidationError."""
    try:
        return model(**fields)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(
            f"Invalid value for '{field}': {first.get('msg')}",
            field=field or None,
            value=first.get("input"),
        ) from e


def _progress(verbose: bool) -> Optional[Callable[[str], None]]:
    if not verbose:
        return None
    return lambda message: click.echo(message, err=True)


def _echo_json(data: Dict[str, Any]) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _handle_error(error: AwsKitError, output_format: str, verbose: bool) -> None:
    if output_format == "json":
        click.echo(json.dumps(error.to_dict(), indent=2, default=str), err=True)
    else:
        click.echo(f"Error: {error.message}", err=True)
        if verbose:
            details = error.to_dict()
            click.echo(f"  Code: {details['code']}", err=True)
            for key, value in details["metadata"].items():
                click.echo(f"  {key}: {value}", err=True)
    sys.exit(1)


def _print_write_summary(summary: BatchWriteSummary) -> None:
    click.echo(f"Batch write to '{summary['table_name']}' complete")
    click.echo(f"  Processed items: {summary['processed_items']}")
    click.echo(f"  Failed items:    {summary['failed_items']}")
    click.echo(f"  Batches:         {summary['total_batches']}")
    click.echo(f"  Retries:         {summary['retries']}")

    failed = summary["unprocessed_items"]
    if failed:
        shown = failed[:FAILED_ITEM_SAMPLE]
        click.echo(f"Failed items (showing {len(shown)} of {len(failed)}):")
        for item in shown:
            click.echo(f"  {json.dumps(item, default=str)}")


def _print_pattern_report(report: Dict[str, Any]) -> None:
    summary = report["summary"]
    click.echo(f"Log group: {report['log_group_name']}")
    click.echo(f"Window:    {report['start_time']} -> {report['end_time']}")
    click.echo(f"Events analyzed: {report['total_events']}")
    click.echo(f"Unique patterns: {summary['unique_patterns']}")
    click.echo(f"Coverage:        {summary['coverage_percentage']:.1f}%")

    if report["patterns"]:
        click.echo("")
        click.echo(f"{'COUNT':>7}  {'PCT':>6}  PATTERN")
        for pattern in report["patterns"]:
            click.echo(f"{pattern['count']:>7}  {pattern['percentage']:>5.1f}%  {pattern['pattern']}")

    if report["anomalies"]:
        click.echo("")
        click.echo("Anomalies:")
        for anomaly in report["anomalies"]:
            click.echo(f"  [{anomaly['severity']}] {anomaly['description']}: {anomaly['pattern']}")


def _print_metrics_report(report: Dict[str, Any]) -> None:
    summary = report["summary"]
    click.echo(f"{report['metric_type'].upper()} metrics for: {report['log_group_name']}")
    click.echo(f"Window:      {report['start_time']} -> {report['end_time']}")
    click.echo(f"Data points: {summary['total_data_points']} ({summary['time_span']})")
    click.echo(
        f"Average: {summary['average_value']:.2f}  Min: {summary['min_value']:.2f}  "
        f"Max: {summary['max_value']:.2f}  Trend: {summary['trend']}"
    )

    if report["data_points"]:
        click.echo("")
        for point in report["data_points"]:
            values = ", ".join(f"{k}={v}" for k, v in point.items() if k != "timestamp")
            click.echo(f"  {point['timestamp']}  {values}")

    for trend in report["trends"]:
        click.echo("")
        click.echo(f"Trend: {trend['description']} ({trend['confidence']} confidence)")


def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


def aws_options(func):
    """Attach shared region/profile/format/verbose options."""
    func = click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")(func)
    func = click.option(
        "-f",
        "--format",
        "output_format",
        type=click.Choice(["table", "json"]),
        default="table",
        show_default=True,
        help="Output format",
    )(func)
    func = click.option("-p", "--profile", default=None, help="AWS profile to use")(func)
    func = click.option("-r", "--region", default=None, help="AWS region to use")(func)
    return func


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """AWS data-operations toolkit: bulk DynamoDB writes and log analytics."""
    pass


@cli.group("dynamodb")
def dynamodb() -> None:
    """DynamoDB bulk operations"""
    pass


@cli.group("logs")
def logs() -> None:
    """CloudWatch Logs analytics"""
    pass


@dynamodb.command("batch-write-item")
@click.argument("table_name")
@click.argument("input_file", type=click.Path(dir_okay=False))
@click.option("--batch-size", type=int, default=25, show_default=True, help="Items per request (max 25)")
@click.option(
    "--max-concurrency",
    type=int,
    default=lambda: config.max_concurrency(),
    show_default="10",
    help="Maximum concurrent batch requests",
)
@click.option(
    "--enable-retry/--no-enable-retry",
    default=True,
    show_default=True,
    help="Retry unprocessed items with exponential backoff",
)
@click.option(
    "--max-retries",
    type=int,
    default=lambda: config.max_retries(),
    show_default="3",
    help="Maximum retry attempts per batch",
)
@aws_options
def batch_write_item_command(
    table_name: str,
    input_file: str,
    batch_size: int,
    max_concurrency: int,
    enable_retry: bool,
    max_retries: int,
    region: Optional[str],
    profile: Optional[str],
    output_format: str,
    verbose: bool,
) -> None:
    """Write items from a CSV, JSON or JSONL file to TABLE_NAME.

    \b
    Examples:
        awskit dynamodb batch-write-item users users.csv
        awskit dynamodb batch-write-item orders orders.jsonl --max-concurrency 5 -v
    """
    if verbose:
        configure_logging(level="DEBUG")

    try:
        request = _build_request(
            BatchWriteItemRequest,
            table_name=table_name,
            input_file=input_file,
            batch_size=batch_size,
            max_concurrency=max_concurrency,
            enable_retry=enable_retry,
            max_retries=max_retries,
            region=region,
            profile=profile,
            format=output_format,
            verbose=verbose,
        )

        records = load_records(request.input_file)
        if not records:
            click.echo("No items found in input file.", err=output_format == "json")
            if output_format == "json":
                _echo_json(
                    {
                        "table_name": request.table_name,
                        "processed_items": 0,
                        "failed_items": 0,
                        "total_batches": 0,
                        "retries": 0,
                        "unprocessed_items": [],
                    }
                )
            return

        click.echo(f"Loaded {len(records)} items from {request.input_file}", err=output_format == "json")

        summary = asyncio.run(
            batch_write_items(request, records=records, progress=_progress(verbose))
        )
    except AwsKitError as e:
        _handle_error(e, output_format, verbose)
        return

    if output_format == "json":
        _echo_json(dict(summary))
    else:
        _print_write_summary(summary)


@logs.command("analyze-patterns")
@click.argument("log_group_name")
@click.option("--hours", type=float, default=24, show_default=True, help="Look-back window in hours")
@click.option("--max-patterns", type=int, default=20, show_default=True, help="Maximum patterns to show")
@click.option(
    "--min-occurrences", type=int, default=5, show_default=True, help="Minimum occurrences per pattern"
)
@click.option("--sample-size", type=int, default=1000, show_default=True, help="Maximum events to sample")
@aws_options
def analyze_patterns_command(
    log_group_name: str,
    hours: float,
    max_patterns: int,
    min_occurrences: int,
    sample_size: int,
    region: Optional[str],
    profile: Optional[str],
    output_format: str,
    verbose: bool,
) -> None:
    """Find recurring message patterns and frequency anomalies in LOG_GROUP_NAME.

    \b
    Examples:
        awskit logs analyze-patterns /aws/lambda/checkout --hours 6
        awskit logs analyze-patterns app-logs --min-occurrences 2 -f json
    """
    if verbose:
        configure_logging(level="DEBUG")

    try:
        request = _build_request(
            AnalyzePatternsRequest,
            log_group_name=log_group_name,
            hours=hours,
            max_patterns=max_patterns,
            min_occurrences=min_occurrences,
            sample_size=sample_size,
            region=region,
            profile=profile,
            format=output_format,
            verbose=verbose,
        )
        client = get_client("logs", region=request.region, profile=request.profile)
        end_time = datetime.now(timezone.utc)
        analyzer = LogPatternAnalyzer(client)
        result = asyncio.run(
            analyzer.analyze(
                request.log_group_name,
                start_time=end_time - timedelta(hours=request.hours),
                end_time=end_time,
                max_patterns=request.max_patterns,
                min_occurrences=request.min_occurrences,
                sample_size=request.sample_size,
            )
        )
    except AwsKitError as e:
        _handle_error(e, output_format, verbose)
        return

    report = result.to_dict()
    if output_format == "json":
        _echo_json(report)
    else:
        _print_pattern_report(report)


@logs.command("metrics")
@click.argument("log_group_name")
@click.option("--hours", type=float, default=24, show_default=True, help="Look-back window in hours")
@click.option(
    "--metric-type",
    type=click.Choice(["error-rate", "performance", "volume", "custom"]),
    default="volume",
    show_default=True,
    help="Type of metrics to extract",
)
@click.option(
    "--group-by",
    type=click.Choice(["minute", "hour", "day"]),
    default="hour",
    show_default=True,
    help="Time grouping for aggregation",
)
@click.option("--custom-query", default=None, help="Logs Insights query (required for custom)")
@click.option("--error-patterns", default=None, help="Comma-separated error patterns (error-rate)")
@click.option(
    "--performance-fields", default=None, help="Comma-separated timing field names (performance)"
)
@aws_options
def metrics_command(
    log_group_name: str,
    hours: float,
    metric_type: str,
    group_by: str,
    custom_query: Optional[str],
    error_patterns: Optional[str],
    performance_fields: Optional[str],
    region: Optional[str],
    profile: Optional[str],
    output_format: str,
    verbose: bool,
) -> None:
    """Extract error-rate, performance or volume metrics from LOG_GROUP_NAME.

    \b
    Examples:
        awskit logs metrics /aws/lambda/checkout --metric-type error-rate
        awskit logs metrics app-logs --metric-type volume --group-by minute -f json
    """
    if verbose:
        configure_logging(level="DEBUG")

    optional: Dict[str, Any] = {}
    for name, value in (
        ("error_patterns", _split_csv(error_patterns)),
        ("performance_fields", _split_csv(performance_fields)),
    ):
        if value is not None:
            optional[name] = value

    try:
        request = _build_request(
            ExtractMetricsRequest,
            log_group_name=log_group_name,
            hours=hours,
            metric_type=metric_type,
            group_by=group_by,
            custom_query=custom_query,
            region=region,
            profile=profile,
            format=output_format,
            verbose=verbose,
            **optional,
        )
        client = get_client("logs", region=request.region, profile=request.profile)
        end_time = datetime.now(timezone.utc)
        extractor = LogMetricsExtractor(client)
        result = asyncio.run(
            extractor.extract(
                request.log_group_name,
                start_time=end_time - timedelta(hours=request.hours),
                end_time=end_time,
                metric_type=request.metric_type,
                group_by=request.group_by,
                custom_query=request.custom_query,
                error_patterns=request.error_patterns,
                performance_fields=request.performance_fields,
            )
        )
    except AwsKitError as e:
        _handle_error(e, output_format, verbose)
        return

    report = result.to_dict()
    if output_format == "json":
        _echo_json(report)
    else:
        _print_metrics_report(report)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
