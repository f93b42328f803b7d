"""CloudWatch Logs pattern analysis for awskit.

Samples events from a log group, collapses variable tokens into placeholders
and reports the most frequent message shapes plus frequency anomalies.
"""

import asyncio
import re
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from awskit.core.errors import AwsKitError, CloudWatchLogsError
from awskit.core.execution import retry_with_backoff
from awskit.core.logging import logger
from awskit.core.retry_config import RetryConfig
from awskit.utils.types import LogEvent, LogPattern, PatternAnomaly

# Order matters: multi-digit tokens (hashes, IPs, emails) must be replaced
# before bare numbers or they get split into [NUMBER] fragments.
_NORMALIZERS = [
    (re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:?\d{2})?"), "[TIMESTAMP]"),
    (
        re.compile(r"\b[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\b", re.IGNORECASE),
        "[UUID]",
    ),
    (re.compile(r"\b[a-f0-9]{32,}\b", re.IGNORECASE), "[HASH]"),
    (re.compile(r"\b[\w.+-]+@[\w-]+(\.[\w-]+)+\b"), "[EMAIL]"),
    (re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b"), "[IP]"),
    (re.compile(r"\b\d+\b"), "[NUMBER]"),
]

ANOMALY_MULTIPLIER = 3
DEFAULT_LOOKBACK = timedelta(hours=24)


def normalize_message(message: str) -> str:
    """Replace timestamps, UUIDs, hashes, emails, IPs and numbers with placeholders."""
    normalized = message
    for pattern, placeholder in _NORMALIZERS:
        normalized = pattern.sub(placeholder, normalized)
    return normalized.strip()


def _iso(timestamp_ms: Optional[int]) -> Optional[str]:
    if timestamp_ms is None:
        return None
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).isoformat()


def extract_patterns(
    events: Sequence[LogEvent],
    max_patterns: int = 20,
    min_occurrences: int = 5,
) -> List[LogPattern]:
    """Group events by normalized message and rank by frequency.

    Args:
        events: Log events with message and timestamp
        max_patterns: Maximum number of patterns to return
        min_occurrences: Minimum occurrences for a pattern to be included

    Returns:
        Patterns sorted by count (descending), each with up to 3 examples
    """
    counts: Counter = Counter()
    examples: Dict[str, List[str]] = {}
    first_seen: Dict[str, int] = {}
    last_seen: Dict[str, int] = {}

    for event in events:
        message = event.get("message") or ""
        pattern = normalize_message(message)
        counts[pattern] += 1
        bucket = examples.setdefault(pattern, [])
        if len(bucket) < 3:
            bucket.append(message)
        timestamp = event.get("timestamp")
        if timestamp is not None:
            first_seen[pattern] = min(first_seen.get(pattern, timestamp), timestamp)
            last_seen[pattern] = max(last_seen.get(pattern, timestamp), timestamp)

    total = len(events)
    ranked = [(p, c) for p, c in counts.most_common() if c >= min_occurrences][:max_patterns]

    return [
        {
            "pattern": pattern,
            "count": count,
            "percentage": (count / total) * 100 if total else 0.0,
            "examples": examples[pattern],
            "first_seen": _iso(first_seen.get(pattern)),
            "last_seen": _iso(last_seen.get(pattern)),
        }
        for pattern, count in ranked
    ]


def detect_anomalies(patterns: Sequence[LogPattern]) -> List[PatternAnomaly]:
    """Flag patterns occurring more than 3x the average pattern percentage.

    Severity is "high" above twice that threshold, "medium" otherwise.
    """
    if not patterns:
        return []

    average = sum(p["percentage"] for p in patterns) / len(patterns)
    threshold = average * ANOMALY_MULTIPLIER
    anomalies: List[PatternAnomaly] = []

    for pattern in patterns:
        if pattern["percentage"] > threshold:
            anomalies.append(
                {
                    "pattern": pattern["pattern"],
                    "count": pattern["count"],
                    "percentage": pattern["percentage"],
                    "anomaly_type": "high-frequency",
                    "severity": "high" if pattern["percentage"] > threshold * 2 else "medium",
                    "description": (
                        f"Pattern occurs {pattern['percentage']:.1f}% of the time "
                        f"(threshold {threshold:.1f}%)"
                    ),
                }
            )

    return anomalies


@dataclass
class PatternAnalysisResult:
    """Outcome of a log group pattern analysis."""

    log_group_name: str
    start_time: str
    end_time: str
    total_events: int
    patterns: List[LogPattern] = field(default_factory=list)
    anomalies: List[PatternAnomaly] = field(default_factory=list)
    analysis_time: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def summary(self) -> Dict[str, Any]:
        return {
            "unique_patterns": len(self.patterns),
            "top_pattern": self.patterns[0]["pattern"] if self.patterns else None,
            "coverage_percentage": sum(p["percentage"] for p in self.patterns),
            "anomaly_count": len(self.anomalies),
        }

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["summary"] = self.summary
        return data


class LogPatternAnalyzer:
    """Fetches sample events from CloudWatch Logs and analyzes their patterns."""

    def __init__(self, client: Any, retry_config: Optional[RetryConfig] = None):
        """Initialize analyzer.

        Args:
            client: boto3 CloudWatch Logs client
            retry_config: Retry settings for FilterLogEvents calls
        """
        self.client = client
        self.retry_config = retry_config or RetryConfig(max_attempts=3)

    async def fetch_events(
        self,
        log_group_name: str,
        start_time: datetime,
        end_time: datetime,
        limit: int,
    ) -> List[LogEvent]:
        """Page through FilterLogEvents until limit events or the end of the stream.

        Args:
            log_group_name: Log group to read
            start_time: Window start (timezone-aware)
            end_time: Window end (timezone-aware)
            limit: Maximum events to return

        Returns:
            List of log events
        """
        events: List[LogEvent] = []
        params: Dict[str, Any] = {
            "logGroupName": log_group_name,
            "startTime": int(start_time.timestamp() * 1000),
            "endTime": int(end_time.timestamp() * 1000),
        }

        while len(events) < limit:
            params["limit"] = min(10_000, limit - len(events))
            response = await retry_with_backoff(
                lambda p=dict(params): asyncio.to_thread(self.client.filter_log_events, **p),
                self.retry_config,
            )
            for raw in response.get("events", []):
                event: LogEvent = {
                    "timestamp": raw.get("timestamp"),
                    "message": raw.get("message", ""),
                }
                if raw.get("logStreamName"):
                    event["logStreamName"] = raw["logStreamName"]
                if raw.get("eventId"):
                    event["eventId"] = raw["eventId"]
                events.append(event)

            next_token = response.get("nextToken")
            if not next_token or next_token == params.get("nextToken"):
                break
            params["nextToken"] = next_token

        return events[:limit]

    async def analyze(
        self,
        log_group_name: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        max_patterns: int = 20,
        min_occurrences: int = 5,
        sample_size: int = 1000,
    ) -> PatternAnalysisResult:
        """Analyze log patterns in a log group over a time window.

        Args:
            log_group_name: Log group to analyze
            start_time: Window start (defaults to 24 hours before end_time)
            end_time: Window end (defaults to now)
            max_patterns: Maximum patterns to return
            min_occurrences: Minimum occurrences for a pattern
            sample_size: Maximum events to sample

        Returns:
            PatternAnalysisResult

        Raises:
            CloudWatchLogsError: If fetching events fails
        """
        end_time = end_time or datetime.now(timezone.utc)
        start_time = start_time or end_time - DEFAULT_LOOKBACK

        logger.info(
            "log_pattern_analysis_started",
            log_group_name=log_group_name,
            start_time=start_time.isoformat(),
            end_time=end_time.isoformat(),
            sample_size=sample_size,
        )

        try:
            events = await self.fetch_events(log_group_name, start_time, end_time, sample_size)
        except AwsKitError:
            raise
        except Exception as e:
            logger.error("log_pattern_analysis_failed", log_group_name=log_group_name, error=str(e))
            raise CloudWatchLogsError(
                f"Pattern analysis failed: {e}",
                operation="analyze-patterns",
                log_group_name=log_group_name,
                cause=e,
            ) from e

        patterns = extract_patterns(events, max_patterns, min_occurrences)
        anomalies = detect_anomalies(patterns)

        result = PatternAnalysisResult(
            log_group_name=log_group_name,
            start_time=start_time.isoformat(),
            end_time=end_time.isoformat(),
            total_events=len(events),
            patterns=patterns,
            anomalies=anomalies,
        )
        logger.info(
            "log_pattern_analysis_completed",
            log_group_name=log_group_name,
            total_events=len(events),
            patterns=len(patterns),
            anomalies=len(anomalies),
        )
        return result
