"""Average time to close metric."""

from typing import Any

from oss_health_analyzer.metrics.base import (
    MetricContext,
    MetricSpec,
    NumberValue,
    RawMetricValue,
    UnknownValue,
    days_between,
    parse_timestamp,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def calculate_average_time_to_close(issues: list[dict[str, Any]]) -> RawMetricValue:
    """Mean days from creation to close over closed issues."""
    close_times = []
    for issue in issues:
        if "pull_request" in issue or issue.get("state") != "closed":
            continue
        created = parse_timestamp(issue.get("created_at"))
        closed = parse_timestamp(issue.get("closed_at"))
        if created is None or closed is None:
            continue
        close_times.append(days_between(created, closed))

    if not close_times:
        return UnknownValue("No closed issues to analyze.")
    return NumberValue(sum(close_times) / len(close_times))


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> RawMetricValue:
    return calculate_average_time_to_close(snapshot.issues)


METRIC = MetricSpec(
    id="average-time-to-close",
    name="Average Time to Close",
    category="maintenance",
    compute=_compute,
    unit="days",
    precision=1,
    description="Average days to close issues",
)
