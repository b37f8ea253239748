"""PR velocity metric."""

from typing import Any

from oss_health_analyzer.metrics.base import (
    MetricContext,
    MetricSpec,
    NumberValue,
    parse_timestamp,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot

DAYS_PER_MONTH = 30


def calculate_pr_velocity(
    pull_requests: list[dict[str, Any]], context: MetricContext
) -> NumberValue:
    """
    Pull requests merged per month over the look-back window.

    Measures: PRs merged in window / (window days / 30)
    """
    window_start = context.window_start
    merged = 0
    for pr in pull_requests:
        merged_at = parse_timestamp(pr.get("merged_at"))
        if merged_at is not None and merged_at >= window_start:
            merged += 1
    return NumberValue(merged / (context.window_days / DAYS_PER_MONTH))


def _compute(snapshot: RepositorySnapshot, context: MetricContext) -> NumberValue:
    return calculate_pr_velocity(snapshot.pull_requests, context)


METRIC = MetricSpec(
    id="pr-velocity",
    name="PR Velocity",
    category="activity",
    compute=_compute,
    unit="PRs/month",
    precision=1,
    description="Pull requests merged per month over the last 90 days",
)
