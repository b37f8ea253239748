"""Last activity metric."""

import math
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


def calculate_last_activity(
    repository: dict[str, Any], context: MetricContext
) -> RawMetricValue:
    """Whole days since the last push to the repository."""
    pushed_at = parse_timestamp(repository.get("pushed_at"))
    if pushed_at is None:
        return UnknownValue("Repository has no push timestamp.")
    days = math.floor(days_between(pushed_at, context.now))
    return NumberValue(max(days, 0))


def _compute(snapshot: RepositorySnapshot, context: MetricContext) -> RawMetricValue:
    return calculate_last_activity(snapshot.repository, context)


METRIC = MetricSpec(
    id="last-activity",
    name="Last Activity",
    category="activity",
    compute=_compute,
    unit="days",
    description="Days since last push",
)
