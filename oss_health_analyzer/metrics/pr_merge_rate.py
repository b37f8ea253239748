"""PR merge rate metric."""

from typing import Any

from oss_health_analyzer.metrics.base import (
    MetricContext,
    MetricSpec,
    NumberValue,
    RawMetricValue,
    UnknownValue,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def calculate_pr_merge_rate(pull_requests: list[dict[str, Any]]) -> RawMetricValue:
    """
    Percentage of resolved pull requests that were merged.

    Measures: merged / (merged + closed without merge) * 100

    Open pull requests are not resolved yet and are left out.
    """
    merged = sum(1 for pr in pull_requests if pr.get("merged_at"))
    closed_unmerged = sum(
        1
        for pr in pull_requests
        if pr.get("state") == "closed" and not pr.get("merged_at")
    )

    resolved = merged + closed_unmerged
    if resolved == 0:
        return UnknownValue("No resolved pull requests.")
    return NumberValue(merged / resolved * 100)


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> RawMetricValue:
    return calculate_pr_merge_rate(snapshot.pull_requests)


METRIC = MetricSpec(
    id="pr-merge-rate",
    name="PR Merge Rate",
    category="community",
    compute=_compute,
    unit="%",
    precision=1,
    description="Percentage of pull requests that get merged",
)
