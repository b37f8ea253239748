"""Open issues ratio metric."""

from typing import Any

from oss_health_analyzer.metrics.base import (
    MetricContext,
    MetricSpec,
    NumberValue,
    RawMetricValue,
    UnknownValue,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def calculate_open_issues_ratio(issues: list[dict[str, Any]]) -> RawMetricValue:
    """Percentage of fetched issues that are still open."""
    actual_issues = [issue for issue in issues if "pull_request" not in issue]
    if not actual_issues:
        return UnknownValue("No issues to analyze.")

    open_count = sum(1 for issue in actual_issues if issue.get("state") == "open")
    return NumberValue(open_count / len(actual_issues) * 100)


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> RawMetricValue:
    return calculate_open_issues_ratio(snapshot.issues)


METRIC = MetricSpec(
    id="open-issues-ratio",
    name="Open Issues Ratio",
    category="maintenance",
    compute=_compute,
    unit="%",
    precision=1,
    description="Percentage of issues currently open",
)
