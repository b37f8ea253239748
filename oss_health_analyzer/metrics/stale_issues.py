"""Stale issues percentage metric."""

from typing import Any

from oss_health_analyzer.metrics.base import (
    MetricContext,
    MetricSpec,
    NumberValue,
    parse_timestamp,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def calculate_stale_issues_percentage(
    issues: list[dict[str, Any]], context: MetricContext
) -> NumberValue:
    """
    Percentage of open issues not updated within the look-back window.

    Measures how well the project manages its issue backlog. A project with
    no open issues has no stale backlog, so it gets 0% rather than an
    unknown value.
    """
    open_issues = [
        issue
        for issue in issues
        if "pull_request" not in issue and issue.get("state") == "open"
    ]
    if not open_issues:
        return NumberValue(0)

    window_start = context.window_start
    stale_count = 0
    for issue in open_issues:
        updated_at = parse_timestamp(issue.get("updated_at"))
        if updated_at is not None and updated_at < window_start:
            stale_count += 1

    return NumberValue(stale_count / len(open_issues) * 100)


def _compute(snapshot: RepositorySnapshot, context: MetricContext) -> NumberValue:
    return calculate_stale_issues_percentage(snapshot.issues, context)


METRIC = MetricSpec(
    id="stale-issues-percentage",
    name="Stale Issues Percentage",
    category="maintenance",
    compute=_compute,
    unit="%",
    precision=1,
    description="Percentage of open issues with no activity in 90+ days",
)
