"""Commit frequency metric."""

from typing import Any

from oss_health_analyzer.metrics.base import (
    WINDOW_DAYS,
    MetricContext,
    MetricSpec,
    NumberValue,
    commit_date,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def calculate_commit_frequency(
    commits: list[dict[str, Any]], context: MetricContext
) -> NumberValue:
    """
    Average commits per week over the look-back window.

    Measures: commits in window / (window days / 7)

    Commits without an authored date are ignored. An empty history is a
    genuine zero, not missing data.
    """
    window_start = context.window_start
    recent = 0
    for commit in commits:
        date = commit_date(commit)
        if date is not None and date >= window_start:
            recent += 1

    weeks = context.window_days / 7
    return NumberValue(recent / weeks)


def _compute(snapshot: RepositorySnapshot, context: MetricContext) -> NumberValue:
    return calculate_commit_frequency(snapshot.commits, context)


METRIC = MetricSpec(
    id="commit-frequency",
    name="Commit Frequency",
    category="activity",
    compute=_compute,
    unit="commits/week",
    description=f"Average commits per week over the last {WINDOW_DAYS} days",
)
