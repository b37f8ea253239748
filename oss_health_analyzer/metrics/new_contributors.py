"""New contributors metric."""

from datetime import datetime
from typing import Any

from oss_health_analyzer.metrics.base import (
    MetricContext,
    MetricSpec,
    NumberValue,
    commit_date,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def calculate_new_contributors(
    commits: list[dict[str, Any]], context: MetricContext
) -> NumberValue:
    """
    Authors whose first commit falls inside the look-back window.

    "First commit" is the earliest commit among the fetched commits, not the
    author's first commit ever. Because commits are fetched for the window
    only, every author seen counts as new; this approximation is kept so
    scores stay comparable across releases.
    """
    first_commit: dict[str, datetime] = {}
    for commit in commits:
        author = commit.get("author") or {}
        login = author.get("login")
        if not login:
            continue
        date = commit_date(commit)
        if date is None:
            continue
        if login not in first_commit or date < first_commit[login]:
            first_commit[login] = date

    window_start = context.window_start
    return NumberValue(sum(1 for d in first_commit.values() if d >= window_start))


def _compute(snapshot: RepositorySnapshot, context: MetricContext) -> NumberValue:
    return calculate_new_contributors(snapshot.commits, context)


METRIC = MetricSpec(
    id="new-contributors",
    name="New Contributors (90 days)",
    category="community",
    compute=_compute,
    unit="contributors",
    description="Number of first-time contributors in last 90 days",
)
