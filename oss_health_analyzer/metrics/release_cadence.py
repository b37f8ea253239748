"""Release cadence metric."""

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

RECENT_RELEASES = 5


def calculate_release_cadence(releases: list[dict[str, Any]]) -> RawMetricValue:
    """
    Mean gap in days between the most recent releases.

    Only published releases count (drafts have no publish date). The newest
    five are used, giving up to four gaps.

    Returns:
        NumberValue with the mean gap, or UnknownValue with fewer than two
        published releases.
    """
    published = [
        date
        for date in (parse_timestamp(r.get("published_at")) for r in releases)
        if date is not None
    ]
    published.sort(reverse=True)
    recent = published[:RECENT_RELEASES]

    if len(recent) < 2:
        return UnknownValue("Fewer than two releases published.")

    gaps = [days_between(recent[i + 1], recent[i]) for i in range(len(recent) - 1)]
    return NumberValue(sum(gaps) / len(gaps))


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> RawMetricValue:
    return calculate_release_cadence(snapshot.releases)


METRIC = MetricSpec(
    id="release-cadence",
    name="Release Cadence",
    category="activity",
    compute=_compute,
    unit="days",
    precision=1,
    description="Average days between releases (last 5 releases)",
)
