"""Issue response time metric."""

from oss_health_analyzer.metrics.base import (
    MetricContext,
    MetricSpec,
    UnknownValue,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def _compute(_snapshot: RepositorySnapshot, _context: MetricContext) -> UnknownValue:
    # First-response times need per-issue comment timelines, which are not
    # part of the fetched resources. Scored as neutral until they are.
    return UnknownValue("Issue comment timelines are not fetched.")


METRIC = MetricSpec(
    id="issue-response-time",
    name="Issue Response Time",
    category="maintenance",
    compute=_compute,
    unit="hours",
    description="Median hours until first response on issues",
)
