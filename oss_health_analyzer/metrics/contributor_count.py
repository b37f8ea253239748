"""Contributor count metric."""

from oss_health_analyzer.metrics.base import MetricContext, MetricSpec, NumberValue
from oss_health_analyzer.vcs.base import RepositorySnapshot


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> NumberValue:
    return NumberValue(len(snapshot.contributors))


METRIC = MetricSpec(
    id="contributor-count",
    name="Contributor Count",
    category="community",
    compute=_compute,
    unit="contributors",
    description="Total number of unique contributors",
)
