"""Wiki presence metric."""

from oss_health_analyzer.metrics.base import BooleanValue, MetricContext, MetricSpec
from oss_health_analyzer.vcs.base import RepositorySnapshot


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> BooleanValue:
    return BooleanValue(bool(snapshot.repository.get("has_wiki")))


METRIC = MetricSpec(
    id="wiki-presence",
    name="Wiki Presence",
    category="documentation",
    compute=_compute,
    description="Whether repository has wiki enabled",
)
