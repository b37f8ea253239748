"""OpenSSF Best Practices badge metric."""

from oss_health_analyzer.metrics.base import (
    CategoricalValue,
    MetricContext,
    MetricSpec,
    RawMetricValue,
    UnknownValue,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> RawMetricValue:
    if snapshot.badge_level is None:
        return UnknownValue("Badge lookup returned no data.")
    return CategoricalValue(snapshot.badge_level)


METRIC = MetricSpec(
    id="openssf-badge",
    name="OpenSSF Best Practices Badge",
    category="governance",
    compute=_compute,
    description="OpenSSF Best Practices badge level",
)
