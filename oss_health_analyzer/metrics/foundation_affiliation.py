"""Foundation affiliation metric."""

from oss_health_analyzer.metrics.base import (
    CategoricalValue,
    MetricContext,
    MetricSpec,
    RawMetricValue,
    UnknownValue,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> RawMetricValue:
    if snapshot.foundation_affiliation is None:
        return UnknownValue("Foundation affiliation could not be determined.")
    return CategoricalValue(snapshot.foundation_affiliation)


METRIC = MetricSpec(
    id="foundation-affiliation",
    name="Foundation Affiliation",
    category="governance",
    compute=_compute,
    description="Affiliation with CNCF, Apache, Linux Foundation, etc.",
)
