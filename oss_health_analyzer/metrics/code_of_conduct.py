"""Code of conduct metric."""

from oss_health_analyzer.metrics.base import (
    BooleanValue,
    MetricContext,
    MetricSpec,
    community_file_present,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> BooleanValue:
    return BooleanValue(community_file_present(snapshot, "code_of_conduct"))


METRIC = MetricSpec(
    id="code-of-conduct",
    name="Code of Conduct",
    category="security",
    compute=_compute,
    description="Presence of CODE_OF_CONDUCT.md",
)
