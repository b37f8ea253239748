"""Contributing guidelines metric."""

from oss_health_analyzer.metrics.base import (
    BooleanValue,
    MetricContext,
    MetricSpec,
    community_file_present,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> BooleanValue:
    return BooleanValue(community_file_present(snapshot, "contributing"))


METRIC = MetricSpec(
    id="contributing-guidelines",
    name="Contributing Guidelines",
    category="security",
    compute=_compute,
    description="Presence of CONTRIBUTING.md",
)
