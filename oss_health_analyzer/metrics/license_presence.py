"""License metric."""

from oss_health_analyzer.metrics.base import (
    BooleanValue,
    MetricContext,
    MetricSpec,
    community_file_present,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> BooleanValue:
    present = community_file_present(snapshot, "license") or bool(
        snapshot.repository.get("license")
    )
    return BooleanValue(present)


METRIC = MetricSpec(
    id="license",
    name="License",
    category="security",
    compute=_compute,
    description="Presence of a license file",
)
