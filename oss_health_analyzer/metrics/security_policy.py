"""Security policy metric."""

from oss_health_analyzer.metrics.base import (
    BooleanValue,
    MetricContext,
    MetricSpec,
    community_file_present,
    root_file_names,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> BooleanValue:
    # The community profile does not always report SECURITY.md
    present = community_file_present(snapshot, "security") or any(
        name.upper().startswith("SECURITY") for name in root_file_names(snapshot)
    )
    return BooleanValue(present)


METRIC = MetricSpec(
    id="security-policy",
    name="Security Policy",
    category="security",
    compute=_compute,
    description="Presence of SECURITY.md",
)
