"""Governance documents metric."""

from oss_health_analyzer.metrics.base import BooleanValue, MetricContext, MetricSpec
from oss_health_analyzer.vcs.base import RepositorySnapshot


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> BooleanValue:
    return BooleanValue(bool(snapshot.governance_files))


METRIC = MetricSpec(
    id="governance-docs",
    name="Governance Documentation",
    category="governance",
    compute=_compute,
    description="Presence of GOVERNANCE.md, MAINTAINERS or CODEOWNERS files",
)
