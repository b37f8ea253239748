"""Documentation directory metric."""

from oss_health_analyzer.metrics.base import (
    BooleanValue,
    MetricContext,
    MetricSpec,
    root_file_names,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot

DOCS_DIRECTORIES = {"docs", "doc", "documentation"}


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> BooleanValue:
    directories = root_file_names(snapshot, kind="dir")
    return BooleanValue(any(name.lower() in DOCS_DIRECTORIES for name in directories))


METRIC = MetricSpec(
    id="documentation-directory",
    name="Documentation Directory",
    category="documentation",
    compute=_compute,
    description="Presence of /docs or /documentation directory",
)
