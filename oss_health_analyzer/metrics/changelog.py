"""Changelog metric."""

from oss_health_analyzer.metrics.base import (
    BooleanValue,
    MetricContext,
    MetricSpec,
    root_file_names,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot

CHANGELOG_NAMES = {"CHANGELOG", "CHANGES", "HISTORY", "NEWS", "RELEASES"}


def has_changelog(file_names: list[str]) -> bool:
    """True if any root file is a changelog, whatever its extension."""
    return any(name.split(".")[0].upper() in CHANGELOG_NAMES for name in file_names)


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> BooleanValue:
    return BooleanValue(has_changelog(root_file_names(snapshot)))


METRIC = MetricSpec(
    id="changelog",
    name="Changelog",
    category="documentation",
    compute=_compute,
    description="Presence of a CHANGELOG (or CHANGES/HISTORY/NEWS) file",
)
