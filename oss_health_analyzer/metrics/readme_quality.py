"""README quality metric."""

import re

from oss_health_analyzer.metrics.base import MetricContext, MetricSpec, NumberValue
from oss_health_analyzer.vcs.base import RepositorySnapshot

MIN_README_LENGTH = 500

_INSTALL_SECTION = re.compile(
    r"##?\s*(install|installation|getting started|setup)", re.IGNORECASE
)
_USAGE_SECTION = re.compile(r"##?\s*(usage|example|quick start)", re.IGNORECASE)
_BADGE = re.compile(r"!\[.*\]\(https://(img\.shields\.io|badge)", re.IGNORECASE)
_TOC = re.compile(r"##?\s*(table of contents|toc)", re.IGNORECASE)


def calculate_readme_quality(readme: str | None) -> NumberValue:
    """
    Scores README completeness on a 0-5 point scale.

    One point each for:
    - more than 500 characters
    - an installation / getting started section
    - a usage / example section
    - a shields.io style badge
    - a table of contents

    A missing README scores 0 points.
    """
    if not readme:
        return NumberValue(0)

    points = 0
    if len(readme) > MIN_README_LENGTH:
        points += 1
    for pattern in (_INSTALL_SECTION, _USAGE_SECTION, _BADGE, _TOC):
        if pattern.search(readme):
            points += 1
    return NumberValue(points)


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> NumberValue:
    return calculate_readme_quality(snapshot.readme)


METRIC = MetricSpec(
    id="readme-quality",
    name="README Quality Score",
    category="documentation",
    compute=_compute,
    unit="/ 5",
    description="Score based on README completeness (0-5 points)",
)
