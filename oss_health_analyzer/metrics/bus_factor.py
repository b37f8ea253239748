"""Bus factor metric."""

from typing import Any

from oss_health_analyzer.metrics.base import MetricContext, MetricSpec, NumberValue
from oss_health_analyzer.vcs.base import RepositorySnapshot

# Share of all contributions the top contributors must cover
COVERAGE = 0.5


def calculate_bus_factor(contributors: list[dict[str, Any]]) -> NumberValue:
    """
    Minimum number of contributors covering half of all contributions.

    Contributors are taken in descending contribution order and counted
    until their running total reaches 50% of the overall total. A project
    without contributors has a bus factor of 0; otherwise it is at least 1.

    Example:
        >>> calculate_bus_factor([{"contributions": c} for c in (30, 30, 20, 10, 10)])
        NumberValue(value=2)
    """
    counts = sorted(
        (int(c.get("contributions") or 0) for c in contributors), reverse=True
    )
    total = sum(counts)
    if not counts or total == 0:
        return NumberValue(0)

    target = total * COVERAGE
    covered = 0
    bus_factor = 0
    for count in counts:
        covered += count
        bus_factor += 1
        if covered >= target:
            break
    return NumberValue(max(1, bus_factor))


def _compute(snapshot: RepositorySnapshot, _context: MetricContext) -> NumberValue:
    return calculate_bus_factor(snapshot.contributors)


METRIC = MetricSpec(
    id="bus-factor",
    name="Bus Factor",
    category="security",
    compute=_compute,
    precision=0,
    description="Minimum contributors whose loss would stall the project",
)
