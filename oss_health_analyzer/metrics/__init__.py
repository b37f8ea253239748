"""
Metric registry and computation engine for OSS Health Analyzer.

Each built-in metric lives in its own module exporting a METRIC spec.
"""

from datetime import datetime, timezone
from importlib import import_module

from rich.console import Console

from oss_health_analyzer.metrics.base import (
    WINDOW_DAYS,
    BooleanValue,
    CategoricalValue,
    MetricContext,
    MetricSpec,
    NumberValue,
    RawMetricValue,
    UnknownValue,
    format_raw_value,
)
from oss_health_analyzer.vcs.base import RepositorySnapshot

console = Console(stderr=True)

__all__ = [
    "WINDOW_DAYS",
    "BooleanValue",
    "CategoricalValue",
    "MetricContext",
    "MetricSpec",
    "NumberValue",
    "RawMetricValue",
    "UnknownValue",
    "compute_raw_metrics",
    "format_raw_value",
    "get_metric_spec",
    "load_metric_specs",
]

# Registry order is display order
_BUILTIN_MODULES = [
    # Activity
    "oss_health_analyzer.metrics.commit_frequency",
    "oss_health_analyzer.metrics.release_cadence",
    "oss_health_analyzer.metrics.last_activity",
    "oss_health_analyzer.metrics.pr_velocity",
    # Community
    "oss_health_analyzer.metrics.contributor_count",
    "oss_health_analyzer.metrics.new_contributors",
    "oss_health_analyzer.metrics.pr_merge_rate",
    # Maintenance
    "oss_health_analyzer.metrics.open_issues_ratio",
    "oss_health_analyzer.metrics.issue_response_time",
    "oss_health_analyzer.metrics.stale_issues",
    "oss_health_analyzer.metrics.time_to_close",
    # Documentation
    "oss_health_analyzer.metrics.readme_quality",
    "oss_health_analyzer.metrics.documentation_directory",
    "oss_health_analyzer.metrics.wiki_presence",
    "oss_health_analyzer.metrics.changelog",
    # Security
    "oss_health_analyzer.metrics.security_policy",
    "oss_health_analyzer.metrics.code_of_conduct",
    "oss_health_analyzer.metrics.contributing_guidelines",
    "oss_health_analyzer.metrics.license_presence",
    "oss_health_analyzer.metrics.bus_factor",
    # Governance
    "oss_health_analyzer.metrics.governance_docs",
    "oss_health_analyzer.metrics.openssf_badge",
    "oss_health_analyzer.metrics.foundation_affiliation",
]


def _load_builtin_metric_specs() -> list[MetricSpec]:
    specs: list[MetricSpec] = []
    for module_path in _BUILTIN_MODULES:
        module = import_module(module_path)
        spec = getattr(module, "METRIC", None)
        if isinstance(spec, MetricSpec):
            specs.append(spec)
    return specs


def load_metric_specs() -> list[MetricSpec]:
    """
    Return the registered metric specs in display order.

    Modules without a METRIC are skipped; duplicate ids keep the first
    registration.
    """
    seen: set[str] = set()
    specs = []
    for spec in _load_builtin_metric_specs():
        if spec.id in seen:
            continue
        seen.add(spec.id)
        specs.append(spec)
    return specs


def get_metric_spec(metric_id: str) -> MetricSpec:
    """
    Look up a metric spec by id.

    Raises:
        KeyError: If no metric with that id is registered.
    """
    for spec in load_metric_specs():
        if spec.id == metric_id:
            return spec
    raise KeyError(f"Unknown metric '{metric_id}'.")


def compute_raw_metrics(
    snapshot: RepositorySnapshot,
    now: datetime | None = None,
    specs: list[MetricSpec] | None = None,
) -> dict[str, RawMetricValue]:
    """
    Compute raw values for every metric from an acquired snapshot.

    A metric whose computation trips over malformed payload data is reported
    as unknown instead of failing the whole evaluation.

    Args:
        snapshot: Fully resolved acquisition data.
        now: Reference time for windowed metrics (defaults to current UTC).
        specs: Metrics to compute (defaults to the registry).

    Returns:
        Dict mapping metric id to its raw value, in registry order.
    """
    context = MetricContext(now=now or datetime.now(timezone.utc))
    raw_values: dict[str, RawMetricValue] = {}
    for spec in specs if specs is not None else load_metric_specs():
        try:
            raw_values[spec.id] = spec.compute(snapshot, context)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            console.print(
                f"[yellow]Note: Could not compute {spec.name}: {e}[/yellow]"
            )
            raw_values[spec.id] = UnknownValue(f"Computation failed: {e}")
    return raw_values
