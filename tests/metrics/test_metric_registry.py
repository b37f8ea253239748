"""
Tests for the metric registry and raw computation.
"""

from types import SimpleNamespace

from oss_health_analyzer import metrics
from oss_health_analyzer.metrics.base import (
    MetricContext,
    MetricSpec,
    NumberValue,
    UnknownValue,
)


def _spec(metric_id: str, compute=None) -> MetricSpec:
    def _compute(_snapshot, _context: MetricContext):
        return NumberValue(1)

    return MetricSpec(
        id=metric_id, name=metric_id.title(), category="activity", compute=compute or _compute
    )


def test_builtin_registry_has_all_metrics():
    specs = metrics.load_metric_specs()
    assert len(specs) == 23
    assert specs[0].id == "commit-frequency"
    assert specs[-1].id == "foundation-affiliation"
    categories = {spec.category for spec in specs}
    assert categories == {
        "activity",
        "community",
        "maintenance",
        "documentation",
        "security",
        "governance",
    }


def test_load_builtin_metric_specs_filters_missing_metric(monkeypatch):
    """Modules without METRIC are skipped."""
    spec = _spec("builtin")
    modules = {
        "mod.with.metric": SimpleNamespace(METRIC=spec),
        "mod.without.metric": SimpleNamespace(),
    }
    monkeypatch.setattr(metrics, "_BUILTIN_MODULES", list(modules))
    monkeypatch.setattr(metrics, "import_module", modules.__getitem__)

    assert metrics._load_builtin_metric_specs() == [spec]


def test_load_metric_specs_deduplicates(monkeypatch):
    specs = [_spec("a"), _spec("b"), _spec("a")]
    monkeypatch.setattr(metrics, "_load_builtin_metric_specs", lambda: specs)
    assert [spec.id for spec in metrics.load_metric_specs()] == ["a", "b"]


def test_get_metric_spec():
    assert metrics.get_metric_spec("bus-factor").name == "Bus Factor"


def test_compute_raw_metrics_for_empty_snapshot(make_snapshot, now):
    raw = metrics.compute_raw_metrics(make_snapshot(), now=now)
    assert list(raw) == [spec.id for spec in metrics.load_metric_specs()]
    assert raw["commit-frequency"] == NumberValue(0)
    assert raw["stale-issues-percentage"] == NumberValue(0)
    assert raw["bus-factor"] == NumberValue(0)
    assert isinstance(raw["release-cadence"], UnknownValue)
    assert isinstance(raw["openssf-badge"], UnknownValue)


def test_compute_failure_becomes_unknown(make_snapshot, now):
    def broken(_snapshot, _context):
        raise KeyError("contributions")

    specs = [_spec("ok"), _spec("broken", compute=broken)]
    raw = metrics.compute_raw_metrics(make_snapshot(), now=now, specs=specs)
    assert raw["ok"] == NumberValue(1)
    assert isinstance(raw["broken"], UnknownValue)
    assert "contributions" in raw["broken"].reason
