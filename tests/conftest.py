"""
Shared fixtures for OSS Health Analyzer tests.
"""

from datetime import datetime, timezone

import pytest

import oss_health_analyzer.aggregation as aggregation
import oss_health_analyzer.config as config
import oss_health_analyzer.thresholds as thresholds
from oss_health_analyzer.metrics.base import MetricContext
from oss_health_analyzer.vcs.base import RepositorySnapshot

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_global_state(monkeypatch, tmp_path):
    """Isolate tests from local config files, env vars and overrides."""
    monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
    monkeypatch.setattr(config, "_VERBOSE", None)
    monkeypatch.setattr(config, "_CACHE_TTL", None)
    monkeypatch.setattr(config, "VERIFY_SSL", True)
    for name in ("VERBOSE", "CACHE_TTL", "MAX_ATTEMPTS", "MAX_PAGES"):
        monkeypatch.delenv(f"{config.ENV_PREFIX}{name}", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    yield
    thresholds.apply_threshold_overrides({})
    aggregation.apply_weight_overrides({})


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def context() -> MetricContext:
    return MetricContext(now=NOW)


@pytest.fixture
def make_snapshot():
    """Factory building a RepositorySnapshot with empty defaults."""

    def _make(**overrides) -> RepositorySnapshot:
        fields = {
            "repository": {},
            "commits": [],
            "contributors": [],
            "issues": [],
            "pull_requests": [],
            "releases": [],
            "community_profile": {"health_percentage": 0, "files": {}},
            "readme": None,
            "root_contents": [],
            "governance_files": [],
            "badge_level": None,
            "foundation_affiliation": None,
        }
        fields.update(overrides)
        return RepositorySnapshot(**fields)

    return _make
