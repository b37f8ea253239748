"""
Tests for the command-line interface.
"""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from oss_health_analyzer import config
from oss_health_analyzer.aggregation import calculate_health_score
from oss_health_analyzer.cache import FetchResult
from oss_health_analyzer.cli import app, describe_threshold, result_to_dict
from oss_health_analyzer.core import EvaluationResult
from oss_health_analyzer.errors import NotFoundError, RateLimitedError
from oss_health_analyzer.metrics import load_metric_specs
from oss_health_analyzer.metrics.base import BooleanValue, NumberValue, UnknownValue
from oss_health_analyzer.scoring import score_metrics
from oss_health_analyzer.thresholds import BooleanThreshold, CategoricalThreshold

runner = CliRunner()


@pytest.fixture
def evaluation() -> EvaluationResult:
    raw_values = {
        "commit-frequency": NumberValue(12),
        "contributor-count": NumberValue(25),
        "license": BooleanValue(True),
        "openssf-badge": UnknownValue(),
    }
    metrics = score_metrics(raw_values, load_metric_specs())
    return EvaluationResult(
        owner="psf",
        name="requests",
        repo_url="https://github.com/psf/requests",
        metrics=metrics,
        health_score=calculate_health_score(metrics),
        fetches={"repository": True, "commits": False},
        evaluated_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
    )


def test_evaluate_prints_report(evaluation):
    with patch(
        "oss_health_analyzer.cli.evaluate_repository_sync", return_value=evaluation
    ) as mock_evaluate:
        result = runner.invoke(app, ["evaluate", "psf/requests"])

    assert result.exit_code == 0
    assert "psf/requests" in result.output
    assert "Overall" in result.output
    assert "Categories" in result.output
    args, kwargs = mock_evaluate.call_args
    assert args == ("psf", "requests")
    assert kwargs["client"] is not None


def test_evaluate_json_output(evaluation):
    with patch(
        "oss_health_analyzer.cli.evaluate_repository_sync", return_value=evaluation
    ):
        result = runner.invoke(app, ["evaluate", "psf/requests", "--json"])

    assert result.exit_code == 0
    document = json.loads(result.output)
    assert document["repository"] == "psf/requests"
    assert document["overall_grade"] == evaluation.health_score.overall_grade
    assert {m["id"] for m in document["metrics"]} == {
        "commit-frequency",
        "contributor-count",
        "license",
        "openssf-badge",
    }
    assert document["fetches"] == {"repository": True, "commits": False}
    assert document["categories"]["documentation"]["metrics"] == []


def test_evaluate_flags_set_configuration(evaluation):
    with patch(
        "oss_health_analyzer.cli.evaluate_repository_sync", return_value=evaluation
    ), patch("oss_health_analyzer.cli.get_vcs_provider") as mock_provider:
        result = runner.invoke(
            app,
            ["evaluate", "psf/requests", "--insecure", "--verbose", "--token", "ghp_x"],
        )

    assert result.exit_code == 0
    assert config.get_verify_ssl() is False
    assert config.is_verbose() is True
    mock_provider.assert_called_once_with("github", token="ghp_x")


def test_evaluate_invalid_identifier():
    result = runner.invoke(app, ["evaluate", "requests"])
    assert result.exit_code == 1
    assert "OWNER/REPO" in result.output


def test_evaluate_acquisition_error_prints_hint():
    with patch(
        "oss_health_analyzer.cli.evaluate_repository_sync",
        side_effect=NotFoundError("GitHub API returned 404", 404),
    ):
        result = runner.invoke(app, ["evaluate", "psf/nope"])

    assert result.exit_code == 1
    assert "Repository not found" in result.output


def test_evaluate_invalid_config():
    (config.PROJECT_ROOT / "pyproject.toml").write_text(
        """
[tool.oss-health-analyzer.weights]
popularity = 0.5
"""
    )
    result = runner.invoke(app, ["evaluate", "psf/requests"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_thresholds_command():
    result = runner.invoke(app, ["thresholds"])
    assert result.exit_code == 0
    assert "Metric Thresholds" in result.output
    assert "bus-factor" in result.output


def test_rate_limit_command():
    client = MagicMock()
    client.get_rate_limit = AsyncMock(
        return_value=FetchResult({"limit": 60, "remaining": 42, "reset": 0}, False)
    )
    with patch("oss_health_analyzer.cli.get_vcs_provider", return_value=client):
        result = runner.invoke(app, ["rate-limit"])

    assert result.exit_code == 0
    assert "42" in result.output


def test_rate_limit_command_error():
    client = MagicMock()
    client.get_rate_limit = AsyncMock(side_effect=RateLimitedError("limited", 429))
    with patch("oss_health_analyzer.cli.get_vcs_provider", return_value=client):
        result = runner.invoke(app, ["rate-limit"])

    assert result.exit_code == 1
    assert "GITHUB_TOKEN" in result.output


def test_describe_threshold():
    assert describe_threshold(BooleanThreshold(100, 0)) == ("boolean", "yes→100, no→0")
    kind, levels = describe_threshold(CategoricalThreshold({"gold": 100}))
    assert kind == "categorical"
    assert levels == "gold→100"


def test_result_to_dict_rounds_scores(evaluation):
    document = result_to_dict(evaluation)
    assert document["evaluated_at"] == "2024-06-01T00:00:00+00:00"
    for metric in document["metrics"]:
        assert metric["score"] == round(metric["score"], 1)
