"""
Tests for the maintenance metrics.
"""

from datetime import datetime, timedelta, timezone

import pytest

from oss_health_analyzer.metrics.base import NumberValue, UnknownValue
from oss_health_analyzer.metrics.issue_response_time import METRIC as RESPONSE_TIME
from oss_health_analyzer.metrics.open_issues_ratio import calculate_open_issues_ratio
from oss_health_analyzer.metrics.stale_issues import calculate_stale_issues_percentage
from oss_health_analyzer.metrics.time_to_close import calculate_average_time_to_close

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _iso(days_ago: float) -> str:
    return (NOW - timedelta(days=days_ago)).strftime("%Y-%m-%dT%H:%M:%SZ")


def test_open_issues_ratio():
    issues = [{"state": "open"}] * 3 + [{"state": "closed"}] * 7
    assert calculate_open_issues_ratio(issues).value == pytest.approx(30)


def test_open_issues_ratio_skips_pull_requests():
    issues = [{"state": "open", "pull_request": {}}, {"state": "closed"}]
    assert calculate_open_issues_ratio(issues).value == 0


def test_open_issues_ratio_without_issues_is_unknown():
    assert isinstance(calculate_open_issues_ratio([]), UnknownValue)


def test_issue_response_time_is_unknown(make_snapshot, context):
    assert isinstance(RESPONSE_TIME.compute(make_snapshot(), context), UnknownValue)


class TestStaleIssues:
    def test_zero_open_issues_is_zero_percent(self, context):
        issues = [{"state": "closed", "updated_at": _iso(200)}]
        assert calculate_stale_issues_percentage(issues, context) == NumberValue(0)

    def test_percentage_of_open_issues_without_recent_update(self, context):
        issues = [
            {"state": "open", "updated_at": _iso(100)},
            {"state": "open", "updated_at": _iso(10)},
            {"state": "open", "updated_at": _iso(91)},
            {"state": "open", "updated_at": _iso(89)},
            {"state": "closed", "updated_at": _iso(300)},
        ]
        assert calculate_stale_issues_percentage(issues, context).value == 50


class TestAverageTimeToClose:
    def test_mean_days(self):
        issues = [
            {"state": "closed", "created_at": _iso(30), "closed_at": _iso(20)},
            {"state": "closed", "created_at": _iso(50), "closed_at": _iso(20)},
            {"state": "open", "created_at": _iso(500), "closed_at": None},
        ]
        assert calculate_average_time_to_close(issues).value == pytest.approx(20)

    def test_no_closed_issues_is_unknown(self):
        assert isinstance(
            calculate_average_time_to_close([{"state": "open"}]), UnknownValue
        )
