"""
Tests for the community metrics.
"""

from datetime import datetime, timedelta, timezone

import pytest

from oss_health_analyzer.metrics.base import UnknownValue
from oss_health_analyzer.metrics.contributor_count import METRIC as CONTRIBUTOR_COUNT
from oss_health_analyzer.metrics.new_contributors import calculate_new_contributors
from oss_health_analyzer.metrics.pr_merge_rate import calculate_pr_merge_rate

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _commit(days_ago: float, login: str | None) -> dict:
    date = (NOW - timedelta(days=days_ago)).strftime("%Y-%m-%dT%H:%M:%SZ")
    commit = {"commit": {"author": {"date": date}}}
    commit["author"] = {"login": login} if login else None
    return commit


def test_contributor_count(make_snapshot, context):
    snapshot = make_snapshot(contributors=[{"login": "a"}, {"login": "b"}])
    assert CONTRIBUTOR_COUNT.compute(snapshot, context).value == 2


class TestNewContributors:
    def test_counts_authors_first_seen_in_window(self, context):
        commits = [
            _commit(5, "alice"),
            _commit(40, "alice"),
            _commit(10, "bob"),
            _commit(120, "carol"),
        ]
        assert calculate_new_contributors(commits, context).value == 2

    def test_earliest_commit_decides(self, context):
        commits = [_commit(5, "dave"), _commit(100, "dave")]
        assert calculate_new_contributors(commits, context).value == 0

    def test_commits_without_login_are_ignored(self, context):
        assert calculate_new_contributors([_commit(1, None)], context).value == 0


class TestPrMergeRate:
    def test_merged_over_resolved(self):
        prs = (
            [{"state": "closed", "merged_at": "2024-05-01T00:00:00Z"}] * 3
            + [{"state": "closed", "merged_at": None}]
            + [{"state": "open", "merged_at": None}] * 5
        )
        assert calculate_pr_merge_rate(prs).value == pytest.approx(75)

    def test_no_resolved_prs_is_unknown(self):
        prs = [{"state": "open", "merged_at": None}]
        assert isinstance(calculate_pr_merge_rate(prs), UnknownValue)
        assert isinstance(calculate_pr_merge_rate([]), UnknownValue)
