"""
Tests for the security metrics.
"""

from oss_health_analyzer.metrics.base import BooleanValue, NumberValue
from oss_health_analyzer.metrics.bus_factor import calculate_bus_factor
from oss_health_analyzer.metrics.code_of_conduct import METRIC as CODE_OF_CONDUCT
from oss_health_analyzer.metrics.contributing_guidelines import METRIC as CONTRIBUTING
from oss_health_analyzer.metrics.license_presence import METRIC as LICENSE
from oss_health_analyzer.metrics.security_policy import METRIC as SECURITY_POLICY


def _profile(**files) -> dict:
    return {"health_percentage": 50, "files": files}


def _contributors(*counts: int) -> list[dict]:
    return [{"login": f"u{i}", "contributions": c} for i, c in enumerate(counts)]


class TestBusFactor:
    def test_two_contributors_cover_half(self):
        assert calculate_bus_factor(_contributors(30, 30, 20, 10, 10)) == NumberValue(2)

    def test_input_order_does_not_matter(self):
        assert calculate_bus_factor(_contributors(10, 20, 30, 10, 30)) == NumberValue(2)

    def test_dominant_contributor(self):
        assert calculate_bus_factor(_contributors(90, 5, 5)) == NumberValue(1)

    def test_even_spread(self):
        assert calculate_bus_factor(_contributors(*([10] * 10))) == NumberValue(5)

    def test_no_contributors(self):
        assert calculate_bus_factor([]) == NumberValue(0)

    def test_contributors_without_contributions(self):
        assert calculate_bus_factor(_contributors(0, 0)) == NumberValue(0)


def test_community_files(make_snapshot, context):
    snapshot = make_snapshot(
        community_profile=_profile(
            code_of_conduct={"key": "contributor_covenant"},
            contributing={"url": "https://example.com"},
            license=None,
        )
    )
    assert CODE_OF_CONDUCT.compute(snapshot, context) == BooleanValue(True)
    assert CONTRIBUTING.compute(snapshot, context) == BooleanValue(True)
    assert LICENSE.compute(snapshot, context) == BooleanValue(False)
    assert SECURITY_POLICY.compute(snapshot, context) == BooleanValue(False)


def test_license_from_repository_metadata(make_snapshot, context):
    snapshot = make_snapshot(repository={"license": {"spdx_id": "MIT"}})
    assert LICENSE.compute(snapshot, context) == BooleanValue(True)


def test_security_policy_from_root_file(make_snapshot, context):
    snapshot = make_snapshot(root_contents=[{"name": "SECURITY.md", "type": "file"}])
    assert SECURITY_POLICY.compute(snapshot, context) == BooleanValue(True)


def test_missing_community_profile(make_snapshot, context):
    snapshot = make_snapshot(community_profile={})
    assert CODE_OF_CONDUCT.compute(snapshot, context) == BooleanValue(False)
