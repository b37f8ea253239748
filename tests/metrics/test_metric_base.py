"""
Tests for shared metric helpers.
"""

from datetime import datetime, timedelta, timezone

from oss_health_analyzer.metrics.base import (
    BooleanValue,
    CategoricalValue,
    MetricContext,
    NumberValue,
    UnknownValue,
    commit_date,
    format_raw_value,
    parse_timestamp,
)


def test_parse_timestamp():
    assert parse_timestamp("2024-01-02T03:04:05Z") == datetime(
        2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc
    )
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None
    assert parse_timestamp("yesterday") is None


def test_commit_date():
    commit = {"commit": {"author": {"date": "2024-01-01T00:00:00Z"}}}
    assert commit_date(commit).year == 2024
    assert commit_date({}) is None


def test_window_start():
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    context = MetricContext(now=now)
    assert context.window_start == now - timedelta(days=90)
    assert MetricContext(now=now, window_days=30).window_start == now - timedelta(days=30)


def test_format_raw_value():
    assert format_raw_value(UnknownValue("x")) == "N/A"
    assert format_raw_value(BooleanValue(True)) == "Yes"
    assert format_raw_value(BooleanValue(False)) == "No"
    assert format_raw_value(CategoricalValue("gold")) == "gold"
    assert format_raw_value(NumberValue(3.0), "days") == "3 days"
    assert format_raw_value(NumberValue(3.14159), "days", 1) == "3.1 days"
    assert format_raw_value(NumberValue(42.5), "%", 1) == "42.5%"
    assert format_raw_value(NumberValue(7)) == "7"
