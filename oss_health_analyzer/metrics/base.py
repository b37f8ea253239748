"""
Shared metric types and context helpers.
"""

from datetime import datetime, timedelta
from typing import Any, Callable, NamedTuple

from oss_health_analyzer.vcs.base import RepositorySnapshot

# Look-back window used by every time-windowed metric
WINDOW_DAYS = 90


class NumberValue(NamedTuple):
    """A count, ratio or duration."""

    value: float


class BooleanValue(NamedTuple):
    """A present/absent signal."""

    value: bool


class CategoricalValue(NamedTuple):
    """A level tag such as a badge level or foundation tier."""

    tag: str


class UnknownValue(NamedTuple):
    """Missing or insufficient data."""

    reason: str = ""


RawMetricValue = NumberValue | BooleanValue | CategoricalValue | UnknownValue

UNKNOWN = UnknownValue()


class MetricContext(NamedTuple):
    """Context provided to metric computations."""

    now: datetime
    window_days: int = WINDOW_DAYS

    @property
    def window_start(self) -> datetime:
        return self.now - timedelta(days=self.window_days)


class MetricSpec(NamedTuple):
    """Specification for a tracked signal."""

    id: str
    name: str
    category: str
    compute: Callable[[RepositorySnapshot, MetricContext], RawMetricValue]
    unit: str = ""
    precision: int = 2
    description: str = ""


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp ('2024-01-01T00:00:00Z')."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None


def days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end."""
    return (end - start).total_seconds() / 86400


def commit_date(commit: dict[str, Any]) -> datetime | None:
    """Authored date of a REST commit object."""
    author = (commit.get("commit") or {}).get("author") or {}
    return parse_timestamp(author.get("date"))


def community_file_present(snapshot: RepositorySnapshot, key: str) -> bool:
    """Whether the community profile lists the given health file."""
    files = (snapshot.community_profile or {}).get("files") or {}
    return bool(files.get(key))


def root_file_names(snapshot: RepositorySnapshot, kind: str = "file") -> list[str]:
    """Names of root-level entries of the given type ('file' or 'dir')."""
    return [
        item.get("name", "")
        for item in snapshot.root_contents or []
        if item.get("type") == kind
    ]


def format_raw_value(raw: RawMetricValue, unit: str = "", precision: int = 2) -> str:
    """Human-readable display string for a raw metric value."""
    if isinstance(raw, UnknownValue):
        return "N/A"
    if isinstance(raw, BooleanValue):
        return "Yes" if raw.value else "No"
    if isinstance(raw, CategoricalValue):
        return raw.tag
    value = raw.value
    if float(value).is_integer():
        text = str(int(value))
    else:
        text = f"{value:.{precision}f}"
    if unit == "%":
        return f"{text}%"
    return f"{text} {unit}".strip()
