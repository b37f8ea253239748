"""
Scoring thresholds.

Each metric maps to exactly one threshold variant:
- NumericThreshold: breakpoints with a score per breakpoint, interpolated
- BooleanThreshold: pass/fail scores
- CategoricalThreshold: level tag -> score lookup

Variants validate themselves at construction, so a bad table fails on load
instead of producing odd scores later.
"""

import copy
from enum import Enum
from typing import Any, Iterable, Mapping, NamedTuple


class Direction(str, Enum):
    """Which end of a numeric scale is healthy."""

    HIGHER_IS_BETTER = "higher-is-better"
    LOWER_IS_BETTER = "lower-is-better"


def _check_score(score: float, label: str) -> float:
    score = float(score)
    if not 0 <= score <= 100:
        raise ValueError(f"{label} must be between 0 and 100, got {score}.")
    return score


class _NumericFields(NamedTuple):
    thresholds: tuple[float, ...]
    scores: tuple[float, ...]
    direction: Direction


class NumericThreshold(_NumericFields):
    """
    Breakpoints and their scores.

    For higher-is-better the thresholds ascend; for lower-is-better they are
    listed worst to best, i.e. descending.
    """

    __slots__ = ()

    def __new__(
        cls,
        thresholds: Iterable[float],
        scores: Iterable[float],
        direction: Direction | str = Direction.HIGHER_IS_BETTER,
    ):
        thresholds = tuple(float(t) for t in thresholds)
        scores = tuple(_check_score(s, "Threshold score") for s in scores)
        direction = Direction(direction)

        if not thresholds:
            raise ValueError("Numeric thresholds need at least one breakpoint.")
        if len(thresholds) != len(scores):
            raise ValueError(
                f"thresholds and scores must have the same length "
                f"({len(thresholds)} != {len(scores)})."
            )

        pairs = zip(thresholds, thresholds[1:])
        if direction is Direction.HIGHER_IS_BETTER:
            ordered = all(a < b for a, b in pairs)
            expected = "strictly ascending"
        else:
            ordered = all(a > b for a, b in pairs)
            expected = "strictly descending"
        if not ordered:
            raise ValueError(
                f"{direction.value} thresholds must be {expected}: {list(thresholds)}"
            )

        return super().__new__(cls, thresholds, scores, direction)


class _BooleanFields(NamedTuple):
    pass_score: float
    fail_score: float


class BooleanThreshold(_BooleanFields):
    """Scores for a pass/fail metric."""

    __slots__ = ()

    def __new__(cls, pass_score: float = 100, fail_score: float = 0):
        return super().__new__(
            cls,
            _check_score(pass_score, "pass_score"),
            _check_score(fail_score, "fail_score"),
        )


class _CategoricalFields(NamedTuple):
    levels: dict[str, float]


class CategoricalThreshold(_CategoricalFields):
    """Level tag -> score. Tags not in the map score 0."""

    __slots__ = ()

    def __new__(cls, levels: Mapping[str, float]):
        if not levels:
            raise ValueError("Categorical thresholds need at least one level.")
        checked = {
            str(tag): _check_score(score, f"Level '{tag}' score")
            for tag, score in levels.items()
        }
        return super().__new__(cls, checked)

    def lookup(self, tag: str) -> float:
        return self.levels.get(tag, 0.0)


ThresholdConfig = NumericThreshold | BooleanThreshold | CategoricalThreshold

HIGHER = Direction.HIGHER_IS_BETTER
LOWER = Direction.LOWER_IS_BETTER

# Breakpoints follow CHAOSS/OpenSSF-style benchmarks. The first breakpoint of
# every numeric table is the floor of the scale.
DEFAULT_METRIC_THRESHOLDS: dict[str, ThresholdConfig] = {
    # Activity
    # Commits per week: <1 Poor, 1-5 Fair, 5-20 Good, >20 Excellent
    "commit-frequency": NumericThreshold([0, 1, 5, 20], [0, 40, 75, 100], HIGHER),
    # Days between releases: >180 Poor, 90-180 Fair, 30-90 Good, <30 Excellent
    "release-cadence": NumericThreshold([365, 180, 90, 30], [0, 40, 75, 100], LOWER),
    # Days since last push: >90 Poor, 30-90 Fair, 7-30 Good, <7 Excellent
    "last-activity": NumericThreshold([365, 90, 30, 7], [0, 40, 75, 100], LOWER),
    # PRs merged per month: <2 Poor, 2-10 Fair, 10-30 Good, >30 Excellent
    "pr-velocity": NumericThreshold([0, 2, 10, 30], [0, 40, 75, 100], HIGHER),
    # Community
    "contributor-count": NumericThreshold([1, 3, 10, 50], [10, 40, 75, 100], HIGHER),
    "new-contributors": NumericThreshold([0, 1, 3, 10], [0, 40, 75, 100], HIGHER),
    "pr-merge-rate": NumericThreshold([0, 50, 70, 85], [0, 40, 75, 100], HIGHER),
    # Maintenance
    "open-issues-ratio": NumericThreshold([90, 70, 50, 30], [0, 40, 75, 100], LOWER),
    # Hours to first response
    "issue-response-time": NumericThreshold(
        [336, 168, 72, 24], [0, 40, 75, 100], LOWER
    ),
    "stale-issues-percentage": NumericThreshold(
        [75, 50, 25, 10], [0, 40, 75, 100], LOWER
    ),
    "average-time-to-close": NumericThreshold(
        [180, 90, 30, 7], [0, 40, 75, 100], LOWER
    ),
    # Documentation
    # README points 0-5
    "readme-quality": NumericThreshold(
        [0, 1, 2, 3, 4, 5], [0, 20, 40, 60, 80, 100], HIGHER
    ),
    "documentation-directory": BooleanThreshold(100, 0),
    "wiki-presence": BooleanThreshold(100, 0),
    "changelog": BooleanThreshold(100, 0),
    # Security
    "security-policy": BooleanThreshold(100, 0),
    "code-of-conduct": BooleanThreshold(100, 0),
    "contributing-guidelines": BooleanThreshold(100, 0),
    "license": BooleanThreshold(100, 0),
    # Contributors covering 50% of contributions: 1 Poor, 2 Fair, 4+ Good
    "bus-factor": NumericThreshold([0, 1, 2, 4, 5], [0, 20, 40, 75, 100], HIGHER),
    # Governance
    "governance-docs": BooleanThreshold(100, 0),
    "openssf-badge": CategoricalThreshold(
        {
            "none": 0,
            "in-progress": 25,
            "passing": 50,
            "silver": 75,
            "gold": 100,
        }
    ),
    "foundation-affiliation": CategoricalThreshold(
        {
            # Top-tier foundations - graduated/TLP status
            "cncf-graduated": 100,
            "apache-tlp": 100,
            "lf-member": 100,
            "lfai-data": 100,
            "lf-edge": 100,
            # Mid-tier - incubating or member status
            "cncf-incubating": 90,
            "eclipse-member": 85,
            "openjs-member": 85,
            "cncf-sandbox": 80,
            "cncf-member": 80,
            # No foundation but has governance
            "none-with-governance": 50,
            # No foundation affiliation
            "none": 0,
        }
    ),
}

METRIC_THRESHOLDS: dict[str, ThresholdConfig] = copy.deepcopy(
    DEFAULT_METRIC_THRESHOLDS
)


def get_threshold(metric_id: str) -> ThresholdConfig:
    """
    Return the active threshold configuration for a metric.

    Raises:
        KeyError: If no threshold is configured for the metric.
    """
    try:
        return METRIC_THRESHOLDS[metric_id]
    except KeyError:
        raise KeyError(f"No threshold configured for metric '{metric_id}'.") from None


def threshold_from_dict(data: Mapping[str, Any]) -> ThresholdConfig:
    """
    Build a threshold variant from a config table.

    Accepted shapes:
        {type = "numeric", thresholds = [...], scores = [...], direction = "..."}
        {type = "boolean", pass_score = 100, fail_score = 0}
        {type = "categorical", levels = {tag = score, ...}}

    The type key may be omitted when the shape is unambiguous.
    """
    kind = data.get("type")
    if kind is None:
        if "thresholds" in data:
            kind = "numeric"
        elif "levels" in data:
            kind = "categorical"
        elif "pass_score" in data or "fail_score" in data:
            kind = "boolean"

    if kind == "numeric":
        return NumericThreshold(
            data["thresholds"],
            data["scores"],
            data.get("direction", Direction.HIGHER_IS_BETTER),
        )
    if kind == "boolean":
        return BooleanThreshold(
            data.get("pass_score", 100), data.get("fail_score", 0)
        )
    if kind == "categorical":
        return CategoricalThreshold(data["levels"])
    raise ValueError(f"Unknown threshold type: {kind!r}")


def apply_threshold_overrides(overrides: Mapping[str, Mapping[str, Any]]) -> None:
    """
    Apply threshold overrides on top of the defaults.

    Args:
        overrides: metric id -> threshold table (see threshold_from_dict).

    Raises:
        ValueError: If a metric id is unknown or a table is invalid. The
            active thresholds are left untouched in that case.
    """
    global METRIC_THRESHOLDS
    merged = copy.deepcopy(DEFAULT_METRIC_THRESHOLDS)
    if not overrides:
        METRIC_THRESHOLDS = merged
        return

    unknown = set(overrides) - set(DEFAULT_METRIC_THRESHOLDS)
    if unknown:
        raise ValueError(
            f"Threshold overrides include unknown metrics: {', '.join(sorted(unknown))}."
        )

    for metric_id, table in overrides.items():
        if not isinstance(table, Mapping):
            raise ValueError(f"Threshold for '{metric_id}' should be a table.")
        try:
            config = threshold_from_dict(table)
        except (KeyError, TypeError) as e:
            raise ValueError(f"Threshold for '{metric_id}' is incomplete: {e}") from e
        except ValueError as e:
            raise ValueError(f"Threshold for '{metric_id}' is invalid: {e}") from e
        if type(config) is not type(DEFAULT_METRIC_THRESHOLDS[metric_id]):
            raise ValueError(
                f"Threshold for '{metric_id}' must stay a "
                f"{type(DEFAULT_METRIC_THRESHOLDS[metric_id]).__name__}."
            )
        merged[metric_id] = config

    METRIC_THRESHOLDS = merged
