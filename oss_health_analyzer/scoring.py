"""
Scoring engine for OSS Health Analyzer.

Converts raw metric values into 0-100 scores and health levels using the
threshold table in oss_health_analyzer.thresholds.
"""

import math
from enum import Enum
from typing import Mapping, NamedTuple

from oss_health_analyzer.metrics.base import (
    BooleanValue,
    CategoricalValue,
    MetricSpec,
    NumberValue,
    RawMetricValue,
    UnknownValue,
    format_raw_value,
)
from oss_health_analyzer.thresholds import (
    BooleanThreshold,
    CategoricalThreshold,
    Direction,
    NumericThreshold,
    ThresholdConfig,
    get_threshold,
)

# Neutral score for metrics without data
UNKNOWN_SCORE = 50.0


class ScoreLevel(str, Enum):
    """Health level of a 0-100 score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    CRITICAL = "Critical"


# (minimum score, level), checked top-down
LEVEL_BANDS = (
    (80, ScoreLevel.EXCELLENT),
    (60, ScoreLevel.GOOD),
    (40, ScoreLevel.FAIR),
    (20, ScoreLevel.POOR),
)


class ScoreResult(NamedTuple):
    score: float
    level: ScoreLevel


class Metric(NamedTuple):
    """A scored health metric."""

    id: str
    name: str
    category: str
    raw_value: RawMetricValue
    score: float
    level: ScoreLevel
    display_value: str


def level_for_score(score: float) -> ScoreLevel:
    """Map a 0-100 score to its health level."""
    for minimum, level in LEVEL_BANDS:
        if score >= minimum:
            return level
    return ScoreLevel.CRITICAL


def _lerp(x: float, x0: float, x1: float, y0: float, y1: float) -> float:
    return y0 + (x - x0) / (x1 - x0) * (y1 - y0)


def interpolate(value: float, config: NumericThreshold) -> float:
    """
    Score a numeric value against breakpoints.

    Values beyond either end take the end score. Between two breakpoints the
    score is linearly interpolated; a value equal to a breakpoint gets that
    breakpoint's score exactly.

    Example:
        >>> interpolate(10, NumericThreshold([0, 1, 5, 20], [0, 40, 75, 100]))
        83.33333333333333
    """
    thresholds, scores = config.thresholds, config.scores

    for threshold, score in zip(thresholds, scores):
        if value == threshold:
            return score

    if config.direction is Direction.HIGHER_IS_BETTER:
        if value <= thresholds[0]:
            return scores[0]
        if value >= thresholds[-1]:
            return scores[-1]
        for i in range(len(thresholds) - 1):
            low, high = thresholds[i], thresholds[i + 1]
            if low < value < high:
                return _lerp(value, low, high, scores[i], scores[i + 1])
    else:
        # Descending: thresholds[0] is the worst value
        if value >= thresholds[0]:
            return scores[0]
        if value <= thresholds[-1]:
            return scores[-1]
        for i in range(len(thresholds) - 1):
            worse, better = thresholds[i], thresholds[i + 1]
            if better < value < worse:
                return _lerp(value, worse, better, scores[i], scores[i + 1])

    # Unreachable for validated thresholds
    return scores[-1]


def _unknown_result() -> ScoreResult:
    return ScoreResult(UNKNOWN_SCORE, level_for_score(UNKNOWN_SCORE))


def score(
    metric_id: str,
    raw_value: RawMetricValue,
    thresholds: Mapping[str, ThresholdConfig] | None = None,
) -> ScoreResult:
    """
    Score one raw metric value.

    Args:
        metric_id: Metric identifier used to look up its threshold.
        raw_value: Value produced by the metric computation.
        thresholds: Optional threshold table (defaults to the active table).

    Returns:
        ScoreResult with a score in [0, 100] and its level. Unknown values
        score a neutral 50 (Fair).

    Raises:
        KeyError: If the metric has no configured threshold.
        TypeError: If the raw value kind does not match the threshold kind.
    """
    if thresholds is None:
        config = get_threshold(metric_id)
    elif metric_id in thresholds:
        config = thresholds[metric_id]
    else:
        raise KeyError(f"No threshold configured for metric '{metric_id}'.")

    if isinstance(raw_value, UnknownValue):
        return _unknown_result()

    if isinstance(config, NumericThreshold):
        if not isinstance(raw_value, NumberValue):
            raise TypeError(
                f"Metric '{metric_id}' expects a number, got {type(raw_value).__name__}."
            )
        value = float(raw_value.value)
        if math.isnan(value):
            return _unknown_result()
        result = interpolate(value, config)
    elif isinstance(config, BooleanThreshold):
        if not isinstance(raw_value, BooleanValue):
            raise TypeError(
                f"Metric '{metric_id}' expects a boolean, got {type(raw_value).__name__}."
            )
        result = config.pass_score if raw_value.value else config.fail_score
    elif isinstance(config, CategoricalThreshold):
        if not isinstance(raw_value, CategoricalValue):
            raise TypeError(
                f"Metric '{metric_id}' expects a level tag, got {type(raw_value).__name__}."
            )
        result = config.lookup(raw_value.tag)
    else:
        raise TypeError(f"Unsupported threshold type: {type(config).__name__}")

    result = min(100.0, max(0.0, float(result)))
    return ScoreResult(result, level_for_score(result))


def score_metrics(
    raw_values: Mapping[str, RawMetricValue],
    specs: list[MetricSpec],
    thresholds: Mapping[str, ThresholdConfig] | None = None,
) -> list[Metric]:
    """
    Score every computed metric, keeping the registry order of specs.

    Specs without a computed raw value are skipped.
    """
    metrics = []
    for spec in specs:
        if spec.id not in raw_values:
            continue
        raw = raw_values[spec.id]
        result = score(spec.id, raw, thresholds)
        metrics.append(
            Metric(
                id=spec.id,
                name=spec.name,
                category=spec.category,
                raw_value=raw,
                score=result.score,
                level=result.level,
                display_value=format_raw_value(raw, spec.unit, spec.precision),
            )
        )
    return metrics
