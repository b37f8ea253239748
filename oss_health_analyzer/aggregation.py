"""
Aggregation of metric scores into category scores and an overall grade.
"""

import copy
from typing import Mapping, NamedTuple

from oss_health_analyzer.scoring import Metric


class CategoryDefinition(NamedTuple):
    id: str
    name: str
    weight: float


class Category(NamedTuple):
    """A scored metric category."""

    id: str
    name: str
    weight: float
    metrics: list[Metric]
    score: float
    grade: str


class Summary(NamedTuple):
    text: str
    strengths: list[str]
    improvements: list[str]


class HealthScore(NamedTuple):
    """Overall health of a repository."""

    overall_score: float
    overall_grade: str
    categories: dict[str, Category]
    summary: Summary


DEFAULT_CATEGORIES: dict[str, CategoryDefinition] = {
    "activity": CategoryDefinition("activity", "Activity Metrics", 0.20),
    "community": CategoryDefinition("community", "Community Metrics", 0.20),
    "maintenance": CategoryDefinition("maintenance", "Maintenance Metrics", 0.20),
    "documentation": CategoryDefinition(
        "documentation", "Documentation Metrics", 0.15
    ),
    "security": CategoryDefinition("security", "Security & Governance", 0.15),
    "governance": CategoryDefinition("governance", "Governance", 0.10),
}

CATEGORIES: dict[str, CategoryDefinition] = copy.deepcopy(DEFAULT_CATEGORIES)

# (minimum score, grade), checked top-down
GRADE_BANDS = (
    (97, "A+"),
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)

STRENGTH_THRESHOLD = 75
IMPROVEMENT_THRESHOLD = 50
MAX_SUMMARY_ITEMS = 3

SUMMARY_TEXTS = (
    (
        80,
        "This project demonstrates excellent overall health with strong "
        "practices across multiple areas.",
    ),
    (
        60,
        "This project shows good health fundamentals with some areas that "
        "could be strengthened.",
    ),
    (40, "This project has room for improvement in several key health indicators."),
)
FALLBACK_SUMMARY_TEXT = (
    "This project would benefit significantly from improvements to its health "
    "practices."
)


def apply_weight_overrides(overrides: Mapping[str, float]) -> None:
    """
    Apply category weight overrides on top of the defaults.

    Args:
        overrides: category id -> weight in (0, 1].

    Raises:
        ValueError: If a category id is unknown or a weight is out of range.
    """
    global CATEGORIES
    merged = copy.deepcopy(DEFAULT_CATEGORIES)
    if not overrides:
        CATEGORIES = merged
        return

    unknown = set(overrides) - set(DEFAULT_CATEGORIES)
    if unknown:
        raise ValueError(
            f"Weight overrides include unknown categories: {', '.join(sorted(unknown))}."
        )

    invalid = {
        category_id: weight
        for category_id, weight in overrides.items()
        if isinstance(weight, bool)
        or not isinstance(weight, (int, float))
        or not 0 < weight <= 1
    }
    if invalid:
        invalid_list = ", ".join(f"{key}={value}" for key, value in invalid.items())
        raise ValueError(
            f"Category weights must be numbers in (0, 1]. Invalid values: {invalid_list}."
        )

    for category_id, weight in overrides.items():
        merged[category_id] = merged[category_id]._replace(weight=float(weight))
    CATEGORIES = merged


def score_to_grade(score: float) -> str:
    """Letter grade for a 0-100 score."""
    for minimum, grade in GRADE_BANDS:
        if score >= minimum:
            return grade
    return "F"


def calculate_category_score(metrics: list[Metric]) -> float:
    """Mean score of the metrics in a category; 0 for an empty category."""
    if not metrics:
        return 0.0
    return sum(m.score for m in metrics) / len(metrics)


def build_categories(
    metrics: list[Metric],
    definitions: Mapping[str, CategoryDefinition] | None = None,
) -> dict[str, Category]:
    """Group metrics by category and score each group."""
    definitions = CATEGORIES if definitions is None else definitions
    categories = {}
    for category_id, definition in definitions.items():
        members = [m for m in metrics if m.category == category_id]
        category_score = calculate_category_score(members)
        categories[category_id] = Category(
            id=category_id,
            name=definition.name,
            weight=definition.weight,
            metrics=members,
            score=category_score,
            grade=score_to_grade(category_score),
        )
    return categories


def calculate_overall_score(categories: Mapping[str, Category]) -> float:
    """
    Weighted mean of category scores.

    Categories without metrics are left out of both the weighted sum and
    the weight total, so a missing category never drags the score down.
    Returns 0 when every category is empty.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for category in categories.values():
        if not category.metrics:
            continue
        weighted_sum += category.score * category.weight
        total_weight += category.weight

    if total_weight == 0:
        return 0.0
    return weighted_sum / total_weight


def generate_summary(
    categories: Mapping[str, Category], overall_score: float
) -> Summary:
    """Build the summary text plus top strengths and improvement areas."""
    scored = [c for c in categories.values() if c.metrics]

    strengths = sorted(
        (c for c in scored if c.score >= STRENGTH_THRESHOLD),
        key=lambda c: c.score,
        reverse=True,
    )
    improvements = sorted(
        (c for c in scored if c.score < IMPROVEMENT_THRESHOLD),
        key=lambda c: c.score,
    )

    text = FALLBACK_SUMMARY_TEXT
    for minimum, band_text in SUMMARY_TEXTS:
        if overall_score >= minimum:
            text = band_text
            break

    return Summary(
        text=text,
        strengths=[c.name for c in strengths[:MAX_SUMMARY_ITEMS]],
        improvements=[c.name for c in improvements[:MAX_SUMMARY_ITEMS]],
    )


def calculate_health_score(
    metrics: list[Metric],
    definitions: Mapping[str, CategoryDefinition] | None = None,
) -> HealthScore:
    """Aggregate scored metrics into the overall health score."""
    categories = build_categories(metrics, definitions)
    overall = calculate_overall_score(categories)
    return HealthScore(
        overall_score=overall,
        overall_grade=score_to_grade(overall),
        categories=categories,
        summary=generate_summary(categories, overall),
    )
