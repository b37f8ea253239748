"""
OSS Health Analyzer: health scores for open-source GitHub repositories.
"""

from oss_health_analyzer.core import (
    EvaluationResult,
    evaluate_repository,
    evaluate_repository_sync,
    parse_repository_identifier,
)

__all__ = [
    "EvaluationResult",
    "evaluate_repository",
    "evaluate_repository_sync",
    "parse_repository_identifier",
]
