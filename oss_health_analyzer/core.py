"""
Evaluation orchestrator for OSS Health Analyzer.

Runs the pipeline Acquisition -> Computation -> Scoring -> Aggregation for
one repository.
"""

import asyncio
import re
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple

from rich.console import Console

from oss_health_analyzer.aggregation import (
    HealthScore,
    apply_weight_overrides,
    calculate_health_score,
)
from oss_health_analyzer.cache import FetchResult
from oss_health_analyzer.config import (
    get_threshold_overrides,
    get_weight_overrides,
    is_verbose,
)
from oss_health_analyzer.errors import ValidationError
from oss_health_analyzer.http_client import close_http_client
from oss_health_analyzer.metrics import (
    WINDOW_DAYS,
    compute_raw_metrics,
    load_metric_specs,
)
from oss_health_analyzer.scoring import Metric, score_metrics
from oss_health_analyzer.thresholds import apply_threshold_overrides
from oss_health_analyzer.vcs import get_vcs_provider
from oss_health_analyzer.vcs.base import RepositorySnapshot
from oss_health_analyzer.vcs.github import GitHubProvider

console = Console(stderr=True)

# GitHub owner and repository names: letters, digits, '-', '_' and '.'
_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
_GITHUB_URL_PREFIXES = ("https://github.com/", "http://github.com/", "github.com/")


class EvaluationResult(NamedTuple):
    """Outcome of evaluating one repository."""

    owner: str
    name: str
    repo_url: str
    metrics: list[Metric]
    health_score: HealthScore
    fetches: dict[str, bool]  # resource -> served from cache
    evaluated_at: datetime


def _validate_part(value: str, label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"Repository {label} must not be empty.")
    if value in (".", "..") or not _NAME_PATTERN.match(value):
        raise ValidationError(f"Invalid repository {label}: '{value}'.")
    return value


def validate_repository(owner: str, name: str) -> tuple[str, str]:
    """
    Validate an owner/name pair.

    Raises:
        ValidationError: If either part is empty or malformed.
    """
    return _validate_part(owner, "owner"), _validate_part(name, "name")


def parse_repository_identifier(identifier: str) -> tuple[str, str]:
    """
    Split 'owner/repo' (or a github.com URL) into validated parts.

    Example:
        >>> parse_repository_identifier("https://github.com/psf/requests.git")
        ('psf', 'requests')

    Raises:
        ValidationError: If the identifier is not of the form owner/repo.
    """
    text = (identifier or "").strip()
    for prefix in _GITHUB_URL_PREFIXES:
        if text.lower().startswith(prefix):
            text = text[len(prefix) :]
            break
    text = text.rstrip("/")
    if text.endswith(".git"):
        text = text[: -len(".git")]

    parts = text.split("/")
    if len(parts) != 2:
        raise ValidationError(
            f"Expected OWNER/REPO, got '{identifier}'.", status_code=None
        )
    return validate_repository(parts[0], parts[1])


def apply_config_overrides() -> None:
    """
    Load weight and threshold overrides from configuration files.

    Raises:
        ValueError: If the configured overrides are invalid.
    """
    apply_weight_overrides(get_weight_overrides())
    apply_threshold_overrides(get_threshold_overrides())


def window_start(now: datetime) -> str:
    """
    Start of the metric window as an ISO date, truncated to the UTC day.

    Repeat evaluations on the same day send identical request parameters.
    """
    start = (now - timedelta(days=WINDOW_DAYS)).astimezone(timezone.utc)
    return start.strftime("%Y-%m-%dT00:00:00Z")


def merge_issue_results(*results: FetchResult) -> FetchResult:
    """Concatenate issue lists, dropping duplicates by issue number."""
    seen: set[Any] = set()
    issues = []
    for result in results:
        for issue in result.payload or []:
            key = issue.get("number", issue.get("id"))
            if key is not None:
                if key in seen:
                    continue
                seen.add(key)
            issues.append(issue)
    return FetchResult(issues, all(result.from_cache for result in results))


async def acquire_snapshot(
    client: GitHubProvider, owner: str, name: str, now: datetime
) -> tuple[RepositorySnapshot, dict[str, bool]]:
    """
    Fetch every resource needed for scoring, concurrently.

    Open issues and issues closed within the window are fetched separately
    so a page cap filled by recent activity cannot hide old open issues.

    Returns:
        The snapshot plus a resource -> from_cache map.
    """
    since = window_start(now)

    fetches = {
        "repository": client.get_repository(owner, name),
        "commits": client.get_commits(owner, name, since),
        "contributors": client.get_contributors(owner, name),
        "open_issues": client.get_issues(owner, name, "open"),
        "closed_issues": client.get_issues(owner, name, "closed", since=since),
        "pull_requests": client.get_pull_requests(owner, name, "all"),
        "releases": client.get_releases(owner, name),
        "community_profile": client.get_community_profile(owner, name),
        "readme": client.get_readme(owner, name),
        "root_contents": client.get_root_contents(owner, name),
        "governance_files": client.get_governance_files(owner, name),
        "badge_level": client.get_external_badge(owner, name),
    }
    results = dict(zip(fetches, await asyncio.gather(*fetches.values())))
    results["issues"] = merge_issue_results(
        results.pop("open_issues"), results.pop("closed_issues")
    )

    repository = results["repository"].payload or {}
    governance_files = results["governance_files"].payload or []
    results["foundation_affiliation"] = await client.detect_foundation_affiliation(
        owner, name, repository=repository, governance_files=governance_files
    )

    snapshot = RepositorySnapshot(
        repository=repository,
        commits=results["commits"].payload or [],
        contributors=results["contributors"].payload or [],
        issues=results["issues"].payload or [],
        pull_requests=results["pull_requests"].payload or [],
        releases=results["releases"].payload or [],
        community_profile=results["community_profile"].payload or {},
        readme=results["readme"].payload,
        root_contents=results["root_contents"].payload or [],
        governance_files=governance_files,
        badge_level=results["badge_level"].payload,
        foundation_affiliation=results["foundation_affiliation"].payload,
    )
    return snapshot, {key: result.from_cache for key, result in results.items()}


async def evaluate_repository(
    owner: str,
    name: str,
    client: GitHubProvider | None = None,
    now: datetime | None = None,
) -> EvaluationResult:
    """
    Evaluate the health of a GitHub repository.

    Args:
        owner: Repository owner (user or organization).
        name: Repository name.
        client: Acquisition client. A default GitHub client is created when
            omitted; pass one explicitly to share its cache across calls.
        now: Reference time for windowed metrics (defaults to current UTC).

    Returns:
        EvaluationResult with scored metrics and the aggregated health score.

    Raises:
        ValidationError: If the identifier is malformed.
        AcquisitionError: If any fetch fails after retries. The evaluation
            is aborted and no partial result is produced.
    """
    owner, name = validate_repository(owner, name)
    client = client or get_vcs_provider("github")
    now = now or datetime.now(timezone.utc)

    if is_verbose():
        console.print(f"[dim]Evaluating {owner}/{name}...[/dim]")

    snapshot, fetches = await acquire_snapshot(client, owner, name, now)

    specs = load_metric_specs()
    raw_values = compute_raw_metrics(snapshot, now=now, specs=specs)
    metrics = score_metrics(raw_values, specs)
    health_score = calculate_health_score(metrics)

    return EvaluationResult(
        owner=owner,
        name=name,
        repo_url=client.get_repository_url(owner, name),
        metrics=metrics,
        health_score=health_score,
        fetches=fetches,
        evaluated_at=now,
    )


def evaluate_repository_sync(
    owner: str,
    name: str,
    client: GitHubProvider | None = None,
    now: datetime | None = None,
) -> EvaluationResult:
    """Blocking wrapper around evaluate_repository for the CLI."""

    async def _run() -> EvaluationResult:
        try:
            return await evaluate_repository(owner, name, client=client, now=now)
        finally:
            await close_http_client()

    return asyncio.run(_run())
