"""
GitHub VCS provider implementation for OSS Health Analyzer.

This module implements the data-acquisition client on top of the GitHub REST
API. Every request goes through the shared ConditionalRequestCache, which in
turn runs it through the RetryScheduler.
"""

import asyncio
import base64
from typing import Any

import httpx
from rich.console import Console

from oss_health_analyzer.cache import ConditionalRequestCache, FetchResult, TTLCache
from oss_health_analyzer.config import (
    get_github_token,
    get_max_pages,
    get_retry_settings,
    is_verbose,
)
from oss_health_analyzer.errors import (
    GITHUB_SOURCE,
    classify_response,
    classify_transport_error,
)
from oss_health_analyzer.http_client import _get_async_http_client
from oss_health_analyzer.retry import RetryScheduler
from oss_health_analyzer.vcs.base import BaseVCSProvider

console = Console(stderr=True)

GITHUB_REST_API = "https://api.github.com"
BEST_PRACTICES_API = "https://www.bestpractices.dev/projects.json"
BEST_PRACTICES_SOURCE = "OpenSSF Best Practices API"
BEST_PRACTICES_HINT = (
    "The OpenSSF Best Practices badge lookup failed. Try again later or check "
    "your network connection."
)

PER_PAGE = 100
RELEASES_PER_PAGE = 20

GOVERNANCE_FILE_PATHS = (
    "GOVERNANCE.md",
    "OWNERS",
    "MAINTAINERS",
    "MAINTAINERS.md",
    "CODEOWNERS",
    ".github/CODEOWNERS",
    "docs/CODEOWNERS",
    "STEERING.md",
    "TSC.md",
)

EMPTY_COMMUNITY_PROFILE: dict[str, Any] = {"health_percentage": 0, "files": {}}

# Owner organizations with a known foundation tier
FOUNDATION_ORGS = {
    # CNCF graduated projects
    "kubernetes": "cncf-graduated",
    "prometheus": "cncf-graduated",
    "envoyproxy": "cncf-graduated",
    "etcd-io": "cncf-graduated",
    "helm": "cncf-graduated",
    "containerd": "cncf-graduated",
    "fluent": "cncf-graduated",
    "jaegertracing": "cncf-graduated",
    "argoproj": "cncf-graduated",
    "istio": "cncf-graduated",
    # CNCF incubating projects
    "open-telemetry": "cncf-incubating",
    "grpc": "cncf-incubating",
    "nats-io": "cncf-incubating",
    "cncf": "cncf-member",
    # Other foundations
    "apache": "apache-tlp",
    "eclipse": "eclipse-member",
    "eclipse-ee4j": "eclipse-member",
    "openjs-foundation": "openjs-member",
    "nodejs": "openjs-member",
    "electron": "openjs-member",
    "webpack": "openjs-member",
    "lf-edge": "lf-edge",
    "lfai": "lfai-data",
    "linuxfoundation": "lf-member",
}

# Repository topics that reveal a CNCF maturity level
FOUNDATION_TOPICS = {
    "cncf-graduated": "cncf-graduated",
    "cncf-incubating": "cncf-incubating",
    "cncf-sandbox": "cncf-sandbox",
    "cncf": "cncf-member",
}


def normalize_badge_level(level: str | None) -> str:
    """Normalize an OpenSSF Best Practices badge level to a threshold tag."""
    if not level:
        return "none"
    normalized = level.strip().lower().replace("_", "-")
    return normalized or "none"


def classify_foundation(
    owner: str, topics: list[str] | None, governance_files: list[str]
) -> str:
    """
    Derive the foundation-affiliation tier for a repository.

    Args:
        owner: Repository owner login.
        topics: Repository topics from the metadata payload.
        governance_files: Governance documents found in the repository.

    Returns:
        Tier tag such as 'cncf-graduated', 'none-with-governance' or 'none'.
    """
    owner_lower = owner.lower()
    if owner_lower in FOUNDATION_ORGS:
        return FOUNDATION_ORGS[owner_lower]
    if owner_lower.startswith("eclipse-"):
        return "eclipse-member"

    for topic, tier in FOUNDATION_TOPICS.items():
        if topic in (topics or []):
            return tier

    if governance_files:
        return "none-with-governance"
    return "none"


class GitHubProvider(BaseVCSProvider):
    """GitHub data-acquisition client using the REST API."""

    def __init__(
        self,
        token: str | None = None,
        cache: ConditionalRequestCache | None = None,
        badge_cache: TTLCache | None = None,
        http_client: httpx.AsyncClient | None = None,
        max_attempts: int | None = None,
        max_pages: int | None = None,
        api_base: str = GITHUB_REST_API,
    ):
        """
        Initialize GitHub provider.

        Args:
            token: GitHub Personal Access Token. If not provided, reads from
                   GITHUB_TOKEN environment variable. Anonymous access works
                   but is limited to 60 requests per hour.
            cache: Shared conditional-request cache. A process should create
                   one and pass it to every client.
            badge_cache: TTL cache for the external badge lookup.
            http_client: Async HTTP client (defaults to the shared pool).
            max_attempts: Retry ceiling per request (default from config).
            max_pages: Page limit for list endpoints (default from config).
            api_base: REST API root, overridable for GitHub Enterprise.
        """
        retry_settings = get_retry_settings()
        self.token = token or get_github_token()
        if cache is None:
            cache = ConditionalRequestCache(
                RetryScheduler(
                    base_delay=retry_settings["base_delay"],
                    max_delay=retry_settings["max_delay"],
                )
            )
        self.cache = cache
        self.badge_cache = badge_cache or TTLCache()
        self.max_attempts = (
            int(retry_settings["max_attempts"]) if max_attempts is None else max_attempts
        )
        self.max_pages = max_pages or get_max_pages()
        self.api_base = api_base.rstrip("/")
        self._http_client = http_client

    def get_platform_name(self) -> str:
        """Return 'github' as the platform identifier."""
        return "github"

    def get_repository_url(self, owner: str, repo: str) -> str:
        """Construct GitHub repository URL."""
        return f"https://github.com/{owner}/{repo}"

    # --- Transport helpers ---

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return _get_async_http_client()

    def _github_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _send(
        self,
        url: str,
        params: dict[str, Any] | None,
        headers: dict[str, str],
        absent_statuses: tuple[int, ...] = (),
        source: str = GITHUB_SOURCE,
        hint: str | None = None,
    ) -> httpx.Response | None:
        """
        Perform one GET and classify the outcome.

        Failures are labelled with source and carry hint when given.

        Returns:
            The response for 2xx/304, or None when the status is listed in
            absent_statuses (an optional resource that does not exist).

        Raises:
            AcquisitionError subclass for every other failure.
        """
        try:
            response = await self._client().get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise classify_transport_error(e, hint) from e

        if response.status_code in absent_statuses:
            return None
        if response.status_code == 304 or response.status_code < 400:
            return response
        raise classify_response(response, source, hint)

    async def _fetch(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        absent_statuses: tuple[int, ...] = (),
    ) -> FetchResult:
        url = f"{self.api_base}/{path}"

        async def perform(extra_headers: dict[str, str]) -> httpx.Response | None:
            headers = {**self._github_headers(), **extra_headers}
            return await self._send(url, params, headers, absent_statuses)

        return await self.cache.fetch_conditional(
            path, params, perform, self.max_attempts
        )

    async def _fetch_paginated(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        absent_statuses: tuple[int, ...] = (),
    ) -> FetchResult:
        """Fetch up to max_pages pages and concatenate them."""
        items: list[dict[str, Any]] = []
        all_from_cache = True
        for page in range(1, self.max_pages + 1):
            page_params = {**(params or {}), "per_page": PER_PAGE, "page": page}
            result = await self._fetch(path, page_params, absent_statuses)
            all_from_cache = all_from_cache and result.from_cache
            page_items = result.payload or []
            items.extend(page_items)
            if len(page_items) < PER_PAGE:
                break
        return FetchResult(items, all_from_cache)

    # --- Resources ---

    async def get_repository(self, owner: str, repo: str) -> FetchResult:
        """
        Fetch repository metadata.

        Raises:
            NotFoundError: If the repository does not exist or is private.
        """
        return await self._fetch(f"repos/{owner}/{repo}")

    async def get_commits(self, owner: str, repo: str, since: str) -> FetchResult:
        """Fetch commits on the default branch since an ISO date."""
        # 409 means the repository is empty
        return await self._fetch_paginated(
            f"repos/{owner}/{repo}/commits", {"since": since}, absent_statuses=(409,)
        )

    async def get_contributors(self, owner: str, repo: str) -> FetchResult:
        """Fetch contributors with their contribution counts."""
        # 204 is returned for empty repositories
        return await self._fetch_paginated(
            f"repos/{owner}/{repo}/contributors", absent_statuses=(204, 404)
        )

    async def get_issues(
        self, owner: str, repo: str, state: str = "all", since: str | None = None
    ) -> FetchResult:
        """
        Fetch issues in the given state, excluding pull requests.

        When since is given only issues updated at or after that ISO date are
        returned.
        """
        params = {"state": state}
        if since:
            params["since"] = since
        result = await self._fetch_paginated(f"repos/{owner}/{repo}/issues", params)
        issues = [issue for issue in result.payload if "pull_request" not in issue]
        return FetchResult(issues, result.from_cache)

    async def get_pull_requests(
        self, owner: str, repo: str, state: str = "all"
    ) -> FetchResult:
        """Fetch pull requests in the given state, most recently updated first."""
        return await self._fetch_paginated(
            f"repos/{owner}/{repo}/pulls",
            {"state": state, "sort": "updated", "direction": "desc"},
        )

    async def get_releases(self, owner: str, repo: str) -> FetchResult:
        """Fetch the most recent releases, newest first."""
        result = await self._fetch(
            f"repos/{owner}/{repo}/releases",
            {"per_page": RELEASES_PER_PAGE},
            absent_statuses=(404,),
        )
        return FetchResult(result.payload or [], result.from_cache)

    async def get_community_profile(self, owner: str, repo: str) -> FetchResult:
        """Fetch the community health-files profile."""
        result = await self._fetch(
            f"repos/{owner}/{repo}/community/profile", absent_statuses=(404,)
        )
        if result.payload is None:
            return FetchResult(dict(EMPTY_COMMUNITY_PROFILE), result.from_cache)
        return result

    async def get_readme(self, owner: str, repo: str) -> FetchResult:
        """Fetch and decode the README. Payload is None when there is none."""
        result = await self._fetch(
            f"repos/{owner}/{repo}/readme", absent_statuses=(404,)
        )
        payload = result.payload
        if not payload:
            return FetchResult(None, result.from_cache)

        content = payload.get("content") or ""
        if payload.get("encoding") == "base64":
            content = base64.b64decode(content).decode("utf-8", errors="replace")
        return FetchResult(content, result.from_cache)

    async def get_root_contents(self, owner: str, repo: str) -> FetchResult:
        """List files and directories at the repository root."""
        result = await self._fetch(
            f"repos/{owner}/{repo}/contents", absent_statuses=(404,)
        )
        payload = result.payload if isinstance(result.payload, list) else []
        return FetchResult(payload, result.from_cache)

    async def get_governance_files(self, owner: str, repo: str) -> FetchResult:
        """Probe for governance documents. Payload is the list of paths found."""
        results = await asyncio.gather(
            *(
                self._fetch(
                    f"repos/{owner}/{repo}/contents/{path}", absent_statuses=(404,)
                )
                for path in GOVERNANCE_FILE_PATHS
            )
        )
        found = [
            path
            for path, result in zip(GOVERNANCE_FILE_PATHS, results)
            if result.payload is not None
        ]
        return FetchResult(found, all(result.from_cache for result in results))

    async def get_external_badge(self, owner: str, repo: str) -> FetchResult:
        """
        Look up the OpenSSF Best Practices badge level.

        Returns:
            FetchResult whose payload is the badge level ('none' when the
            project is not registered) or None when the lookup had no data.
        """
        cache_key = f"badge:{owner}/{repo}".lower()
        cached = self.badge_cache.get(cache_key)
        if cached is not None:
            return FetchResult(cached["level"], True)

        params = {"url": self.get_repository_url(owner, repo)}
        response = await self.cache.scheduler.run_with_retry(
            lambda: self._send(
                BEST_PRACTICES_API,
                params,
                {"Accept": "application/json"},
                absent_statuses=(404,),
                source=BEST_PRACTICES_SOURCE,
                hint=BEST_PRACTICES_HINT,
            ),
            self.max_attempts,
        )

        level: str | None = None
        if response is not None:
            projects = response.json() if response.content else []
            if isinstance(projects, list):
                level = (
                    normalize_badge_level(projects[0].get("badge_level"))
                    if projects
                    else "none"
                )
        elif is_verbose():
            console.print(f"[dim]No badge data for {owner}/{repo}[/dim]")

        self.badge_cache.set(cache_key, {"level": level})
        return FetchResult(level, False)

    async def detect_foundation_affiliation(
        self,
        owner: str,
        repo: str,
        repository: dict[str, Any] | None = None,
        governance_files: list[str] | None = None,
    ) -> FetchResult:
        """
        Detect the foundation tier of a repository.

        Already fetched repository metadata and governance files can be passed
        in to avoid fetching them again.
        """
        from_cache = True
        if repository is None:
            repo_result = await self.get_repository(owner, repo)
            repository = repo_result.payload or {}
            from_cache = from_cache and repo_result.from_cache
        if governance_files is None:
            governance_result = await self.get_governance_files(owner, repo)
            governance_files = governance_result.payload
            from_cache = from_cache and governance_result.from_cache

        owner_login = (repository.get("owner") or {}).get("login") or owner
        tier = classify_foundation(
            owner_login, repository.get("topics"), governance_files
        )
        return FetchResult(tier, from_cache)

    async def get_rate_limit(self) -> FetchResult:
        """Return the core rate-limit bucket (limit, remaining, reset)."""
        url = f"{self.api_base}/rate_limit"
        response = await self.cache.scheduler.run_with_retry(
            lambda: self._send(url, None, self._github_headers()),
            self.max_attempts,
        )
        data = response.json() if response is not None else {}
        return FetchResult(data.get("resources", {}).get("core", {}), False)


GitHubClient = GitHubProvider

PROVIDER = GitHubProvider
