"""
Base contract for VCS data providers.
"""

from abc import ABC, abstractmethod
from typing import Any, NamedTuple

from oss_health_analyzer.cache import FetchResult


class RepositorySnapshot(NamedTuple):
    """
    Fully resolved acquisition data for one evaluation.

    Every metric computation reads from this snapshot only, never from the
    network, so fetch completion order cannot affect results.
    """

    repository: dict[str, Any]
    commits: list[dict[str, Any]]
    contributors: list[dict[str, Any]]
    issues: list[dict[str, Any]]
    pull_requests: list[dict[str, Any]]
    releases: list[dict[str, Any]]
    community_profile: dict[str, Any]
    readme: str | None
    root_contents: list[dict[str, Any]]
    governance_files: list[str]
    badge_level: str | None  # None = lookup had no data
    foundation_affiliation: str | None


class BaseVCSProvider(ABC):
    """Resource accessors needed to score a repository."""

    @abstractmethod
    def get_platform_name(self) -> str:
        """Return the platform identifier (e.g. 'github')."""

    @abstractmethod
    def get_repository_url(self, owner: str, repo: str) -> str:
        """Construct the browsable repository URL."""

    @abstractmethod
    async def get_repository(self, owner: str, repo: str) -> FetchResult: ...

    @abstractmethod
    async def get_commits(self, owner: str, repo: str, since: str) -> FetchResult: ...

    @abstractmethod
    async def get_contributors(self, owner: str, repo: str) -> FetchResult: ...

    @abstractmethod
    async def get_issues(
        self, owner: str, repo: str, state: str, since: str | None = None
    ) -> FetchResult: ...

    @abstractmethod
    async def get_pull_requests(
        self, owner: str, repo: str, state: str
    ) -> FetchResult: ...

    @abstractmethod
    async def get_releases(self, owner: str, repo: str) -> FetchResult: ...

    @abstractmethod
    async def get_community_profile(self, owner: str, repo: str) -> FetchResult: ...

    @abstractmethod
    async def get_readme(self, owner: str, repo: str) -> FetchResult: ...

    @abstractmethod
    async def get_root_contents(self, owner: str, repo: str) -> FetchResult: ...

    @abstractmethod
    async def get_governance_files(self, owner: str, repo: str) -> FetchResult: ...

    @abstractmethod
    async def get_external_badge(self, owner: str, repo: str) -> FetchResult: ...

    @abstractmethod
    async def detect_foundation_affiliation(
        self, owner: str, repo: str
    ) -> FetchResult: ...
