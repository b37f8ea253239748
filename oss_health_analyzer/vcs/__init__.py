"""
VCS (Version Control System) access layer for OSS Health Analyzer.

Only GitHub is supported; the factory keeps provider construction in one
place so callers do not import the concrete class.
"""

from oss_health_analyzer.vcs.base import BaseVCSProvider, RepositorySnapshot
from oss_health_analyzer.vcs.github import GitHubClient, GitHubProvider

__all__ = [
    "BaseVCSProvider",
    "RepositorySnapshot",
    "GitHubClient",
    "GitHubProvider",
    "get_vcs_provider",
    "list_supported_platforms",
]

# Registry of supported VCS providers
_PROVIDERS: dict[str, type[GitHubProvider]] = {
    "github": GitHubProvider,
}


def get_vcs_provider(platform: str = "github", **kwargs) -> GitHubProvider:
    """
    Factory function to get VCS provider instance.

    Args:
        platform: VCS platform name. Default: 'github'
        **kwargs: Provider-specific configuration (e.g., token, cache)

    Returns:
        Initialized VCS provider instance

    Raises:
        ValueError: If platform is not supported

    Example:
        >>> provider = get_vcs_provider("github", token="ghp_xxx")
    """
    platform_lower = platform.lower()

    if platform_lower not in _PROVIDERS:
        supported = ", ".join(sorted(_PROVIDERS.keys()))
        raise ValueError(
            f"Unsupported VCS platform: {platform}. Supported platforms: {supported}"
        )

    provider_class = _PROVIDERS[platform_lower]
    return provider_class(**kwargs)


def list_supported_platforms() -> list[str]:
    """List all supported VCS platforms."""
    return sorted(_PROVIDERS.keys())
