"""
Configuration management for OSS Health Analyzer.

Settings are resolved in this order:
1. Values set explicitly through the set_* helpers (CLI flags)
2. OSS_HEALTH_ANALYZER_* environment variables
3. .oss-health-analyzer.toml (local config)
4. pyproject.toml [tool.oss-health-analyzer] (project-level config)
5. Built-in defaults
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

# Directory searched for configuration files. Tests point this elsewhere.
PROJECT_ROOT = Path.cwd()

CONFIG_SECTION = "oss-health-analyzer"
ENV_PREFIX = "OSS_HEALTH_ANALYZER_"

# Global configuration for SSL verification
# Can be set to False by CLI --insecure flag
VERIFY_SSL = True

# Default TTL for in-memory caches: 1 hour (in seconds)
DEFAULT_CACHE_TTL = 60 * 60

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_DELAY = 60.0
DEFAULT_MAX_PAGES = 3

_CACHE_TTL: int | None = None
_VERBOSE: bool | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def get_tool_config() -> dict[str, Any]:
    """
    Return the [tool.oss-health-analyzer] table.

    .oss-health-analyzer.toml wins over pyproject.toml; the two are not merged.
    """
    local_config_path = PROJECT_ROOT / ".oss-health-analyzer.toml"
    if local_config_path.exists():
        config = load_config_file(local_config_path)
        section = config.get("tool", {}).get(CONFIG_SECTION, {})
        if section:
            return section

    pyproject_path = PROJECT_ROOT / "pyproject.toml"
    if pyproject_path.exists():
        config = load_config_file(pyproject_path)
        return config.get("tool", {}).get(CONFIG_SECTION, {})

    return {}


def _env(name: str) -> str | None:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    return value if value else None


def set_verify_ssl(verify: bool) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool:
    """Get the current SSL verification setting."""
    return VERIFY_SSL


def get_github_token() -> str | None:
    """Return GITHUB_TOKEN from the environment (or .env), if any."""
    token = os.getenv("GITHUB_TOKEN")
    return token or None


def get_cache_ttl() -> int:
    """
    Get the cache TTL (Time To Live) in seconds.

    Returns:
        TTL in seconds.
    """
    if _CACHE_TTL is not None:
        return _CACHE_TTL

    env_cache_ttl = _env("CACHE_TTL")
    if env_cache_ttl:
        try:
            return int(env_cache_ttl)
        except ValueError:
            pass

    cache_config = get_tool_config().get("cache", {})
    if "ttl_seconds" in cache_config:
        return int(cache_config["ttl_seconds"])

    return DEFAULT_CACHE_TTL


def set_cache_ttl(seconds: int) -> None:
    """Set the cache TTL (Time To Live) explicitly."""
    global _CACHE_TTL
    _CACHE_TTL = seconds


def get_retry_settings() -> dict[str, float]:
    """
    Get retry settings for the acquisition layer.

    Returns:
        Dict with max_attempts, base_delay and max_delay (seconds).
    """
    retry_config = get_tool_config().get("retry", {})
    settings: dict[str, float] = {
        "max_attempts": int(retry_config.get("max_attempts", DEFAULT_MAX_ATTEMPTS)),
        "base_delay": float(retry_config.get("base_delay", DEFAULT_BASE_DELAY)),
        "max_delay": float(retry_config.get("max_delay", DEFAULT_MAX_DELAY)),
    }

    env_attempts = _env("MAX_ATTEMPTS")
    if env_attempts:
        try:
            settings["max_attempts"] = int(env_attempts)
        except ValueError:
            pass

    if settings["max_attempts"] < 0:
        raise ValueError("retry.max_attempts must be zero or greater.")
    if settings["base_delay"] < 0 or settings["max_delay"] < 0:
        raise ValueError("retry delays must be zero or greater.")
    return settings


def get_max_pages() -> int:
    """Maximum number of 100-item pages fetched per list endpoint."""
    value = get_tool_config().get("max_pages", DEFAULT_MAX_PAGES)
    env_value = _env("MAX_PAGES")
    if env_value:
        try:
            value = int(env_value)
        except ValueError:
            pass
    return max(1, int(value))


def is_verbose() -> bool:
    """Whether acquisition and retry status lines are printed."""
    if _VERBOSE is not None:
        return _VERBOSE
    env_value = _env("VERBOSE")
    if env_value:
        return env_value.lower() in ("1", "true", "yes", "on")
    return bool(get_tool_config().get("verbose", False))


def set_verbose(verbose: bool) -> None:
    """Enable or disable verbose output explicitly."""
    global _VERBOSE
    _VERBOSE = verbose


def get_weight_overrides() -> dict[str, float]:
    """Category weight overrides from [tool.oss-health-analyzer.weights]."""
    return dict(get_tool_config().get("weights", {}))


def get_threshold_overrides() -> dict[str, dict[str, Any]]:
    """Per-metric threshold overrides from [tool.oss-health-analyzer.thresholds]."""
    return dict(get_tool_config().get("thresholds", {}))
