"""
Cache management for OSS Health Analyzer.

Two in-memory caches live here:
- TTLCache: plain key/value entries that expire after a TTL.
- ConditionalRequestCache: ETag-aware cache that turns repeat requests into
  conditional requests and serves the stored payload on HTTP 304.
"""

import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, NamedTuple

import httpx
from rich.console import Console

from oss_health_analyzer.config import get_cache_ttl, is_verbose
from oss_health_analyzer.retry import RetryScheduler

console = Console(stderr=True)


class CacheEntry(NamedTuple):
    """Last successful response for one (endpoint, params) key."""

    key: str
    etag: str | None
    payload: Any
    fetched_at: datetime


class FetchResult(NamedTuple):
    """Payload of an acquisition call plus whether it was served from cache."""

    payload: Any
    from_cache: bool


# Returns the response for 2xx/304, or None when an optional resource is absent.
PerformRequest = Callable[[dict[str, str]], Awaitable[httpx.Response | None]]


def make_key(endpoint_key: str, params: dict[str, Any] | None = None) -> str:
    """
    Build a cache key from an endpoint and its query params.

    Params are sorted so that dict ordering never produces two keys for the
    same request. None values are dropped.

    Example:
        >>> make_key("repos/psf/requests/issues", {"state": "open", "page": 1})
        'repos/psf/requests/issues?page=1&state=open'
    """
    if not params:
        return endpoint_key
    pairs = [f"{k}={params[k]}" for k in sorted(params) if params[k] is not None]
    if not pairs:
        return endpoint_key
    return f"{endpoint_key}?{'&'.join(pairs)}"


class TTLCache:
    """Key/value store whose entries expire after a time-to-live."""

    def __init__(
        self, ttl_seconds: int | None = None, clock: Callable[[], float] = time.time
    ):
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, int, Any]] = {}

    @property
    def ttl_seconds(self) -> int:
        return self._ttl if self._ttl is not None else get_cache_ttl()

    def _is_valid(self, stored_at: float, ttl: int) -> bool:
        return (self._clock() - stored_at) < ttl

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, ttl, value = entry
        if not self._is_valid(stored_at, ttl):
            del self._entries[key]
            return None
        return value

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        self._entries[key] = (self._clock(), ttl, value)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> int:
        """Remove every entry. Returns the number of entries removed."""
        cleared = len(self._entries)
        self._entries.clear()
        return cleared

    def clear_expired(self) -> int:
        """Remove only expired entries. Returns the number removed."""
        expired = [
            key
            for key, (stored_at, ttl, _value) in self._entries.items()
            if not self._is_valid(stored_at, ttl)
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def stats(self) -> dict[str, int]:
        total = len(self._entries)
        valid = sum(
            1
            for stored_at, ttl, _value in self._entries.values()
            if self._is_valid(stored_at, ttl)
        )
        return {
            "total_entries": total,
            "valid_entries": valid,
            "expired_entries": total - valid,
        }


class ConditionalRequestCache:
    """
    ETag-based conditional request cache.

    One instance is meant to live for the whole process and be shared by
    every evaluation; keys include the full endpoint path, so different
    repositories never collide.
    """

    def __init__(self, scheduler: RetryScheduler | None = None):
        self.scheduler = scheduler or RetryScheduler()
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get_entry(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def clear(self) -> None:
        self._entries.clear()

    async def fetch_conditional(
        self,
        endpoint_key: str,
        params: dict[str, Any] | None,
        perform_request: PerformRequest,
        max_attempts: int | None = None,
    ) -> FetchResult:
        """
        Fetch through the cache, sending If-None-Match when an ETag is known.

        Args:
            endpoint_key: Endpoint path identifying the resource.
            params: Query params that are part of the cache key.
            perform_request: Coroutine function taking the extra headers to
                send. It must raise a classified AcquisitionError for failures
                and return None when an optional resource does not exist.
            max_attempts: Retry ceiling passed to the scheduler.

        Returns:
            FetchResult with the payload and from_cache flag.
        """
        key = make_key(endpoint_key, params)
        entry = self._entries.get(key)

        headers: dict[str, str] = {}
        if entry is not None and entry.etag:
            headers["If-None-Match"] = entry.etag

        response = await self.scheduler.run_with_retry(
            lambda: perform_request(headers), max_attempts
        )

        if response is None:
            self._entries.pop(key, None)
            return FetchResult(None, False)

        if response.status_code == 304 and entry is not None:
            if is_verbose():
                console.print(f"[dim]Not modified: {key}[/dim]")
            return FetchResult(entry.payload, True)

        payload = response.json() if response.content else None
        self._entries[key] = CacheEntry(
            key=key,
            etag=response.headers.get("etag"),
            payload=payload,
            fetched_at=datetime.now(timezone.utc),
        )
        if is_verbose():
            console.print(f"[dim]Fetched: {key}[/dim]")
        return FetchResult(payload, False)
