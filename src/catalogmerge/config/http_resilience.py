"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

type ShouldCacheHook = Callable[[object], bool]


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 10.0
    respect_retry_after_header: bool = True
    # GraphQL reads are POSTs, so POST stays retryable
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"GET", "HEAD", "OPTIONS", "POST"})
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """In-memory response cache; entries live for the lifetime of the owning client."""

    enabled: bool = True
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = False
    should_cache: ShouldCacheHook | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 10.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] | None = None
