"""Merge cache defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float

DEFAULT_MERGE_CACHE_TTL_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class MergeCacheConfig:
    ttl_seconds: float = DEFAULT_MERGE_CACHE_TTL_SECONDS


def get_merge_cache_config() -> MergeCacheConfig:
    return MergeCacheConfig(
        ttl_seconds=env_float(
            "MERGE_CACHE_TTL_SECONDS",
            DEFAULT_MERGE_CACHE_TTL_SECONDS,
            minimum=0.0,
        )
    )
