from __future__ import annotations

import asyncio

import httpx

from catalogmerge.adapters.http_resilience import ResilientClient, build_retry
from catalogmerge.config.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)


def test_build_retry_allows_graphql_posts() -> None:
    retry = build_retry(RetryPolicy())

    assert retry.is_retryable_method("POST")
    assert retry.is_retryable_status_code(429)
    assert not retry.is_retryable_status_code(404)


def test_client_applies_base_url_headers_and_rate_limit() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="test",
        base_url="https://example.test",
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"User-Agent": "catalogmerge-tests"},
        retry=RetryPolicy(total=0),
    )

    async def run() -> httpx.Response:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            return await client.get("/ping")

    response = asyncio.run(run())

    assert response.json() == {"ok": True}
    assert str(seen[0].url) == "https://example.test/ping"
    assert seen[0].headers["User-Agent"] == "catalogmerge-tests"


def _count_requests_through_cache(cache: CacheConfig, responses: list[httpx.Response]) -> int:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return responses[len(seen) - 1]

    config = ResilienceConfig(
        name="test",
        base_url="https://example.test",
        retry=RetryPolicy(total=0),
        cache=cache,
    )

    async def run() -> None:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            for _ in responses:
                await client.get("/images")

    asyncio.run(run())
    return len(seen)


def test_cache_serves_repeat_requests_accepted_by_predicate() -> None:
    cache = CacheConfig(default_ttl_seconds=60, should_cache=lambda payload: payload == {"ok": 1})
    responses = [httpx.Response(200, json={"ok": 1}), httpx.Response(200, json={"ok": 2})]

    assert _count_requests_through_cache(cache, responses) == 1


def test_cache_skips_payloads_rejected_by_predicate() -> None:
    cache = CacheConfig(default_ttl_seconds=60, should_cache=lambda payload: payload == {"ok": 1})
    responses = [httpx.Response(200, json={"ok": 2}), httpx.Response(200, json={"ok": 1})]

    assert _count_requests_through_cache(cache, responses) == 2


def test_cache_skips_non_json_bodies_when_predicate_is_set() -> None:
    cache = CacheConfig(default_ttl_seconds=60, should_cache=lambda _: True)
    responses = [httpx.Response(503, text="<html>down</html>"), httpx.Response(200, json={})]

    assert _count_requests_through_cache(cache, responses) == 2


def test_disabled_cache_uses_plain_client() -> None:
    cache = CacheConfig(enabled=False)
    responses = [httpx.Response(200, json={"ok": 1}), httpx.Response(200, json={"ok": 1})]

    assert _count_requests_through_cache(cache, responses) == 2
