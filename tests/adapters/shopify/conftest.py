"""Shared fixtures for Shopify adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from catalogmerge.adapters.http_resilience import ResilientClient
from catalogmerge.config.http_resilience import ResilienceConfig, RetryPolicy
from catalogmerge.config.shopify import ShopifyConfig

if TYPE_CHECKING:
    from collections.abc import Callable

type Handler = Callable[[httpx.Request], httpx.Response]


def _resilience(name: str) -> ResilienceConfig:
    return ResilienceConfig(
        name=name,
        base_url="https://example.myshopify.com",
        retry=RetryPolicy(total=0),
    )


@pytest.fixture
def shopify_config() -> ShopifyConfig:
    return ShopifyConfig(
        store_domain="example.myshopify.com",
        storefront_access_token="storefront-token",
        admin_access_token="admin-token",
        storefront=_resilience("shopify-storefront"),
        admin=_resilience("shopify-admin"),
    )


class RecordingTransport:
    """Routes every request to ``handler`` and keeps the requests it saw."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client_factory(self, config: ResilienceConfig) -> ResilientClient:
        return ResilientClient(config, transport=httpx.MockTransport(self))


@pytest.fixture
def transport_for() -> Callable[[Handler], RecordingTransport]:
    return RecordingTransport
