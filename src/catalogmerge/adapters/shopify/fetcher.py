"""Catalog entry points backed by Shopify."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from .client import ShopifyAdminClient, ShopifyAPIError, ShopifyStorefrontClient
from .translator import translate_admin_image, translate_product

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogmerge.adapters.http_resilience import ResilientClient
    from catalogmerge.config.http_resilience import ResilienceConfig
    from catalogmerge.config.shopify import ShopifyConfig
    from catalogmerge.domain.model import CatalogEntry, ProductImage
    from catalogmerge.domain.ports import CatalogSource, ProductImageFetcher

    from .schema import AdminImage, ProductPayload

log = getLogger(__name__)


class ProductLookupClient(Protocol):
    def fetch_product(self, *, handle: str) -> ProductPayload | None: ...

    def fetch_products(self, *, first: int = 50) -> list[ProductPayload]: ...


class ProductImagesClient(Protocol):
    def fetch_product_images(self, *, product_id: str) -> list[AdminImage]: ...


class ShopifyCatalogSource:
    """``CatalogSource`` reading products through the Storefront API.

    Failures propagate as ``ShopifyAPIError``; callers decide how to degrade.
    """

    def __init__(
        self,
        *,
        config: ShopifyConfig,
        client: ProductLookupClient | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._client = client or ShopifyStorefrontClient(
            config=config, client_factory=client_factory
        )

    def get_product(self, handle: str) -> CatalogEntry | None:
        payload = self._client.fetch_product(handle=handle)
        if payload is None:
            log.debug("Product %r not found", handle)
            return None
        return translate_product(payload)

    def list_products(self, *, first: int = 50) -> list[CatalogEntry]:
        return [translate_product(payload) for payload in self._client.fetch_products(first=first)]


class ShopifyImageFetcher:
    """``ProductImageFetcher`` reading product images through the Admin API.

    Returns an empty list when the Admin API is not configured or a request fails.
    """

    def __init__(
        self,
        *,
        config: ShopifyConfig,
        client: ProductImagesClient | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._configured = config.admin_configured
        self._client = client or ShopifyAdminClient(config=config, client_factory=client_factory)

    def __call__(self, product_id: str) -> list[ProductImage]:
        if not self._configured:
            log.warning("Shopify Admin API is not configured; skipping product images")
            return []
        try:
            payloads = self._client.fetch_product_images(product_id=product_id)
        except ShopifyAPIError as exc:
            log.warning("Fetching images for product %s failed: %s", product_id, exc)
            return []
        return [translate_admin_image(payload) for payload in payloads]


if TYPE_CHECKING:

    def _protocol_check(config: ShopifyConfig) -> None:
        _source: CatalogSource = ShopifyCatalogSource(config=config)
        _fetcher: ProductImageFetcher = ShopifyImageFetcher(config=config)
