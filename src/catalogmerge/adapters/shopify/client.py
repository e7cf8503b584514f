"""HTTP clients for the Shopify Storefront GraphQL and Admin REST APIs."""

from __future__ import annotations

import asyncio
import threading
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from catalogmerge.adapters.http_resilience import ResilientClient
from catalogmerge.domain.errors import UpstreamUnavailableError

from .schema import (
    AdminImage,
    AdminImagesResponse,
    GraphQLResponse,
    ProductByHandleData,
    ProductPayload,
    ProductsData,
    ShopifyBaseModel,
)
from .translator import numeric_product_id

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogmerge.config.http_resilience import ResilienceConfig
    from catalogmerge.config.shopify import ShopifyConfig

log = getLogger(__name__)

_PRODUCT_FIELDS = """
  id
  handle
  title
  images(first: 50) {
    nodes { url }
  }
  variants(first: 100) {
    nodes {
      id
      availableForSale
      price { amount currencyCode }
      selectedOptions { name value }
      image { url }
    }
  }
"""

PRODUCT_BY_HANDLE_QUERY = f"""
query ProductByHandle($handle: String!) {{
  product(handle: $handle) {{{_PRODUCT_FIELDS}}}
}}
"""

PRODUCTS_QUERY = f"""
query Products($first: Int!) {{
  products(first: $first) {{
    nodes {{{_PRODUCT_FIELDS}}}
  }}
}}
"""


class ShopifyAPIError(UpstreamUnavailableError):
    """Raised when a Shopify API call fails or returns an unusable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ShopifyStorefrontClient:
    """Low-level client for the Storefront GraphQL API."""

    def __init__(
        self,
        *,
        config: ShopifyConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.storefront
        self._client_factory = client_factory or ResilientClient

    def fetch_product(self, *, handle: str) -> ProductPayload | None:
        data = asyncio.run(self._query(PRODUCT_BY_HANDLE_QUERY, {"handle": handle}))
        return _validate(ProductByHandleData, data).product

    def fetch_products(self, *, first: int = 50) -> list[ProductPayload]:
        data = asyncio.run(self._query(PRODUCTS_QUERY, {"first": first}))
        return _validate(ProductsData, data).products.nodes

    async def _query(self, query: str, variables: dict[str, object]) -> dict[str, object]:
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Storefront-Access-Token": self._config.storefront_access_token,
        }
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.post(
                    self._config.storefront_endpoint,
                    json={"query": query, "variables": variables},
                    headers=headers,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                raise ShopifyAPIError(
                    f"Shopify Storefront API error: {status}", status_code=status
                ) from exc
            except httpx.HTTPError as exc:
                raise ShopifyAPIError(f"Shopify Storefront API unreachable: {exc}") from exc

        payload = _validate(GraphQLResponse, _json(response))
        if payload.errors:
            message = "; ".join(error.message for error in payload.errors)
            log.error("Shopify GraphQL errors: %s", message)
            raise ShopifyAPIError(message)
        if payload.data is None:
            raise ShopifyAPIError("Shopify GraphQL response carried no data")
        return payload.data


class ShopifyAdminClient:
    """Low-level client for the Admin REST API.

    One event loop and one ``ResilientClient`` serve every call until ``close``, so the
    image cache and the rate limit span requests. Calls are serialised.
    """

    def __init__(
        self,
        *,
        config: ShopifyConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.admin
        self._client_factory = client_factory or ResilientClient
        self._lock = threading.Lock()
        self._runner: asyncio.Runner | None = None
        self._client: ResilientClient | None = None

    def fetch_product_images(self, *, product_id: str) -> list[AdminImage]:
        if not self._config.admin_access_token:
            raise ShopifyAPIError("Shopify Admin API is not configured")
        with self._lock:
            if self._runner is None:
                self._runner = asyncio.Runner()
            return self._runner.run(self._fetch_product_images_async(product_id=product_id))

    def close(self) -> None:
        with self._lock:
            if self._runner is None:
                return
            try:
                if self._client is not None:
                    self._runner.run(self._client.aclose())
            finally:
                self._client = None
                self._runner.close()
                self._runner = None

    async def _fetch_product_images_async(self, *, product_id: str) -> list[AdminImage]:
        if self._client is None:
            self._client = self._client_factory(self._resilience)
        path = self._config.admin_path(f"/products/{numeric_product_id(product_id)}/images.json")
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self._config.admin_access_token or "",
        }
        try:
            response = await self._client.get(path, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise ShopifyAPIError(f"Shopify Admin API error: {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            raise ShopifyAPIError(f"Shopify Admin API unreachable: {exc}") from exc

        return _validate(AdminImagesResponse, _json(response)).images


def _json(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError as exc:
        raise ShopifyAPIError("Shopify returned a non-JSON payload") from exc


def _validate[TModel: ShopifyBaseModel](model: type[TModel], payload: object) -> TModel:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ShopifyAPIError(f"Unexpected Shopify payload: {exc}") from exc
