"""Shopify catalog adapter."""

from __future__ import annotations

from .client import ShopifyAdminClient, ShopifyAPIError, ShopifyStorefrontClient
from .fetcher import ShopifyCatalogSource, ShopifyImageFetcher

__all__ = [
    "ShopifyAPIError",
    "ShopifyAdminClient",
    "ShopifyCatalogSource",
    "ShopifyImageFetcher",
    "ShopifyStorefrontClient",
]
