"""Shopify configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, optional_env_var, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

DEFAULT_SHOPIFY_API_VERSION = "2024-01"
SHOPIFY_TIMEOUT_SECONDS = 10.0
DEFAULT_IMAGE_CACHE_TTL_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class ShopifyConfig:
    """Credentials and transport settings for the Storefront and Admin APIs."""

    store_domain: str
    storefront_access_token: str
    storefront: ResilienceConfig
    admin: ResilienceConfig
    admin_access_token: str | None = None
    api_version: str = DEFAULT_SHOPIFY_API_VERSION

    @property
    def admin_configured(self) -> bool:
        return bool(self.store_domain and self.admin_access_token)

    @property
    def storefront_endpoint(self) -> str:
        return f"/api/{self.api_version}/graphql.json"

    def admin_path(self, path: str) -> str:
        return f"/admin/api/{self.api_version}{path}"


def _is_image_listing(payload: object) -> bool:
    # error bodies such as {"errors": "Not Found"} must not be served from cache
    return isinstance(payload, dict) and isinstance(payload.get("images"), list)


def _normalize_domain(value: str) -> str:
    domain = value.strip().removeprefix("https://").removeprefix("http://")
    return domain.rstrip("/")


def get_shopify_config(
    *,
    storefront: ResilienceConfig | None = None,
    admin: ResilienceConfig | None = None,
) -> ShopifyConfig:
    values = require_env_vars(("SHOPIFY_STORE_DOMAIN", "SHOPIFY_STOREFRONT_ACCESS_TOKEN"))
    domain = _normalize_domain(values["SHOPIFY_STORE_DOMAIN"])
    base_url = f"https://{domain}"
    image_ttl = env_float(
        "SHOPIFY_IMAGE_CACHE_TTL_SECONDS",
        DEFAULT_IMAGE_CACHE_TTL_SECONDS,
        minimum=0.0,
    )

    return ShopifyConfig(
        store_domain=domain,
        storefront_access_token=values["SHOPIFY_STOREFRONT_ACCESS_TOKEN"],
        admin_access_token=optional_env_var("SHOPIFY_ADMIN_ACCESS_TOKEN"),
        api_version=optional_env_var("SHOPIFY_API_VERSION") or DEFAULT_SHOPIFY_API_VERSION,
        storefront=storefront
        or ResilienceConfig(
            name="shopify-storefront",
            base_url=base_url,
            timeout_seconds=SHOPIFY_TIMEOUT_SECONDS,
        ),
        admin=admin
        or ResilienceConfig(
            name="shopify-admin",
            base_url=base_url,
            timeout_seconds=SHOPIFY_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
            cache=CacheConfig(default_ttl_seconds=image_ttl, should_cache=_is_image_listing)
            if image_ttl > 0
            else None,
        ),
    )
