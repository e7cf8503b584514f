"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .merges import MergeCacheConfig, get_merge_cache_config
from .shopify import ShopifyConfig, get_shopify_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MergeCacheConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "ShopifyConfig",
    "StorageConfig",
    "configure_logging",
    "env_float",
    "get_database_config",
    "get_database_uri",
    "get_merge_cache_config",
    "get_shopify_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
