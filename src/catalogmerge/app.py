"""Application entry points wiring the merge engine to its adapters."""

from __future__ import annotations

import threading
from logging import getLogger
from typing import TYPE_CHECKING

from catalogmerge.adapters.shopify import ShopifyCatalogSource, ShopifyImageFetcher
from catalogmerge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    is_started,
    startup,
)
from catalogmerge.config import get_merge_cache_config, get_shopify_config
from catalogmerge.domain.catalog_merger import filter_hidden, merge_into
from catalogmerge.domain.color_images import get_images_by_color as resolve_images_by_color
from catalogmerge.domain.merge_cache import MergeCache
from catalogmerge.domain.merge_registry import MergeRegistry
from catalogmerge.domain.storefront import assemble_product_detail
from catalogmerge.domain.storefront import list_products as list_storefront_products

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from uuid import UUID

    from catalogmerge.config import ShopifyConfig
    from catalogmerge.domain.errors import MergeNotFoundError, MergeValidationError
    from catalogmerge.domain.merge_registry import UnitOfWorkFactory
    from catalogmerge.domain.model import (
        CatalogEntry,
        ColorImageMap,
        Handle,
        MergeDirective,
        ProductId,
        Variant,
    )
    from catalogmerge.domain.ports import CatalogSource, ProductImageFetcher
    from catalogmerge.domain.results import Result
    from catalogmerge.domain.storefront import ProductDetail

log = getLogger(__name__)


class CatalogMergeService:
    """Merge administration and storefront reads over one registry and cache.

    The cache is invalidated after every registry write. Catalog access is only
    configured when first needed, so merge administration works without Shopify
    credentials.
    """

    def __init__(
        self,
        *,
        registry: MergeRegistry,
        cache: MergeCache,
        catalog: CatalogSource | None = None,
        image_fetcher: ProductImageFetcher | None = None,
        shopify_config_loader: Callable[[], ShopifyConfig] = get_shopify_config,
    ) -> None:
        self.registry = registry
        self.cache = cache
        self._catalog = catalog
        self._image_fetcher = image_fetcher
        self._shopify_config_loader = shopify_config_loader
        self._shopify_config: ShopifyConfig | None = None
        registry.add_listener(cache.invalidate)

    @classmethod
    def from_environment(
        cls,
        *,
        unit_of_work_factory: UnitOfWorkFactory | None = None,
    ) -> CatalogMergeService:
        if unit_of_work_factory is None:
            if not is_started():
                startup()
            unit_of_work_factory = SqlAlchemyUnitOfWork
        registry = MergeRegistry(unit_of_work_factory)
        cache = MergeCache(registry, ttl_seconds=get_merge_cache_config().ttl_seconds)
        log.info("Merge cache TTL: %ss", cache.ttl_seconds)
        return cls(registry=registry, cache=cache)

    @property
    def catalog(self) -> CatalogSource:
        if self._catalog is None:
            self._catalog = ShopifyCatalogSource(config=self._shopify())
        return self._catalog

    @property
    def image_fetcher(self) -> ProductImageFetcher:
        if self._image_fetcher is None:
            self._image_fetcher = ShopifyImageFetcher(config=self._shopify())
        return self._image_fetcher

    # Read side -----------------------------------------------------------------

    def filter_hidden_products(self, entries: Iterable[CatalogEntry]) -> list[CatalogEntry]:
        return filter_hidden(entries, self.cache.read())

    def get_secondary_handles(self, primary_handle: Handle) -> list[Handle]:
        return list(self.cache.read().secondaries_of(primary_handle))

    def get_primary_for_secondary(self, handle: Handle) -> Handle | None:
        return self.cache.read().primary_of(handle)

    def merge_product_variants(
        self,
        primary: CatalogEntry,
        secondaries: Sequence[CatalogEntry],
    ) -> CatalogEntry:
        return merge_into(primary, secondaries)

    def get_images_by_color(
        self,
        product_id: ProductId,
        variants: Sequence[Variant],
    ) -> ColorImageMap:
        return resolve_images_by_color(product_id, variants, fetcher=self.image_fetcher)

    def list_products(
        self,
        *,
        first: int = 50,
        include_hidden: bool = False,
    ) -> list[CatalogEntry]:
        return list_storefront_products(
            catalog=self.catalog,
            cache=self.cache,
            first=first,
            include_hidden=include_hidden,
        )

    def get_product_detail(self, handle: Handle) -> ProductDetail | None:
        return assemble_product_detail(
            handle,
            catalog=self.catalog,
            cache=self.cache,
            image_fetcher=self.image_fetcher,
        )

    # Administration ------------------------------------------------------------

    def create_merge(
        self,
        primary: Handle,
        secondary: Handle,
    ) -> Result[MergeDirective, MergeValidationError]:
        return self.registry.create(primary, secondary)

    def delete_merge(self, directive_id: UUID) -> Result[UUID, MergeNotFoundError]:
        return self.registry.delete(directive_id)

    def list_merges(self) -> list[MergeDirective]:
        return self.registry.list()

    def _shopify(self) -> ShopifyConfig:
        if self._shopify_config is None:
            self._shopify_config = self._shopify_config_loader()
        return self._shopify_config


_default_lock = threading.Lock()
_default_service: CatalogMergeService | None = None


def get_service() -> CatalogMergeService:
    """Return the process-wide service, building it from the environment on first use."""

    global _default_service  # noqa: PLW0603
    with _default_lock:
        if _default_service is None:
            _default_service = CatalogMergeService.from_environment()
        return _default_service


def set_service(service: CatalogMergeService | None) -> None:
    """Replace the process-wide service (``None`` rebuilds it on next use)."""

    global _default_service  # noqa: PLW0603
    with _default_lock:
        _default_service = service


def filter_hidden_products(entries: Iterable[CatalogEntry]) -> list[CatalogEntry]:
    return get_service().filter_hidden_products(entries)


def get_secondary_handles(primary_handle: Handle) -> list[Handle]:
    return get_service().get_secondary_handles(primary_handle)


def get_primary_for_secondary(handle: Handle) -> Handle | None:
    return get_service().get_primary_for_secondary(handle)


def merge_product_variants(
    primary: CatalogEntry,
    secondaries: Sequence[CatalogEntry],
) -> CatalogEntry:
    return get_service().merge_product_variants(primary, secondaries)


def get_images_by_color(product_id: ProductId, variants: Sequence[Variant]) -> ColorImageMap:
    return get_service().get_images_by_color(product_id, variants)


def list_products(*, first: int = 50, include_hidden: bool = False) -> list[CatalogEntry]:
    return get_service().list_products(first=first, include_hidden=include_hidden)


def get_product_detail(handle: Handle) -> ProductDetail | None:
    return get_service().get_product_detail(handle)


def create_merge(
    primary: Handle,
    secondary: Handle,
) -> Result[MergeDirective, MergeValidationError]:
    return get_service().create_merge(primary, secondary)


def delete_merge(directive_id: UUID) -> Result[UUID, MergeNotFoundError]:
    return get_service().delete_merge(directive_id)


def list_merges() -> list[MergeDirective]:
    return get_service().list_merges()
