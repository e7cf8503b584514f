"""Product listing and detail assembly on top of merges and color images."""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from catalogmerge.domain.catalog_merger import filter_hidden, merge_into
from catalogmerge.domain.color_images import get_images_by_color
from catalogmerge.domain.errors import StoreUnavailableError, UpstreamUnavailableError

if TYPE_CHECKING:
    from catalogmerge.domain.merge_cache import MergeCache
    from catalogmerge.domain.model import CatalogEntry, Handle
    from catalogmerge.domain.ports.catalog import CatalogSource, ProductImageFetcher

DEFAULT_PAGE_SIZE = 50

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProductDetail:
    """Outcome of a detail lookup.

    ``redirect_handle`` is set instead of ``entry`` when the requested handle is a
    merge secondary; its page lives under the primary now.
    """

    entry: CatalogEntry | None = None
    redirect_handle: Handle | None = None


def list_products(
    *,
    catalog: CatalogSource,
    cache: MergeCache,
    first: int = DEFAULT_PAGE_SIZE,
    include_hidden: bool = False,
) -> list[CatalogEntry]:
    entries = list(catalog.list_products(first=first))
    if include_hidden:
        return entries
    try:
        snapshot = cache.read()
    except StoreUnavailableError as exc:
        log.warning("Merge data unavailable, listing without hiding secondaries: %s", exc)
        return entries
    return filter_hidden(entries, snapshot)


def assemble_product_detail(
    handle: Handle,
    *,
    catalog: CatalogSource,
    cache: MergeCache,
    image_fetcher: ProductImageFetcher | None = None,
) -> ProductDetail | None:
    """Load a product with its merged secondaries and color-grouped images.

    Returns ``None`` when the catalog has no product for ``handle``.
    """

    try:
        snapshot = cache.read()
    except StoreUnavailableError as exc:
        log.warning("Merge data unavailable, serving %s unmerged: %s", handle, exc)
        snapshot = None

    if snapshot is not None:
        primary_handle = snapshot.primary_of(handle)
        if primary_handle is not None:
            log.info("Product %s is merged into %s", handle, primary_handle)
            return ProductDetail(redirect_handle=primary_handle)

    primary = catalog.get_product(handle)
    if primary is None:
        return None
    primary = _with_color_images(primary, image_fetcher)

    secondaries: list[CatalogEntry] = []
    for secondary_handle in snapshot.secondaries_of(handle) if snapshot is not None else ():
        secondary = _load_secondary(catalog, secondary_handle)
        if secondary is not None:
            secondaries.append(_with_color_images(secondary, image_fetcher))

    return ProductDetail(entry=merge_into(primary, secondaries))


def _load_secondary(catalog: CatalogSource, handle: Handle) -> CatalogEntry | None:
    try:
        entry = catalog.get_product(handle)
    except UpstreamUnavailableError as exc:
        log.warning("Skipping secondary product %s: %s", handle, exc)
        return None
    if entry is None:
        log.warning("Secondary product %s not found in catalog", handle)
    return entry


def _with_color_images(
    entry: CatalogEntry,
    image_fetcher: ProductImageFetcher | None,
) -> CatalogEntry:
    if image_fetcher is None:
        return entry
    color_images = get_images_by_color(entry.id, entry.variants, fetcher=image_fetcher)
    if not color_images:
        return entry
    return replace(entry, images_by_color=color_images)
