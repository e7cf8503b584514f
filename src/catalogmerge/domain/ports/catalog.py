"""Ports for reading the upstream catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from catalogmerge.domain.model import CatalogEntry, Handle, ProductId, ProductImage


@runtime_checkable
class CatalogSource(Protocol):
    """Read-only access to products and their variants.

    Implementations raise ``UpstreamUnavailableError`` when the platform cannot be reached.
    """

    def get_product(self, handle: Handle) -> CatalogEntry | None: ...

    def list_products(self, *, first: int = 50) -> Sequence[CatalogEntry]: ...


@runtime_checkable
class ProductImageFetcher(Protocol):
    """Callable port returning a product's images with their variant associations."""

    def __call__(self, product_id: ProductId) -> Sequence[ProductImage]: ...
