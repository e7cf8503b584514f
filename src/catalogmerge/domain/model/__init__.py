"""Public domain model surface."""

from __future__ import annotations

from catalogmerge.domain.model.catalog import CatalogEntry, ProductImage, Variant
from catalogmerge.domain.model.merges import MergeDirective, MergeSnapshot, new_id, pair_key
from catalogmerge.domain.model.primitives import (
    ColorImageMap,
    ColorName,
    Handle,
    ImageURL,
    Money,
    ProductId,
    VariantId,
)

__all__ = [
    "CatalogEntry",
    "ColorImageMap",
    "ColorName",
    "Handle",
    "ImageURL",
    "MergeDirective",
    "MergeSnapshot",
    "Money",
    "ProductId",
    "ProductImage",
    "Variant",
    "VariantId",
    "new_id",
    "pair_key",
]
