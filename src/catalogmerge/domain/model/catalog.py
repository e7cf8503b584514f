"""Catalog entries as delivered by the upstream commerce platform.

These objects are read-only ground truth for this package: nothing here writes back
to the platform, and every transformation produces a new value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .primitives import ColorName, Handle, ImageURL, Money, ProductId, VariantId


def _freeze_images_by_color(
    value: Mapping[ColorName, tuple[ImageURL, ...] | list[ImageURL]],
) -> Mapping[ColorName, tuple[ImageURL, ...]]:
    return MappingProxyType({color: tuple(images) for color, images in value.items()})


@dataclass(frozen=True, slots=True)
class Variant:
    """A sellable line item; its id is what carts and orders reference."""

    id: VariantId
    price: Money
    available_for_sale: bool = True
    size: str | None = None
    color: ColorName | None = None
    image: ImageURL | None = None


@dataclass(frozen=True, slots=True)
class ProductImage:
    """Image record from the upstream image API.

    ``variant_ids`` keeps the upstream order and uses the same identifier form as
    ``Variant.id``. An image with no variant ids is *unassociated*.
    """

    src: ImageURL
    position: int
    id: str | None = None
    variant_ids: tuple[VariantId, ...] = ()

    @property
    def is_associated(self) -> bool:
        return bool(self.variant_ids)


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    id: ProductId
    handle: Handle
    title: str = ""
    variants: tuple[Variant, ...] = ()
    images: tuple[ImageURL, ...] = ()
    colors: tuple[ColorName, ...] = ()
    sizes: tuple[str, ...] = ()
    images_by_color: Mapping[ColorName, tuple[ImageURL, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        # accept lists from callers but store immutable sequences
        object.__setattr__(self, "variants", tuple(self.variants))
        object.__setattr__(self, "images", tuple(self.images))
        object.__setattr__(self, "colors", tuple(self.colors))
        object.__setattr__(self, "sizes", tuple(self.sizes))
        object.__setattr__(self, "images_by_color", _freeze_images_by_color(self.images_by_color))
