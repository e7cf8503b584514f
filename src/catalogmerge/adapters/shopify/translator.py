"""Translate Shopify payloads into catalog domain objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogmerge.domain.model import CatalogEntry, Money, ProductImage, Variant

if TYPE_CHECKING:
    from .schema import AdminImage, ProductPayload, VariantPayload

PRODUCT_GID_PREFIX = "gid://shopify/Product/"
VARIANT_GID_PREFIX = "gid://shopify/ProductVariant/"

COLOR_OPTION_NAMES = frozenset({"color", "colour"})
SIZE_OPTION_NAMES = frozenset({"size"})


def numeric_product_id(product_id: str) -> str:
    """Reduce a product GID to the numeric id the Admin REST API expects."""
    return product_id.removeprefix(PRODUCT_GID_PREFIX)


def variant_gid(variant_id: int | str) -> str:
    return f"{VARIANT_GID_PREFIX}{variant_id}"


def translate_admin_image(payload: AdminImage) -> ProductImage:
    # admin variant ids are numeric; storefront variants carry GIDs
    return ProductImage(
        id=str(payload.id),
        src=payload.src,
        position=payload.position,
        variant_ids=tuple(variant_gid(variant_id) for variant_id in payload.variant_ids),
    )


def translate_product(payload: ProductPayload) -> CatalogEntry:
    variants = tuple(_translate_variant(node) for node in payload.variants.nodes)

    colors: dict[str, None] = {}
    sizes: dict[str, None] = {}
    images_by_color: dict[str, dict[str, None]] = {}
    for variant in variants:
        if variant.color:
            colors.setdefault(variant.color, None)
            if variant.image:
                images_by_color.setdefault(variant.color, {}).setdefault(variant.image, None)
        if variant.size:
            sizes.setdefault(variant.size, None)

    return CatalogEntry(
        id=payload.id,
        handle=payload.handle,
        title=payload.title,
        variants=variants,
        images=tuple(dict.fromkeys(image.url for image in payload.images.nodes)),
        colors=tuple(colors),
        sizes=tuple(sizes),
        images_by_color={color: tuple(urls) for color, urls in images_by_color.items()},
    )


def _translate_variant(payload: VariantPayload) -> Variant:
    color = _option_value(payload, COLOR_OPTION_NAMES)
    size = _option_value(payload, SIZE_OPTION_NAMES)
    return Variant(
        id=payload.id,
        price=Money(amount=payload.price.amount, currency_code=payload.price.currency_code),
        available_for_sale=payload.available_for_sale,
        size=size,
        color=color,
        image=payload.image.url if payload.image else None,
    )


def _option_value(payload: VariantPayload, names: frozenset[str]) -> str | None:
    for option in payload.selected_options:
        if option.name.strip().lower() in names:
            value = option.value.strip()
            return value or None
    return None
