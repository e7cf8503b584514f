"""Reconstruct a color -> images grouping from partial variant associations.

The upstream platform reliably links only the representative swatch image of each
color variant. Every other photo arrives without a variant link, so it is assigned
by position: supplementary photos are assumed to be uploaded in color-grouped
batches following the order in which the colors' swatch images appear.

For ``U`` unassociated images and ``C`` discovered colors each color receives
``U // C`` of them, and the first ``U % C`` colors one extra, consumed strictly in
position order. Products uploaded in a different order will be mis-grouped; that is
an accepted limitation, not something to guess around.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from catalogmerge.domain.errors import UpstreamUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from catalogmerge.domain.model import (
        ColorImageMap,
        ColorName,
        ImageURL,
        ProductId,
        ProductImage,
        Variant,
        VariantId,
    )
    from catalogmerge.domain.ports.catalog import ProductImageFetcher

log = getLogger(__name__)


def resolve_color_images(
    images: Iterable[ProductImage],
    variants: Iterable[Variant],
) -> ColorImageMap:
    """Group image URLs by color.

    Returns an empty mapping when no associated image resolves to a color; callers
    then fall back to the flat image list.
    """

    associated: list[ProductImage] = []
    unassociated: list[ProductImage] = []
    for image in images:
        (associated if image.is_associated else unassociated).append(image)

    color_by_variant: dict[VariantId, ColorName] = {
        variant.id: variant.color for variant in variants if variant.color
    }

    color_order: list[ColorName] = []
    primary_image: dict[ColorName, ImageURL] = {}
    for image in sorted(associated, key=_position):
        for variant_id in image.variant_ids:
            color = color_by_variant.get(variant_id)
            if color and color not in primary_image:
                color_order.append(color)
                primary_image[color] = image.src
                break

    if not color_order:
        log.debug("No colors resolved from %s associated images", len(associated))
        return {}

    color_images: ColorImageMap = {color: [primary_image[color]] for color in color_order}

    remaining = sorted(unassociated, key=_position)
    base, remainder = divmod(len(remaining), len(color_order))
    index = 0
    for color_index, color in enumerate(color_order):
        count = base + (1 if color_index < remainder else 0)
        color_images[color].extend(image.src for image in remaining[index : index + count])
        index += count

    log.debug(
        "Resolved %s colors (%s per color, remainder %s): %s",
        len(color_order),
        base,
        remainder,
        {color: len(urls) for color, urls in color_images.items()},
    )
    return color_images


def images_by_variant_id(images: Iterable[ProductImage]) -> dict[VariantId, list[ImageURL]]:
    """Map each variant id to the images explicitly linked to it, in image order."""

    mapping: dict[VariantId, list[ImageURL]] = {}
    for image in images:
        for variant_id in image.variant_ids:
            mapping.setdefault(variant_id, []).append(image.src)
    return mapping


def get_images_by_color(
    product_id: ProductId,
    variants: Sequence[Variant],
    *,
    fetcher: ProductImageFetcher,
) -> ColorImageMap:
    """Fetch a product's images and group them by color.

    Upstream failures degrade to an empty mapping instead of failing the caller.
    """

    try:
        images = fetcher(product_id)
    except UpstreamUnavailableError as exc:
        log.warning("Images unavailable for product %s: %s", product_id, exc)
        return {}
    return resolve_color_images(images, variants)


def _position(image: ProductImage) -> int:
    return image.position
