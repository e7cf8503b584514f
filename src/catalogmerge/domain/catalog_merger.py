"""Fold secondary catalog entries into a primary and hide the donors from listings."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from catalogmerge.domain.model import CatalogEntry, ColorName, ImageURL, MergeSnapshot, Variant

log = getLogger(__name__)


def filter_hidden(
    entries: Iterable[CatalogEntry],
    snapshot: MergeSnapshot,
) -> list[CatalogEntry]:
    """Drop entries whose handle is a merge secondary, keeping the order of the rest."""

    if not snapshot.hidden_handles:
        return list(entries)
    return [entry for entry in entries if entry.handle not in snapshot.hidden_handles]


def merge_into(primary: CatalogEntry, secondaries: Sequence[CatalogEntry]) -> CatalogEntry:
    """Return ``primary`` with the variants, images and options of ``secondaries`` appended.

    Variants keep their own identity so carts and orders still reference the right
    line item; they are never deduplicated. Images are deduplicated by exact URL, both
    in the flat list and per color. Neither input is modified.
    """

    if not secondaries:
        return primary

    log.info(
        "Merging variants from %s secondary products into %s",
        len(secondaries),
        primary.handle,
    )

    variants: list[Variant] = list(primary.variants)
    images = _OrderedUrls(primary.images)
    colors: dict[ColorName, None] = dict.fromkeys(primary.colors)
    sizes: dict[str, None] = dict.fromkeys(primary.sizes)
    images_by_color: dict[ColorName, _OrderedUrls] = {
        color: _OrderedUrls(urls) for color, urls in primary.images_by_color.items()
    }

    for secondary in secondaries:
        variants.extend(secondary.variants)
        images.extend(secondary.images)
        colors.update(dict.fromkeys(secondary.colors))
        sizes.update(dict.fromkeys(secondary.sizes))
        for color, urls in secondary.images_by_color.items():
            images_by_color.setdefault(color, _OrderedUrls()).extend(urls)

    return replace(
        primary,
        variants=tuple(variants),
        images=images.as_tuple(),
        colors=tuple(colors),
        sizes=tuple(sizes),
        images_by_color={color: urls.as_tuple() for color, urls in images_by_color.items()},
    )


class _OrderedUrls:
    """Insertion-ordered URL set."""

    __slots__ = ("_urls",)

    def __init__(self, urls: Iterable[ImageURL] = ()) -> None:
        self._urls: dict[ImageURL, None] = dict.fromkeys(urls)

    def extend(self, urls: Iterable[ImageURL]) -> None:
        for url in urls:
            self._urls.setdefault(url, None)

    def as_tuple(self) -> tuple[ImageURL, ...]:
        return tuple(self._urls)
