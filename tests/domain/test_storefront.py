from __future__ import annotations

from datetime import UTC, datetime, timedelta

from catalogmerge.domain.errors import StoreUnavailableError
from catalogmerge.domain.merge_cache import MergeCache
from catalogmerge.domain.model import MergeDirective
from catalogmerge.domain.storefront import ProductDetail, assemble_product_detail, list_products
from tests.helpers.catalog import (
    FakeCatalog,
    FakeClock,
    FakeDirectiveSource,
    FakeImageFetcher,
    make_entry,
    make_image,
    make_variant,
)


def _cache(*pairs: tuple[str, str]) -> tuple[MergeCache, FakeDirectiveSource]:
    source = FakeDirectiveSource(
        MergeDirective(primary_handle=primary, secondary_handle=secondary)
        for primary, secondary in pairs
    )
    return MergeCache(source, clock=FakeClock()), source


BLACK = make_entry(
    "tee-black",
    variants=[make_variant("v-black", color="Black", image="https://cdn/black.jpg")],
    images=["https://cdn/black.jpg"],
    colors=["Black"],
)
WHITE = make_entry(
    "tee-white",
    variants=[make_variant("v-white", color="White", image="https://cdn/white.jpg")],
    images=["https://cdn/white.jpg"],
    colors=["White"],
)
HOODIE = make_entry("hoodie", variants=[make_variant("v-hoodie")])


def test_list_products_hides_secondaries() -> None:
    cache, _ = _cache(("tee-black", "tee-white"))
    catalog = FakeCatalog([BLACK, WHITE, HOODIE])

    visible = list_products(catalog=catalog, cache=cache)

    assert [entry.handle for entry in visible] == ["tee-black", "hoodie"]


def test_list_products_can_include_hidden() -> None:
    cache, source = _cache(("tee-black", "tee-white"))
    catalog = FakeCatalog([BLACK, WHITE, HOODIE])

    everything = list_products(catalog=catalog, cache=cache, include_hidden=True)

    assert [entry.handle for entry in everything] == ["tee-black", "tee-white", "hoodie"]
    assert source.calls == 0


def test_list_products_without_merge_data_lists_everything() -> None:
    cache, source = _cache()
    source.error = StoreUnavailableError("down")
    catalog = FakeCatalog([BLACK, WHITE])

    assert len(list_products(catalog=catalog, cache=cache)) == 2


def test_secondary_detail_redirects_to_primary() -> None:
    cache, _ = _cache(("tee-black", "tee-white"))
    catalog = FakeCatalog([BLACK, WHITE])

    detail = assemble_product_detail("tee-white", catalog=catalog, cache=cache)

    assert detail == ProductDetail(redirect_handle="tee-black")
    assert catalog.requested == []


def test_primary_detail_includes_secondary_variants() -> None:
    cache, _ = _cache(("tee-black", "tee-white"))
    catalog = FakeCatalog([BLACK, WHITE])

    detail = assemble_product_detail("tee-black", catalog=catalog, cache=cache)

    assert detail is not None
    assert detail.entry is not None
    assert [variant.id for variant in detail.entry.variants] == ["v-black", "v-white"]
    assert detail.entry.colors == ("Black", "White")


def test_secondaries_are_merged_in_creation_order() -> None:
    red = make_entry(
        "tee-red",
        variants=[make_variant("v-red", color="Red", image="https://cdn/red.jpg")],
        images=["https://cdn/red.jpg"],
        colors=["Red"],
    )
    created = datetime(2024, 5, 1, tzinfo=UTC)
    # listed newest first, as the store returns them
    source = FakeDirectiveSource(
        [
            MergeDirective(
                primary_handle="tee-black",
                secondary_handle="tee-red",
                created_at=created + timedelta(minutes=5),
            ),
            MergeDirective(
                primary_handle="tee-black",
                secondary_handle="tee-white",
                created_at=created,
            ),
        ]
    )
    cache = MergeCache(source, clock=FakeClock())
    catalog = FakeCatalog([BLACK, WHITE, red])

    detail = assemble_product_detail("tee-black", catalog=catalog, cache=cache)

    assert detail is not None
    assert detail.entry is not None
    assert [variant.id for variant in detail.entry.variants] == ["v-black", "v-white", "v-red"]
    assert detail.entry.images == (
        "https://cdn/black.jpg",
        "https://cdn/white.jpg",
        "https://cdn/red.jpg",
    )


def test_unknown_handle_returns_none() -> None:
    cache, _ = _cache()

    assert assemble_product_detail("nope", catalog=FakeCatalog(), cache=cache) is None


def test_missing_or_unavailable_secondaries_are_skipped() -> None:
    cache, _ = _cache(("tee-black", "tee-white"), ("tee-black", "tee-gone"))
    catalog = FakeCatalog([BLACK, WHITE], unavailable=["tee-white"])

    detail = assemble_product_detail("tee-black", catalog=catalog, cache=cache)

    assert detail is not None
    assert detail.entry == BLACK


def test_detail_groups_images_by_color_per_product() -> None:
    cache, _ = _cache(("tee-black", "tee-white"))
    catalog = FakeCatalog([BLACK, WHITE])
    fetcher = FakeImageFetcher(
        {
            BLACK.id: [
                make_image("https://cdn/black.jpg", 1, "v-black"),
                make_image("https://cdn/black-back.jpg", 2),
            ],
            WHITE.id: [make_image("https://cdn/white.jpg", 1, "v-white")],
        }
    )

    detail = assemble_product_detail(
        "tee-black", catalog=catalog, cache=cache, image_fetcher=fetcher
    )

    assert detail is not None
    assert detail.entry is not None
    assert dict(detail.entry.images_by_color) == {
        "Black": ("https://cdn/black.jpg", "https://cdn/black-back.jpg"),
        "White": ("https://cdn/white.jpg",),
    }
    assert fetcher.calls == [BLACK.id, WHITE.id]


def test_detail_without_merge_data_serves_unmerged_product() -> None:
    cache, source = _cache(("tee-black", "tee-white"))
    source.error = StoreUnavailableError("down")
    catalog = FakeCatalog([BLACK, WHITE])

    detail = assemble_product_detail("tee-white", catalog=catalog, cache=cache)

    assert detail == ProductDetail(entry=WHITE)
