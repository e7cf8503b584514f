from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from catalogmerge.app import CatalogMergeService
from catalogmerge.domain.merge_cache import MergeCache
from catalogmerge.ui import cli
from tests.helpers.catalog import (
    FakeCatalog,
    FakeClock,
    FakeImageFetcher,
    make_entry,
    make_image,
    make_variant,
)

if TYPE_CHECKING:
    from catalogmerge.domain.merge_registry import MergeRegistry

TEE = make_entry(
    "tee",
    variants=[make_variant("v-red", color="Red"), make_variant("v-blue", color="Blue")],
)


@pytest.fixture
def service(registry: MergeRegistry) -> CatalogMergeService:
    fetcher = FakeImageFetcher(
        {
            TEE.id: [
                make_image("red.jpg", 1, "v-red"),
                make_image("blue.jpg", 2, "v-blue"),
                make_image("extra.jpg", 3),
            ]
        }
    )
    return CatalogMergeService(
        registry=registry,
        cache=MergeCache(registry, clock=FakeClock()),
        catalog=FakeCatalog([TEE]),
        image_fetcher=fetcher,
    )


def _run(service: CatalogMergeService, *argv: str) -> int:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(list(argv), service_factory=lambda: service)
    code = excinfo.value.code
    assert isinstance(code, int)
    return code


def test_create_and_list_merges(
    service: CatalogMergeService, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(service, "merges", "create", "tee-black", "tee-white") == 0
    created = capsys.readouterr().out

    assert _run(service, "merges", "list") == 0
    listed = capsys.readouterr().out

    assert "tee-black <- tee-white" in created
    assert listed.strip() == created.strip()


def test_rejected_create_exits_with_message(
    service: CatalogMergeService, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(service, "merges", "create", "tee-black", "tee-black") == 1

    assert "Cannot merge a product with itself" in capsys.readouterr().err


def test_delete_merge(service: CatalogMergeService, capsys: pytest.CaptureFixture[str]) -> None:
    directive = service.create_merge("tee-black", "tee-white").unwrap()

    assert _run(service, "merges", "delete", str(directive.id)) == 0
    assert f"Deleted merge {directive.id}" in capsys.readouterr().out
    assert service.list_merges() == []


def test_delete_unknown_merge_exits_1(
    service: CatalogMergeService, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(service, "merges", "delete", "00000000-0000-0000-0000-000000000000") == 1

    assert "not found" in capsys.readouterr().err


def test_delete_with_malformed_id_exits_2(service: CatalogMergeService) -> None:
    assert _run(service, "merges", "delete", "not-a-uuid") == 2


def test_images_prints_color_map(
    service: CatalogMergeService, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(service, "images", "tee") == 0

    assert json.loads(capsys.readouterr().out) == {
        "Red": ["red.jpg", "extra.jpg"],
        "Blue": ["blue.jpg"],
    }


def test_images_for_unknown_product_exits_1(service: CatalogMergeService) -> None:
    assert _run(service, "images", "missing") == 1


def test_fatal_errors_exit_1() -> None:
    def broken() -> CatalogMergeService:
        raise RuntimeError("boom")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["merges", "list"], service_factory=broken)

    assert excinfo.value.code == 1
