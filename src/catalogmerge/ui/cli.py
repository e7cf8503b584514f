# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from catalogmerge.app import CatalogMergeService, get_service
from catalogmerge.config import configure_logging
from catalogmerge.domain.results import Err, Ok

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from catalogmerge.domain.model import MergeDirective

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Administer catalog merges")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    merges = subparsers.add_parser("merges", help="Merge directive commands")
    merges_sub = merges.add_subparsers(dest="merges_command", required=True)
    merges_sub.add_parser("list", help="List merges, newest first")
    merges_create = merges_sub.add_parser(
        "create",
        help="Fold the SECONDARY product's variants into PRIMARY",
    )
    merges_create.add_argument("primary", help="Handle of the product that stays visible")
    merges_create.add_argument("secondary", help="Handle of the product to hide")
    merges_delete = merges_sub.add_parser("delete", help="Delete a merge by id")
    merges_delete.add_argument("id", help="Merge id (UUID)")

    images = subparsers.add_parser(
        "images",
        help="Print the color -> images grouping for a product",
    )
    images.add_argument("handle", help="Product handle")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _format_directive(directive: MergeDirective) -> str:
    return (
        f"{directive.id}  {directive.primary_handle} <- {directive.secondary_handle}  "
        f"({directive.created_at.isoformat()})"
    )


def _run(args: argparse.Namespace, service: CatalogMergeService) -> int:
    if args.command == "merges":
        return _run_merges(args, service)
    if args.command == "images":
        return _run_images(args.handle, service)
    raise ValueError(f"Unsupported command: {args.command}")


def _run_merges(args: argparse.Namespace, service: CatalogMergeService) -> int:
    if args.merges_command == "list":
        directives = service.list_merges()
        for directive in directives:
            print(_format_directive(directive))
        log.info("%s merges", len(directives))
        return 0

    if args.merges_command == "create":
        match service.create_merge(args.primary, args.secondary):
            case Ok(directive):
                print(_format_directive(directive))
                return 0
            case Err(error):
                print(f"Error: {error.message}", file=sys.stderr)
                return 1

    if args.merges_command == "delete":
        match service.delete_merge(_parse_uuid(args.id)):
            case Ok(directive_id):
                print(f"Deleted merge {directive_id}")
                return 0
            case Err(error):
                print(f"Error: {error.message}", file=sys.stderr)
                return 1

    raise ValueError(f"Unsupported merges command: {args.merges_command}")


def _run_images(handle: str, service: CatalogMergeService) -> int:
    entry = service.catalog.get_product(handle)
    if entry is None:
        print(f"Error: Product {handle} not found", file=sys.stderr)
        return 1
    color_images = service.get_images_by_color(entry.id, entry.variants)
    print(json.dumps(color_images, indent=2))
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    service_factory: Callable[[], CatalogMergeService] = get_service,
) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    if parsed_args.command == "merges" and parsed_args.merges_command == "delete":
        try:
            _parse_uuid(parsed_args.id)
        except ValueError:
            log.exception("CLI validation error")
            sys.exit(2)

    try:
        exit_code = _run(parsed_args, service_factory())
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
