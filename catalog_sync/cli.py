from __future__ import annotations

import argparse
import logging
import sys
import traceback
from typing import TextIO

from sqlalchemy.exc import SQLAlchemyError

from catalog_sync.clients.shopify import MAX_PAGE_SIZE, ShopifyClient, ShopifyConfig
from catalog_sync.core.config import get_settings
from catalog_sync.core.errors import CatalogSyncError
from catalog_sync.db.base import Base
from catalog_sync.db.session import SessionLocal, engine
from catalog_sync.repositories.products import ProductRepository
from catalog_sync.services.sync import ProductSyncService, SyncSummary


def run_sync(page_size: int) -> SyncSummary:
    settings = get_settings()
    Base.metadata.create_all(bind=engine)
    with ShopifyClient(ShopifyConfig.from_settings(settings)) as client, SessionLocal() as db:
        service = ProductSyncService(ProductRepository(db), client, page_size=page_size)
        return service.sync()


def _print_summary(summary: SyncSummary, out: TextIO) -> None:
    rows = [("Total products", summary.total), ("Synced", summary.synced), ("Skipped", summary.skipped)]
    width = max(len(label) for label, _ in rows)
    print(f"{'Metric':<{width}}  Count", file=out)
    print(f"{'-' * width}  -----", file=out)
    for label, count in rows:
        print(f"{label:<{width}}  {count}", file=out)


def sync_command(args: argparse.Namespace, out: TextIO | None = None, err: TextIO | None = None) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    if not args.quiet:
        print("Starting Shopify products sync...", file=out)
    try:
        summary = run_sync(page_size=args.page_size)
    except (CatalogSyncError, SQLAlchemyError) as exc:
        print(f"Sync failed: {exc}", file=err)
        if args.verbose:
            print("", file=err)
            print("Stack trace:", file=err)
            traceback.print_exc(file=err)
        elif not args.quiet:
            print("Use -v flag for more details.", file=err)
        return 1

    if not args.quiet:
        print("Sync completed successfully!", file=out)
        _print_summary(summary, out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="catalog-sync", description="Shopify catalog sync")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Sync products from Shopify to the local database")
    verbosity = sync_parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging and stack traces on failure")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only report failures")
    sync_parser.add_argument("--page-size", type=int, default=None, help=f"Products per Shopify page (1-{MAX_PAGE_SIZE})")
    sync_parser.set_defaults(handler=sync_command)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.page_size is None:
        args.page_size = get_settings().shopify_page_size
    args.page_size = max(1, min(MAX_PAGE_SIZE, args.page_size))
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
