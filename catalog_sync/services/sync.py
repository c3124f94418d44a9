from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from catalog_sync.clients.shopify import MAX_PAGE_SIZE, ShopifyClient
from catalog_sync.core.errors import CatalogSyncError, SyncError
from catalog_sync.repositories.products import ProductRepository
from catalog_sync.services.normalization import normalize_product

logger = logging.getLogger(__name__)


@dataclass
class SyncSummary:
    synced: int = 0
    skipped: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class ProductSyncService:
    """Pulls every Shopify product and upserts it into the local store.

    Records are handled independently: a record without an id, or one that
    fails to normalize or persist, is logged and counted as skipped while the
    rest of the batch continues. Only a failure to fetch the catalog aborts the
    sync.
    """

    def __init__(self, repository: ProductRepository, client: ShopifyClient, page_size: int = MAX_PAGE_SIZE) -> None:
        self.repository = repository
        self.client = client
        self.page_size = page_size

    def sync(self) -> SyncSummary:
        try:
            records = self.client.fetch_all_products(limit=self.page_size)
        except CatalogSyncError as exc:
            logger.error("Failed to fetch products from Shopify: %s", exc)
            raise SyncError(f"Failed to fetch products from Shopify: {exc}") from exc

        summary = SyncSummary(total=len(records))
        for raw in records:
            try:
                if self._process(raw):
                    summary.synced += 1
                else:
                    summary.skipped += 1
            except Exception:
                summary.skipped += 1
                logger.exception("Failed to process product %r", _record_id(raw))

        logger.info(
            "Product sync completed: synced=%d skipped=%d total=%d",
            summary.synced,
            summary.skipped,
            summary.total,
        )
        return summary

    def _process(self, raw: dict[str, object]) -> bool:
        normalized = normalize_product(raw)
        if normalized is None:
            logger.warning("Product data missing ID, skipping (title=%r)", _record_title(raw))
            return False

        self.repository.upsert(
            normalized.shopify_id,
            title=normalized.title,
            price=normalized.price,
            stock=normalized.stock,
        )
        logger.debug(
            "Product upserted shopify_id=%s title=%r price=%s stock=%d",
            normalized.shopify_id,
            normalized.title,
            normalized.price,
            normalized.stock,
        )
        return True


def _record_id(raw: object) -> object:
    return raw.get("id") if isinstance(raw, dict) else None


def _record_title(raw: object) -> object:
    return raw.get("title") if isinstance(raw, dict) else None
