from collections.abc import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from catalog_sync.clients.shopify import ShopifyClient, ShopifyConfig
from catalog_sync.core.config import get_settings
from catalog_sync.core.errors import ApiError, AppHTTPException, ConfigurationError
from catalog_sync.db.session import get_db
from catalog_sync.repositories.products import ProductRepository
from catalog_sync.services.sync import ProductSyncService


def get_shopify_client() -> Iterator[ShopifyClient]:
    try:
        client = ShopifyClient(ShopifyConfig.from_settings(get_settings()))
    except ConfigurationError as exc:
        raise AppHTTPException(status_code=500, error=ApiError(error="Shopify is not configured", message=str(exc)))
    try:
        yield client
    finally:
        client.close()


def get_sync_service(
    db: Session = Depends(get_db),
    client: ShopifyClient = Depends(get_shopify_client),
) -> ProductSyncService:
    return ProductSyncService(ProductRepository(db), client, page_size=get_settings().shopify_page_size)
