import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_sync.api.deps import get_sync_service
from catalog_sync.core.errors import ApiError, AppHTTPException, SyncError
from catalog_sync.db.session import get_db
from catalog_sync.schemas.products import ClearOut, ProductsListOut, SyncSummaryOut
from catalog_sync.services.products import clear_products, list_products
from catalog_sync.services.sync import ProductSyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductsListOut)
def index(
    page: int = Query(default=1),
    per_page: int = Query(default=10),
    db: Session = Depends(get_db),
) -> ProductsListOut:
    return list_products(db, page=page, per_page=per_page)


@router.post("/sync", response_model=SyncSummaryOut)
def sync(service: ProductSyncService = Depends(get_sync_service)) -> SyncSummaryOut:
    try:
        summary = service.sync()
    except SyncError as exc:
        raise AppHTTPException(status_code=500, error=ApiError(error="Failed to sync products", message=str(exc)))
    return SyncSummaryOut(**summary.to_dict())


@router.delete("/clear", response_model=ClearOut)
def clear(db: Session = Depends(get_db)) -> ClearOut:
    try:
        cleared = clear_products(db)
    except SQLAlchemyError as exc:
        logger.exception("Failed to clear products")
        raise AppHTTPException(status_code=500, error=ApiError(error="Failed to clear products", message=str(exc)))
    return ClearOut(message="All products cleared successfully", cleared=cleared)
