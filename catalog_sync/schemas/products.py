from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    shopify_id: str
    title: str
    price: Decimal
    stock: int
    created_at: datetime
    updated_at: datetime


class ProductsListOut(BaseModel):
    items: list[ProductOut]
    total: int
    page: int
    per_page: int
    last_page: int


class SyncSummaryOut(BaseModel):
    synced: int
    skipped: int
    total: int


class ClearOut(BaseModel):
    message: str
    cleared: int
