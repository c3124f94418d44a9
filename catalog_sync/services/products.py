from __future__ import annotations

import math

from sqlalchemy.orm import Session

from catalog_sync.repositories.products import ProductRepository
from catalog_sync.schemas.products import ProductOut, ProductsListOut

MAX_PER_PAGE = 100


def list_products(db: Session, page: int = 1, per_page: int = 10) -> ProductsListOut:
    page = max(1, page)
    per_page = max(1, min(MAX_PER_PAGE, per_page))
    rows, total = ProductRepository(db).list_paginated(page=page, per_page=per_page)
    return ProductsListOut(
        items=[ProductOut.model_validate(row) for row in rows],
        total=total,
        page=page,
        per_page=per_page,
        last_page=max(1, math.ceil(total / per_page)),
    )


def clear_products(db: Session) -> int:
    return ProductRepository(db).clear()
