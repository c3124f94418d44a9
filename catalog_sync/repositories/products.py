from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_sync.models import Product

logger = logging.getLogger(__name__)


class ProductRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_shopify_id(self, shopify_id: str) -> Product | None:
        return self.db.execute(select(Product).where(Product.shopify_id == shopify_id)).scalar_one_or_none()

    def upsert(self, shopify_id: str, *, title: str, price: Decimal, stock: int) -> Product:
        """Insert or update the product keyed by ``shopify_id`` and commit.

        A unique-constraint violation means a concurrent sync inserted the same
        id between our select and insert; the write is retried once, which then
        takes the update branch.
        """
        try:
            return self._save(shopify_id, title=title, price=price, stock=stock)
        except IntegrityError:
            self.db.rollback()
            logger.info("Concurrent insert for shopify_id=%s, retrying as update", shopify_id)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        try:
            return self._save(shopify_id, title=title, price=price, stock=stock)
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _save(self, shopify_id: str, *, title: str, price: Decimal, stock: int) -> Product:
        product = self.get_by_shopify_id(shopify_id)
        if product is None:
            product = Product(shopify_id=shopify_id, title=title, price=price, stock=stock)
            self.db.add(product)
        else:
            product.title = title
            product.price = price
            product.stock = stock
        self.db.commit()
        return product

    def list_paginated(self, page: int = 1, per_page: int = 10) -> tuple[list[Product], int]:
        total = self.count()
        rows = (
            self.db.execute(
                select(Product).order_by(Product.id.desc()).offset((page - 1) * per_page).limit(per_page)
            )
            .scalars()
            .all()
        )
        return list(rows), total

    def count(self) -> int:
        return int(self.db.execute(select(func.count()).select_from(Product)).scalar_one())

    def clear(self) -> int:
        try:
            result = self.db.execute(delete(Product))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return int(result.rowcount or 0)
