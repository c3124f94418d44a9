from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import ValidationError

from catalog_sync.core.errors import RecordNormalizationError
from catalog_sync.schemas.shopify import ShopifyProduct

UNTITLED_PRODUCT = "Untitled Product"
CENTS = Decimal("0.01")
LEADING_NUMBER_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass
class NormalizedProduct:
    shopify_id: str
    title: str
    price: Decimal
    stock: int


def _leading_number(value: Any) -> Decimal | None:
    """Numeric prefix of ``value``: "12.5kg" -> 12.5, "abc" / NaN / inf -> None."""
    if value is None or isinstance(value, bool):
        return None
    match = LEADING_NUMBER_RE.match(str(value))
    if not match:
        return None
    return Decimal(match.group(0).strip())


def normalize_price(value: Any) -> Decimal:
    price = _leading_number(value)
    if price is None:
        return Decimal("0.00")
    return price.quantize(CENTS, rounding=ROUND_HALF_UP)


def normalize_stock(value: Any) -> int:
    quantity = _leading_number(value)
    if quantity is None:
        return 0
    # Shopify reports oversold items as negative inventory.
    return max(0, int(quantity))


def normalize_product(raw: dict[str, Any]) -> NormalizedProduct | None:
    """Map a raw Shopify product onto the local product shape.

    Returns ``None`` when the record has no usable id; such records are skipped,
    not failed. Price and stock come from the first variant only and fall back
    to zero when absent or unparseable.
    """
    try:
        record = ShopifyProduct.model_validate(raw)
    except ValidationError as exc:
        raise RecordNormalizationError(f"Malformed product record: {exc.error_count()} validation error(s)") from exc

    shopify_id = str(record.id).strip() if record.id else ""
    if not shopify_id:
        return None

    title = UNTITLED_PRODUCT if record.title is None else str(record.title)

    price = Decimal("0.00")
    stock = 0
    if record.variants:
        first_variant = record.variants[0]
        price = normalize_price(first_variant.price)
        stock = normalize_stock(first_variant.inventory_quantity)

    return NormalizedProduct(shopify_id=shopify_id, title=title, price=price, stock=stock)
