from decimal import Decimal

import pytest

from catalog_sync.core.errors import RecordNormalizationError
from catalog_sync.services.normalization import (
    UNTITLED_PRODUCT,
    normalize_price,
    normalize_product,
    normalize_stock,
)


def test_first_variant_supplies_price_and_stock() -> None:
    normalized = normalize_product(
        {
            "id": "999888777",
            "title": "API Product",
            "variants": [
                {"price": "99.99", "inventory_quantity": 15},
                {"price": "1.00", "inventory_quantity": 1},
            ],
        }
    )

    assert normalized is not None
    assert normalized.shopify_id == "999888777"
    assert normalized.title == "API Product"
    assert normalized.price == Decimal("99.99")
    assert normalized.stock == 15


def test_numeric_id_is_stored_as_string() -> None:
    normalized = normalize_product({"id": 632910392, "title": "IPod Nano - 8GB"})

    assert normalized is not None
    assert normalized.shopify_id == "632910392"


@pytest.mark.parametrize("variants", [None, []])
def test_missing_variants_default_to_zero(variants) -> None:
    normalized = normalize_product({"id": "1", "title": "No Variants", "variants": variants})

    assert normalized is not None
    assert normalized.price == Decimal("0.00")
    assert normalized.stock == 0


def test_variant_without_price_or_quantity_defaults_to_zero() -> None:
    normalized = normalize_product({"id": "1", "variants": [{}]})

    assert normalized is not None
    assert normalized.price == Decimal("0.00")
    assert normalized.stock == 0


@pytest.mark.parametrize("title", [None, "missing"])
def test_missing_title_uses_placeholder(title) -> None:
    raw = {"id": "1"} if title == "missing" else {"id": "1", "title": title}
    normalized = normalize_product(raw)

    assert normalized is not None
    assert normalized.title == UNTITLED_PRODUCT


@pytest.mark.parametrize("title", ["", "   "])
def test_blank_title_is_kept(title) -> None:
    normalized = normalize_product({"id": "1", "title": title})

    assert normalized is not None
    assert normalized.title == title


def test_non_string_title_is_coerced() -> None:
    normalized = normalize_product({"id": "3", "title": 12345})

    assert normalized is not None
    assert normalized.title == "12345"


@pytest.mark.parametrize("raw", [{"title": "B"}, {"id": None, "title": "B"}, {"id": "", "title": "B"}, {"id": 0}])
def test_missing_id_is_skipped(raw) -> None:
    assert normalize_product(raw) is None


def test_string_quantities_and_float_prices_are_coerced() -> None:
    normalized = normalize_product({"id": "7", "variants": [{"price": 19.5, "inventory_quantity": "4"}]})

    assert normalized is not None
    assert normalized.price == Decimal("19.50")
    assert normalized.stock == 4


def test_oversold_inventory_clamps_to_zero() -> None:
    normalized = normalize_product({"id": "7", "variants": [{"price": "5.00", "inventory_quantity": -3}]})

    assert normalized is not None
    assert normalized.stock == 0


@pytest.mark.parametrize(
    ("quantity", "expected"),
    [(2.5, 2), ("2.9", 2), ("12 units", 12), ("abc", 0), (True, 0), (-0.5, 0)],
)
def test_fractional_or_non_numeric_quantity_is_truncated(quantity, expected) -> None:
    assert normalize_stock(quantity) == expected


def test_price_rounds_to_cents() -> None:
    assert normalize_price("10.005") == Decimal("10.01")
    assert normalize_price(" 12 ") == Decimal("12.00")
    assert normalize_price("9.99 USD") == Decimal("9.99")


@pytest.mark.parametrize("price", ["free", "abc", "NaN", "Infinity", "-inf", ""])
def test_unparseable_price_defaults_to_zero(price) -> None:
    normalized = normalize_product({"id": "1", "variants": [{"price": price, "inventory_quantity": 3}]})

    assert normalized is not None
    assert normalized.price == Decimal("0.00")
    assert normalized.stock == 3


def test_malformed_record_fails_the_record() -> None:
    with pytest.raises(RecordNormalizationError):
        normalize_product({"id": "1", "variants": "not-a-list"})
