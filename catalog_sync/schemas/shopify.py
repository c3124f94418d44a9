from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ShopifyVariant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Coerced leniently during normalization.
    price: Any = None
    inventory_quantity: Any = None


class ShopifyProduct(BaseModel):
    """Subset of the Admin REST `product` resource the sync reads."""

    model_config = ConfigDict(extra="ignore")

    id: str | int | None = None
    title: Any = None
    variants: list[ShopifyVariant] | None = Field(default=None)
