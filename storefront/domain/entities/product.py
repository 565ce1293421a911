"""Catalog product as seen by the cart engine."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.constants import DEFAULT_PRODUCT_BASE_PRICE


class Product(BaseModel):
    """Read-only catalog facts copied onto a cart line at add-time."""

    model_config = ConfigDict(frozen=True)

    product_id: str = Field(..., min_length=1, description="Catalog product ID")
    title: str = Field(..., description="Product title")
    image: str = Field("", description="Primary image URL")
    base_price: Optional[float] = Field(None, ge=0, description="Catalog base price")
    category: Optional[str] = Field(None, description="Product category")

    @property
    def effective_base_price(self) -> float:
        """Catalog base price, or the storefront default when none is set."""
        return self.base_price or DEFAULT_PRODUCT_BASE_PRICE
