"""Cart, cart line and saved-cart entities."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from storefront.core.constants import DEFAULT_TAX_RATE, MIN_QUANTITY


class CartItem(BaseModel):
    """One configured, priced unit in a cart or saved-for-later list.

    `price` is the unit price fixed when the item was added; it is never
    recomputed from the catalog afterwards.
    """

    id: str = Field(..., min_length=1, description="Identity key of the configuration")
    product_id: str = Field(..., description="Catalog product ID")
    title: str = Field("", description="Product title at add-time")
    image: str = Field("", description="Product image at add-time")
    price: float = Field(..., ge=0, description="Unit price at add-time")
    quantity: int = Field(MIN_QUANTITY, ge=MIN_QUANTITY, description="Units of this line")
    width: Optional[float] = Field(None, gt=0, description="Width in inches")
    height: Optional[float] = Field(None, gt=0, description="Height in inches")
    options: dict[str, str] = Field(default_factory=dict, description="Option name -> value")

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CartItem:
        return cls.model_validate(data)


class Cart(BaseModel):
    """Active shopping session.

    Every money field is derived from `items`, `tax_rate` and the active
    coupon; use `storefront.domain.totals.recalculate_cart` after changing them.
    """

    items: list[CartItem] = Field(default_factory=list)
    subtotal: float = 0.0
    tax_rate: float = Field(DEFAULT_TAX_RATE, ge=0)
    tax_amount: float = 0.0
    shipping_amount: float = 0.0
    total: float = 0.0
    coupon_code: Optional[str] = None
    discount_rate: float = Field(0.0, ge=0, le=1)
    discount_amount: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        """Total number of units across all lines."""
        return sum(item.quantity for item in self.items)

    def find_item(self, item_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Cart:
        return cls.model_validate(data)


class SavedCart(BaseModel):
    """Named snapshot of cart items, immutable once created."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., description="User-given name")
    created_at: str = Field(..., description="ISO-8601 creation timestamp")
    items: list[CartItem] = Field(default_factory=list)
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Saved cart name cannot be empty")
        return v

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavedCart:
        return cls.model_validate(data)
