"""Domain package."""

from .entities import Cart, CartItem, Product, SavedCart
from .identity import cart_item_id

__all__ = [
    # Entities
    "Product",
    "CartItem",
    "Cart",
    "SavedCart",
    # Identity
    "cart_item_id",
]
