"""Domain entities."""

from .cart import Cart, CartItem, SavedCart
from .product import Product

__all__ = ["Product", "CartItem", "Cart", "SavedCart"]
