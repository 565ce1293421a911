"""Custom exceptions for the storefront cart engine."""
from __future__ import annotations


class StorefrontException(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationException(StorefrontException):
    """Input validation errors."""

    pass


class EmptyCartError(ValidationException):
    """Attempt to snapshot a cart that has no items."""

    def __init__(self) -> None:
        super().__init__("Cannot save an empty cart")


class InvalidQuantityError(ValidationException):
    """Quantity below the allowed minimum."""

    def __init__(self, quantity: int) -> None:
        super().__init__(f"Quantity must be at least 1, got {quantity}")
        self.quantity = quantity


class NotFoundError(StorefrontException):
    """Referenced entity no longer exists."""

    pass


class SavedCartNotFoundError(NotFoundError):
    """Saved cart not found in storage."""

    def __init__(self, cart_id: str) -> None:
        super().__init__(f"Saved cart with ID {cart_id} not found")
        self.cart_id = cart_id


class SavedItemNotFoundError(NotFoundError):
    """Saved-for-later item not found."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Saved item with ID {item_id} not found")
        self.item_id = item_id


class CartItemNotFoundError(NotFoundError):
    """Cart line not found in the active cart."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Cart item with ID {item_id} not found")
        self.item_id = item_id


class PersistenceUnavailable(StorefrontException):
    """Durable key-value store is disabled, full or unreachable."""

    pass


class ConfigurationException(StorefrontException):
    """Configuration errors."""

    pass
