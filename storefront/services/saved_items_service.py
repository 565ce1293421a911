"""Saved-for-later list kept beside the active cart."""
from __future__ import annotations

import logging

from storefront.core.exceptions import CartItemNotFoundError, SavedItemNotFoundError
from storefront.domain.entities.cart import Cart, CartItem
from storefront.services.cart_service import CartStore

logger = logging.getLogger(__name__)


class SavedForLaterManager:
    """Moves lines between the cart and the saved-for-later list.

    The list is not deduplicated: moving the same configuration twice keeps
    two entries.
    """

    def __init__(self, cart_store: CartStore):
        self._cart_store = cart_store
        self._gateway = cart_store.gateway

    def list(self) -> list[CartItem]:
        return self._gateway.load_saved_items()

    def move_to_saved(self, item_id: str) -> tuple[Cart, list[CartItem]]:
        """Take a line out of the cart and append it to the saved list."""
        item, cart = self._cart_store.take_item(item_id)
        if item is None:
            raise CartItemNotFoundError(item_id)

        saved_items = self._gateway.load_saved_items()
        saved_items.append(item)
        self._gateway.save_saved_items(saved_items)
        logger.info("Moved %s to saved for later", item_id)
        return cart, saved_items

    def move_to_cart(self, item_id: str) -> tuple[Cart, list[CartItem]]:
        """Put the first saved entry with `item_id` back into the cart."""
        saved_items = self._gateway.load_saved_items()
        for index, item in enumerate(saved_items):
            if item.id == item_id:
                break
        else:
            raise SavedItemNotFoundError(item_id)

        del saved_items[index]
        self._gateway.save_saved_items(saved_items)
        cart = self._cart_store.add_item(item)
        logger.info("Moved %s back to cart", item_id)
        return cart, saved_items

    def remove(self, item_id: str) -> list[CartItem]:
        """Delete every saved entry with `item_id`; unknown ids are ignored."""
        saved_items = self._gateway.load_saved_items()
        remaining = [item for item in saved_items if item.id != item_id]
        if len(remaining) == len(saved_items):
            return saved_items
        self._gateway.save_saved_items(remaining)
        return remaining
