"""Named cart snapshots: save, delete, and load back by replace or merge."""
from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone

from storefront.core.exceptions import EmptyCartError, SavedCartNotFoundError
from storefront.domain.entities.cart import Cart, SavedCart
from storefront.services.cart_service import CartStore

logger = logging.getLogger(__name__)


class SavedCartManager:
    """CRUD over saved carts for the profile the cart store belongs to."""

    def __init__(self, cart_store: CartStore):
        self._cart_store = cart_store
        self._gateway = cart_store.gateway

    @staticmethod
    def _new_id(existing: set[str]) -> str:
        cart_id = f"saved_cart_{int(time.time() * 1000)}"
        if cart_id in existing:
            cart_id = f"{cart_id}_{uuid.uuid4().hex[:8]}"
        return cart_id

    def list(self) -> list[SavedCart]:
        return self._gateway.load_saved_carts()

    def get(self, cart_id: str) -> SavedCart:
        for saved in self._gateway.load_saved_carts():
            if saved.id == cart_id:
                return saved
        raise SavedCartNotFoundError(cart_id)

    def save(self, name: str, notes: str | None = None) -> SavedCart:
        """Snapshot the active cart under `name`.

        Raises:
            EmptyCartError: the active cart has no items
        """
        cart = self._cart_store.get_cart()
        if cart.is_empty:
            raise EmptyCartError()

        saved_carts = self._gateway.load_saved_carts()
        snapshot = SavedCart(
            id=self._new_id({saved.id for saved in saved_carts}),
            name=name,
            created_at=datetime.now(timezone.utc).isoformat(),
            items=[item.model_copy(deep=True) for item in cart.items],
            notes=notes,
        )
        saved_carts.append(snapshot)
        self._gateway.save_saved_carts(saved_carts)
        logger.info("Saved cart %s (%s items) as %r", snapshot.id, len(snapshot.items), snapshot.name)
        return snapshot

    def delete(self, cart_id: str) -> list[SavedCart]:
        """Remove a saved cart; unknown ids are ignored."""
        saved_carts = self._gateway.load_saved_carts()
        remaining = [saved for saved in saved_carts if saved.id != cart_id]
        if len(remaining) == len(saved_carts):
            return saved_carts
        self._gateway.save_saved_carts(remaining)
        logger.info("Deleted saved cart %s", cart_id)
        return remaining

    def replace(self, cart_id: str) -> Cart:
        """Load a snapshot, discarding whatever the active cart held."""
        saved = self.get(cart_id)
        logger.info("Loaded saved cart %s into the active cart", cart_id)
        return self._cart_store.replace_items(saved.items)

    load = replace

    def merge(self, cart_id: str) -> Cart:
        """Add a snapshot's items to the active cart, summing matching lines."""
        saved = self.get(cart_id)
        logger.info("Merged saved cart %s into the active cart", cart_id)
        return self._cart_store.add_items(saved.items)
