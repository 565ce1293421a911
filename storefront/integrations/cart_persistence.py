"""Persistence gateway for the active cart, saved carts and saved-for-later items.

Each logical value is stored as one JSON document under a profile-scoped
key. Corrupt documents read as absent. If the store fails, the gateway
switches to an in-memory store for the rest of the session and keeps going;
callers never see a persistence error.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from storefront.core.constants import (
    CART_STORAGE_KEY,
    DEFAULT_PROFILE,
    SAVED_CARTS_STORAGE_KEY,
    SAVED_ITEMS_STORAGE_KEY,
)
from storefront.core.exceptions import PersistenceUnavailable
from storefront.core.notifications import ChangeEvent, ChangeNotifier
from storefront.domain.entities.cart import Cart, CartItem, SavedCart
from storefront.integrations.kv_store import InMemoryKeyValueStore, KeyValueStore

logger = logging.getLogger(__name__)


class CartPersistenceGateway:
    """Reads and writes cart documents and broadcasts a change event after each write."""

    def __init__(
        self,
        store: KeyValueStore | None = None,
        notifier: ChangeNotifier | None = None,
        profile: str = DEFAULT_PROFILE,
    ):
        self._store: KeyValueStore = store if store is not None else InMemoryKeyValueStore()
        self._notifier = notifier or ChangeNotifier(profile=profile)
        self._profile = profile
        self._degraded = False

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def is_degraded(self) -> bool:
        """True once the durable store failed and memory mode took over."""
        return self._degraded

    def _key(self, name: str) -> str:
        return f"{self._profile}:{name}"

    @property
    def cart_key(self) -> str:
        return self._key(CART_STORAGE_KEY)

    @property
    def saved_carts_key(self) -> str:
        return self._key(SAVED_CARTS_STORAGE_KEY)

    @property
    def saved_items_key(self) -> str:
        return self._key(SAVED_ITEMS_STORAGE_KEY)

    def _switch_to_memory_fallback(self, reason: Exception | str) -> None:
        logger.warning("Cart storage fallback to memory mode: %s", reason)
        fallback = InMemoryKeyValueStore()
        # a store over quota is still readable; keep what was already written
        for key in (self.cart_key, self.saved_carts_key, self.saved_items_key):
            try:
                raw = self._store.get(key)
            except PersistenceUnavailable:
                continue
            if raw:
                fallback.set(key, raw)
        self._store = fallback
        self._degraded = True

    # -------------------- Raw documents --------------------

    def _read_json(self, key: str) -> Any:
        try:
            raw = self._store.get(key)
        except PersistenceUnavailable as exc:
            self._switch_to_memory_fallback(exc)
            raw = self._store.get(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed JSON under %s", key)
            return None

    def _write_json(self, key: str, value: Any) -> None:
        serialized = json.dumps(value, ensure_ascii=False)
        try:
            self._store.set(key, serialized)
            return
        except PersistenceUnavailable as exc:
            self._switch_to_memory_fallback(exc)
        self._store.set(key, serialized)

    # -------------------- Active cart --------------------

    def load_cart(self) -> Cart | None:
        """Persisted cart, or None when absent or unreadable."""
        payload = self._read_json(self.cart_key)
        if not isinstance(payload, dict):
            return None
        try:
            return Cart.from_dict(payload)
        except ValidationError as exc:
            logger.warning("Ignoring invalid cart under %s: %s", self.cart_key, exc)
            return None

    def save_cart(self, cart: Cart) -> None:
        self._write_json(self.cart_key, cart.to_dict())
        self._notifier.notify(ChangeEvent.CART_UPDATED)

    # -------------------- Saved carts --------------------

    def load_saved_carts(self) -> list[SavedCart]:
        payload = self._read_json(self.saved_carts_key)
        if not isinstance(payload, list):
            return []
        saved_carts = []
        for raw in payload:
            try:
                saved_carts.append(SavedCart.from_dict(raw))
            except ValidationError as exc:
                logger.warning("Skipping invalid saved cart: %s", exc)
        return saved_carts

    def save_saved_carts(self, saved_carts: list[SavedCart]) -> None:
        self._write_json(self.saved_carts_key, [saved.to_dict() for saved in saved_carts])
        self._notifier.notify(ChangeEvent.SAVED_CARTS_UPDATED)

    # -------------------- Saved for later --------------------

    def load_saved_items(self) -> list[CartItem]:
        payload = self._read_json(self.saved_items_key)
        if not isinstance(payload, list):
            return []
        items = []
        for raw in payload:
            try:
                items.append(CartItem.from_dict(raw))
            except ValidationError as exc:
                logger.warning("Skipping invalid saved item: %s", exc)
        return items

    def save_saved_items(self, items: list[CartItem]) -> None:
        self._write_json(self.saved_items_key, [item.to_dict() for item in items])
        self._notifier.notify(ChangeEvent.SAVED_ITEMS_UPDATED)
