"""Active cart ledger.

Every mutation reads the persisted cart, applies a pure transformation,
recomputes totals, writes the whole cart back and broadcasts `cartUpdated`.
When two processes write the same profile the last full write wins.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import overload

from storefront.core.config import TotalsConfig
from storefront.core.constants import (
    CURRENCY_SYMBOL,
    DEFAULT_HEIGHT,
    DEFAULT_PROFILE,
    DEFAULT_WIDTH,
    MIN_QUANTITY,
)
from storefront.core.exceptions import InvalidQuantityError
from storefront.core.notifications import ChangeEvent, ChangeNotifier
from storefront.domain.coupons import CouponResult
from storefront.domain.coupons import apply_coupon as apply_coupon_to_cart
from storefront.domain.coupons import remove_coupon as remove_coupon_from_cart
from storefront.domain.entities.cart import Cart, CartItem
from storefront.domain.entities.product import Product
from storefront.domain.identity import cart_item_id
from storefront.domain.pricing import calculate_product_price
from storefront.domain.totals import recalculate_cart
from storefront.integrations.cart_persistence import CartPersistenceGateway
from storefront.integrations.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def merge_items(items: Iterable[CartItem], incoming: Iterable[CartItem]) -> list[CartItem]:
    """Fold `incoming` into `items`, summing quantities of lines with the same id."""
    merged = [item.model_copy(deep=True) for item in items]
    for new_item in incoming:
        for existing in merged:
            if existing.id == new_item.id:
                existing.quantity += new_item.quantity
                break
        else:
            merged.append(new_item.model_copy(deep=True))
    return merged


def build_cart_item(
    product: Product,
    quantity: int = 1,
    width: float | None = None,
    height: float | None = None,
    options: Mapping[str, str] | None = None,
) -> CartItem:
    """Price a configured product and freeze it into a cart line."""
    options = dict(options or {})
    price = calculate_product_price(
        product.effective_base_price,
        width or DEFAULT_WIDTH,
        height or DEFAULT_HEIGHT,
        options,
    )
    return CartItem(
        id=cart_item_id(product.product_id, width, height, options),
        product_id=product.product_id,
        title=product.title,
        image=product.image,
        price=price,
        quantity=quantity,
        width=width,
        height=height,
        options=options,
    )


class CartStore:
    """Owns the current cart for one storefront profile."""

    def __init__(
        self,
        gateway: CartPersistenceGateway,
        totals: TotalsConfig | None = None,
        *,
        currency_symbol: str = CURRENCY_SYMBOL,
        watch: bool = True,
    ):
        self._gateway = gateway
        self._totals = totals or TotalsConfig()
        self._currency_symbol = currency_symbol
        self._cart: Cart | None = None
        self._watching = False
        if watch:
            gateway.notifier.subscribe(ChangeEvent.CART_UPDATED, self._on_cart_changed)
            self._watching = True

    @classmethod
    def init(
        cls,
        store: KeyValueStore | None = None,
        *,
        notifier: ChangeNotifier | None = None,
        profile: str = DEFAULT_PROFILE,
        totals: TotalsConfig | None = None,
        currency_symbol: str = CURRENCY_SYMBOL,
    ) -> CartStore:
        """Create a cart store over a storage backend."""
        gateway = CartPersistenceGateway(store, notifier=notifier, profile=profile)
        return cls(gateway, totals, currency_symbol=currency_symbol)

    def close(self) -> None:
        """Stop following change broadcasts."""
        if self._watching:
            self._gateway.notifier.unsubscribe(ChangeEvent.CART_UPDATED, self._on_cart_changed)
            self._watching = False

    @property
    def gateway(self) -> CartPersistenceGateway:
        return self._gateway

    @property
    def totals(self) -> TotalsConfig:
        return self._totals

    @property
    def cart(self) -> Cart:
        """Last cart this store read or wrote, loading it on first access."""
        if self._cart is None:
            self._cart = self._load()
        return self._cart

    # -------------------- Internals --------------------

    def _empty_cart(self) -> Cart:
        return self.recalculate(Cart(tax_rate=self._totals.tax_rate))

    def _load(self) -> Cart:
        cart = self._gateway.load_cart()
        if cart is not None:
            return cart
        if self._gateway.is_degraded and self._cart is not None:
            # storage just went away; carry on from the last cart we saw
            return self._cart.model_copy(deep=True)
        return self._empty_cart()

    def _commit(self, cart: Cart) -> Cart:
        cart = self.recalculate(cart)
        self._cart = cart
        self._gateway.save_cart(cart)
        return cart

    def _on_cart_changed(self, _event: ChangeEvent) -> None:
        self.refresh()

    # -------------------- Queries --------------------

    def recalculate(self, cart: Cart) -> Cart:
        return recalculate_cart(
            cart,
            free_threshold=self._totals.free_shipping_threshold,
            flat_rate=self._totals.flat_shipping_rate,
        )

    def get_cart(self) -> Cart:
        """Current persisted cart; an empty cart when nothing is stored."""
        self._cart = self._load()
        return self._cart

    def refresh(self) -> Cart:
        """Re-read the cart after another writer changed it."""
        return self.get_cart()

    def item_count(self) -> int:
        return self.get_cart().item_count

    # -------------------- Mutations --------------------

    @overload
    def add_item(self, item: CartItem) -> Cart: ...

    @overload
    def add_item(
        self,
        item: Product,
        quantity: int = 1,
        width: float | None = None,
        height: float | None = None,
        options: Mapping[str, str] | None = None,
    ) -> Cart: ...

    def add_item(
        self,
        item: CartItem | Product,
        quantity: int = 1,
        width: float | None = None,
        height: float | None = None,
        options: Mapping[str, str] | None = None,
    ) -> Cart:
        """Add a ready cart line, or price and add a configured product.

        A line with the same identity key gets its quantity increased instead
        of a second line being appended.
        """
        if isinstance(item, CartItem):
            line = item.model_copy(deep=True)
        elif isinstance(item, Product):
            if quantity < MIN_QUANTITY:
                raise InvalidQuantityError(quantity)
            line = build_cart_item(item, quantity, width, height, options)
        else:
            raise TypeError(f"Cannot add {type(item).__name__} to cart")

        cart = self._load()
        cart.items = merge_items(cart.items, [line])
        logger.info("Added %s x%s to cart", line.id, line.quantity)
        return self._commit(cart)

    def add_items(self, items: Iterable[CartItem]) -> Cart:
        """Merge several lines in one write."""
        cart = self._load()
        cart.items = merge_items(cart.items, items)
        return self._commit(cart)

    def update_quantity(self, item_id: str, quantity: int) -> Cart:
        """Set a line's quantity, never below 1. Unknown ids leave the cart as is."""
        cart = self._load()
        item = cart.find_item(item_id)
        if item is None:
            self._cart = cart
            return cart
        item.quantity = max(MIN_QUANTITY, int(quantity))
        return self._commit(cart)

    def remove_item(self, item_id: str) -> Cart:
        cart = self._load()
        if cart.find_item(item_id) is None:
            self._cart = cart
            return cart
        cart.items = [item for item in cart.items if item.id != item_id]
        logger.info("Removed %s from cart", item_id)
        return self._commit(cart)

    def take_item(self, item_id: str) -> tuple[CartItem | None, Cart]:
        """Remove a line and hand it back; (None, cart) when it is not there."""
        cart = self._load()
        item = cart.find_item(item_id)
        if item is None:
            self._cart = cart
            return None, cart
        cart.items = [line for line in cart.items if line.id != item_id]
        return item, self._commit(cart)

    def replace_items(self, items: Iterable[CartItem]) -> Cart:
        """Drop the current cart, coupon included, and start over with `items`."""
        cart = Cart(
            tax_rate=self._totals.tax_rate,
            items=[item.model_copy(deep=True) for item in items],
        )
        return self._commit(cart)

    def clear(self) -> Cart:
        logger.info("Cleared cart")
        return self._commit(Cart(tax_rate=self._totals.tax_rate))

    def apply_coupon(self, code: str) -> CouponResult:
        """Apply a coupon; the cart is persisted only when the code is valid."""
        result = apply_coupon_to_cart(
            code,
            self._load(),
            free_threshold=self._totals.free_shipping_threshold,
            flat_rate=self._totals.flat_shipping_rate,
            currency_symbol=self._currency_symbol,
        )
        if result.success:
            logger.info("Applied coupon %s", code)
            self._commit(result.cart)
        else:
            self._cart = result.cart
        return result

    def remove_coupon(self) -> Cart:
        return self._commit(
            remove_coupon_from_cart(
                self._load(),
                free_threshold=self._totals.free_shipping_threshold,
                flat_rate=self._totals.flat_shipping_rate,
            )
        )
