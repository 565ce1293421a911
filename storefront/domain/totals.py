"""Cart totals derived from items, tax rate and the active coupon."""
from __future__ import annotations

from collections.abc import Iterable

from storefront.core.constants import FLAT_SHIPPING_RATE, FREE_SHIPPING_THRESHOLD
from storefront.domain.entities.cart import Cart, CartItem


def calc_subtotal(items: Iterable[CartItem]) -> float:
    return sum((item.price * item.quantity for item in items), 0.0)


def calc_discount(subtotal: float, discount_rate: float) -> float:
    if discount_rate <= 0:
        return 0.0
    return subtotal * discount_rate


def calc_shipping(
    subtotal: float,
    *,
    free_threshold: float = FREE_SHIPPING_THRESHOLD,
    flat_rate: float = FLAT_SHIPPING_RATE,
) -> float:
    """Free shipping at or above the threshold, flat rate below it."""
    return 0.0 if subtotal >= free_threshold else flat_rate


def calc_tax(taxable: float, tax_rate: float) -> float:
    return tax_rate * max(0.0, taxable)


def recalculate_cart(
    cart: Cart,
    *,
    free_threshold: float = FREE_SHIPPING_THRESHOLD,
    flat_rate: float = FLAT_SHIPPING_RATE,
) -> Cart:
    """Return a copy of `cart` with every derived money field recomputed.

    Pure and idempotent: the result depends only on items, tax rate and
    discount rate, never on previously stored totals.
    """
    subtotal = calc_subtotal(cart.items)
    discount = calc_discount(subtotal, cart.discount_rate)
    discounted = subtotal - discount
    tax_amount = calc_tax(discounted, cart.tax_rate)
    shipping_amount = calc_shipping(subtotal, free_threshold=free_threshold, flat_rate=flat_rate)

    return cart.model_copy(
        update={
            "items": [item.model_copy(deep=True) for item in cart.items],
            "subtotal": subtotal,
            "discount_amount": discount,
            "tax_amount": tax_amount,
            "shipping_amount": shipping_amount,
            "total": discounted + tax_amount + shipping_amount,
        }
    )
