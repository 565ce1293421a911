"""Coupon codes and their effect on cart totals.

Only one coupon is active at a time: applying a code replaces whatever
discount the cart carried before.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from storefront.core.constants import CURRENCY_SYMBOL, FLAT_SHIPPING_RATE, FREE_SHIPPING_THRESHOLD
from storefront.core.money import format_money
from storefront.domain.entities.cart import Cart
from storefront.domain.totals import recalculate_cart

logger = logging.getLogger(__name__)

# Coupon code -> discount fraction of the subtotal
COUPONS: dict[str, float] = {
    "SAVE10": 0.10,
    "SPRING20": 0.20,
    "WELCOME15": 0.15,
}

INVALID_COUPON_MESSAGE = "Invalid coupon code"


@dataclass(frozen=True)
class CouponResult:
    success: bool
    message: str
    cart: Cart


def lookup_coupon(code: str | None) -> float | None:
    """Discount fraction for an exact code match, else None."""
    if not code:
        return None
    return COUPONS.get(code)


def apply_coupon(
    code: str,
    cart: Cart,
    *,
    free_threshold: float = FREE_SHIPPING_THRESHOLD,
    flat_rate: float = FLAT_SHIPPING_RATE,
    currency_symbol: str = CURRENCY_SYMBOL,
) -> CouponResult:
    """Attach `code` to a copy of `cart` and recompute totals.

    The discount comes off the subtotal before tax is charged. Unknown codes
    return the cart untouched.
    """
    fraction = lookup_coupon(code)
    if fraction is None:
        logger.warning("Rejected unknown coupon code %r", code)
        return CouponResult(success=False, message=INVALID_COUPON_MESSAGE, cart=cart)

    updated = cart.model_copy(update={"coupon_code": code, "discount_rate": fraction})
    updated = recalculate_cart(updated, free_threshold=free_threshold, flat_rate=flat_rate)
    discount = updated.discount_amount

    return CouponResult(
        success=True,
        message=f"Coupon applied! You saved {format_money(discount, symbol=currency_symbol)}",
        cart=updated,
    )


def remove_coupon(
    cart: Cart,
    *,
    free_threshold: float = FREE_SHIPPING_THRESHOLD,
    flat_rate: float = FLAT_SHIPPING_RATE,
) -> Cart:
    updated = cart.model_copy(update={"coupon_code": None, "discount_rate": 0.0})
    return recalculate_cart(updated, free_threshold=free_threshold, flat_rate=flat_rate)
