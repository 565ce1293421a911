"""Money helpers for user-facing amounts."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from storefront.core.constants import CURRENCY_SYMBOL, MONEY_DECIMALS


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(amount: Any, places: int = MONEY_DECIMALS) -> Decimal:
    """Round half-up to `places` decimals."""
    quantize_str = "0." + "0" * places if places else "1"
    return _to_decimal(amount).quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)


def format_money(amount: Any, symbol: str = CURRENCY_SYMBOL) -> str:
    return f"{symbol}{round_money(amount):.{MONEY_DECIMALS}f}"
