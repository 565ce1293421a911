"""Identity keys that decide whether two configured items are the same cart line."""
from __future__ import annotations

from collections.abc import Mapping


def _format_dimension(value: float) -> str:
    # 36 and 36.0 must produce the same key
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def cart_item_id(
    product_id: str,
    width: float | None = None,
    height: float | None = None,
    options: Mapping[str, str] | None = None,
) -> str:
    """Build the deduplication key for a configured product.

    Format: ``{product_id}[-{width}x{height}][-{name}:{value}...]`` with
    options sorted by name. Option names are compared as-is, so ``Color``
    and ``color`` are different options.
    """
    key = str(product_id)

    if width is not None and height is not None:
        key += f"-{_format_dimension(width)}x{_format_dimension(height)}"

    for name, value in sorted((options or {}).items(), key=lambda pair: pair[0]):
        key += f"-{name}:{value}"

    return key
