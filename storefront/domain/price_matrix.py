"""Size-range price matrices for catalog products priced per inch."""
from __future__ import annotations

import logging
from collections.abc import Mapping

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PriceRange(BaseModel):
    """Base price for one width/height band, plus a per-inch rate beyond its minimums."""

    min_width: float
    max_width: float
    min_height: float
    max_height: float
    base_price: float = Field(..., ge=0)
    additional_cost_per_inch: float = Field(0.0, ge=0)

    def contains(self, width: float, height: float) -> bool:
        return (
            self.min_width <= width <= self.max_width
            and self.min_height <= height <= self.max_height
        )


class OptionPricing(BaseModel):
    """Surcharges for the values of one option."""

    name: str
    value_pricing: dict[str, float] = Field(default_factory=dict)


class PriceMatrix(BaseModel):
    product_id: str
    ranges: list[PriceRange] = Field(default_factory=list)
    option_pricing: list[OptionPricing] = Field(default_factory=list)

    def find_range(self, width: float, height: float) -> PriceRange | None:
        for price_range in self.ranges:
            if price_range.contains(width, height):
                return price_range
        return None


def calculate_matrix_price(
    matrix: PriceMatrix,
    width: float,
    height: float,
    selected_options: Mapping[str, str] | None = None,
) -> float:
    """Price a configuration from its matrix; 0 when no band covers the size."""
    price_range = matrix.find_range(width, height)
    if price_range is None:
        logger.error(
            "No applicable price range for %sx%s on product %s", width, height, matrix.product_id
        )
        return 0.0

    extra_inches = max(0.0, width - price_range.min_width) + max(0.0, height - price_range.min_height)
    total = price_range.base_price + extra_inches * price_range.additional_cost_per_inch

    selected_options = selected_options or {}
    for option in matrix.option_pricing:
        selected_value = selected_options.get(option.name)
        if selected_value:
            total += option.value_pricing.get(selected_value, 0.0)

    return total
