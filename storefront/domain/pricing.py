"""Pricing engine for made-to-order blinds.

`calculate_price` turns a full configuration into an itemized breakdown.
`calculate_product_price` applies the same extras on top of a base price
supplied by the catalog.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any, Optional

from pydantic import BaseModel, Field


# ============== BASE PRICES ==============
PRODUCT_TYPE_FAUX_WOOD = "faux wood"

BASE_PRICES: dict[str, float] = {
    PRODUCT_TYPE_FAUX_WOOD: 39.99,
    "cellular": 89.99,
    "roller": 49.99,
    "wood": 129.99,
    "woven wood": 119.99,
    "roman": 149.99,
}

# ============== SIZE ==============
SIZE_FREE_AREA = 1500  # square inches
SIZE_STEP_AREA = 500
SIZE_STEP_PRICE = 5

# ============== ADD-ONS ==============
CONTROL_TYPE_PRICES: dict[str, float] = {
    "standard": 0.0,
    "cordless": 25.0,
    "motorized": 120.0,
}
DELUXE_HEADRAIL_PRICE = 15.0
CLOTH_TAPE_PRICE = 18.99
OPACITY_PRICES: dict[str, float] = {
    "light_filtering": 0.0,
    "room_darkening": 10.0,
    "blackout": 25.0,
}
CORD_TILT_PRICE = 5.0
PROFESSIONAL_INSTALLATION_PRICE = 79.99
PROFESSIONAL_MEASUREMENT_PRICE = 39.99
EXPEDITED_PRODUCTION_RATE = 0.25
WIDE_SLAT_SIZE = "2.5inch"
WIDE_SLAT_PRICE = 10.0

_TRUE_VALUES = {"1", "true", "yes", "on"}


class PricingConfig(BaseModel):
    """Configuration of one blind as chosen in the configurator."""

    width: float = Field(..., gt=0, description="Width in inches")
    height: float = Field(..., gt=0, description="Height in inches")
    slat_size: str = "2inch"
    mount_type: str = "inside"
    control_type: str = "standard"
    headrail_type: str = "standard"
    product_type: str = PRODUCT_TYPE_FAUX_WOOD
    opacity: Optional[str] = "light_filtering"
    slat_style: Optional[str] = None
    tilt_type: Optional[str] = None
    cloth_tape: bool = False
    professional_installation: bool = False
    professional_measurement: bool = False
    expedited_production: bool = False


@dataclass(frozen=True)
class PriceBreakdown:
    """Every priced component plus the total, for itemized display."""

    base_price: float
    size_adjustment: float
    control_type_price: float
    headrail_price: float
    cloth_tape_price: float
    opacity_price: float
    tilt_type_price: float
    professional_installation_price: float
    professional_measurement_price: float
    expedited_production_price: float
    total: float

    @property
    def extras(self) -> float:
        """Everything on top of the base price."""
        return self.total - self.base_price

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def base_price_for(product_type: str) -> float:
    """Table base price; unknown types price as faux wood."""
    return BASE_PRICES.get(product_type.strip().lower(), BASE_PRICES[PRODUCT_TYPE_FAUX_WOOD])


def size_adjustment_for(width: float, height: float) -> float:
    """$5 per started 500 sq in above 1500 sq in."""
    area = width * height
    if area <= SIZE_FREE_AREA:
        return 0.0
    return float(SIZE_STEP_PRICE * math.ceil((area - SIZE_FREE_AREA) / SIZE_STEP_AREA))


def calculate_price(config: PricingConfig) -> PriceBreakdown:
    base_price = base_price_for(config.product_type)
    size_adjustment = size_adjustment_for(config.width, config.height)

    control_type_price = CONTROL_TYPE_PRICES.get(config.control_type, 0.0)
    headrail_price = DELUXE_HEADRAIL_PRICE if config.headrail_type == "deluxe" else 0.0
    cloth_tape_price = CLOTH_TAPE_PRICE if config.cloth_tape else 0.0
    opacity_price = OPACITY_PRICES.get(config.opacity or "", 0.0)
    tilt_type_price = CORD_TILT_PRICE if config.tilt_type == "cord" else 0.0
    installation_price = PROFESSIONAL_INSTALLATION_PRICE if config.professional_installation else 0.0
    measurement_price = PROFESSIONAL_MEASUREMENT_PRICE if config.professional_measurement else 0.0

    # Surcharge uses the table price, before the slat adjustment below
    expedited_price = base_price * EXPEDITED_PRODUCTION_RATE if config.expedited_production else 0.0

    if config.slat_size == WIDE_SLAT_SIZE:
        base_price += WIDE_SLAT_PRICE

    total = (
        base_price
        + size_adjustment
        + control_type_price
        + headrail_price
        + cloth_tape_price
        + opacity_price
        + tilt_type_price
        + installation_price
        + measurement_price
        + expedited_price
    )

    return PriceBreakdown(
        base_price=base_price,
        size_adjustment=size_adjustment,
        control_type_price=control_type_price,
        headrail_price=headrail_price,
        cloth_tape_price=cloth_tape_price,
        opacity_price=opacity_price,
        tilt_type_price=tilt_type_price,
        professional_installation_price=installation_price,
        professional_measurement_price=measurement_price,
        expedited_production_price=expedited_price,
        total=total,
    )


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def config_from_options(width: float, height: float, options: Mapping[str, Any]) -> PricingConfig:
    """Build a pricing config from a cart option bag; missing keys use defaults."""
    return PricingConfig(
        width=width,
        height=height,
        slat_size=options.get("slat_size") or "2inch",
        mount_type=options.get("mount_type") or "inside",
        control_type=options.get("control_type") or "standard",
        headrail_type=options.get("headrail_type") or "standard",
        product_type=options.get("product_type") or PRODUCT_TYPE_FAUX_WOOD,
        opacity=options.get("opacity") or "light_filtering",
        slat_style=options.get("slat_style"),
        tilt_type=options.get("tilt_type"),
        cloth_tape=_flag(options.get("cloth_tape")),
        professional_installation=_flag(options.get("professional_installation")),
        professional_measurement=_flag(options.get("professional_measurement")),
        expedited_production=_flag(options.get("expedited_production")),
    )


def calculate_product_price(
    base_price: float,
    width: float,
    height: float,
    options: Mapping[str, Any] | None = None,
) -> float:
    """Price a catalog product, keeping the engine's extras on the supplied base.

    Returns ``base_price + (engine_total - engine_base)``; when the supplied
    base already equals the engine base the engine total is returned as is.
    """
    breakdown = calculate_price(config_from_options(width, height, options or {}))
    if base_price != breakdown.base_price:
        return base_price + breakdown.extras
    return breakdown.total
