"""Environment-driven configuration for the storefront engine."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from storefront.core.constants import (
    CURRENCY_SYMBOL,
    DEFAULT_PROFILE,
    DEFAULT_TAX_RATE,
    FLAT_SHIPPING_RATE,
    FREE_SHIPPING_THRESHOLD,
)
from storefront.core.exceptions import ConfigurationException


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationException(f"{name} must be a number, got {raw!r}") from exc


@dataclass(slots=True)
class TotalsConfig:
    tax_rate: float = DEFAULT_TAX_RATE
    free_shipping_threshold: float = FREE_SHIPPING_THRESHOLD
    flat_shipping_rate: float = FLAT_SHIPPING_RATE


@dataclass(slots=True)
class Settings:
    redis_url: str | None
    profile: str
    totals: TotalsConfig
    currency_symbol: str
    log_level: str

    @property
    def uses_redis(self) -> bool:
        return bool(self.redis_url)


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    totals = TotalsConfig(
        tax_rate=_get_float("TAX_RATE", DEFAULT_TAX_RATE),
        free_shipping_threshold=_get_float("FREE_SHIPPING_THRESHOLD", FREE_SHIPPING_THRESHOLD),
        flat_shipping_rate=_get_float("FLAT_SHIPPING_RATE", FLAT_SHIPPING_RATE),
    )
    if totals.tax_rate < 0:
        raise ConfigurationException("TAX_RATE cannot be negative")

    return Settings(
        redis_url=os.getenv("REDIS_URL") or None,
        profile=(os.getenv("STOREFRONT_PROFILE") or DEFAULT_PROFILE).strip(),
        totals=totals,
        currency_symbol=os.getenv("CURRENCY_SYMBOL", CURRENCY_SYMBOL),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
