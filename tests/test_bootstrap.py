from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from storefront.bootstrap import build_storefront
from storefront.core.config import Settings, TotalsConfig
from storefront.core.notifications import InMemoryPubSub, RedisPubSub
from storefront.domain.entities.product import Product


def _settings(redis_url: str | None = None) -> Settings:
    return Settings(
        redis_url=redis_url,
        profile="test",
        totals=TotalsConfig(),
        currency_symbol="$",
        log_level="WARNING",
    )


def test_in_memory_wiring() -> None:
    storefront = build_storefront(_settings())
    try:
        assert isinstance(storefront.gateway.notifier.backend, InMemoryPubSub)

        storefront.cart.add_item(Product(product_id="roller-1", title="Roller", base_price=49.99), 2)
        saved = storefront.saved_carts.save("Office")
        storefront.saved_items.move_to_saved(storefront.cart.get_cart().items[0].id)

        assert storefront.cart.get_cart().items == []
        assert storefront.saved_carts.get(saved.id).items[0].quantity == 2
        assert len(storefront.saved_items.list()) == 1
    finally:
        storefront.close()


@patch("storefront.bootstrap.redis.from_url")
def test_redis_wiring(mock_from_url) -> None:
    client = MagicMock()
    client.ping.return_value = True
    client.get.return_value = None
    mock_from_url.return_value = client

    storefront = build_storefront(_settings("redis://fake"))

    mock_from_url.assert_called_once()
    assert isinstance(storefront.gateway.notifier.backend, RedisPubSub)
    assert not storefront.gateway.is_degraded
    storefront.close()


@patch("storefront.bootstrap.redis.from_url")
def test_redis_unreachable_falls_back(mock_from_url) -> None:
    client = MagicMock()
    client.ping.side_effect = ConnectionError("refused")
    mock_from_url.return_value = client

    storefront = build_storefront(_settings("redis://fake"))

    assert isinstance(storefront.gateway.notifier.backend, InMemoryPubSub)
    assert storefront.cart.get_cart().items == []
    storefront.close()


@pytest.mark.parametrize("level", ["DEBUG", "bogus"])
def test_log_level_accepted(level) -> None:
    settings = _settings()
    settings.log_level = level
    build_storefront(settings).close()


def test_currency_symbol_reaches_coupon_message() -> None:
    settings = _settings()
    settings.currency_symbol = "£"
    storefront = build_storefront(settings)
    try:
        storefront.cart.add_item(Product(product_id="roman-1", title="Roman", base_price=149.99))
        result = storefront.cart.apply_coupon("SAVE10")
        assert result.success
        assert result.message.startswith("Coupon applied! You saved £")
    finally:
        storefront.close()
