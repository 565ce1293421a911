"""Shared pytest fixtures for the cart engine tests."""
from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from storefront.core.notifications import ChangeNotifier, InMemoryPubSub
from storefront.domain.entities.cart import CartItem
from storefront.domain.entities.product import Product
from storefront.integrations.cart_persistence import CartPersistenceGateway
from storefront.integrations.kv_store import InMemoryKeyValueStore
from storefront.services import CartStore, SavedCartManager, SavedForLaterManager


@dataclass
class FakeRedisClient:
    data: dict[str, str] = field(default_factory=dict)
    published: list[tuple[str, str]] = field(default_factory=list)
    fail: bool = False

    def _check(self) -> None:
        if self.fail:
            raise ConnectionError("redis is down")

    def ping(self) -> bool:
        self._check()
        return True

    def get(self, key: str):
        self._check()
        return self.data.get(key)

    def set(self, key: str, value: str) -> bool:
        self._check()
        self.data[key] = value
        return True

    def delete(self, key: str) -> int:
        self._check()
        existed = 1 if key in self.data else 0
        self.data.pop(key, None)
        return existed

    def publish(self, channel: str, message: str) -> int:
        self._check()
        self.published.append((channel, message))
        return 0


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def notifier() -> ChangeNotifier:
    return ChangeNotifier(InMemoryPubSub(), profile="test")


@pytest.fixture
def gateway(kv_store, notifier) -> CartPersistenceGateway:
    return CartPersistenceGateway(kv_store, notifier=notifier, profile="test")


@pytest.fixture
def cart_store(gateway) -> CartStore:
    store = CartStore(gateway)
    yield store
    store.close()


@pytest.fixture
def saved_carts(cart_store) -> SavedCartManager:
    return SavedCartManager(cart_store)


@pytest.fixture
def saved_items(cart_store) -> SavedForLaterManager:
    return SavedForLaterManager(cart_store)


@pytest.fixture
def faux_wood() -> Product:
    return Product(
        product_id="faux-wood-2in",
        title="2\" Faux Wood Blinds",
        image="/images/faux-wood.jpg",
        base_price=39.99,
    )


@pytest.fixture
def cellular() -> Product:
    return Product(product_id="cellular-shade", title="Cellular Shade", image="/images/cellular.jpg")


def _make_item(item_id: str, price: float = 10.0, quantity: int = 1, **extra) -> CartItem:
    return CartItem(
        id=item_id,
        product_id=extra.pop("product_id", item_id.split("-")[0]),
        title=extra.pop("title", f"Item {item_id}"),
        price=price,
        quantity=quantity,
        **extra,
    )


@pytest.fixture
def make_item():
    """Factory for ready-made cart lines with a fixed price."""
    return _make_item


@pytest.fixture
def fake_redis() -> FakeRedisClient:
    return FakeRedisClient()
