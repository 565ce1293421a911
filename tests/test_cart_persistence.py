"""Tests for the persistence gateway and key-value backends."""
from __future__ import annotations

import json

import pytest

from storefront.core.exceptions import PersistenceUnavailable
from storefront.domain.entities.cart import Cart
from storefront.integrations.cart_persistence import CartPersistenceGateway
from storefront.integrations.kv_store import InMemoryKeyValueStore, RedisKeyValueStore
from storefront.services import CartStore, SavedCartManager, SavedForLaterManager


class BrokenStore:
    """Store that is disabled entirely (private mode, blocked storage)."""

    def get(self, key: str):
        raise PersistenceUnavailable("storage disabled")

    def set(self, key: str, value: str) -> None:
        raise PersistenceUnavailable("storage disabled")

    def delete(self, key: str) -> None:
        raise PersistenceUnavailable("storage disabled")


class TestMalformedData:
    @pytest.mark.parametrize("raw", ["{not json", "[1, 2, 3]", '"cart"', '{"items": "nope"}', ""])
    def test_bad_cart_reads_as_empty(self, kv_store, gateway, cart_store, raw):
        kv_store.set(gateway.cart_key, raw)

        assert gateway.load_cart() is None
        assert cart_store.get_cart().items == []

    def test_bad_cart_is_overwritten_by_next_write(self, kv_store, gateway, cart_store, make_item):
        kv_store.set(gateway.cart_key, "{not json")
        cart_store.add_item(make_item("x-1"))

        assert json.loads(kv_store.get(gateway.cart_key))["items"][0]["id"] == "x-1"

    def test_bad_saved_lists_read_as_empty(self, kv_store, gateway):
        kv_store.set(gateway.saved_carts_key, "garbage")
        kv_store.set(gateway.saved_items_key, '{"id": 1}')

        assert gateway.load_saved_carts() == []
        assert gateway.load_saved_items() == []

    def test_invalid_entries_are_skipped(self, kv_store, gateway, make_item):
        good = make_item("x-1").to_dict()
        kv_store.set(gateway.saved_items_key, json.dumps([good, {"id": ""}, 42]))

        assert [item.id for item in gateway.load_saved_items()] == ["x-1"]


class TestDegradedStorage:
    def test_disabled_store_falls_back_to_memory(self, make_item):
        gateway = CartPersistenceGateway(BrokenStore(), profile="p")
        store = CartStore(gateway)

        cart = store.add_item(make_item("x-1", quantity=2))

        assert gateway.is_degraded
        assert cart.items[0].quantity == 2
        assert store.get_cart().items[0].quantity == 2

    def test_quota_exceeded_keeps_mutation(self, make_item):
        gateway = CartPersistenceGateway(InMemoryKeyValueStore(quota_bytes=64), profile="p")
        store = CartStore(gateway)

        cart = store.add_item(make_item("x-1"))

        assert gateway.is_degraded
        assert len(cart.items) == 1
        assert store.update_quantity("x-1", 3).items[0].quantity == 3

    def test_quota_exceeded_keeps_saved_documents(self, make_item):
        kv = InMemoryKeyValueStore(quota_bytes=3000)
        gateway = CartPersistenceGateway(kv, profile="p")
        store = CartStore(gateway)
        saved_carts = SavedCartManager(store)
        saved_items = SavedForLaterManager(store)

        store.add_items([make_item("x-1"), make_item("y-1")])
        kitchen = saved_carts.save("Kitchen")
        saved_items.move_to_saved("y-1")
        assert not gateway.is_degraded

        store.add_item(make_item("big-1", title="B" * 4000))

        assert gateway.is_degraded
        assert [saved.id for saved in saved_carts.list()] == [kitchen.id]
        assert [item.id for item in saved_items.list()] == ["y-1"]
        assert [item.id for item in store.get_cart().items] == ["x-1", "big-1"]
        assert [item.id for item in saved_carts.replace(kitchen.id).items] == ["x-1", "y-1"]

    def test_redis_outage_mid_session(self, fake_redis, make_item):
        gateway = CartPersistenceGateway(RedisKeyValueStore(client=fake_redis), profile="p")
        store = CartStore(gateway)
        store.add_item(make_item("x-1"))
        assert not gateway.is_degraded

        fake_redis.fail = True
        cart = store.add_item(make_item("y-1"))

        assert gateway.is_degraded
        # the memory session continues from the last cart this view saw
        assert [item.id for item in cart.items] == ["x-1", "y-1"]


class TestInMemoryKeyValueStore:
    def test_roundtrip_and_delete(self):
        store = InMemoryKeyValueStore()
        store.set("k", "v")
        assert store.get("k") == "v"
        assert "k" in store
        store.delete("k")
        store.delete("k")
        assert store.get("k") is None

    def test_quota_counts_replaced_value_once(self):
        store = InMemoryKeyValueStore(quota_bytes=10)
        store.set("k", "12345678")
        store.set("k", "87654321")
        with pytest.raises(PersistenceUnavailable):
            store.set("other", "x")


class TestRedisKeyValueStore:
    def test_shared_between_instances(self, fake_redis, make_item):
        tab_a = CartStore(CartPersistenceGateway(RedisKeyValueStore(client=fake_redis), profile="42"))
        tab_b = CartStore(CartPersistenceGateway(RedisKeyValueStore(client=fake_redis), profile="42"))

        tab_a.add_item(make_item("x-1"))

        assert "42:smartblinds_cart" in fake_redis.data
        assert tab_b.get_cart().items[0].id == "x-1"

    def test_errors_become_persistence_unavailable(self, fake_redis):
        store = RedisKeyValueStore(client=fake_redis)
        fake_redis.fail = True

        with pytest.raises(PersistenceUnavailable):
            store.get("k")
        with pytest.raises(PersistenceUnavailable):
            store.set("k", "v")
        with pytest.raises(PersistenceUnavailable):
            store.delete("k")
        assert store.ping() is False

    def test_decodes_bytes(self, fake_redis):
        fake_redis.data["k"] = b"value"
        assert RedisKeyValueStore(client=fake_redis).get("k") == "value"

    def test_requires_url_or_client(self):
        with pytest.raises(PersistenceUnavailable):
            RedisKeyValueStore()


def test_saved_cart_document_shape(kv_store, gateway, saved_carts, cart_store, make_item):
    cart_store.add_item(make_item("x-1", width=36, height=60, options={"color": "white"}))
    saved_carts.save("Den")

    payload = json.loads(kv_store.get(gateway.saved_carts_key))
    assert payload[0]["name"] == "Den"
    assert payload[0]["items"][0]["options"] == {"color": "white"}
    assert set(Cart().to_dict()) <= set(json.loads(kv_store.get(gateway.cart_key)))
