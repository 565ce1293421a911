"""Tests for the saved-for-later list."""
from __future__ import annotations

import pytest

from storefront.core.exceptions import CartItemNotFoundError, SavedItemNotFoundError
from storefront.core.notifications import ChangeEvent


def test_move_to_saved(saved_items, cart_store, make_item) -> None:
    cart_store.add_item(make_item("x-1", price=15.0, quantity=2))
    cart_store.add_item(make_item("y-1", price=5.0))

    cart, saved = saved_items.move_to_saved("x-1")

    assert [item.id for item in cart.items] == ["y-1"]
    assert cart.subtotal == pytest.approx(5.0)
    assert [(item.id, item.quantity) for item in saved] == [("x-1", 2)]
    assert [item.id for item in saved_items.list()] == ["x-1"]


def test_move_to_saved_keeps_duplicates(saved_items, cart_store, make_item) -> None:
    cart_store.add_item(make_item("x-1"))
    saved_items.move_to_saved("x-1")
    cart_store.add_item(make_item("x-1"))
    _, saved = saved_items.move_to_saved("x-1")

    assert [item.id for item in saved] == ["x-1", "x-1"]


def test_move_missing_cart_item(saved_items) -> None:
    with pytest.raises(CartItemNotFoundError):
        saved_items.move_to_saved("ghost")
    assert saved_items.list() == []


def test_move_to_cart(saved_items, cart_store, make_item) -> None:
    cart_store.add_item(make_item("x-1", quantity=2))
    saved_items.move_to_saved("x-1")

    cart, saved = saved_items.move_to_cart("x-1")

    assert saved == []
    assert cart.find_item("x-1").quantity == 2


def test_move_to_cart_merges_with_existing_line(saved_items, cart_store, make_item) -> None:
    cart_store.add_item(make_item("x-1", quantity=2))
    saved_items.move_to_saved("x-1")
    cart_store.add_item(make_item("x-1", quantity=1))

    cart, _ = saved_items.move_to_cart("x-1")

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 3


def test_move_to_cart_takes_one_duplicate(saved_items, cart_store, make_item) -> None:
    for _ in range(2):
        cart_store.add_item(make_item("x-1"))
        saved_items.move_to_saved("x-1")

    _, saved = saved_items.move_to_cart("x-1")

    assert [item.id for item in saved] == ["x-1"]


def test_move_missing_saved_item(saved_items) -> None:
    with pytest.raises(SavedItemNotFoundError):
        saved_items.move_to_cart("ghost")


def test_remove(saved_items, cart_store, make_item) -> None:
    cart_store.add_item(make_item("x-1"))
    cart_store.add_item(make_item("y-1"))
    saved_items.move_to_saved("x-1")
    saved_items.move_to_saved("y-1")

    remaining = saved_items.remove("x-1")

    assert [item.id for item in remaining] == ["y-1"]
    assert cart_store.get_cart().items == []


def test_remove_unknown_is_noop(saved_items) -> None:
    assert saved_items.remove("ghost") == []


def test_moves_broadcast_both_channels(saved_items, cart_store, gateway, make_item) -> None:
    cart_store.add_item(make_item("x-1"))
    events = []
    gateway.notifier.subscribe(ChangeEvent.CART_UPDATED, events.append)
    gateway.notifier.subscribe(ChangeEvent.SAVED_ITEMS_UPDATED, events.append)

    saved_items.move_to_saved("x-1")

    assert events == [ChangeEvent.CART_UPDATED, ChangeEvent.SAVED_ITEMS_UPDATED]
