"""Adapters for the durable key-value store the cart is persisted in."""
