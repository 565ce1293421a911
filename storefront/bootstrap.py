"""Wire the cart engine together from settings."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import redis

from storefront.core.config import Settings, load_settings
from storefront.core.logging_config import setup_logging
from storefront.core.notifications import ChangeNotifier, InMemoryPubSub, PubSubBackend, RedisPubSub
from storefront.integrations.cart_persistence import CartPersistenceGateway
from storefront.integrations.kv_store import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore
from storefront.services import CartStore, SavedCartManager, SavedForLaterManager

logger = logging.getLogger(__name__)


@dataclass
class Storefront:
    """Everything a view needs to drive the cart for one profile."""

    settings: Settings
    gateway: CartPersistenceGateway
    cart: CartStore
    saved_carts: SavedCartManager
    saved_items: SavedForLaterManager

    def close(self) -> None:
        self.cart.close()
        self.gateway.notifier.close()


def _init_backends(settings: Settings) -> tuple[KeyValueStore, PubSubBackend]:
    if not settings.redis_url:
        logger.info("REDIS_URL is not set; cart uses in-memory storage")
        return InMemoryKeyValueStore(), InMemoryPubSub()

    try:
        client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        client.ping()
    except Exception as exc:
        logger.warning("Redis cart init failed, fallback to in-memory: %s", exc)
        return InMemoryKeyValueStore(), InMemoryPubSub()

    logger.info("Redis cart storage enabled")
    return RedisKeyValueStore(client=client), RedisPubSub(client)


def build_storefront(settings: Settings | None = None) -> Storefront:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    store, backend = _init_backends(settings)
    notifier = ChangeNotifier(backend, profile=settings.profile)
    gateway = CartPersistenceGateway(store, notifier=notifier, profile=settings.profile)
    cart = CartStore(gateway, settings.totals, currency_symbol=settings.currency_symbol)

    return Storefront(
        settings=settings,
        gateway=gateway,
        cart=cart,
        saved_carts=SavedCartManager(cart),
        saved_items=SavedForLaterManager(cart),
    )
