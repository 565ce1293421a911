"""
Change notifications with a Pub/Sub pattern.

Views subscribe to "cart changed" style events and re-read the relevant
storage key when one fires. Events carry no payload.

Supports:
- In-memory pub/sub for a single process
- Redis pub/sub so that other processes sharing the store resync
"""
from __future__ import annotations

import json
import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Any

from storefront.core.constants import (
    CART_UPDATED,
    DEFAULT_PROFILE,
    SAVED_CARTS_UPDATED,
    SAVED_ITEMS_UPDATED,
)

logger = logging.getLogger(__name__)


class ChangeEvent(str, Enum):
    """Types of change broadcasts."""

    CART_UPDATED = CART_UPDATED
    SAVED_ITEMS_UPDATED = SAVED_ITEMS_UPDATED
    SAVED_CARTS_UPDATED = SAVED_CARTS_UPDATED


ChangeHandler = Callable[[ChangeEvent], None]


class PubSubBackend(ABC):
    """Abstract base for pub/sub backends."""

    @abstractmethod
    def publish(self, channel: str, event: ChangeEvent) -> None:
        """Publish event to channel."""

    @abstractmethod
    def subscribe(self, channel: str, handler: ChangeHandler) -> None:
        """Subscribe handler to channel."""

    @abstractmethod
    def unsubscribe(self, channel: str, handler: ChangeHandler) -> None:
        """Unsubscribe handler from channel."""

    @abstractmethod
    def close(self) -> None:
        """Release backend resources."""


class InMemoryPubSub(PubSubBackend):
    """In-process pub/sub; handlers run synchronously in subscription order."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[ChangeHandler]] = {}

    def _dispatch(self, channel: str, event: ChangeEvent) -> None:
        for handler in list(self._subscribers.get(channel, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Handler error in channel {channel}: {e}")

    def publish(self, channel: str, event: ChangeEvent) -> None:
        self._dispatch(channel, event)

    def subscribe(self, channel: str, handler: ChangeHandler) -> None:
        handlers = self._subscribers.setdefault(channel, [])
        if handler not in handlers:
            handlers.append(handler)
        logger.debug(f"Subscribed to {channel}, total: {len(handlers)}")

    def unsubscribe(self, channel: str, handler: ChangeHandler) -> None:
        handlers = self._subscribers.get(channel)
        if not handlers:
            return
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            del self._subscribers[channel]

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, []))

    def close(self) -> None:
        self._subscribers.clear()


class RedisPubSub(InMemoryPubSub):
    """Redis-backed pub/sub for processes sharing one Redis store.

    Local subscribers are notified immediately on publish. Messages from
    other processes are delivered when `pump()` is called; messages this
    instance published itself are skipped.
    """

    def __init__(self, client: Any) -> None:
        super().__init__()
        self._client = client
        self._pubsub = client.pubsub(ignore_subscribe_messages=True)
        self._origin = uuid.uuid4().hex

    def publish(self, channel: str, event: ChangeEvent) -> None:
        self._dispatch(channel, event)
        message = json.dumps({"event": event.value, "origin": self._origin})
        try:
            self._client.publish(channel, message)
        except Exception as e:
            logger.warning(f"Redis publish failed on {channel}: {e}")

    def subscribe(self, channel: str, handler: ChangeHandler) -> None:
        if channel not in self._subscribers:
            try:
                self._pubsub.subscribe(channel)
            except Exception as e:
                logger.warning(f"Redis subscribe failed on {channel}: {e}")
        super().subscribe(channel, handler)

    def unsubscribe(self, channel: str, handler: ChangeHandler) -> None:
        super().unsubscribe(channel, handler)
        if channel not in self._subscribers:
            try:
                self._pubsub.unsubscribe(channel)
            except Exception as e:
                logger.warning(f"Redis unsubscribe failed on {channel}: {e}")

    def pump(self, timeout: float = 0.0) -> int:
        """Deliver pending remote messages. Returns number of events dispatched."""
        delivered = 0
        while True:
            try:
                message = self._pubsub.get_message(timeout=timeout)
            except Exception as e:
                logger.error(f"Redis listener error: {e}")
                return delivered
            if not message:
                return delivered
            if message.get("type") != "message":
                continue

            channel = message["channel"]
            if isinstance(channel, bytes):
                channel = channel.decode()
            try:
                data = json.loads(message["data"])
                event = ChangeEvent(data["event"])
            except (ValueError, KeyError, TypeError):
                logger.warning(f"Ignoring malformed change message on {channel}")
                continue
            if data.get("origin") == self._origin:
                continue

            self._dispatch(channel, event)
            delivered += 1

    def close(self) -> None:
        super().close()
        try:
            self._pubsub.close()
        except Exception:
            logger.debug("Redis pubsub close failed", exc_info=True)


class ChangeNotifier:
    """Fire-and-forget change broadcasts scoped to one storefront profile."""

    def __init__(self, backend: PubSubBackend | None = None, profile: str = DEFAULT_PROFILE):
        self._backend = backend or InMemoryPubSub()
        self._profile = profile

    @property
    def backend(self) -> PubSubBackend:
        return self._backend

    def channel(self, event: ChangeEvent) -> str:
        return f"{self._profile}:{event.value}"

    def notify(self, event: ChangeEvent) -> None:
        self._backend.publish(self.channel(event), event)

    def subscribe(self, event: ChangeEvent, handler: ChangeHandler) -> None:
        self._backend.subscribe(self.channel(event), handler)

    def unsubscribe(self, event: ChangeEvent, handler: ChangeHandler) -> None:
        self._backend.unsubscribe(self.channel(event), handler)

    def close(self) -> None:
        self._backend.close()
