"""Key-value store backends.

The cart engine only needs get/set/delete of whole string values. Backends
raise `PersistenceUnavailable` when the store cannot be used; callers decide
how to degrade.
"""
from __future__ import annotations

from typing import Any, Protocol

import redis

from storefront.core.exceptions import PersistenceUnavailable


class KeyValueStore(Protocol):
    """Browser-storage style API: string keys, whole string values."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store. `quota_bytes` emulates a storage quota."""

    def __init__(self, quota_bytes: int | None = None):
        self._data: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def _used_bytes(self, excluding: str | None = None) -> int:
        return sum(
            len(key) + len(value.encode("utf-8"))
            for key, value in self._data.items()
            if key != excluding
        )

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            needed = self._used_bytes(excluding=key) + len(key) + len(value.encode("utf-8"))
            if needed > self._quota_bytes:
                raise PersistenceUnavailable(
                    f"Storage quota exceeded writing {key} ({needed} > {self._quota_bytes} bytes)"
                )
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data


class RedisKeyValueStore:
    """Redis-backed store shared by every process that uses the same profile."""

    def __init__(self, redis_url: str | None = None, client: Any = None):
        if client is None:
            if not redis_url:
                raise PersistenceUnavailable("REDIS_URL is not set")
            client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except Exception:
            return False

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(key)
        except Exception as exc:
            raise PersistenceUnavailable(f"Redis get failed for {key}: {exc}") from exc
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self._client.set(key, value)
        except Exception as exc:
            raise PersistenceUnavailable(f"Redis set failed for {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except Exception as exc:
            raise PersistenceUnavailable(f"Redis delete failed for {key}: {exc}") from exc
