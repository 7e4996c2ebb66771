"""
TTL-capable key-value store.

Backs both the idempotency markers and the per-job lock markers. Redis is
the shared backend for multi-process deployments; the memory backend
serves a single local process and tests.

Dependencies: redis (asyncio client), jobrunner.configs
System role: Ephemeral marker storage (never a source of truth)
"""

import logging
import time
from typing import Callable, Protocol

import redis.asyncio as redis

from jobrunner.configs.redis_config import RedisSettings

logger = logging.getLogger(__name__)

# Deletes KEYS[1] only while it still holds ARGV[1].
_COMPARE_AND_DELETE = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None:
        ...

    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        ...

    async def set_if_absent(self, key: str, value: str, ttl_seconds: float) -> bool:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def delete_if_equals(self, key: str, value: str) -> bool:
        ...

    async def aclose(self) -> None:
        ...


class RedisKeyValueStore:
    """Key-value store over a redis-py asyncio client."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client
        self._compare_and_delete = client.register_script(_COMPARE_AND_DELETE)

    @classmethod
    def from_settings(cls, settings: RedisSettings) -> "RedisKeyValueStore":
        client = redis.Redis.from_url(
            settings.url,
            decode_responses=True,
            socket_timeout=settings.socket_timeout,
        )
        return cls(client)

    async def get(self, key: str) -> str | None:
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        await self._client.set(key, value, px=_to_millis(ttl_seconds))

    async def set_if_absent(self, key: str, value: str, ttl_seconds: float) -> bool:
        # SET NX PX returns True on success, None if the key already exists
        created = await self._client.set(key, value, nx=True, px=_to_millis(ttl_seconds))
        return bool(created)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def delete_if_equals(self, key: str, value: str) -> bool:
        deleted = await self._compare_and_delete(keys=[key], args=[value])
        return bool(deleted)

    async def aclose(self) -> None:
        await self._client.aclose()


class MemoryKeyValueStore:
    """
    Process-local key-value store with TTL expiry.

    Expiry is evaluated lazily on access against an injectable monotonic
    clock. Operations contain no awaits, so each is atomic with respect to
    other coroutines on the same event loop.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    def _live(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def get(self, key: str) -> str | None:
        return self._live(key)

    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    async def set_if_absent(self, key: str, value: str, ttl_seconds: float) -> bool:
        if self._live(key) is not None:
            return False
        self._entries[key] = (value, self._clock() + ttl_seconds)
        return True

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def delete_if_equals(self, key: str, value: str) -> bool:
        if self._live(key) != value:
            return False
        del self._entries[key]
        return True

    async def aclose(self) -> None:
        self._entries.clear()


def _to_millis(ttl_seconds: float) -> int:
    return max(1, int(ttl_seconds * 1000))


def build_key_value_store(settings: RedisSettings) -> KeyValueStore:
    """
    Select the key-value backend from settings.

    Args:
        settings: Redis settings; `backend` is 'redis' or 'memory'

    Returns:
        KeyValueStore: Configured backend

    Raises:
        ValueError: If the backend name is not recognised
    """
    backend = settings.backend.lower()
    if backend == "redis":
        return RedisKeyValueStore.from_settings(settings)
    if backend == "memory":
        logger.warning("Using in-process key-value store; locks are not shared across processes")
        return MemoryKeyValueStore()
    raise ValueError(f"Unsupported key-value backend: {settings.backend}")
