"""Key/value persistence adapter for chat collections."""

from typing import Protocol

import redis.asyncio as redis


class KeyValueStorage(Protocol):
    """Durable string store keyed by name.

    ``set`` overwrites the whole value stored under ``key``.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class RedisStorage:
    """KeyValueStorage backed by a ``decode_responses=True`` Redis client."""

    def __init__(self, redis_client: redis.Redis) -> None:  # type: ignore[type-arg]
        self._redis = redis_client

    async def get(self, key: str) -> str | None:
        value = await self._redis.get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str) -> None:
        await self._redis.set(key, value)
