from __future__ import annotations

from typing import Optional

from redis.asyncio import Redis

from accounts.domain.ports.user_cache import UserCachePort


class RedisUserCache(UserCachePort):
    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    async def get(self, key: str) -> Optional[str]:
        return await self._redis.get(key)

    async def set_many(
        self,
        entries: dict[str, str],
        ttl_seconds: int | None = None,
        *,
        drop: tuple[str, ...] = (),
    ) -> None:
        # MULTI/EXEC: both lookup keys change together or not at all
        pipe = self._redis.pipeline(transaction=True)
        for key, value in entries.items():
            pipe.set(key, value, ex=ttl_seconds or None)
        if drop:
            pipe.delete(*drop)
        await pipe.execute()

    async def populate(
        self,
        entries: dict[str, str],
        ttl_seconds: int | None = None,
    ) -> None:
        # NX: a concurrent write-through that landed first wins
        pipe = self._redis.pipeline(transaction=True)
        for key, value in entries.items():
            pipe.set(key, value, ex=ttl_seconds or None, nx=True)
        await pipe.execute()

    async def delete(self, *keys: str) -> None:
        if keys:
            await self._redis.delete(*keys)
