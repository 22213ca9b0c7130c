"""Cache Backend Implementations

Redis for deployments, an in-process dict for development and tests.
"""

import logging
import time
from typing import Callable, Dict, Iterable, Optional, Set, Tuple
from redis import asyncio as aioredis
from src.app.services.cache_service import CacheBackend

logger = logging.getLogger(__name__)

TAG_PREFIX = "tag:"

# Tag sets live at least as long as the longest entry TTL
TAG_TTL = 3600


class MemoryCacheBackend(CacheBackend):
    """
    Process-local backend

    Expiry uses a monotonic clock. Reads drop their own expired entry; every
    write and invalidation also sweeps expired entries and the tag index
    references they leave behind.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self.entries: Dict[str, Tuple[str, float]] = {}
        self.tags: Dict[str, Set[str]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self.entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self.clock():
            self.entries.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl: int, tags: Iterable[str] = ()) -> None:
        self._sweep()
        self.entries[key] = (value, self.clock() + ttl)
        for tag in tags:
            self.tags.setdefault(tag, set()).add(key)

    async def delete(self, key: str) -> None:
        self.entries.pop(key, None)

    async def invalidate_tags(self, tags: Iterable[str]) -> int:
        removed = 0
        for tag in tags:
            for key in self.tags.pop(tag, set()):
                if self.entries.pop(key, None) is not None:
                    removed += 1
        self._sweep()
        return removed

    async def clear(self) -> None:
        self.entries.clear()
        self.tags.clear()

    def _sweep(self) -> None:
        now = self.clock()
        for key in [k for k, (_, expires_at) in self.entries.items() if expires_at <= now]:
            del self.entries[key]
        for tag in list(self.tags):
            live = {k for k in self.tags[tag] if k in self.entries}
            if live:
                self.tags[tag] = live
            else:
                del self.tags[tag]


class RedisCacheBackend(CacheBackend):
    """
    Redis backend

    Values are plain keys with EX; each tag is a set ``tag:<tag>`` of the
    keys indexed under it. A tag set may briefly list keys that already
    expired; deleting those is a no-op.
    """

    def __init__(self, client: aioredis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheBackend":
        return cls(aioredis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(key)

    async def set(self, key: str, value: str, ttl: int, tags: Iterable[str] = ()) -> None:
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.set(key, value, ex=ttl)
            for tag in tags:
                tag_key = f"{TAG_PREFIX}{tag}"
                pipe.sadd(tag_key, key)
                pipe.expire(tag_key, max(ttl, TAG_TTL))
            await pipe.execute()

    async def delete(self, key: str) -> None:
        await self.client.delete(key)

    async def invalidate_tags(self, tags: Iterable[str]) -> int:
        removed = 0
        for tag in tags:
            tag_key = f"{TAG_PREFIX}{tag}"
            keys = await self.client.smembers(tag_key)
            if keys:
                removed += await self.client.delete(*keys)
            await self.client.delete(tag_key)
        return removed

    async def clear(self) -> None:
        await self.client.flushdb()


def create_cache_backend(backend: str, redis_url: Optional[str] = None) -> CacheBackend:
    """
    Factory function to create the configured cache backend

    Args:
        backend: "redis" or "memory"
        redis_url: Connection URL, required for "redis"

    Returns:
        Configured CacheBackend
    """
    if backend == "redis" and redis_url:
        logger.info(f"Using Redis cache backend at {redis_url}")
        return RedisCacheBackend.from_url(redis_url)

    if backend != "memory":
        logger.warning(f"Unknown or unconfigured cache backend '{backend}', using memory backend")
    return MemoryCacheBackend()
