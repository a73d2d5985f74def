"""Redis shared cache backend.

Uses redis-py's asyncio client. All keys live under a prefix so several
applications can share one Redis database and flush() only touches ours.

Usage:
    from stratum.cache.redis_cache import RedisSharedCache

    shared = RedisSharedCache.from_url("redis://localhost:6379/0", key_prefix="blog:")
    session = Session(store, shared_cache=shared)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from stratum.config import CacheSettings

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = "\\*?[]"


def _glob_escape(text: str) -> str:
    """Escape Redis MATCH pattern metacharacters."""
    return "".join(f"\\{c}" if c in _GLOB_SPECIAL else c for c in text)


class RedisSharedCache:
    """SharedCache implementation backed by a Redis server.

    Args:
        client: redis.asyncio client (must return bytes, i.e. decode_responses=False).
        key_prefix: Namespace prepended to every key.
        scan_count: COUNT hint for SCAN during a prefixed flush.
    """

    def __init__(self, client: Redis, key_prefix: str = "stratum:", scan_count: int = 500) -> None:
        self._client = client
        self._prefix = key_prefix
        self._scan_count = scan_count

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "stratum:") -> RedisSharedCache:
        """Create a backend with a fresh connection pool for `url`."""
        try:
            import redis.asyncio as redis_asyncio
        except ImportError as e:
            raise ImportError(
                "redis is required for RedisSharedCache. Install with: pip install stratum[redis]"
            ) from e

        return cls(redis_asyncio.from_url(url), key_prefix=key_prefix)

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> RedisSharedCache:
        """Create a backend from CacheSettings.

        Raises:
            ValueError: If settings.redis_url is not set.
        """
        if not settings.redis_url:
            raise ValueError("CacheSettings.redis_url is required for RedisSharedCache")
        return cls.from_url(settings.redis_url, key_prefix=settings.key_prefix)

    @property
    def client(self) -> Redis:
        """Get the underlying Redis client."""
        return self._client

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get_multi(self, keys: Sequence[str]) -> dict[str, bytes]:
        """MGET the keys, dropping misses."""
        if not keys:
            return {}
        values = await self._client.mget([self._key(k) for k in keys])
        return {key: value for key, value in zip(keys, values, strict=True) if value is not None}

    async def set_multi(self, items: Mapping[str, bytes], expiry: float | None = None) -> None:
        """Pipelined SET with optional millisecond expiry."""
        if not items:
            return
        px = int(expiry * 1000) if expiry and expiry > 0 else None
        async with self._client.pipeline(transaction=False) as pipe:
            for key, data in items.items():
                pipe.set(self._key(key), data, px=px)
            await pipe.execute()

    async def delete_multi(self, keys: Sequence[str]) -> None:
        """DEL the keys."""
        if keys:
            await self._client.delete(*(self._key(k) for k in keys))

    async def flush(self) -> None:
        """Delete every key under the prefix (FLUSHDB when there is no prefix)."""
        if not self._prefix:
            await self._client.flushdb()
            return

        pattern = f"{_glob_escape(self._prefix)}*"
        batch: list[bytes | str] = []
        removed = 0
        async for key in self._client.scan_iter(match=pattern, count=self._scan_count):
            batch.append(key)
            if len(batch) >= self._scan_count:
                await self._client.delete(*batch)
                removed += len(batch)
                batch.clear()
        if batch:
            await self._client.delete(*batch)
            removed += len(batch)
        logger.debug(f"Flushed {removed} keys under {self._prefix!r}")

    async def close(self) -> None:
        """Release the connection pool."""
        await self._client.aclose()
