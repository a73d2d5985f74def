"""Cache tiers: request-scoped local cache and the shared cache adapter."""

from stratum.cache.adapter import SharedCacheAdapter
from stratum.cache.local import LocalCache
from stratum.cache.memory import MemorySharedCache
from stratum.cache.models import CacheEntry
from stratum.cache.protocol import SharedCache
from stratum.cache.redis_cache import RedisSharedCache

__all__ = [
    "CacheEntry",
    "LocalCache",
    "MemorySharedCache",
    "RedisSharedCache",
    "SharedCache",
    "SharedCacheAdapter",
]
