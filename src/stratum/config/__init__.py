"""Configuration module using Pydantic Settings.

Provides typed configuration for the cache and store tiers with environment
variable support.

Usage:
    from stratum.config import CacheSettings, StoreSettings

    cache = CacheSettings(redis_url="redis://localhost:6379/0")
    store = StoreSettings(max_put_batch=100, retry_attempts=3)
"""

from stratum.config.settings import CacheSettings, StoreSettings

__all__ = [
    "CacheSettings",
    "StoreSettings",
]
